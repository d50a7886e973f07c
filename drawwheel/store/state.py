"""Immutable snapshot of the whole draw aggregate."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..ledger import next_pending_task, pending_tasks
from ..models.history import PrizeHistory, RouletteHistory, TaskHistory
from ..models.project import Project, ProjectSettings
from ..models.roster import Participant, Prize, Task, Team

_DEFAULT_SETTINGS = ProjectSettings()


@dataclass(frozen=True)
class TaskSpinSequence:
    """Progress of a task whose participants are drawn one spin at a time."""

    task: Task
    required_participants: int
    selected_participants: tuple[Participant, ...] = ()
    current_spin_index: int = 0

    @property
    def is_complete(self) -> bool:
        return len(self.selected_participants) >= self.required_participants


@dataclass(frozen=True)
class RouletteState:
    """Project registry, global teams, active pointer, and transient draw state.

    The active project's roster, tasks, prizes, history, and settings are
    exposed as read-only properties derived from :meth:`current_project`, so
    they always agree with the stored project. With no active project they
    read as empty collections and default settings.
    """

    projects: tuple[Project, ...] = ()
    active_project_id: Optional[str] = None
    global_teams: tuple[Team, ...] = ()
    is_spinning: bool = False
    selected_participant: Optional[Participant] = None
    selected_task: Optional[Task] = None
    selected_participants: Optional[tuple[Participant, ...]] = None
    selected_prize: Optional[Prize] = None
    last_winner: Optional[Participant] = None
    task_spin: Optional[TaskSpinSequence] = None

    def current_project(self) -> Optional[Project]:
        """Return the active project, or ``None`` when there is none."""
        if self.active_project_id is None:
            return None
        return self.get_project(self.active_project_id)

    def get_project(self, project_id: str) -> Optional[Project]:
        for project in self.projects:
            if project.id == project_id:
                return project
        return None

    def get_team(self, team_id: str) -> Optional[Team]:
        for team in self.global_teams:
            if team.id == team_id:
                return team
        return None

    # Mirror of the active project

    @property
    def participants(self) -> tuple[Participant, ...]:
        project = self.current_project()
        return project.participants if project else ()

    @property
    def tasks(self) -> tuple[Task, ...]:
        project = self.current_project()
        return project.tasks if project else ()

    @property
    def prizes(self) -> tuple[Prize, ...]:
        project = self.current_project()
        return project.prizes if project else ()

    @property
    def history(self) -> tuple[RouletteHistory, ...]:
        project = self.current_project()
        return project.history if project else ()

    @property
    def task_history(self) -> tuple[TaskHistory, ...]:
        project = self.current_project()
        return project.task_history if project else ()

    @property
    def prize_history(self) -> tuple[PrizeHistory, ...]:
        project = self.current_project()
        return project.prize_history if project else ()

    @property
    def settings(self) -> ProjectSettings:
        project = self.current_project()
        return project.settings if project else _DEFAULT_SETTINGS

    @property
    def auto_remove_participants(self) -> bool:
        return self.settings.auto_remove_participants

    @property
    def animation_duration(self) -> int:
        return self.settings.animation_duration

    @property
    def allow_duplicate_participants_in_task(self) -> bool:
        return self.settings.allow_duplicate_participants_in_task

    # Draw guards

    def pending_tasks(self) -> tuple[Task, ...]:
        return pending_tasks(self.tasks, self.task_history)

    def current_task(self) -> Optional[Task]:
        """The next task a task draw would staff."""
        return next_pending_task(self.tasks, self.task_history)

    def can_spin(self) -> bool:
        return not self.is_spinning and bool(self.participants)

    def can_spin_task(self) -> bool:
        return self.can_spin() and self.current_task() is not None

    def can_spin_prize(self) -> bool:
        return self.can_spin() and bool(self.prizes)


EMPTY_STATE = RouletteState()

__all__ = ["EMPTY_STATE", "RouletteState", "TaskSpinSequence"]
