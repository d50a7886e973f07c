"""Transition function of the draw aggregate."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable, Dict, Optional

from . import actions as act
from ..ledger import (
    is_task_assigned,
    mark_removed,
    record_draw,
    record_prize_award,
    record_task_assignment,
    restore_by_name,
)
from ..models.project import Project
from ..models.roster import Participant, Prize, Task, Team
from ..names import (
    normalize_name,
    parse_required_participants,
    parse_task_line,
    resolve_unique_name,
    resolve_unique_names,
)
from ..utils import assign_color, generate_id, utcnow
from .state import RouletteState, TaskSpinSequence

Handler = Callable[[RouletteState, Any], RouletteState]

# Transient draw fields reset whenever the active project changes.
_IDLE: Dict[str, Any] = {
    "is_spinning": False,
    "selected_participant": None,
    "selected_task": None,
    "selected_participants": None,
    "selected_prize": None,
    "last_winner": None,
    "task_spin": None,
}

_CLEARED_SELECTION: Dict[str, Any] = {
    "selected_participant": None,
    "selected_task": None,
    "selected_participants": None,
    "selected_prize": None,
}


def _replace_project(state: RouletteState, project: Project) -> tuple[Project, ...]:
    return tuple(project if p.id == project.id else p for p in state.projects)


def _coerce_required(value: Any) -> int:
    if isinstance(value, str):
        return parse_required_participants(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        return parse_required_participants(None)


def _coerce_duration(value: Any) -> Optional[int]:
    try:
        duration = int(value)
    except (TypeError, ValueError):
        return None
    return duration if duration > 0 else None


class RouletteReducer:
    """Pure transition function ``apply(state, action) -> state``.

    Validation failures (blank or non-string names, non-positive or
    non-numeric durations), unknown ids, and rejected draws all return the
    input state unchanged; nothing here raises for bad input.
    Actions that are not registered are ignored the same way, which keeps
    :meth:`apply` total over any input.
    """

    def __init__(
        self,
        *,
        id_factory: Optional[Callable[[], str]] = None,
        color_picker: Optional[Callable[[], str]] = None,
    ) -> None:
        """Create a reducer.

        Parameters
        ----------
        id_factory : Optional[Callable[[], str]], default: None
            Produces ids for new projects, roster entries, and history
            records. Defaults to :func:`drawwheel.utils.generate_id`.
        color_picker : Optional[Callable[[], str]], default: None
            Produces display colours. Defaults to
            :func:`drawwheel.utils.assign_color`.
        """

        self._new_id = id_factory or generate_id
        self._pick_color = color_picker or assign_color
        self._handlers: Dict[type, Handler] = {
            act.CreateProject: self._create_project,
            act.DeleteProject: self._delete_project,
            act.SwitchProject: self._switch_project,
            act.RenameProject: self._rename_project,
            act.AddParticipant: self._add_participant,
            act.AddParticipantsBulk: self._add_participants_bulk,
            act.RemoveParticipant: self._remove_participant,
            act.ClearParticipants: self._clear_participants,
            act.AddTask: self._add_task,
            act.AddTasksBulk: self._add_tasks_bulk,
            act.RemoveTask: self._remove_task,
            act.ClearTasks: self._clear_tasks,
            act.AddPrize: self._add_prize,
            act.AddPrizesBulk: self._add_prizes_bulk,
            act.RemovePrize: self._remove_prize,
            act.ClearPrizes: self._clear_prizes,
            act.SpinRequest: self._spin_request,
            act.TaskSpinRequest: self._task_spin_request,
            act.PrizeSpinRequest: self._prize_spin_request,
            act.FinishSpin: self._finish_spin,
            act.FinishTaskSpin: self._finish_task_spin,
            act.FinishPrizeSpin: self._finish_prize_spin,
            act.StartTaskSpinSequence: self._start_task_spin_sequence,
            act.RecordTaskSpinPick: self._record_task_spin_pick,
            act.CompleteTaskSpinSequence: self._complete_task_spin_sequence,
            act.CancelTaskSpinSequence: self._cancel_task_spin_sequence,
            act.ClearHistory: self._clear_history,
            act.ClearTaskHistory: self._clear_task_history,
            act.ClearPrizeHistory: self._clear_prize_history,
            act.RemoveFromRouletteAfterSpin: self._remove_from_roulette_after_spin,
            act.RestoreParticipant: self._restore_participant,
            act.SetAutoRemoveParticipants: self._set_auto_remove_participants,
            act.UpdateProjectSettings: self._update_project_settings,
            act.AddTeam: self._add_team,
            act.RemoveTeam: self._remove_team,
            act.EditTeam: self._edit_team,
            act.AddMemberToTeam: self._add_member_to_team,
            act.RemoveMemberFromTeam: self._remove_member_from_team,
            act.ImportTeamToProject: self._import_team_to_project,
        }

    def apply(self, state: RouletteState, action: Any) -> RouletteState:
        """Return the state that results from applying ``action`` to ``state``."""
        handler = self._handlers.get(type(action))
        if handler is None:
            return state
        return handler(state, action)

    def handles(self, action_type: type) -> bool:
        return action_type in self._handlers

    # -------- helpers --------

    def _update_active(
        self,
        state: RouletteState,
        update: Callable[[Project], Optional[Project]],
        **state_changes: Any,
    ) -> RouletteState:
        """Apply ``update`` to the active project.

        ``update`` returns ``None`` to signal a no-op. Without an active
        project the state is returned unchanged.
        """
        project = state.current_project()
        if project is None:
            return state
        updated = update(project)
        if updated is None:
            return state
        return replace(state, projects=_replace_project(state, updated), **state_changes)

    def _new_participant(self, name: str, color: Optional[str] = None) -> Participant:
        return Participant(
            id=self._new_id(),
            name=name,
            color=color or self._pick_color(),
            created_at=utcnow(),
        )

    # -------- projects --------

    def _create_project(self, state: RouletteState, action: act.CreateProject) -> RouletteState:
        name = normalize_name(action.name)
        if name is None:
            return state
        now = utcnow()
        project = Project(
            id=self._new_id(),
            name=name,
            description=normalize_name(action.description),
            created_at=now,
            last_modified=now,
        )
        return replace(
            state,
            projects=state.projects + (project,),
            active_project_id=project.id,
            **_IDLE,
        )

    def _delete_project(self, state: RouletteState, action: act.DeleteProject) -> RouletteState:
        if state.get_project(action.project_id) is None:
            return state
        remaining = tuple(p for p in state.projects if p.id != action.project_id)
        if state.active_project_id != action.project_id:
            return replace(state, projects=remaining)
        fallback = remaining[0].id if remaining else None
        return replace(state, projects=remaining, active_project_id=fallback, **_IDLE)

    def _switch_project(self, state: RouletteState, action: act.SwitchProject) -> RouletteState:
        if state.get_project(action.project_id) is None:
            return state
        if state.active_project_id == action.project_id:
            return state
        return replace(state, active_project_id=action.project_id, **_IDLE)

    def _rename_project(self, state: RouletteState, action: act.RenameProject) -> RouletteState:
        name = normalize_name(action.name)
        project = state.get_project(action.project_id)
        if name is None or project is None:
            return state
        return replace(state, projects=_replace_project(state, project.touch(name=name)))

    # -------- participants --------

    def _add_participant(self, state: RouletteState, action: act.AddParticipant) -> RouletteState:
        def update(project: Project) -> Optional[Project]:
            name = resolve_unique_name(action.name, (p.name for p in project.participants))
            if name is None:
                return None
            return project.touch(participants=project.participants + (self._new_participant(name),))

        return self._update_active(state, update)

    def _add_participants_bulk(
        self, state: RouletteState, action: act.AddParticipantsBulk
    ) -> RouletteState:
        def update(project: Project) -> Optional[Project]:
            names = resolve_unique_names(
                action.names or (), (p.name for p in project.participants)
            )
            if not names:
                return None
            added = tuple(self._new_participant(name) for name in names)
            return project.touch(participants=project.participants + added)

        return self._update_active(state, update)

    def _remove_participant(
        self, state: RouletteState, action: act.RemoveParticipant
    ) -> RouletteState:
        def update(project: Project) -> Optional[Project]:
            kept = tuple(p for p in project.participants if p.id != action.participant_id)
            if len(kept) == len(project.participants):
                return None
            return project.touch(participants=kept)

        return self._update_active(state, update)

    def _clear_participants(self, state: RouletteState, action: act.ClearParticipants) -> RouletteState:
        return self._update_active(
            state, lambda project: project.touch(participants=()) if project.participants else None
        )

    # -------- tasks --------

    def _add_task(self, state: RouletteState, action: act.AddTask) -> RouletteState:
        def update(project: Project) -> Optional[Project]:
            name = resolve_unique_name(action.name, (t.name for t in project.tasks))
            if name is None:
                return None
            task = Task(
                id=self._new_id(),
                name=name,
                description=normalize_name(action.description),
                required_participants=_coerce_required(action.required_participants),
                color=self._pick_color(),
                created_at=utcnow(),
            )
            return project.touch(tasks=project.tasks + (task,))

        return self._update_active(state, update)

    def _add_tasks_bulk(self, state: RouletteState, action: act.AddTasksBulk) -> RouletteState:
        def update(project: Project) -> Optional[Project]:
            parsed_lines = map(parse_task_line, action.task_lines or ())
            lines = [parsed for parsed in parsed_lines if parsed]
            if not lines:
                return None
            names = resolve_unique_names((line.name for line in lines), (t.name for t in project.tasks))
            added = tuple(
                Task(
                    id=self._new_id(),
                    name=name,
                    description=line.description,
                    required_participants=line.required_participants,
                    color=self._pick_color(),
                    created_at=utcnow(),
                )
                for name, line in zip(names, lines)
            )
            return project.touch(tasks=project.tasks + added)

        return self._update_active(state, update)

    def _remove_task(self, state: RouletteState, action: act.RemoveTask) -> RouletteState:
        def update(project: Project) -> Optional[Project]:
            kept = tuple(t for t in project.tasks if t.id != action.task_id)
            if len(kept) == len(project.tasks):
                return None
            return project.touch(tasks=kept)

        return self._update_active(state, update)

    def _clear_tasks(self, state: RouletteState, action: act.ClearTasks) -> RouletteState:
        return self._update_active(
            state, lambda project: project.touch(tasks=()) if project.tasks else None
        )

    # -------- prizes --------

    def _add_prize(self, state: RouletteState, action: act.AddPrize) -> RouletteState:
        def update(project: Project) -> Optional[Project]:
            name = resolve_unique_name(action.name, (p.name for p in project.prizes))
            if name is None:
                return None
            prize = Prize(
                id=self._new_id(),
                name=name,
                description=normalize_name(action.description),
                color=self._pick_color(),
                created_at=utcnow(),
            )
            return project.touch(prizes=project.prizes + (prize,))

        return self._update_active(state, update)

    def _add_prizes_bulk(self, state: RouletteState, action: act.AddPrizesBulk) -> RouletteState:
        def update(project: Project) -> Optional[Project]:
            names = resolve_unique_names(
                action.names or (), (p.name for p in project.prizes)
            )
            if not names:
                return None
            added = tuple(
                Prize(id=self._new_id(), name=name, color=self._pick_color(), created_at=utcnow())
                for name in names
            )
            return project.touch(prizes=project.prizes + added)

        return self._update_active(state, update)

    def _remove_prize(self, state: RouletteState, action: act.RemovePrize) -> RouletteState:
        def update(project: Project) -> Optional[Project]:
            kept = tuple(p for p in project.prizes if p.id != action.prize_id)
            if len(kept) == len(project.prizes):
                return None
            return project.touch(prizes=kept)

        return self._update_active(state, update)

    def _clear_prizes(self, state: RouletteState, action: act.ClearPrizes) -> RouletteState:
        return self._update_active(
            state, lambda project: project.touch(prizes=()) if project.prizes else None
        )

    # -------- draws --------

    def _spin_request(self, state: RouletteState, action: act.SpinRequest) -> RouletteState:
        if not state.can_spin():
            return state
        return replace(state, is_spinning=True, **_CLEARED_SELECTION)

    def _task_spin_request(self, state: RouletteState, action: act.TaskSpinRequest) -> RouletteState:
        if not state.can_spin_task():
            return state
        return replace(state, is_spinning=True, **_CLEARED_SELECTION)

    def _prize_spin_request(
        self, state: RouletteState, action: act.PrizeSpinRequest
    ) -> RouletteState:
        if not state.can_spin_prize():
            return state
        return replace(state, is_spinning=True, **_CLEARED_SELECTION)

    def _finish_spin(self, state: RouletteState, action: act.FinishSpin) -> RouletteState:
        if not state.is_spinning:
            return state
        participant = action.participant
        if participant is None or state.current_project() is None:
            return replace(state, is_spinning=False)

        def update(project: Project) -> Project:
            return project.touch(
                history=record_draw(project.history, participant, id_factory=self._new_id)
            )

        return self._update_active(
            state,
            update,
            is_spinning=False,
            selected_participant=participant,
            last_winner=participant,
        )

    def _finish_task_spin(self, state: RouletteState, action: act.FinishTaskSpin) -> RouletteState:
        if not state.is_spinning:
            return state
        participants = tuple(action.participants or ())
        task = action.task
        if not participants or task is None or state.current_project() is None:
            return replace(state, is_spinning=False)

        def update(project: Project) -> Project:
            changes: Dict[str, Any] = {
                "task_history": record_task_assignment(
                    project.task_history, task, participants, id_factory=self._new_id
                )
            }
            if project.settings.auto_remove_participants:
                drawn = {p.id for p in participants}
                changes["participants"] = tuple(
                    p for p in project.participants if p.id not in drawn
                )
            return project.touch(**changes)

        return self._update_active(
            state,
            update,
            is_spinning=False,
            selected_participant=participants[0],
            selected_participants=participants,
            selected_task=task,
            last_winner=participants[0],
        )

    def _finish_prize_spin(self, state: RouletteState, action: act.FinishPrizeSpin) -> RouletteState:
        if not state.is_spinning:
            return state
        participant, prize = action.participant, action.prize
        if participant is None or prize is None or state.current_project() is None:
            return replace(state, is_spinning=False)

        def update(project: Project) -> Project:
            return project.touch(
                prize_history=record_prize_award(
                    project.prize_history, participant, prize, id_factory=self._new_id
                ),
                prizes=tuple(p for p in project.prizes if p.id != prize.id),
            )

        return self._update_active(
            state,
            update,
            is_spinning=False,
            selected_participant=participant,
            selected_prize=prize,
            last_winner=participant,
        )

    def _start_task_spin_sequence(
        self, state: RouletteState, action: act.StartTaskSpinSequence
    ) -> RouletteState:
        task = action.task
        if not state.can_spin() or state.task_spin is not None:
            return state
        if task.id not in {t.id for t in state.tasks}:
            return state
        if is_task_assigned(state.task_history, task.id):
            return state
        sequence = TaskSpinSequence(task=task, required_participants=task.required_participants)
        return replace(state, is_spinning=True, task_spin=sequence, **_CLEARED_SELECTION)

    def _record_task_spin_pick(
        self, state: RouletteState, action: act.RecordTaskSpinPick
    ) -> RouletteState:
        sequence = state.task_spin
        if sequence is None or sequence.is_complete:
            return state
        picked = action.participant
        if not state.allow_duplicate_participants_in_task and any(
            p.id == picked.id for p in sequence.selected_participants
        ):
            return state
        updated = replace(
            sequence,
            selected_participants=sequence.selected_participants + (picked,),
            current_spin_index=sequence.current_spin_index + 1,
        )
        return replace(state, task_spin=updated, selected_participant=picked)

    def _complete_task_spin_sequence(
        self, state: RouletteState, action: act.CompleteTaskSpinSequence
    ) -> RouletteState:
        sequence = state.task_spin
        if sequence is None:
            return state
        return self._finish_task_spin(
            replace(state, task_spin=None),
            act.FinishTaskSpin(participants=sequence.selected_participants, task=sequence.task),
        )

    def _cancel_task_spin_sequence(
        self, state: RouletteState, action: act.CancelTaskSpinSequence
    ) -> RouletteState:
        if state.task_spin is None:
            return state
        return replace(state, task_spin=None, is_spinning=False)

    # -------- history --------

    def _clear_history(self, state: RouletteState, action: act.ClearHistory) -> RouletteState:
        return self._update_active(
            state, lambda project: project.touch(history=()) if project.history else None
        )

    def _clear_task_history(self, state: RouletteState, action: act.ClearTaskHistory) -> RouletteState:
        return self._update_active(
            state,
            lambda project: project.touch(task_history=()) if project.task_history else None,
        )

    def _clear_prize_history(
        self, state: RouletteState, action: act.ClearPrizeHistory
    ) -> RouletteState:
        return self._update_active(
            state,
            lambda project: project.touch(prize_history=()) if project.prize_history else None,
        )

    def _remove_from_roulette_after_spin(
        self, state: RouletteState, action: act.RemoveFromRouletteAfterSpin
    ) -> RouletteState:
        def update(project: Project) -> Optional[Project]:
            kept = tuple(p for p in project.participants if p.id != action.participant_id)
            history = mark_removed(project.history, action.participant_id)
            if len(kept) == len(project.participants) and history is project.history:
                return None
            return project.touch(participants=kept, history=history)

        return self._update_active(state, update)

    def _restore_participant(
        self, state: RouletteState, action: act.RestoreParticipant
    ) -> RouletteState:
        raw_name = action.participant_name
        if normalize_name(raw_name) is None:
            return state

        def update(project: Project) -> Optional[Project]:
            name = resolve_unique_name(raw_name, (p.name for p in project.participants))
            if name is None:
                return None
            # History is matched by the name the record was written with.
            return project.touch(
                participants=project.participants + (self._new_participant(name),),
                history=restore_by_name(project.history, raw_name),
            )

        return self._update_active(state, update)

    # -------- settings --------

    def _set_auto_remove_participants(
        self, state: RouletteState, action: act.SetAutoRemoveParticipants
    ) -> RouletteState:
        def update(project: Project) -> Project:
            settings = replace(project.settings, auto_remove_participants=bool(action.enabled))
            return project.touch(settings=settings)

        return self._update_active(state, update)

    def _update_project_settings(
        self, state: RouletteState, action: act.UpdateProjectSettings
    ) -> RouletteState:
        changes: Dict[str, Any] = {}
        if action.auto_remove_participants is not None:
            changes["auto_remove_participants"] = bool(action.auto_remove_participants)
        duration = _coerce_duration(action.animation_duration)
        if duration is not None:
            changes["animation_duration"] = duration
        if action.allow_duplicate_participants_in_task is not None:
            changes["allow_duplicate_participants_in_task"] = bool(
                action.allow_duplicate_participants_in_task
            )
        if not changes:
            return state
        return self._update_active(
            state, lambda project: project.touch(settings=replace(project.settings, **changes))
        )

    # -------- teams --------

    def _add_team(self, state: RouletteState, action: act.AddTeam) -> RouletteState:
        name = resolve_unique_name(action.name, (t.name for t in state.global_teams))
        if name is None:
            return state
        team = Team(
            id=self._new_id(),
            name=name,
            description=normalize_name(action.description),
            color=self._pick_color(),
            created_at=utcnow(),
        )
        return replace(state, global_teams=state.global_teams + (team,))

    def _remove_team(self, state: RouletteState, action: act.RemoveTeam) -> RouletteState:
        if state.get_team(action.team_id) is None:
            return state
        return replace(
            state, global_teams=tuple(t for t in state.global_teams if t.id != action.team_id)
        )

    def _replace_team(self, state: RouletteState, team: Team) -> RouletteState:
        return replace(
            state,
            global_teams=tuple(team if t.id == team.id else t for t in state.global_teams),
        )

    def _edit_team(self, state: RouletteState, action: act.EditTeam) -> RouletteState:
        team = state.get_team(action.team_id)
        if team is None:
            return state
        others = (t.name for t in state.global_teams if t.id != team.id)
        name = resolve_unique_name(action.name, others)
        if name is None:
            return state
        edited = replace(team, name=name, description=normalize_name(action.description))
        return self._replace_team(state, edited)

    def _add_member_to_team(self, state: RouletteState, action: act.AddMemberToTeam) -> RouletteState:
        team = state.get_team(action.team_id)
        member = action.participant
        if team is None or normalize_name(member.name) is None:
            return state
        if any(m.id == member.id for m in team.members):
            return state
        return self._replace_team(state, team.with_members(team.members + (member,)))

    def _remove_member_from_team(
        self, state: RouletteState, action: act.RemoveMemberFromTeam
    ) -> RouletteState:
        team = state.get_team(action.team_id)
        if team is None:
            return state
        kept = tuple(m for m in team.members if m.id != action.participant_id)
        if len(kept) == len(team.members):
            return state
        return self._replace_team(state, team.with_members(kept))

    def _import_team_to_project(
        self, state: RouletteState, action: act.ImportTeamToProject
    ) -> RouletteState:
        team = state.get_team(action.team_id)
        if team is None:
            return state

        def update(project: Project) -> Optional[Project]:
            # Colliding names are skipped, not renumbered.
            taken = {p.name.lower() for p in project.participants}
            imported: list[Participant] = []
            for member in team.members:
                key = member.name.strip().lower()
                if not key or key in taken:
                    continue
                taken.add(key)
                imported.append(self._new_participant(member.name.strip(), member.color))
            if not imported:
                return None
            return project.touch(participants=project.participants + tuple(imported))

        return self._update_active(state, update)


_DEFAULT_REDUCER = RouletteReducer()


def apply(state: RouletteState, action: Any) -> RouletteState:
    """Apply ``action`` with the default reducer."""
    return _DEFAULT_REDUCER.apply(state, action)


__all__ = ["RouletteReducer", "apply"]
