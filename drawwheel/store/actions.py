"""Intents accepted by :class:`~drawwheel.store.reducer.RouletteReducer`.

Each action is a small frozen dataclass. Roster, task, prize, settings, and
draw actions implicitly target the active project.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..models.roster import Participant, Prize, Task


class Action:
    """Marker base class for store actions."""

    __slots__ = ()


# Projects


@dataclass(frozen=True)
class CreateProject(Action):
    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class DeleteProject(Action):
    project_id: str


@dataclass(frozen=True)
class SwitchProject(Action):
    project_id: str


@dataclass(frozen=True)
class RenameProject(Action):
    project_id: str
    name: str


# Participants


@dataclass(frozen=True)
class AddParticipant(Action):
    name: str


@dataclass(frozen=True)
class AddParticipantsBulk(Action):
    names: Sequence[str]


@dataclass(frozen=True)
class RemoveParticipant(Action):
    participant_id: str


@dataclass(frozen=True)
class ClearParticipants(Action):
    pass


# Tasks


@dataclass(frozen=True)
class AddTask(Action):
    name: str
    description: Optional[str] = None
    required_participants: int = 1


@dataclass(frozen=True)
class AddTasksBulk(Action):
    """``task_lines`` use the ``name|description|requiredParticipants`` format."""

    task_lines: Sequence[str]


@dataclass(frozen=True)
class RemoveTask(Action):
    task_id: str


@dataclass(frozen=True)
class ClearTasks(Action):
    pass


# Prizes


@dataclass(frozen=True)
class AddPrize(Action):
    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class AddPrizesBulk(Action):
    names: Sequence[str]


@dataclass(frozen=True)
class RemovePrize(Action):
    prize_id: str


@dataclass(frozen=True)
class ClearPrizes(Action):
    pass


# Draws


@dataclass(frozen=True)
class SpinRequest(Action):
    pass


@dataclass(frozen=True)
class TaskSpinRequest(Action):
    pass


@dataclass(frozen=True)
class PrizeSpinRequest(Action):
    pass


@dataclass(frozen=True)
class FinishSpin(Action):
    """Commit a participant draw. ``participant=None`` cancels the spin."""

    participant: Optional[Participant] = None


@dataclass(frozen=True)
class FinishTaskSpin(Action):
    """Commit a task draw. Missing participants or task cancel the spin."""

    participants: Optional[Sequence[Participant]] = None
    task: Optional[Task] = None


@dataclass(frozen=True)
class FinishPrizeSpin(Action):
    participant: Optional[Participant] = None
    prize: Optional[Prize] = None


@dataclass(frozen=True)
class StartTaskSpinSequence(Action):
    """Begin drawing ``task``'s participants one wheel spin at a time."""

    task: Task


@dataclass(frozen=True)
class RecordTaskSpinPick(Action):
    participant: Participant


@dataclass(frozen=True)
class CompleteTaskSpinSequence(Action):
    pass


@dataclass(frozen=True)
class CancelTaskSpinSequence(Action):
    pass


# History


@dataclass(frozen=True)
class ClearHistory(Action):
    pass


@dataclass(frozen=True)
class ClearTaskHistory(Action):
    pass


@dataclass(frozen=True)
class ClearPrizeHistory(Action):
    pass


@dataclass(frozen=True)
class RemoveFromRouletteAfterSpin(Action):
    participant_id: str


@dataclass(frozen=True)
class RestoreParticipant(Action):
    participant_name: str


# Settings


@dataclass(frozen=True)
class SetAutoRemoveParticipants(Action):
    enabled: bool


@dataclass(frozen=True)
class UpdateProjectSettings(Action):
    """Partial settings update; ``None`` fields are left unchanged."""

    auto_remove_participants: Optional[bool] = None
    animation_duration: Optional[int] = None
    allow_duplicate_participants_in_task: Optional[bool] = None


# Teams


@dataclass(frozen=True)
class AddTeam(Action):
    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class RemoveTeam(Action):
    team_id: str


@dataclass(frozen=True)
class EditTeam(Action):
    team_id: str
    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class AddMemberToTeam(Action):
    team_id: str
    participant: Participant


@dataclass(frozen=True)
class RemoveMemberFromTeam(Action):
    team_id: str
    participant_id: str


@dataclass(frozen=True)
class ImportTeamToProject(Action):
    team_id: str
