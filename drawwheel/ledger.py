"""History ledger operations.

All ledgers are tuples ordered newest first. The helpers here are the only
code that builds or edits history records; the reducer calls them and never
touches the tuples directly.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Iterable, Optional

from .models.history import ParticipantRef, PrizeHistory, RouletteHistory, TaskHistory
from .models.roster import Participant, Prize, Task
from .utils import generate_id, utcnow


def record_draw(
    history: tuple[RouletteHistory, ...],
    participant: Participant,
    *,
    id_factory: Callable[[], str] = generate_id,
) -> tuple[RouletteHistory, ...]:
    """Prepend a ``removed=False`` record for ``participant``."""
    entry = RouletteHistory(
        id=id_factory(),
        participant_id=participant.id,
        participant_name=participant.name,
        selected_at=utcnow(),
        removed=False,
    )
    return (entry,) + history


def record_task_assignment(
    task_history: tuple[TaskHistory, ...],
    task: Task,
    participants: Iterable[Participant],
    *,
    id_factory: Callable[[], str] = generate_id,
) -> tuple[TaskHistory, ...]:
    """Prepend a snapshot of ``task`` assigned to ``participants``."""
    entry = TaskHistory(
        id=id_factory(),
        participants=tuple(ParticipantRef(id=p.id, name=p.name) for p in participants),
        task_id=task.id,
        task_name=task.name,
        task_description=task.description,
        selected_at=utcnow(),
    )
    return (entry,) + task_history


def record_prize_award(
    prize_history: tuple[PrizeHistory, ...],
    participant: Participant,
    prize: Prize,
    *,
    id_factory: Callable[[], str] = generate_id,
) -> tuple[PrizeHistory, ...]:
    """Prepend a snapshot of ``prize`` going to ``participant``."""
    entry = PrizeHistory(
        id=id_factory(),
        participant_id=participant.id,
        participant_name=participant.name,
        prize_id=prize.id,
        prize_name=prize.name,
        selected_at=utcnow(),
    )
    return (entry,) + prize_history


def mark_removed(
    history: tuple[RouletteHistory, ...], participant_id: str
) -> tuple[RouletteHistory, ...]:
    """Soft-delete the newest not-yet-removed record of ``participant_id``.

    The ledger is returned unchanged when no such record exists.
    """
    for index, entry in enumerate(history):
        if entry.participant_id == participant_id and not entry.removed:
            updated = replace(entry, removed=True)
            return history[:index] + (updated,) + history[index + 1 :]
    return history


def restore_by_name(
    history: tuple[RouletteHistory, ...], participant_name: str
) -> tuple[RouletteHistory, ...]:
    """Undo the soft delete of the newest removed record named ``participant_name``.

    Matching is by exact display name, not by participant id, so two removed
    participants that shared a name cannot be told apart here.
    """
    for index, entry in enumerate(history):
        if entry.removed and entry.participant_name == participant_name:
            updated = replace(entry, removed=False)
            return history[:index] + (updated,) + history[index + 1 :]
    return history


def is_task_assigned(task_history: Iterable[TaskHistory], task_id: str) -> bool:
    """A task counts as completed iff some record references its id."""
    return any(entry.task_id == task_id for entry in task_history)


def pending_tasks(
    tasks: Iterable[Task], task_history: Iterable[TaskHistory]
) -> tuple[Task, ...]:
    """Return tasks without an assignment record, in insertion order."""
    assigned = {entry.task_id for entry in task_history}
    return tuple(task for task in tasks if task.id not in assigned)


def completed_tasks(
    tasks: Iterable[Task], task_history: Iterable[TaskHistory]
) -> tuple[Task, ...]:
    assigned = {entry.task_id for entry in task_history}
    return tuple(task for task in tasks if task.id in assigned)


def next_pending_task(
    tasks: Iterable[Task], task_history: Iterable[TaskHistory]
) -> Optional[Task]:
    """Return the first pending task by insertion order, if any."""
    pending = pending_tasks(tasks, task_history)
    return pending[0] if pending else None


__all__ = [
    "completed_tasks",
    "is_task_assigned",
    "mark_removed",
    "next_pending_task",
    "pending_tasks",
    "record_draw",
    "record_prize_award",
    "record_task_assignment",
    "restore_by_name",
]
