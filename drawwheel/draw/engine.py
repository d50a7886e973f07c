"""Random-selection engine for participant, task, and prize draws."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional, Sequence

from ..models.roster import (
    MAX_REQUIRED_PARTICIPANTS,
    MIN_REQUIRED_PARTICIPANTS,
    Participant,
    Prize,
    Task,
)
from ..utils import clamp, pick_random_uniform


@dataclass(frozen=True)
class TaskDrawResult:
    """Value object describing a task draw.

    Attributes
    ----------
    task : Task
        The pending task the participants were drawn for.
    participants : tuple[Participant, ...]
        Drawn participants in draw order. Shorter than
        ``task.required_participants`` when the working pool ran dry.
    """

    task: Task
    participants: tuple[Participant, ...]

    @property
    def is_partial(self) -> bool:
        return len(self.participants) < self.task.required_participants


@dataclass(frozen=True)
class PrizeDrawResult:
    """Value object pairing a drawn participant with a drawn prize."""

    participant: Participant
    prize: Prize


class DrawEngine:
    """Engine that performs the random selection step of every draw.

    The engine is pure apart from its random source: it never touches the
    store. Callers commit results by dispatching the matching finish action.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        """Create a draw engine.

        Parameters
        ----------
        rng : Optional[random.Random], default: None
            Source of randomness. Typically omitted, in which case the
            module-level generator is used. Tests pass a seeded instance.
        """

        self._rng = rng

    def draw_one(self, participants: Sequence[Participant]) -> Optional[Participant]:
        """Select one participant uniformly at random.

        Returns ``None`` for an empty roster.
        """
        return pick_random_uniform(participants, self._rng)

    def draw_for_task(
        self,
        participants: Sequence[Participant],
        task: Optional[Task],
        *,
        allow_duplicates: bool = False,
    ) -> Optional[TaskDrawResult]:
        """Draw the participants required by ``task``.

        Parameters
        ----------
        participants : Sequence[Participant]
            Active roster.
        task : Optional[Task]
            Task to staff, normally the next pending task. ``None`` means
            there is nothing left to draw for.
        allow_duplicates : bool, default: False
            When ``False`` each drawn participant leaves the working pool
            (sampling without replacement). When ``True`` the pool is left
            untouched and the same person may be drawn repeatedly.

        Returns
        -------
        Optional[TaskDrawResult]
            ``None`` when there is no task or no participant. Otherwise the
            drawn participants; the result is partial rather than an error
            when the task needs more people than the pool holds.

        Notes
        -----
        The loop stops after ``task.required_participants`` successful
        draws or when the working pool is exhausted, whichever comes first.
        """
        if task is None or not participants:
            return None

        required = clamp(
            task.required_participants,
            MIN_REQUIRED_PARTICIPANTS,
            MAX_REQUIRED_PARTICIPANTS,
        )
        pool = list(participants)
        selected: list[Participant] = []
        while len(selected) < required and pool:
            drawn = pick_random_uniform(pool, self._rng)
            if drawn is None:  # pragma: no cover - pool is non-empty here
                break
            selected.append(drawn)
            if not allow_duplicates:
                pool.remove(drawn)

        return TaskDrawResult(task=task, participants=tuple(selected))

    def draw_next_pick(
        self,
        participants: Sequence[Participant],
        already_selected: Sequence[Participant] = (),
        *,
        allow_duplicates: bool = False,
    ) -> Optional[Participant]:
        """Draw one more participant for a task drawn one spin at a time.

        Participants in ``already_selected`` are excluded unless duplicates
        are allowed. Returns ``None`` when nobody is left.
        """
        if allow_duplicates:
            pool = list(participants)
        else:
            taken = {p.id for p in already_selected}
            pool = [p for p in participants if p.id not in taken]
        return pick_random_uniform(pool, self._rng)

    def draw_prize(
        self,
        participants: Sequence[Participant],
        prizes: Sequence[Prize],
    ) -> Optional[PrizeDrawResult]:
        """Draw a participant and, independently, a prize.

        Returns ``None`` unless both collections are non-empty.
        """
        participant = pick_random_uniform(participants, self._rng)
        prize = pick_random_uniform(prizes, self._rng)
        if participant is None or prize is None:
            return None
        return PrizeDrawResult(participant=participant, prize=prize)


__all__ = [
    "DrawEngine",
    "PrizeDrawResult",
    "TaskDrawResult",
]
