"""Store object owning the current state and the two-phase draw protocol."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence

from . import actions as act
from ..draw.engine import DrawEngine, PrizeDrawResult, TaskDrawResult
from ..models.project import Project
from ..models.roster import Participant, Prize, Task
from .reducer import RouletteReducer
from .state import EMPTY_STATE, RouletteState

logger = logging.getLogger(__name__)

Listener = Callable[[RouletteState, RouletteState], None]


class RouletteStore:
    """Holds one immutable :class:`RouletteState` and serialises every change.

    ``dispatch`` and the ``request_*`` / ``finish_*`` helpers are the only
    mutation surface. Listeners registered with :meth:`subscribe` are called
    with ``(previous, current)`` after each dispatch that changed the state.

    Draws follow a two-phase protocol: a ``request_*`` call flips the store
    into the spinning state and performs the random selection immediately;
    the matching ``finish_*`` call commits the result to history. Any wheel
    animation between the two phases is the caller's concern. While a draw
    is in flight further requests are rejected with ``None``.
    """

    def __init__(
        self,
        state: Optional[RouletteState] = None,
        *,
        reducer: Optional[RouletteReducer] = None,
        engine: Optional[DrawEngine] = None,
    ) -> None:
        """Create a store.

        Parameters
        ----------
        state : Optional[RouletteState], default: None
            Initial state, typically loaded by
            :class:`~drawwheel.persistence.repository.StateRepository`.
            Defaults to an empty registry.
        reducer : Optional[RouletteReducer], default: None
            Transition function. A default reducer is used when omitted.
        engine : Optional[DrawEngine], default: None
            Random-selection engine. A default engine is used when omitted.
        """

        self._state = state if state is not None else EMPTY_STATE
        self._reducer = reducer or RouletteReducer()
        self._engine = engine or DrawEngine()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> RouletteState:
        return self._state

    def current_project(self) -> Optional[Project]:
        return self._state.current_project()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Any) -> RouletteState:
        """Apply ``action`` and notify listeners when the state changed."""
        previous = self._state
        current = self._reducer.apply(previous, action)
        if current is previous:
            return current
        self._state = current
        for listener in list(self._listeners):
            listener(previous, current)
        return current

    # -------- participant draws --------

    def request_spin(self) -> Optional[Participant]:
        """Start a participant draw and return the selected participant.

        Returns ``None`` without mutating anything when the roster is empty
        or a draw is already in flight.
        """
        if not self._state.can_spin():
            logger.debug("Participant spin rejected (spinning or empty roster)")
            return None
        self.dispatch(act.SpinRequest())
        return self._engine.draw_one(self._state.participants)

    def finish_spin(self, participant: Optional[Participant] = None) -> RouletteState:
        """Commit ``participant`` to history; ``None`` cancels the spin."""
        return self.dispatch(act.FinishSpin(participant=participant))

    # -------- task draws --------

    def request_task_spin(self) -> Optional[TaskDrawResult]:
        """Start a task draw for the next pending task.

        Returns ``None`` without mutating anything when no task is pending,
        the roster is empty, or a draw is already in flight.
        """
        if not self._state.can_spin_task():
            logger.debug("Task spin rejected (spinning, empty roster, or no pending task)")
            return None
        task = self._state.current_task()
        self.dispatch(act.TaskSpinRequest())
        return self._engine.draw_for_task(
            self._state.participants,
            task,
            allow_duplicates=self._state.allow_duplicate_participants_in_task,
        )

    def finish_task_spin(
        self,
        participants: Optional[Sequence[Participant]] = None,
        task: Optional[Task] = None,
    ) -> RouletteState:
        """Commit a task assignment; missing arguments cancel the spin."""
        return self.dispatch(
            act.FinishTaskSpin(
                participants=tuple(participants) if participants is not None else None,
                task=task,
            )
        )

    def start_task_sequence(self, task: Optional[Task] = None) -> bool:
        """Begin drawing ``task`` (default: next pending task) one spin at a time."""
        target = task or self._state.current_task()
        if target is None:
            return False
        before = self._state
        return self.dispatch(act.StartTaskSpinSequence(task=target)) is not before

    def request_task_sequence_pick(self) -> Optional[Participant]:
        """Draw and record the next participant of the running sequence."""
        sequence = self._state.task_spin
        if sequence is None or sequence.is_complete:
            return None
        picked = self._engine.draw_next_pick(
            self._state.participants,
            sequence.selected_participants,
            allow_duplicates=self._state.allow_duplicate_participants_in_task,
        )
        if picked is None:
            return None
        self.dispatch(act.RecordTaskSpinPick(participant=picked))
        return picked

    def complete_task_sequence(self) -> RouletteState:
        return self.dispatch(act.CompleteTaskSpinSequence())

    def cancel_task_sequence(self) -> RouletteState:
        return self.dispatch(act.CancelTaskSpinSequence())

    # -------- prize draws --------

    def request_prize_spin(self) -> Optional[PrizeDrawResult]:
        """Start a prize draw and return the drawn participant and prize."""
        if not self._state.can_spin_prize():
            logger.debug("Prize spin rejected (spinning, empty roster, or no prizes)")
            return None
        self.dispatch(act.PrizeSpinRequest())
        return self._engine.draw_prize(self._state.participants, self._state.prizes)

    def finish_prize_spin(
        self,
        participant: Optional[Participant] = None,
        prize: Optional[Prize] = None,
    ) -> RouletteState:
        return self.dispatch(act.FinishPrizeSpin(participant=participant, prize=prize))


__all__ = ["Listener", "RouletteStore"]
