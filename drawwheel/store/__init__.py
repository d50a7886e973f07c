"""Draw aggregate: state snapshot, actions, reducer, and store."""

from . import actions
from .reducer import RouletteReducer, apply
from .state import EMPTY_STATE, RouletteState, TaskSpinSequence
from .store import RouletteStore

__all__ = [
    "EMPTY_STATE",
    "RouletteReducer",
    "RouletteState",
    "RouletteStore",
    "TaskSpinSequence",
    "actions",
    "apply",
]
