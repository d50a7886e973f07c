"""Lottery-wheel draw engine with project-scoped rosters and draw history."""

from .draw import DrawEngine, PrizeDrawResult, TaskDrawResult
from .models import (
    Participant,
    ParticipantRef,
    Prize,
    PrizeHistory,
    Project,
    ProjectSettings,
    RouletteHistory,
    Task,
    TaskHistory,
    Team,
)
from .store import RouletteReducer, RouletteState, RouletteStore, actions

__all__ = [
    "DrawEngine",
    "Participant",
    "ParticipantRef",
    "Prize",
    "PrizeDrawResult",
    "PrizeHistory",
    "Project",
    "ProjectSettings",
    "RouletteHistory",
    "RouletteReducer",
    "RouletteState",
    "RouletteStore",
    "Task",
    "TaskDrawResult",
    "TaskHistory",
    "Team",
    "actions",
]
