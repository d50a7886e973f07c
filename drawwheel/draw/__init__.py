"""Utilities for the draw subsystem."""

from .engine import DrawEngine, PrizeDrawResult, TaskDrawResult

__all__ = [
    "DrawEngine",
    "PrizeDrawResult",
    "TaskDrawResult",
]
