from .base import Base

# import models so Alembic/autoloaders can discover mappers
from .kv import KeyValueEntry  # noqa: F401
from .roster import (  # noqa: F401
    MAX_REQUIRED_PARTICIPANTS,
    MIN_REQUIRED_PARTICIPANTS,
    Participant,
    Prize,
    Task,
    Team,
)
from .history import (  # noqa: F401
    ParticipantRef,
    PrizeHistory,
    RouletteHistory,
    TaskHistory,
)
from .project import DEFAULT_ANIMATION_DURATION_MS, Project, ProjectSettings  # noqa: F401

__all__ = [
    "Base",
    "KeyValueEntry",
    "MAX_REQUIRED_PARTICIPANTS",
    "MIN_REQUIRED_PARTICIPANTS",
    "Participant",
    "Prize",
    "Task",
    "Team",
    "ParticipantRef",
    "PrizeHistory",
    "RouletteHistory",
    "TaskHistory",
    "DEFAULT_ANIMATION_DURATION_MS",
    "Project",
    "ProjectSettings",
]
