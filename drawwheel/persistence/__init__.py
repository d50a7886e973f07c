"""Persistence of the draw aggregate in a durable key-value store."""

from .codec import dumps, loads
from .gateway import KeyValueGateway
from .migration import CURRENT_SCHEMA_VERSION, SCHEMA_VERSION_KEY, upgrade_storage
from .repository import ACTIVE_PROJECT_KEY, PROJECTS_KEY, TEAMS_KEY, StateRepository

__all__ = [
    "ACTIVE_PROJECT_KEY",
    "CURRENT_SCHEMA_VERSION",
    "KeyValueGateway",
    "PROJECTS_KEY",
    "SCHEMA_VERSION_KEY",
    "StateRepository",
    "TEAMS_KEY",
    "dumps",
    "loads",
    "upgrade_storage",
]
