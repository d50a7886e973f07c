"""One-time upgrade of flat, pre-project storage into the project registry.

Schema 1 kept a single roster in five flat keys. Schema 2 groups everything
into projects. :func:`upgrade_storage` checks the version marker, wraps any
schema-1 data into a default project, writes the schema-2 keys, sets the
marker, and finally deletes the flat keys.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..models.history import RouletteHistory, TaskHistory
from ..models.project import Project, ProjectSettings
from ..models.roster import Participant, Task
from ..utils import generate_id, utcnow
from .gateway import KeyValueGateway
from .repository import ACTIVE_PROJECT_KEY, PROJECTS_KEY

logger = logging.getLogger(__name__)

SCHEMA_VERSION_KEY = "roulette-schema-version"
LEGACY_SCHEMA_VERSION = 1
CURRENT_SCHEMA_VERSION = 2

LEGACY_PARTICIPANTS_KEY = "roulette-participants"
LEGACY_TASKS_KEY = "task-roulette-tasks"
LEGACY_HISTORY_KEY = "roulette-history"
LEGACY_TASK_HISTORY_KEY = "task-roulette-history"
LEGACY_SETTINGS_KEY = "roulette-settings"

LEGACY_KEYS = (
    LEGACY_PARTICIPANTS_KEY,
    LEGACY_TASKS_KEY,
    LEGACY_HISTORY_KEY,
    LEGACY_TASK_HISTORY_KEY,
    LEGACY_SETTINGS_KEY,
)

DEFAULT_PROJECT_NAME = "Default Project"


def _decode_list(raw: Any, decoder: Callable[[dict], Any], key: str) -> tuple:
    if not isinstance(raw, list):
        return ()
    decoded = []
    for item in raw:
        try:
            decoded.append(decoder(item))
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning(f"Skipping unreadable legacy record in '{key}': {exc}")
    return tuple(decoded)


def build_legacy_project(
    gateway: KeyValueGateway,
    *,
    id_factory: Callable[[], str] = generate_id,
) -> Optional[Project]:
    """Wrap schema-1 data into a project, or return ``None`` when there is none."""
    participants = _decode_list(
        gateway.load(LEGACY_PARTICIPANTS_KEY, []), Participant.from_json, LEGACY_PARTICIPANTS_KEY
    )
    tasks = _decode_list(gateway.load(LEGACY_TASKS_KEY, []), Task.from_json, LEGACY_TASKS_KEY)
    history = _decode_list(
        gateway.load(LEGACY_HISTORY_KEY, []), RouletteHistory.from_json, LEGACY_HISTORY_KEY
    )
    task_history = _decode_list(
        gateway.load(LEGACY_TASK_HISTORY_KEY, []),
        TaskHistory.from_json,
        LEGACY_TASK_HISTORY_KEY,
    )
    if not (participants or tasks or history or task_history):
        return None

    raw_settings = gateway.load(LEGACY_SETTINGS_KEY, {})
    auto_remove = (
        bool(raw_settings.get("autoRemoveParticipants", False))
        if isinstance(raw_settings, dict)
        else False
    )
    now = utcnow()
    return Project(
        id=id_factory(),
        name=DEFAULT_PROJECT_NAME,
        participants=participants,
        tasks=tasks,
        history=history,
        task_history=task_history,
        settings=ProjectSettings(auto_remove_participants=auto_remove),
        created_at=now,
        last_modified=now,
    )


def upgrade_storage(
    gateway: KeyValueGateway,
    *,
    id_factory: Callable[[], str] = generate_id,
) -> bool:
    """Run the schema 1 -> 2 upgrade if it has not completed yet.

    Safe to call on every start. An interrupted run is resumed: when the
    project registry was already written, the legacy data is not wrapped a
    second time and only the marker and cleanup steps are repeated.

    Returns
    -------
    bool
        ``True`` when this call completed the upgrade, ``False`` when it was
        already done or failed. A failed upgrade leaves the marker unset and
        is retried next time.
    """
    version = gateway.load(SCHEMA_VERSION_KEY, LEGACY_SCHEMA_VERSION)
    if isinstance(version, int) and version >= CURRENT_SCHEMA_VERSION:
        return False

    try:
        if not gateway.contains(PROJECTS_KEY):
            project = build_legacy_project(gateway, id_factory=id_factory)
            if project is not None:
                logger.info(
                    f"Migrating {len(project.participants)} participants and "
                    f"{len(project.tasks)} tasks into '{project.name}'"
                )
                gateway.write(PROJECTS_KEY, [project.to_json()])
                gateway.write(ACTIVE_PROJECT_KEY, project.id)
        gateway.write(SCHEMA_VERSION_KEY, CURRENT_SCHEMA_VERSION)
        for key in LEGACY_KEYS:
            gateway.delete(key)
    except SQLAlchemyError as exc:
        logger.error(f"Storage upgrade failed; it will be retried: {exc}")
        return False

    logger.debug(f"Storage upgraded to schema {CURRENT_SCHEMA_VERSION}")
    return True


__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "DEFAULT_PROJECT_NAME",
    "LEGACY_KEYS",
    "SCHEMA_VERSION_KEY",
    "build_legacy_project",
    "upgrade_storage",
]
