"""Load and save the draw aggregate through the key-value gateway."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..models.project import Project
from ..models.roster import Team
from ..store.state import RouletteState
from .gateway import KeyValueGateway

logger = logging.getLogger(__name__)

PROJECTS_KEY = "roulette-projects"
TEAMS_KEY = "roulette-global-teams"
ACTIVE_PROJECT_KEY = "roulette-active-project"


def _decode_records(raw: Any, decoder: Callable[[dict], Any], key: str) -> tuple:
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning(f"Ignoring non-list value stored under '{key}'")
        return ()
    try:
        return tuple(decoder(item) for item in raw)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        # All or nothing: a partially decoded registry is never exposed.
        logger.error(f"Discarding corrupt records stored under '{key}': {exc}")
        return ()


class StateRepository:
    """Maps :class:`RouletteState` onto the three persisted keys.

    Only durable data is stored: the project registry, the global team
    registry, and the active-project pointer. Spinning flags and selections
    are transient and always load as idle.
    """

    def __init__(self, gateway: KeyValueGateway) -> None:
        self._gateway = gateway

    @property
    def gateway(self) -> KeyValueGateway:
        return self._gateway

    def load_state(self) -> RouletteState:
        """Rebuild the aggregate from storage, falling back to empty collections."""
        projects = _decode_records(
            self._gateway.load(PROJECTS_KEY, []), Project.from_json, PROJECTS_KEY
        )
        teams = _decode_records(self._gateway.load(TEAMS_KEY, []), Team.from_json, TEAMS_KEY)
        active_id: Optional[str] = self._gateway.load(ACTIVE_PROJECT_KEY, None)

        known = {project.id for project in projects}
        if active_id not in known:
            fallback = projects[0].id if projects else None
            if active_id is not None:
                logger.warning(
                    f"Active project '{active_id}' not found; falling back to {fallback!r}"
                )
            active_id = fallback

        return RouletteState(projects=projects, active_project_id=active_id, global_teams=teams)

    def save_state(self, state: RouletteState) -> None:
        """Write every durable part of ``state``. Failures are logged, not raised."""
        self._gateway.save(PROJECTS_KEY, [project.to_json() for project in state.projects])
        self._gateway.save(TEAMS_KEY, [team.to_json() for team in state.global_teams])
        self._gateway.save(ACTIVE_PROJECT_KEY, state.active_project_id)

    def on_change(self, previous: RouletteState, current: RouletteState) -> None:
        """Store listener: persist only the parts that changed.

        Spin flags and selections do not touch storage.
        """
        if current.projects is not previous.projects:
            self._gateway.save(
                PROJECTS_KEY, [project.to_json() for project in current.projects]
            )
        if current.global_teams is not previous.global_teams:
            self._gateway.save(TEAMS_KEY, [team.to_json() for team in current.global_teams])
        if current.active_project_id != previous.active_project_id:
            self._gateway.save(ACTIVE_PROJECT_KEY, current.active_project_id)


__all__ = [
    "ACTIVE_PROJECT_KEY",
    "PROJECTS_KEY",
    "StateRepository",
    "TEAMS_KEY",
]
