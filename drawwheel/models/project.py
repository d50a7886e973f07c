"""Project aggregate: one roster, its tasks and prizes, and its draw history."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Optional

from ..db.utils import coerce_timestamp, dt_iso
from ..utils import utcnow
from .history import PrizeHistory, RouletteHistory, TaskHistory
from .roster import Participant, Prize, Task, Team

DEFAULT_ANIMATION_DURATION_MS = 3000


@dataclass(frozen=True)
class ProjectSettings:
    """Per-project draw behaviour."""

    auto_remove_participants: bool = False
    """Remove drawn participants from the roster when a task draw finishes."""

    animation_duration: int = DEFAULT_ANIMATION_DURATION_MS
    """Wheel animation length in milliseconds; consumed by the UI only."""

    allow_duplicate_participants_in_task: bool = False
    """Sample with replacement when a task needs several participants."""

    def to_json(self) -> dict[str, Any]:
        return {
            "autoRemoveParticipants": self.auto_remove_participants,
            "animationDuration": self.animation_duration,
            "allowDuplicateParticipantsInTask": self.allow_duplicate_participants_in_task,
        }

    @classmethod
    def from_json(cls, data: Optional[dict[str, Any]]) -> "ProjectSettings":
        data = data or {}
        return cls(
            auto_remove_participants=bool(data.get("autoRemoveParticipants", False)),
            animation_duration=int(
                data.get("animationDuration", DEFAULT_ANIMATION_DURATION_MS)
            ),
            allow_duplicate_participants_in_task=bool(
                data.get("allowDuplicateParticipantsInTask", False)
            ),
        )


@dataclass(frozen=True)
class Project:
    """A named workspace owning its roster, tasks, prizes, and history.

    History tuples are ordered newest first. ``teams`` is kept for format
    compatibility and is always empty: teams live in the global registry.
    """

    id: str
    name: str
    description: Optional[str] = None
    participants: tuple[Participant, ...] = ()
    tasks: tuple[Task, ...] = ()
    prizes: tuple[Prize, ...] = ()
    teams: tuple[Team, ...] = ()
    history: tuple[RouletteHistory, ...] = ()
    task_history: tuple[TaskHistory, ...] = ()
    prize_history: tuple[PrizeHistory, ...] = ()
    settings: ProjectSettings = field(default_factory=ProjectSettings)
    created_at: datetime = field(default_factory=utcnow)
    last_modified: datetime = field(default_factory=utcnow)

    def touch(self, **changes: Any) -> "Project":
        """Return a copy with ``changes`` applied and ``last_modified`` bumped."""
        changes.setdefault("last_modified", utcnow())
        return replace(self, **changes)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "participants": [p.to_json() for p in self.participants],
            "tasks": [t.to_json() for t in self.tasks],
            "prizes": [p.to_json() for p in self.prizes],
            "teams": [t.to_json() for t in self.teams],
            "history": [h.to_json() for h in self.history],
            "taskHistory": [h.to_json() for h in self.task_history],
            "prizeHistory": [h.to_json() for h in self.prize_history],
            "settings": self.settings.to_json(),
            "createdAt": dt_iso(self.created_at),
            "lastModified": dt_iso(self.last_modified),
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Project":
        created_at = coerce_timestamp(data["createdAt"])
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            description=data.get("description") or None,
            participants=tuple(Participant.from_json(p) for p in data.get("participants") or ()),
            tasks=tuple(Task.from_json(t) for t in data.get("tasks") or ()),
            prizes=tuple(Prize.from_json(p) for p in data.get("prizes") or ()),
            teams=tuple(Team.from_json(t) for t in data.get("teams") or ()),
            history=tuple(RouletteHistory.from_json(h) for h in data.get("history") or ()),
            task_history=tuple(TaskHistory.from_json(h) for h in data.get("taskHistory") or ()),
            prize_history=tuple(
                PrizeHistory.from_json(h) for h in data.get("prizeHistory") or ()
            ),
            settings=ProjectSettings.from_json(data.get("settings")),
            created_at=created_at,
            last_modified=coerce_timestamp(data.get("lastModified") or created_at),
        )


__all__ = ["DEFAULT_ANIMATION_DURATION_MS", "Project", "ProjectSettings"]
