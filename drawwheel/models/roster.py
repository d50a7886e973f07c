"""Roster records: participants, tasks, prizes, and teams."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Optional

from ..db.utils import coerce_timestamp, dt_iso
from ..utils import clamp, utcnow

MIN_REQUIRED_PARTICIPANTS = 1
MAX_REQUIRED_PARTICIPANTS = 10


@dataclass(frozen=True)
class Participant:
    """A person who can be drawn.

    Attributes
    ----------
    id : str
        Identifier unique within the owning roster.
    name : str
        Display name, unique case-insensitively within the roster.
    color : Optional[str]
        Wheel segment colour.
    created_at : datetime
        Creation timestamp (aware, UTC).
    """

    id: str
    name: str
    color: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "createdAt": dt_iso(self.created_at),
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Participant":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            color=data.get("color"),
            created_at=coerce_timestamp(data["createdAt"]),
        )


@dataclass(frozen=True)
class Task:
    """A unit of work assigned to ``required_participants`` distinct people."""

    id: str
    name: str
    description: Optional[str] = None
    required_participants: int = MIN_REQUIRED_PARTICIPANTS
    color: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        # Frozen dataclass: route the clamped value through object.__setattr__.
        object.__setattr__(
            self,
            "required_participants",
            clamp(
                int(self.required_participants),
                MIN_REQUIRED_PARTICIPANTS,
                MAX_REQUIRED_PARTICIPANTS,
            ),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "requiredParticipants": self.required_participants,
            "color": self.color,
            "createdAt": dt_iso(self.created_at),
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Task":
        # Records written before multi-participant tasks existed lack the count.
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            description=data.get("description") or None,
            required_participants=data.get("requiredParticipants") or MIN_REQUIRED_PARTICIPANTS,
            color=data.get("color"),
            created_at=coerce_timestamp(data["createdAt"]),
        )


@dataclass(frozen=True)
class Prize:
    """Something handed out by the prize wheel. Leaves the list once drawn."""

    id: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "color": self.color,
            "createdAt": dt_iso(self.created_at),
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Prize":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            description=data.get("description") or None,
            color=data.get("color"),
            created_at=coerce_timestamp(data["createdAt"]),
        )


@dataclass(frozen=True)
class Team:
    """A reusable, project-independent group of people.

    ``members`` are independent copies of :class:`Participant`; importing a
    team into a project copies them again rather than linking.
    """

    id: str
    name: str
    description: Optional[str] = None
    members: tuple[Participant, ...] = ()
    color: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)

    def with_members(self, members: tuple[Participant, ...]) -> "Team":
        return replace(self, members=members)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "members": [member.to_json() for member in self.members],
            "color": self.color,
            "createdAt": dt_iso(self.created_at),
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Team":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            description=data.get("description") or None,
            members=tuple(Participant.from_json(m) for m in data.get("members") or ()),
            color=data.get("color"),
            created_at=coerce_timestamp(data["createdAt"]),
        )


__all__ = [
    "MAX_REQUIRED_PARTICIPANTS",
    "MIN_REQUIRED_PARTICIPANTS",
    "Participant",
    "Prize",
    "Task",
    "Team",
]
