"""Draw records kept by the history ledger.

Records are snapshots: names and descriptions are copied at draw time and
never follow later edits of the source participant, task, or prize.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..db.utils import coerce_timestamp, dt_iso
from ..utils import utcnow


@dataclass(frozen=True)
class RouletteHistory:
    """Outcome of a single-participant draw.

    ``removed`` is a soft-delete marker: it records that the participant was
    taken off the roster after this draw. It is the only field that may
    change after the record is created.
    """

    id: str
    participant_id: str
    participant_name: str
    selected_at: datetime = field(default_factory=utcnow)
    removed: bool = False

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "participantId": self.participant_id,
            "participantName": self.participant_name,
            "selectedAt": dt_iso(self.selected_at),
            "removed": self.removed,
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "RouletteHistory":
        return cls(
            id=str(data["id"]),
            participant_id=str(data["participantId"]),
            participant_name=str(data["participantName"]),
            selected_at=coerce_timestamp(data["selectedAt"]),
            removed=bool(data.get("removed", False)),
        )


@dataclass(frozen=True)
class ParticipantRef:
    """``{id, name}`` snapshot of a participant inside a task record."""

    id: str
    name: str

    def to_json(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "ParticipantRef":
        return cls(id=str(data["id"]), name=str(data["name"]))


@dataclass(frozen=True)
class TaskHistory:
    """Assignment of a task to one or more participants. Never edited."""

    id: str
    participants: tuple[ParticipantRef, ...]
    task_id: str
    task_name: str
    task_description: Optional[str] = None
    selected_at: datetime = field(default_factory=utcnow)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "participants": [p.to_json() for p in self.participants],
            "taskId": self.task_id,
            "taskName": self.task_name,
            "taskDescription": self.task_description,
            "selectedAt": dt_iso(self.selected_at),
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "TaskHistory":
        if "participants" in data:
            participants = tuple(ParticipantRef.from_json(p) for p in data["participants"])
        else:
            # Single-assignee shape written before multi-participant tasks.
            participants = (
                ParticipantRef(id=str(data["participantId"]), name=str(data["participantName"])),
            )
        return cls(
            id=str(data["id"]),
            participants=participants,
            task_id=str(data["taskId"]),
            task_name=str(data["taskName"]),
            task_description=data.get("taskDescription") or None,
            selected_at=coerce_timestamp(data["selectedAt"]),
        )


@dataclass(frozen=True)
class PrizeHistory:
    """Outcome of a prize draw. Never edited."""

    id: str
    participant_id: str
    participant_name: str
    prize_id: str
    prize_name: str
    selected_at: datetime = field(default_factory=utcnow)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "participantId": self.participant_id,
            "participantName": self.participant_name,
            "prizeId": self.prize_id,
            "prizeName": self.prize_name,
            "selectedAt": dt_iso(self.selected_at),
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "PrizeHistory":
        return cls(
            id=str(data["id"]),
            participant_id=str(data["participantId"]),
            participant_name=str(data["participantName"]),
            prize_id=str(data["prizeId"]),
            prize_name=str(data["prizeName"]),
            selected_at=coerce_timestamp(data["selectedAt"]),
        )


__all__ = ["ParticipantRef", "PrizeHistory", "RouletteHistory", "TaskHistory"]
