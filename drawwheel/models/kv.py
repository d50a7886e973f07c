"""Durable key-value storage backing the persistence gateway."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String, Text, select
from sqlalchemy.orm import Mapped, Session, mapped_column

from .base import Base


class KeyValueEntry(Base):
    """One serialised value stored under a string key."""

    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    """Storage key, e.g. ``"roulette-projects"``."""

    value: Mapped[str] = mapped_column(Text, nullable=False)
    """JSON document produced by :func:`drawwheel.persistence.codec.dumps`."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    """Timestamp automatically bumped on every write."""

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return "<KeyValueEntry(key={key}, size={size})>".format(
            key=self.key,
            size=len(self.value or ""),
        )

    @classmethod
    def get_by_key(cls, session: Session, key: str) -> Optional["KeyValueEntry"]:
        """Return the entry stored under ``key`` if it exists."""

        return session.get(cls, key)

    @classmethod
    def upsert(cls, session: Session, key: str, value: str) -> "KeyValueEntry":
        """Insert or overwrite the entry stored under ``key``."""

        entry = session.get(cls, key)
        if entry is None:
            entry = cls(key=key, value=value)
            session.add(entry)
        else:
            entry.value = value
        return entry

    @classmethod
    def keys(cls, session: Session) -> list[str]:
        """Return every stored key in sorted order."""

        return list(session.scalars(select(cls.key).order_by(cls.key)))


__all__ = ["KeyValueEntry"]
