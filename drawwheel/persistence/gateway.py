"""Key-value persistence gateway backed by SQLAlchemy."""

from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.kv import KeyValueEntry
from .codec import dumps, loads

logger = logging.getLogger(__name__)

T = TypeVar("T")


class KeyValueGateway:
    """Load and save JSON documents under string keys.

    ``load`` and ``save`` never raise: read problems fall back to the
    caller's default and write problems are logged. ``write`` and ``delete``
    are strict and let database errors propagate, for callers (such as the
    schema upgrade) that must know whether a write landed.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        """Create a gateway.

        Parameters
        ----------
        session_factory : Callable[[], Session]
            Usually a :func:`sqlalchemy.orm.sessionmaker`. Each operation
            runs in its own short-lived session.
        """

        self._session_factory = session_factory

    def load(self, key: str, default: T) -> Any:
        """Return the value stored under ``key``, or ``default``.

        ``default`` is returned when the key is missing, the stored document
        cannot be decoded, or the database cannot be read. ISO 8601
        strings under the timestamp fields (``createdAt``, ``selectedAt``,
        ``lastModified``, ``updatedAt``) come back as aware datetimes.
        """
        try:
            with self._session_factory() as session:
                entry = KeyValueEntry.get_by_key(session, key)
                raw = entry.value if entry is not None else None
        except SQLAlchemyError as exc:
            logger.error(f"Error reading key '{key}' from storage: {exc}")
            return default
        if raw is None:
            return default
        try:
            return loads(raw)
        except ValueError as exc:
            logger.warning(f"Discarding undecodable value stored under '{key}': {exc}")
            return default

    def save(self, key: str, value: Any) -> None:
        """Best-effort write of ``value`` under ``key``; failures are logged."""
        try:
            self.write(key, value)
        except (SQLAlchemyError, TypeError, ValueError) as exc:
            logger.error(f"Error saving key '{key}' to storage: {exc}")

    def write(self, key: str, value: Any) -> None:
        """Write ``value`` under ``key``, raising on failure."""
        document = dumps(value)
        with self._session_factory() as session:
            KeyValueEntry.upsert(session, key, document)
            session.commit()

    def delete(self, key: str) -> None:
        """Remove ``key`` if present, raising on database failure."""
        with self._session_factory() as session:
            entry = KeyValueEntry.get_by_key(session, key)
            if entry is not None:
                session.delete(entry)
                session.commit()

    def contains(self, key: str) -> bool:
        try:
            with self._session_factory() as session:
                return KeyValueEntry.get_by_key(session, key) is not None
        except SQLAlchemyError as exc:
            logger.error(f"Error reading key '{key}' from storage: {exc}")
            return False


__all__ = ["KeyValueGateway"]
