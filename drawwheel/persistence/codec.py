"""Date-aware JSON encoding for values kept in the key-value store."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from ..db.utils import dt_iso, parse_timestamp


def _default(value: Any) -> Any:
    if isinstance(value, datetime):
        return dt_iso(value)
    to_json = getattr(value, "to_json", None)
    if callable(to_json):
        return to_json()
    if isinstance(value, (tuple, set, frozenset)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


# Record fields that carry timestamps. Other strings, names included, are
# never touched even when they look like dates.
TIMESTAMP_KEYS = frozenset({"createdAt", "selectedAt", "lastModified", "updatedAt"})


def _revive_field(key: str, value: Any) -> Any:
    if key in TIMESTAMP_KEYS and isinstance(value, str):
        parsed = parse_timestamp(value)
        return parsed if parsed is not None else value
    return _revive(value)


def _revive(value: Any) -> Any:
    if isinstance(value, list):
        return [_revive(item) for item in value]
    if isinstance(value, dict):
        return {key: _revive_field(key, item) for key, item in value.items()}
    return value


def dumps(value: Any) -> str:
    """Serialise ``value``; datetimes become ISO 8601 strings in UTC.

    Objects exposing ``to_json()`` (the domain records) are serialised
    through it.
    """
    return json.dumps(value, default=_default, ensure_ascii=False)


def loads(text: str) -> Any:
    """Parse ``text`` and turn ISO 8601 timestamp fields back into datetimes.

    Only values stored under :data:`TIMESTAMP_KEYS` are revived.

    Raises
    ------
    ValueError
        If ``text`` is not valid JSON.
    """
    return _revive(json.loads(text))


__all__ = ["TIMESTAMP_KEYS", "dumps", "loads"]
