"""Name normalisation, duplicate resolution, and bulk-text parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from .models.roster import MAX_REQUIRED_PARTICIPANTS, MIN_REQUIRED_PARTICIPANTS
from .utils import clamp

_NAME_LIST_SEPARATOR = re.compile(r"[\n,]")
_LEADING_INT = re.compile(r"^[+-]?\d+")


def normalize_name(name: Optional[str]) -> Optional[str]:
    """Trim ``name`` and return ``None`` when nothing is left.

    Values that are not strings count as empty.
    """
    if not isinstance(name, str):
        return None
    trimmed = name.strip()
    return trimmed or None


def _first_free_name(trimmed: str, taken: set[str]) -> str:
    if trimmed.lower() not in taken:
        return trimmed
    counter = 2
    while f"{trimmed} ({counter})".lower() in taken:
        counter += 1
    return f"{trimmed} ({counter})"


def resolve_unique_name(name: Optional[str], existing: Iterable[str]) -> Optional[str]:
    """Return a display name that does not collide with ``existing``.

    Parameters
    ----------
    name : Optional[str]
        Candidate display name. Surrounding whitespace is removed.
    existing : Iterable[str]
        Names already present in the target collection. Compared
        case-insensitively.

    Returns
    -------
    Optional[str]
        ``None`` when the trimmed candidate is empty. Otherwise the trimmed
        candidate itself when it is free, or ``"<name> (N)"`` with the
        smallest ``N >= 2`` that is free.
    """

    trimmed = normalize_name(name)
    if trimmed is None:
        return None
    taken = {value.lower() for value in existing}
    return _first_free_name(trimmed, taken)


def resolve_unique_names(names: Iterable[Optional[str]], existing: Iterable[str]) -> list[str]:
    """Resolve an ordered batch of candidate names.

    Each resolved name is added to the running set before the next candidate
    is considered, so ``["X", "X"]`` resolves to ``["X", "X (2)"]``. Empty
    candidates are dropped.
    """

    taken = {value.lower() for value in existing}
    resolved: list[str] = []
    for candidate in names:
        trimmed = normalize_name(candidate)
        if trimmed is None:
            continue
        final = _first_free_name(trimmed, taken)
        taken.add(final.lower())
        resolved.append(final)
    return resolved


def parse_name_list(text: str) -> list[str]:
    """Split newline- or comma-delimited ``text`` into trimmed, non-empty names."""
    return [part.strip() for part in _NAME_LIST_SEPARATOR.split(text) if part.strip()]


def parse_required_participants(raw: Optional[str]) -> int:
    """Parse the numeric segment of a task line.

    Leading digits are honoured the way a lenient integer parser reads them
    (``"3 people"`` -> 3). Anything unparsable falls back to 1. The result is
    clamped to the allowed range.
    """

    if raw is None:
        return MIN_REQUIRED_PARTICIPANTS
    match = _LEADING_INT.match(raw.strip())
    if match is None:
        return MIN_REQUIRED_PARTICIPANTS
    return clamp(int(match.group(0)), MIN_REQUIRED_PARTICIPANTS, MAX_REQUIRED_PARTICIPANTS)


@dataclass(frozen=True)
class TaskLine:
    """One parsed ``name|description|requiredParticipants`` line."""

    name: str
    description: Optional[str]
    required_participants: int


def parse_task_line(line: str) -> Optional[TaskLine]:
    """Parse a pipe-delimited bulk task line.

    Returns ``None`` for blank lines and lines whose name segment is empty.
    """

    if not isinstance(line, str):
        return None
    segments = [segment.strip() for segment in line.split("|")]
    name = segments[0] if segments else ""
    if not name:
        return None
    description = segments[1] if len(segments) > 1 and segments[1] else None
    required = parse_required_participants(segments[2] if len(segments) > 2 else None)
    return TaskLine(name=name, description=description, required_participants=required)


def parse_task_lines(text: str) -> list[TaskLine]:
    """Parse a multi-line block of task lines, skipping blanks."""
    parsed = (parse_task_line(line) for line in text.splitlines())
    return [task for task in parsed if task is not None]


__all__ = [
    "TaskLine",
    "normalize_name",
    "parse_name_list",
    "parse_required_participants",
    "parse_task_line",
    "parse_task_lines",
    "resolve_unique_name",
    "resolve_unique_names",
]
