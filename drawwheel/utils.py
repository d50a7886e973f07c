"""Identity, colour, and randomness helpers shared by the draw subsystem."""

from __future__ import annotations

import random
import secrets
import string
from datetime import datetime, timezone
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")

BASE62_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase

ID_LENGTH = 12

# Display palette for wheel segments.
WHEEL_COLORS = (
    "#FF6B6B",  # vibrant red
    "#4ECDC4",  # teal
    "#45B7D1",  # blue
    "#96CEB4",  # mint green
    "#FFEAA7",  # sunny yellow
    "#DDA0DD",  # plum
    "#FF8A80",  # light red
    "#80CBC4",  # cyan
    "#81C784",  # light green
    "#FFB74D",  # orange
    "#CE93D8",  # light purple
    "#F06292",  # pink
    "#64B5F6",  # light blue
    "#A5D6A7",  # pale green
    "#FFCC02",  # golden yellow
    "#BA68C8",  # medium purple
    "#26C6DA",  # light cyan
    "#66BB6A",  # green
    "#FF7043",  # deep orange
    "#AB47BC",  # purple
)


def generate_id(length: int = ID_LENGTH) -> str:
    """Return a random base62 identifier for in-session collection keys.

    Twelve base62 characters give ~71 bits of entropy, which keeps the
    collision probability negligible for rosters of a few thousand entries.
    """

    return "".join(secrets.choice(BASE62_ALPHABET) for _ in range(length))


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def pick_random_uniform(
    items: Sequence[T], rng: Optional[random.Random] = None
) -> Optional[T]:
    """Return one element of ``items`` chosen with probability ``1/len(items)``.

    Parameters
    ----------
    items : Sequence[T]
        Candidates to choose from. Participants, tasks, and prizes all go
        through this helper.
    rng : Optional[random.Random], default: None
        Source of randomness. The module-level generator is used when omitted;
        tests pass a seeded :class:`random.Random`.

    Returns
    -------
    Optional[T]
        The selected element, or ``None`` when ``items`` is empty.
    """

    if not items:
        return None
    source = rng if rng is not None else random
    return items[source.randrange(len(items))]


def assign_color(rng: Optional[random.Random] = None) -> str:
    """Return a colour from :data:`WHEEL_COLORS`. Uniqueness is not required."""
    source = rng if rng is not None else random
    return WHEEL_COLORS[source.randrange(len(WHEEL_COLORS))]


def clamp(value: int, lower: int, upper: int) -> int:
    """Clamp ``value`` into the closed range ``[lower, upper]``."""
    if lower > upper:
        raise ValueError("lower bound must not exceed upper bound")
    return max(lower, min(value, upper))


__all__ = [
    "BASE62_ALPHABET",
    "WHEEL_COLORS",
    "assign_color",
    "clamp",
    "generate_id",
    "pick_random_uniform",
    "utcnow",
]
