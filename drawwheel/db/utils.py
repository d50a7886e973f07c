import re
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional

# Prefix of the ISO 8601 timestamps written by ``dt_iso`` (and by the
# browser-era ``Date.toISOString``).
ISO_TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}")


def resolve_sqlite_url(url: str, project_root: Path) -> str:
    """Resolve 'sqlite:///./relative/path' to an absolute sqlite:/// URL.

    Keeps other URL forms unchanged.
    """
    prefix = "sqlite:///./"
    if not url.startswith(prefix):
        return url
    rel = url[len(prefix) :]
    return f"sqlite:///{(project_root / rel).resolve()}"


def dt_iso(dt: Optional[datetime]) -> Optional[str]:
    """Convert a datetime to an ISO 8601 string in UTC, or return None.

    Naive datetimes are assumed to already be in UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp string into an aware UTC datetime.

    Returns ``None`` when ``value`` does not look like a timestamp or cannot
    be parsed. A trailing ``Z`` is accepted.
    """
    if not isinstance(value, str) or not ISO_TIMESTAMP_RE.match(value):
        return None
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def coerce_timestamp(value) -> datetime:
    """Return ``value`` as an aware datetime.

    Accepts datetimes (naive values are taken as UTC) and ISO 8601 strings.
    Raises ``ValueError`` for anything else so callers can reject corrupt
    records as a whole.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
    parsed = parse_timestamp(value)
    if parsed is None:
        raise ValueError(f"invalid timestamp: {value!r}")
    return parsed
