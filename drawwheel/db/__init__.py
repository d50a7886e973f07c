"""Database configuration helpers."""

from .engine import DEFAULT_SQLITE_URL, create_schema, get_sessionmaker, make_engine
from .utils import coerce_timestamp, dt_iso, parse_timestamp, resolve_sqlite_url

__all__ = [
    "DEFAULT_SQLITE_URL",
    "coerce_timestamp",
    "create_schema",
    "dt_iso",
    "get_sessionmaker",
    "make_engine",
    "parse_timestamp",
    "resolve_sqlite_url",
]
