import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from .utils import resolve_sqlite_url

# DB_URL and DB_ECHO may come from a .env file
load_dotenv()

# Repository root; relative SQLite paths are anchored here
ROOT_DIR = Path(__file__).resolve().parents[2]
DEFAULT_SQLITE_URL = resolve_sqlite_url(
    os.getenv("DB_URL", "sqlite:///./drawwheel.db"), ROOT_DIR
)
DEFAULT_ECHO = os.getenv("DB_ECHO", "").lower() in ("1", "true", "yes")


def make_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """Create the engine behind the key-value store.

    ``database_url`` defaults to ``DB_URL`` and ``echo`` to ``DB_ECHO``.
    """
    url = database_url or DEFAULT_SQLITE_URL
    return create_engine(
        url,
        echo=DEFAULT_ECHO if echo is None else echo,
        future=True,
    )


def get_sessionmaker(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        expire_on_commit=False,
        future=True,
    )


def create_schema(engine: Engine) -> None:
    """Create every table known to the models on ``engine``.

    Intended for tests and throwaway databases; persistent databases are
    upgraded through alembic (see ``scripts/init_db.py``).
    """
    from ..models import Base

    Base.metadata.create_all(engine)
