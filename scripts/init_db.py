from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import inspect

from drawwheel.db.engine import get_sessionmaker, make_engine
from drawwheel.persistence import KeyValueGateway, upgrade_storage


def upgrade_db(target_revision: str = "head") -> None:
    """Apply Alembic migrations up to the requested revision."""
    project_root = Path(__file__).resolve().parents[1]
    alembic_cfg = Config(str(project_root / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
    command.upgrade(alembic_cfg, target_revision)


def upgrade_stored_data() -> None:
    """Move flat pre-project keys into the project registry, if any remain."""
    engine = make_engine()
    gateway = KeyValueGateway(get_sessionmaker(engine))
    if upgrade_storage(gateway):
        print("Stored data upgraded to the project registry.")
    engine.dispose()


def print_keys() -> None:
    """Inspect the configured database and print its tables and stored keys."""
    engine = make_engine()
    insp = inspect(engine)
    print("Current tables:", ", ".join(sorted(insp.get_table_names())))
    from drawwheel.models import KeyValueEntry

    with get_sessionmaker(engine)() as session:
        keys = KeyValueEntry.keys(session)
    print("Stored keys:", ", ".join(keys) if keys else "(none)")
    engine.dispose()


def main() -> None:
    """Apply migrations (default to head), upgrade stored data, and report."""
    upgrade_db()
    upgrade_stored_data()
    print_keys()


if __name__ == "__main__":
    main()
