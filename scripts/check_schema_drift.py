"""Compare the kv_entries model against the configured database.

Exit codes: 0 when the database matches the model, 1 when it drifted,
2 when the comparison could not run.
"""

from __future__ import annotations

import sys

from alembic.autogenerate import compare_metadata
from alembic.runtime.migration import MigrationContext
from sqlalchemy.exc import SQLAlchemyError

from drawwheel.db.engine import make_engine
from drawwheel.models import Base


def _describe(diff) -> str:
    # compare_metadata yields tuples, or lists of tuples for column modifications.
    if isinstance(diff, list):
        return "; ".join(_describe(item) for item in diff)
    kind, *details = diff
    return f"{kind}: {', '.join(str(d) for d in details)}"


def main() -> int:
    engine = make_engine()
    url_display = engine.url.render_as_string(hide_password=True)
    try:
        with engine.connect() as connection:
            context = MigrationContext.configure(
                connection=connection,
                opts={
                    "compare_type": True,
                    "render_as_batch": connection.dialect.name == "sqlite",
                },
            )
            diffs = compare_metadata(context, Base.metadata)
    except SQLAlchemyError as exc:
        print(f"Schema drift check: ERROR for {url_display}: {exc}", file=sys.stderr)
        return 2
    finally:
        engine.dispose()

    if not diffs:
        print(f"Schema drift check: OK (no differences) for {url_display}.")
        return 0
    print(f"Schema drift check: FAILED for {url_display}. Differences detected:")
    for diff in diffs:
        print(f"- {_describe(diff)}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
