#!/usr/bin/env python3
"""Apply identity store migrations, reporting failures to Logfire.

Usage:
    python scripts/run_migrations.py            # upgrade to head
    python scripts/run_migrations.py <revision> # upgrade to a revision
    python scripts/run_migrations.py -1         # step back one revision
"""

import sys

import logfire
from alembic import command
from alembic.config import Config
from sqlalchemy.engine import make_url

from claim.config import Settings
from claim.util.observability import configure_logfire


def main(argv: list[str]) -> int:
    """Migrate the database to the requested revision."""
    settings = Settings()
    configure_logfire(settings)

    target = argv[0] if argv else "head"
    url = make_url(settings.database.url)

    with logfire.span(
        "run_migrations", target=target, host=url.host, database=url.database
    ):
        try:
            alembic_cfg = Config("alembic.ini")
            if target.startswith("-"):
                command.downgrade(alembic_cfg, target)
            else:
                command.upgrade(alembic_cfg, target)
        except Exception as e:
            logfire.error(
                "Database migration failed",
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            # Re-raise so the deploy stops before serving on a broken schema
            raise

    logfire.info("Database migrations completed", target=target)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
