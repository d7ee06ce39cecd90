#!/usr/bin/env python3
"""
Migration runner.

Creates every tenant table that does not exist yet, then prints the tables
present in the working schema. Safe to run repeatedly; never drops or alters.

    DATABASE_URL=postgres://... python -m outbound_impact.scripts.run_migration
"""
from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Callable
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncEngine

from outbound_impact.core.config import Settings, get_settings
from outbound_impact.core.errors import translate_db_error
from outbound_impact.core.logging_config import configure_logging
from outbound_impact.db.migrate import run_migration
from outbound_impact.db.session import create_engine_from_settings

logger = logging.getLogger(__name__)

EngineFactory = Callable[[Settings], AsyncEngine]


async def _migrate(settings: Settings, engine_factory: EngineFactory) -> list[str]:
    print("Connecting to database...")
    engine = engine_factory(settings)
    try:
        print("Running migration...")
        return await run_migration(engine)
    finally:
        await engine.dispose()


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    settings: Optional[Settings] = None,
    engine_factory: EngineFactory = create_engine_from_settings,
) -> int:
    """Returns the process exit code."""
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv:
        print("Usage: python -m outbound_impact.scripts.run_migration  (takes no arguments)", file=sys.stderr)
        return 1

    try:
        settings = settings or get_settings()
    except Exception as e:  # pydantic ValidationError for a missing/bad DATABASE_URL
        print(f"Migration failed: {e}", file=sys.stderr)
        return 1

    configure_logging(settings.LOG_LEVEL)

    try:
        tables = asyncio.run(_migrate(settings, engine_factory))
    except Exception as e:
        err = translate_db_error(e)
        if err is e:
            logger.exception("unexpected error while migrating")
        print(f"Migration failed: {err}", file=sys.stderr)
        return 1

    print("Migration complete! Tables created:")
    for name in tables:
        print(f"  - {name}")
    print("Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
