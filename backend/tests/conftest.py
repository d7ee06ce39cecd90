from __future__ import annotations

import asyncio
import os

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from outbound_impact.core.config import Settings

# Ensure Base + models are registered before create_all
from outbound_impact.db.base import Base
import outbound_impact.models  # noqa: F401
from outbound_impact.db.migrate import apply_schema
from outbound_impact.db.schema import ADMIN_TABLES, TENANT_TABLES
from outbound_impact.db.session import create_engine_from_settings, make_sessionmaker


# ---------------------------------------------------------
# Database config
# ---------------------------------------------------------
@pytest.fixture()
def database_url(tmp_path) -> str:
    """
    SQLite file per test by default.
    Set TEST_DATABASE_URL to run the same suite against PostgreSQL.
    """
    url = os.getenv("TEST_DATABASE_URL")
    if url:
        return url
    return f"sqlite+aiosqlite:///{tmp_path / 'outbound_impact_test.db'}"


async def _drop_everything(settings: Settings) -> None:
    engine = create_engine_from_settings(settings)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
    finally:
        await engine.dispose()


@pytest.fixture()
def settings(database_url: str):
    s = Settings(
        _env_file=None,
        DATABASE_URL=database_url,
        DATABASE_SSL=os.getenv("TEST_DATABASE_SSL", "strict"),
        BCRYPT_ROUNDS=4,  # minimum cost keeps the suite fast
    )
    yield s

    # a shared PostgreSQL database has to be emptied; SQLite files die with tmp_path
    if not s.is_sqlite:
        asyncio.run(_drop_everything(s))


# ---------------------------------------------------------
# Engine (empty database)
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def engine(settings: Settings):
    engine = create_engine_from_settings(settings)
    yield engine
    await engine.dispose()


# ---------------------------------------------------------
# DB session on a fully migrated database
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def db(engine):
    async with engine.begin() as conn:
        await apply_schema(conn, TENANT_TABLES)
        await apply_schema(conn, ADMIN_TABLES)

    sessionmaker = make_sessionmaker(engine)
    async with sessionmaker() as session:
        yield session
        await session.rollback()


async def _fetch_all(settings: Settings, stmt):
    engine = create_engine_from_settings(settings)
    try:
        async with AsyncSession(engine) as session:
            return [tuple(row) for row in (await session.execute(stmt)).all()]
    finally:
        await engine.dispose()


@pytest.fixture()
def fetch(settings: Settings):
    """Read back through a fresh engine, the way a second process would."""

    def _fetch(stmt):
        return asyncio.run(_fetch_all(settings, stmt))

    return _fetch
