# tests/test_migration.py
from __future__ import annotations

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError

from outbound_impact.db.migrate import list_tables, run_migration
from outbound_impact.db.schema import TENANT_TABLE_NAMES
from outbound_impact.db.session import engine_scope
from outbound_impact.scripts.run_migration import main

EXPECTED = {
    "organizations",
    "users",
    "uploaded_files",
    "qr_codes",
    "qr_scan_events",
    "campaigns",
    "activity_log",
}


class _UnreachableEngine:
    def __init__(self):
        self.disposed = False

    def begin(self):
        raise OperationalError("SELECT 1", {}, Exception("connection to server failed"))

    def connect(self):
        return self.begin()

    async def dispose(self):
        self.disposed = True


def test_tenant_table_names_cover_the_product_schema():
    assert set(TENANT_TABLE_NAMES) == EXPECTED


@pytest.mark.asyncio
async def test_run_migration_twice_reports_same_tables(engine):
    first = await run_migration(engine)
    second = await run_migration(engine)

    assert EXPECTED.issubset(first)
    assert first == second


@pytest.mark.asyncio
async def test_migration_does_not_create_admin_table(engine):
    tables = await run_migration(engine)
    assert "oi_admin_users" not in tables


@pytest.mark.asyncio
async def test_migration_leaves_existing_tables_alone(engine):
    # an older, narrower "campaigns" already exists; it must not be altered or dropped
    async with engine.begin() as conn:
        await conn.exec_driver_sql("CREATE TABLE campaigns (id INTEGER PRIMARY KEY, name VARCHAR(10))")

    await run_migration(engine)

    async with engine.connect() as conn:
        columns = await conn.run_sync(lambda c: [col["name"] for col in inspect(c).get_columns("campaigns")])
        tables = await list_tables(conn)

    assert columns == ["id", "name"]
    assert EXPECTED.issubset(tables)


@pytest.mark.asyncio
async def test_migration_reports_unrelated_existing_tables(engine):
    async with engine.begin() as conn:
        await conn.exec_driver_sql("CREATE TABLE legacy_notes (id INTEGER PRIMARY KEY)")

    try:
        tables = await run_migration(engine)
        assert "legacy_notes" in tables
        assert EXPECTED.issubset(tables)
    finally:
        # not in Base.metadata, so the fixture teardown would not drop it
        async with engine.begin() as conn:
            await conn.exec_driver_sql("DROP TABLE legacy_notes")


# ---------------------------------------------------------
# CLI
# ---------------------------------------------------------
def test_cli_prints_table_inventory(settings, capsys):
    code = main([], settings=settings)

    assert code == 0
    out = capsys.readouterr().out
    assert out.startswith("Connecting to database...\nRunning migration...\n")
    assert "Migration complete! Tables created:" in out
    for name in EXPECTED:
        assert f"  - {name}\n" in out
    assert out.rstrip().endswith("Done!")


def test_cli_is_idempotent(settings, capsys):
    assert main([], settings=settings) == 0
    first = capsys.readouterr().out

    assert main([], settings=settings) == 0
    second = capsys.readouterr().out

    assert first == second


def test_cli_failure_exits_nonzero_and_releases_engine(settings, capsys):
    engine = _UnreachableEngine()

    code = main([], settings=settings, engine_factory=lambda s: engine)

    assert code == 1
    assert engine.disposed is True
    err = capsys.readouterr().err
    assert "Migration failed: connection to server failed" in err


def test_cli_rejects_arguments(capsys):
    code = main(["--drop-everything"])

    assert code == 1
    assert "takes no arguments" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_engine_scope_migrates_and_releases(settings):
    async with engine_scope(settings) as engine:
        tables = await run_migration(engine)

    assert EXPECTED.issubset(tables)
