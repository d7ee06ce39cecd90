from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import Table, inspect
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from outbound_impact.db.base import Base
from outbound_impact.db.schema import TENANT_TABLES

logger = logging.getLogger(__name__)


def _create_tables(sync_conn: Connection, tables: Sequence[Table]) -> None:
    # checkfirst=True: only tables that are missing get a CREATE TABLE.
    # Existing tables are left exactly as they are, even if their definition changed.
    Base.metadata.create_all(sync_conn, tables=list(tables), checkfirst=True)


def _table_names(sync_conn: Connection) -> list[str]:
    # default schema (search_path head on PostgreSQL, "main" on SQLite)
    return sorted(inspect(sync_conn).get_table_names())


async def apply_schema(conn: AsyncConnection, tables: Sequence[Table] = TENANT_TABLES) -> None:
    await conn.run_sync(_create_tables, tables)


async def list_tables(conn: AsyncConnection) -> list[str]:
    return await conn.run_sync(_table_names)


async def run_migration(engine: AsyncEngine) -> list[str]:
    """
    Apply the tenant schema in one transaction and return every table
    present afterwards. Strictly additive; safe to re-run.
    """
    async with engine.begin() as conn:
        logger.debug("creating %d tenant tables if missing", len(TENANT_TABLES))
        await apply_schema(conn)

    async with engine.connect() as conn:
        return await list_tables(conn)
