from __future__ import annotations

import ssl
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from outbound_impact.core.config import Settings


def build_ssl_context(mode: str) -> ssl.SSLContext:
    """
    strict: system CA bundle, host name checked.
    permissive: still encrypted, but any certificate is accepted.
    """
    ctx = ssl.create_default_context()
    if mode == "permissive":
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
    elif mode != "strict":
        raise ValueError(f"Unknown DATABASE_SSL mode {mode!r}. Allowed: strict, permissive")
    return ctx


def build_connect_args(settings: Settings) -> dict[str, Any]:
    if settings.is_sqlite:
        return {}

    connect_args: dict[str, Any] = {"timeout": settings.DATABASE_CONNECT_TIMEOUT}
    if settings.ssl_disabled:
        connect_args["ssl"] = False
    else:
        connect_args["ssl"] = build_ssl_context(settings.DATABASE_SSL)
    return connect_args


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE / SET NULL unless this is on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """
    Explicitly constructed; the caller owns it and must dispose it.
    No engine lives at module level.
    """
    engine = create_async_engine(
        settings.DATABASE_URL_ASYNC,
        echo=False,
        pool_pre_ping=True,  # detects dead connections before using them
        connect_args=build_connect_args(settings),
    )
    if settings.is_sqlite:
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


@asynccontextmanager
async def engine_scope(settings: Settings) -> AsyncIterator[AsyncEngine]:
    """
    Scoped acquisition: the pool is released on every exit path.
    """
    engine = create_engine_from_settings(settings)
    try:
        yield engine
    finally:
        await engine.dispose()


def make_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
