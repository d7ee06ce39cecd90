# backend/outbound_impact/crud/admin_user.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from outbound_impact.core.security import hash_password, verify_password
from outbound_impact.db.migrate import apply_schema
from outbound_impact.db.schema import ADMIN_TABLES
from outbound_impact.db.session import make_sessionmaker
from outbound_impact.models.admin_user import AdminUser
from outbound_impact.schemas.admin_user import AdminUserCreate, AdminUserOut

logger = logging.getLogger(__name__)

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def ensure_admin_tables(engine: AsyncEngine) -> None:
    """
    Idempotent CREATE of oi_admin_users, independent of the main migration
    so the bootstrap works against a brand-new database.
    """
    async with engine.begin() as conn:
        await apply_schema(conn, ADMIN_TABLES)


async def get_admin_by_email(db: AsyncSession, email: str) -> Optional[AdminUser]:
    stmt = select(AdminUser).where(AdminUser.email == email.strip().lower())
    return (await db.execute(stmt)).scalar_one_or_none()


async def upsert_admin_user(db: AsyncSession, *, email: str, password_hash: str, full_name: str, role: str) -> AdminUser:
    """
    Single INSERT ... ON CONFLICT (email) DO UPDATE.
    An existing operator keeps its id and created_at; hash, name and role are replaced.
    """
    email = email.strip().lower()
    dialect = db.get_bind().dialect.name
    insert = _INSERT_BY_DIALECT.get(dialect)
    if insert is None:
        raise RuntimeError(f"Admin upsert is not supported on dialect {dialect!r}")

    stmt = insert(AdminUser).values(
        email=email,
        password_hash=password_hash,
        full_name=full_name,
        role=role,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[AdminUser.email],
        set_={
            "password_hash": stmt.excluded.password_hash,
            "full_name": stmt.excluded.full_name,
            "role": stmt.excluded.role,
        },
    )
    await db.execute(stmt)

    admin = await get_admin_by_email(db, email)
    if admin is None:
        raise RuntimeError(f"Upserted admin {email} not found")
    # the upsert bypassed the identity map; pick up the fresh row
    await db.refresh(admin)
    return admin


async def bootstrap_admin(engine: AsyncEngine, payload: AdminUserCreate, *, bcrypt_rounds: Optional[int] = None) -> AdminUserOut:
    """
    EnsureTable -> HashPassword -> UpsertRow. Arguments are already validated.
    """
    await ensure_admin_tables(engine)

    password_hash = hash_password(payload.password, rounds=bcrypt_rounds)

    sessionmaker = make_sessionmaker(engine)
    async with sessionmaker() as db:
        try:
            admin = await upsert_admin_user(
                db,
                email=payload.email,
                password_hash=password_hash,
                full_name=payload.full_name,
                role=payload.role.value,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    logger.info("admin operator %s upserted with role %s", admin.email, admin.role)
    return AdminUserOut.model_validate(admin)


async def authenticate_admin(db: AsyncSession, email: str, password: str) -> Optional[AdminUser]:
    """
    Returns the active operator whose password matches and stamps
    last_login_at; None for unknown, inactive or wrong password.
    Caller commits.
    """
    if not email or not password:
        return None

    admin = await get_admin_by_email(db, email)
    if admin is None or admin.status != "active":
        return None
    if not verify_password(password, admin.password_hash):
        return None

    admin.last_login_at = _utcnow()
    await db.flush()
    return admin
