# backend/outbound_impact/crud/organization.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from outbound_impact.core.errors import ValidationError
from outbound_impact.core.plans import DEFAULT_PLAN, get_plan_limits, normalize_plan
from outbound_impact.core.roles import AccountStatus
from outbound_impact.models.organization import Organization

ORGANIZATION_STATUSES = frozenset(s.value for s in AccountStatus)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def get_organization(db: AsyncSession, organization_id: int) -> Organization:
    org = (
        await db.execute(select(Organization).where(Organization.id == organization_id))
    ).scalar_one_or_none()
    if org is None:
        raise ValidationError(f"Organization {organization_id} not found")
    return org


async def create_organization(
    db: AsyncSession,
    company_name: str,
    company_email: str,
    plan_type: str = DEFAULT_PLAN,
    subscription_start_date: Optional[datetime] = None,
) -> Organization:
    """
    Quotas and price come from the plan catalog. A duplicate
    company_email surfaces as IntegrityError on flush.
    """
    plan = normalize_plan(plan_type)
    limits = get_plan_limits(plan)

    org = Organization(
        company_name=company_name.strip(),
        company_email=company_email.strip().lower(),
        plan_type=plan,
        status=AccountStatus.ACTIVE.value,
        monthly_price=limits.monthly_price,
        max_qr_codes=limits.max_qr_codes,
        max_contributors=limits.max_contributors,
        storage_limit_gb=limits.storage_limit_gb,
        subscription_start_date=subscription_start_date or _utcnow(),
    )
    db.add(org)
    await db.flush()
    return org


async def change_organization_plan(db: AsyncSession, organization_id: int, plan_type: str) -> Organization:
    plan = normalize_plan(plan_type)
    limits = get_plan_limits(plan)

    org = await get_organization(db, organization_id)
    org.plan_type = plan
    org.max_qr_codes = limits.max_qr_codes
    org.max_contributors = limits.max_contributors
    org.storage_limit_gb = limits.storage_limit_gb
    org.monthly_price = limits.monthly_price
    org.updated_at = _utcnow()
    await db.flush()
    return org


async def set_organization_status(db: AsyncSession, organization_id: int, status: str) -> Organization:
    """
    Soft lifecycle change. Preferred over DELETE, which cascades
    through every row the organization owns.
    """
    s = (status or "").strip().lower()
    if s not in ORGANIZATION_STATUSES:
        raise ValidationError(
            f"Invalid status {status!r}. Must be one of: {', '.join(sorted(ORGANIZATION_STATUSES))}"
        )

    org = await get_organization(db, organization_id)
    org.status = s
    org.updated_at = _utcnow()
    await db.flush()
    return org
