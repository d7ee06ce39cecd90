# backend/outbound_impact/crud/campaign.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from outbound_impact.core.errors import ValidationError
from outbound_impact.models.campaign import Campaign

_UNSET = object()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _check_window(start_date: Optional[datetime], end_date: Optional[datetime]) -> None:
    if start_date is not None and end_date is not None and start_date > end_date:
        raise ValidationError("Campaign start_date must not be after end_date")


async def create_campaign(
    db: AsyncSession,
    organization_id: int,
    name: str,
    *,
    description: Optional[str] = None,
    status: str = "active",
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> Campaign:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Campaign name is required")
    _check_window(start_date, end_date)

    campaign = Campaign(
        organization_id=organization_id,
        name=name,
        description=description,
        status=status,
        start_date=start_date,
        end_date=end_date,
    )
    db.add(campaign)
    await db.flush()
    return campaign


async def reschedule_campaign(
    db: AsyncSession,
    campaign_id: int,
    *,
    start_date=_UNSET,
    end_date=_UNSET,
) -> Campaign:
    """
    Only the dates that are passed change; the merged window is checked.
    """
    campaign = (await db.execute(select(Campaign).where(Campaign.id == campaign_id))).scalar_one_or_none()
    if campaign is None:
        raise ValidationError(f"Campaign {campaign_id} not found")

    new_start = campaign.start_date if start_date is _UNSET else start_date
    new_end = campaign.end_date if end_date is _UNSET else end_date
    _check_window(new_start, new_end)

    campaign.start_date = new_start
    campaign.end_date = new_end
    campaign.updated_at = _utcnow()
    await db.flush()
    return campaign
