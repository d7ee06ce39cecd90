# backend/outbound_impact/crud/content.py
from __future__ import annotations

import re
import secrets
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional
from urllib.parse import quote

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from outbound_impact.core.errors import ValidationError
from outbound_impact.models.activity_log import ActivityLogEntry
from outbound_impact.models.organization import Organization
from outbound_impact.models.qr_code import QRCode
from outbound_impact.models.qr_scan_event import QRScanEvent
from outbound_impact.models.uploaded_file import UploadedFile

_SLUG_STRIP_RE = re.compile(r"[^a-z0-9]+")

PUBLIC_VIEW_BASE_URL = "https://outboundimpact.net/view"
QR_IMAGE_SERVICE_URL = "https://api.qrserver.com/v1/create-qr-code/"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_slug(title: Optional[str] = None) -> str:
    """
    URL-safe: lower-case title words joined by '-', plus a random suffix.
    The random part carries the uniqueness; the unique index is the backstop.
    """
    base = _SLUG_STRIP_RE.sub("-", (title or "").lower()).strip("-")[:30].strip("-")
    suffix = secrets.token_hex(4)
    return f"{base}-{suffix}" if base else suffix


def public_view_url(slug: str, base_url: str = PUBLIC_VIEW_BASE_URL) -> str:
    return f"{base_url.rstrip('/')}/{slug}"


def qr_image_url(slug: str, size: int = 200, base_url: str = PUBLIC_VIEW_BASE_URL) -> str:
    # rasterising is done by the external service; we only build its URL
    data = quote(public_view_url(slug, base_url), safe="")
    return f"{QR_IMAGE_SERVICE_URL}?size={size}x{size}&data={data}"


async def log_activity(
    db: AsyncSession,
    organization_id: Optional[int],
    action: str,
    *,
    user_id: Optional[int] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[int] = None,
    metadata: Optional[dict[str, Any]] = None,
) -> ActivityLogEntry:
    entry = ActivityLogEntry(
        organization_id=organization_id,
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        entry_metadata=metadata,
    )
    db.add(entry)
    await db.flush()
    return entry


async def register_upload(
    db: AsyncSession,
    organization_id: int,
    title: str,
    *,
    user_id: Optional[int] = None,
    description: Optional[str] = None,
    file_name: Optional[str] = None,
    file_size_bytes: int = 0,
    mime_type: Optional[str] = None,
    storage_key: Optional[str] = None,
    storage_url: Optional[str] = None,
    type_category: Optional[str] = None,
    content_text: Optional[str] = None,
    embed_url: Optional[str] = None,
    thumbnail_url: Optional[str] = None,
) -> tuple[UploadedFile, QRCode]:
    """
    One upload = file row + active QR code sharing its slug + an "upload"
    activity entry + organizations.total_uploads += 1. Caller commits.
    """
    title = (title or file_name or "").strip()
    if not title:
        raise ValidationError("title is required")
    if file_size_bytes < 0:
        raise ValidationError("file_size_bytes must not be negative")

    slug = generate_slug(title)
    item = UploadedFile(
        organization_id=organization_id,
        user_id=user_id,
        title=title,
        description=description,
        file_name=file_name,
        file_size_bytes=file_size_bytes,
        mime_type=mime_type,
        storage_key=storage_key,
        storage_url=storage_url,
        slug=slug,
        type_category=type_category,
        content_text=content_text,
        embed_url=embed_url,
        thumbnail_url=thumbnail_url,
    )
    db.add(item)
    await db.flush()

    qr = QRCode(
        organization_id=organization_id,
        uploaded_file_id=item.id,
        slug=slug,
        status="active",
    )
    db.add(qr)

    await db.execute(
        update(Organization)
        .where(Organization.id == organization_id)
        .values(total_uploads=Organization.total_uploads + 1, updated_at=_utcnow())
    )

    await log_activity(
        db,
        organization_id,
        "upload",
        user_id=user_id,
        entity_type="file",
        entity_id=item.id,
        metadata={"fileName": file_name, "fileSize": file_size_bytes},
    )
    return item, qr


async def get_qr_code_by_slug(db: AsyncSession, slug: str) -> Optional[QRCode]:
    return (await db.execute(select(QRCode).where(QRCode.slug == slug))).scalar_one_or_none()


async def record_scan(
    db: AsyncSession,
    qr_code_id: int,
    *,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
    device_type: Optional[str] = None,
    os: Optional[str] = None,
    browser: Optional[str] = None,
    country: Optional[str] = None,
    country_code: Optional[str] = None,
    city: Optional[str] = None,
    state: Optional[str] = None,
    latitude: Optional[Decimal] = None,
    longitude: Optional[Decimal] = None,
) -> QRScanEvent:
    """
    Append one scan event and bump both running counters in SQL
    (counter = counter + 1), so concurrent scans never lose an increment.
    """
    qr = (await db.execute(select(QRCode).where(QRCode.id == qr_code_id))).scalar_one_or_none()
    if qr is None:
        raise ValidationError(f"QR code {qr_code_id} not found")

    event = QRScanEvent(
        qr_code_id=qr.id,
        organization_id=qr.organization_id,
        ip_address=ip_address,
        user_agent=user_agent,
        device_type=device_type,
        os=os,
        browser=browser,
        country=country,
        country_code=country_code,
        city=city,
        state=state,
        latitude=latitude,
        longitude=longitude,
    )
    db.add(event)

    now = _utcnow()
    await db.execute(
        update(QRCode)
        .where(QRCode.id == qr.id)
        .values(total_scans=QRCode.total_scans + 1, updated_at=now)
    )
    if qr.organization_id is not None:
        await db.execute(
            update(Organization)
            .where(Organization.id == qr.organization_id)
            .values(total_qr_scans=Organization.total_qr_scans + 1, updated_at=now)
        )

    await db.flush()
    return event
