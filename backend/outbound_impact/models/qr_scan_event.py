# backend/outbound_impact/models/qr_scan_event.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from outbound_impact.db.base import Base


class QRScanEvent(Base):
    """
    Append-only: one row per scan, never updated after insert.

    organization_id is copied from the QR code at insert time so tenant-scoped
    aggregation does not need to join through qr_codes.
    """

    __tablename__ = "qr_scan_events"
    __table_args__ = (
        Index("ix_qr_scan_events_org_scanned", "organization_id", "scanned_at"),
        Index("ix_qr_scan_events_qr_scanned", "qr_code_id", "scanned_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    qr_code_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("qr_codes.id", ondelete="CASCADE"),
        nullable=True,
    )
    organization_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=True,
    )

    scanned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # request
    ip_address: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # parsed from user agent
    device_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    os: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    browser: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # geo lookup
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    country_code: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    latitude: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 6), nullable=True)
    longitude: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 6), nullable=True)
