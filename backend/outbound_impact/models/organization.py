# backend/outbound_impact/models/organization.py

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from outbound_impact.core.plans import DEFAULT_LIMITS, DEFAULT_PLAN
from outbound_impact.db.base import Base


class Organization(Base):
    """
    Tenant / billing root. Every tenant-scoped row references it with
    ON DELETE CASCADE; day-to-day removal is a status change instead.
    """

    __tablename__ = "organizations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    company_email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    # personal | small_business | medium_business | enterprise
    plan_type: Mapped[str] = mapped_column(String(50), nullable=False, default=DEFAULT_PLAN, server_default=DEFAULT_PLAN)
    # active | suspended | cancelled
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="active", server_default="active")
    monthly_price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=DEFAULT_LIMITS.monthly_price, server_default="0"
    )

    # quotas
    max_qr_codes: Mapped[int] = mapped_column(
        Integer, nullable=False, default=DEFAULT_LIMITS.max_qr_codes, server_default=str(DEFAULT_LIMITS.max_qr_codes)
    )
    max_contributors: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=DEFAULT_LIMITS.max_contributors,
        server_default=str(DEFAULT_LIMITS.max_contributors),
    )
    storage_limit_gb: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=DEFAULT_LIMITS.storage_limit_gb,
        server_default=str(DEFAULT_LIMITS.storage_limit_gb),
    )

    # running usage counters
    total_qr_scans: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    total_uploads: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    subscription_start_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    # creation-time default only; writers set it on every mutation
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
