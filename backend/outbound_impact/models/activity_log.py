# backend/outbound_impact/models/activity_log.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from outbound_impact.db.base import Base


class ActivityLogEntry(Base):
    """
    Immutable audit trail row, read by the admin console.

    NOTE:
      - The Python attribute cannot be named "metadata" because SQLAlchemy Declarative uses it.
      - We map attribute `entry_metadata` -> DB column name "metadata".
    """

    __tablename__ = "activity_log"
    __table_args__ = (
        Index("ix_activity_log_org_created", "organization_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    organization_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=True,
    )
    user_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Examples: upload, delete, share, plan_change
    action: Mapped[str] = mapped_column(String(100), nullable=False)
    entity_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    entity_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    entry_metadata: Mapped[Optional[dict[str, Any]]] = mapped_column(
        "metadata",  # keep DB column name
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
