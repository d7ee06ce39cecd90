from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from outbound_impact.db.base import Base


class AdminUser(Base):
    """
    Internal operator account for the admin console.
    Not tenant-scoped: no organization reference at all.
    """

    __tablename__ = "oi_admin_users"
    __table_args__ = (
        CheckConstraint(
            "created_by_user_id IS NULL OR created_by_user_id <> id",
            name="not_self_created",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # stored lower-cased; uniqueness is case-insensitive in practice
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # analyst | admin | super_admin
    role: Mapped[str] = mapped_column(String(50), nullable=False, default="admin", server_default="admin")
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="active", server_default="active")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    created_by_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("oi_admin_users.id"),
        nullable=True,
    )
