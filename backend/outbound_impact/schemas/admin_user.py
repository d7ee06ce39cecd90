# backend/outbound_impact/schemas/admin_user.py
from __future__ import annotations

import re
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from outbound_impact.core.roles import AdminRole

# Operators use internal domains (corp.local, localhost); only the local@domain shape is enforced.
_EMAIL_SHAPE = re.compile(r"^[^@\s]+@[^@\s]+$")


class AdminUserCreate(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    # repr=False keeps the plaintext out of tracebacks and log lines
    password: str = Field(min_length=1, repr=False)
    full_name: str = Field(min_length=1, max_length=255)
    role: AdminRole = AdminRole.ADMIN

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not _EMAIL_SHAPE.match(v):
            raise ValueError("email must look like name@domain")
        return v

    @field_validator("full_name")
    @classmethod
    def strip_full_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("full_name must not be blank")
        return v


class AdminUserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    full_name: Optional[str] = None
    role: str
