# ============================
# FILE: outbound_impact/core/plans.py
# Canonical plan catalog for Outbound Impact
# ============================
from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import Decimal

from outbound_impact.core.errors import ValidationError

UNLIMITED = 999999


class PlanType(str, enum.Enum):
    PERSONAL = "personal"
    SMALL_BUSINESS = "small_business"
    MEDIUM_BUSINESS = "medium_business"
    ENTERPRISE = "enterprise"


@dataclass(frozen=True)
class PlanLimits:
    max_qr_codes: int
    max_contributors: int
    storage_limit_gb: int
    monthly_price: Decimal


PLAN_LIMITS: dict[str, PlanLimits] = {
    PlanType.PERSONAL.value: PlanLimits(
        max_qr_codes=3, max_contributors=1, storage_limit_gb=5, monthly_price=Decimal("0")
    ),
    PlanType.SMALL_BUSINESS.value: PlanLimits(
        max_qr_codes=5, max_contributors=3, storage_limit_gb=250, monthly_price=Decimal("0")
    ),
    PlanType.MEDIUM_BUSINESS.value: PlanLimits(
        max_qr_codes=UNLIMITED, max_contributors=UNLIMITED, storage_limit_gb=500, monthly_price=Decimal("29")
    ),
    PlanType.ENTERPRISE.value: PlanLimits(
        max_qr_codes=UNLIMITED, max_contributors=UNLIMITED, storage_limit_gb=1000, monthly_price=Decimal("99")
    ),
}

# New organizations start on the lowest tier; the column defaults mirror it.
DEFAULT_PLAN = PlanType.PERSONAL.value
DEFAULT_LIMITS = PLAN_LIMITS[DEFAULT_PLAN]


def normalize_plan(value: str | None) -> str:
    return (value or "").strip().lower()


def get_plan_limits(plan: str | None) -> PlanLimits:
    p = normalize_plan(plan)
    if p not in PLAN_LIMITS:
        raise ValidationError(
            f"Invalid plan type {plan!r}. Must be: {', '.join(PLAN_LIMITS)}"
        )
    return PLAN_LIMITS[p]
