# backend/outbound_impact/core/roles.py

import enum


class AdminRole(str, enum.Enum):
    # internal staff only; never attached to an organization
    ANALYST = "analyst"          # read-only dashboards
    ADMIN = "admin"              # manage customers
    SUPER_ADMIN = "super_admin"  # manage other operators


ADMIN_ROLE_LEVELS = {
    AdminRole.ANALYST: 1,
    AdminRole.ADMIN: 2,
    AdminRole.SUPER_ADMIN: 3,
}

ADMIN_ROLE_VALUES = tuple(r.value for r in AdminRole)


def parse_admin_role(value: str) -> AdminRole:
    try:
        return AdminRole(value)
    except ValueError:
        raise ValueError(
            f"Invalid role: {value}. Must be one of: {', '.join(ADMIN_ROLE_VALUES)}"
        ) from None


def has_admin_permission(role: str | None, required: str) -> bool:
    """
    True when `role` sits at or above `required` in the operator hierarchy.
    Unknown roles have no permissions; an unknown requirement is never met.
    """
    try:
        have = ADMIN_ROLE_LEVELS[AdminRole(role)]
    except ValueError:
        return False
    try:
        need = ADMIN_ROLE_LEVELS[AdminRole(required)]
    except ValueError:
        return False
    return have >= need


class UserRole(str, enum.Enum):
    MEMBER = "member"
    ADMIN = "admin"


class AccountStatus(str, enum.Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    CANCELLED = "cancelled"
