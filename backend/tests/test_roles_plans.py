# tests/test_roles_plans.py
from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError

from outbound_impact.core.errors import (
    ConstraintViolation,
    DatabaseUnavailableError,
    UsageError,
    ValidationError,
    translate_db_error,
)
from outbound_impact.core.plans import DEFAULT_PLAN, UNLIMITED, get_plan_limits
from outbound_impact.core.roles import AdminRole, has_admin_permission, parse_admin_role
from outbound_impact.core.security import hash_password, verify_password


# ---------------------------------------------------------
# Operator roles
# ---------------------------------------------------------
@pytest.mark.parametrize(
    "role, required, allowed",
    [
        ("super_admin", "analyst", True),
        ("super_admin", "super_admin", True),
        ("admin", "analyst", True),
        ("admin", "admin", True),
        ("admin", "super_admin", False),
        ("analyst", "admin", False),
        ("analyst", "analyst", True),
        ("root", "analyst", False),
        (None, "analyst", False),
        ("super_admin", "owner", False),
    ],
)
def test_admin_role_hierarchy(role, required, allowed):
    assert has_admin_permission(role, required) is allowed


def test_parse_admin_role():
    assert parse_admin_role("super_admin") is AdminRole.SUPER_ADMIN

    with pytest.raises(ValueError) as excinfo:
        parse_admin_role("Admin")
    assert str(excinfo.value) == "Invalid role: Admin. Must be one of: analyst, admin, super_admin"


# ---------------------------------------------------------
# Plan catalog
# ---------------------------------------------------------
def test_default_plan_is_personal():
    limits = get_plan_limits(DEFAULT_PLAN)
    assert DEFAULT_PLAN == "personal"
    assert (limits.max_qr_codes, limits.max_contributors, limits.storage_limit_gb) == (3, 1, 5)
    assert limits.monthly_price == Decimal("0")


def test_plan_lookup_is_case_insensitive():
    assert get_plan_limits(" SMALL_BUSINESS ").max_contributors == 3
    assert get_plan_limits("enterprise").max_qr_codes == UNLIMITED


@pytest.mark.parametrize("plan", ["gold", "", None])
def test_unknown_plan_rejected(plan):
    with pytest.raises(ValidationError):
        get_plan_limits(plan)


# ---------------------------------------------------------
# Passwords
# ---------------------------------------------------------
def test_hash_is_salted_and_verifies():
    a = hash_password("Secret123!", rounds=4)
    b = hash_password("Secret123!", rounds=4)

    assert a != b
    assert a.startswith("$2")
    assert "Secret123!" not in a
    assert verify_password("Secret123!", a)
    assert not verify_password("Secret124!", a)


def test_empty_password_cannot_be_hashed():
    with pytest.raises(ValueError):
        hash_password("")


@pytest.mark.parametrize("stored", [None, "", "plaintext", "$2b$04$short"])
def test_verify_against_missing_or_malformed_hash(stored):
    assert verify_password("anything", stored) is False


# ---------------------------------------------------------
# Error taxonomy
# ---------------------------------------------------------
def test_translate_db_error():
    dup = IntegrityError("INSERT", {}, Exception('duplicate key value violates unique constraint "uq_users_email"'))
    down = OperationalError("SELECT 1", {}, Exception("could not connect to server"))

    translated = translate_db_error(dup)
    assert isinstance(translated, ConstraintViolation)
    assert "uq_users_email" in str(translated)

    translated = translate_db_error(down)
    assert isinstance(translated, DatabaseUnavailableError)
    assert str(translated) == "could not connect to server"

    assert isinstance(translate_db_error(ConnectionRefusedError("refused")), DatabaseUnavailableError)


def test_translate_db_error_passes_through_the_rest():
    usage = UsageError("bad input")
    other = ProgrammingError("SELECT", {}, Exception("syntax error"))
    boom = RuntimeError("boom")

    assert translate_db_error(usage) is usage
    assert translate_db_error(other) is other
    assert translate_db_error(boom) is boom
