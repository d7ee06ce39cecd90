#!/usr/bin/env python3
"""
Create or update one internal admin-console operator.

    python -m outbound_impact.scripts.create_admin <email> <password> <full_name> [role]

Roles: analyst, admin (default), super_admin. Re-running with the same email
(any case) overwrites the password, name and role of the existing operator.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Callable
from typing import NoReturn, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncEngine

from outbound_impact.core.config import Settings, get_settings
from outbound_impact.core.errors import UsageError, translate_db_error
from outbound_impact.core.logging_config import configure_logging
from outbound_impact.core.roles import ADMIN_ROLE_VALUES, AdminRole, parse_admin_role
from outbound_impact.crud.admin_user import bootstrap_admin
from outbound_impact.db.session import create_engine_from_settings
from outbound_impact.schemas.admin_user import AdminUserCreate, AdminUserOut

logger = logging.getLogger(__name__)

EngineFactory = Callable[[Settings], AsyncEngine]

PROG = "python -m outbound_impact.scripts.create_admin"
ROLES_LINE = f"Roles: {', '.join(ADMIN_ROLE_VALUES)}"


class _ArgumentParser(argparse.ArgumentParser):
    # argparse exits 2 on bad input; surface it as UsageError so main() picks the exit code
    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog=PROG,
        description="Create or update an Outbound Impact admin-console operator.",
        epilog=ROLES_LINE,
        # no -h: a password such as "-h" must stay a positional value
        add_help=False,
    )
    parser.add_argument("email")
    # visible in process listings / shell history: operator tool, documented caveat
    parser.add_argument("password")
    parser.add_argument("full_name")
    parser.add_argument("role", nargs="?", default=AdminRole.ADMIN.value)
    return parser


def parse_args(argv: Sequence[str]) -> AdminUserCreate:
    """
    ValidateArgs: everything here happens before any I/O.
    Raises UsageError.
    """
    args = list(argv)
    if args[:1] == ["--"]:
        args = args[1:]

    # everything is positional; a leading "-" belongs to the value, never an option
    parser = build_parser()
    ns = parser.parse_args(["--", *args])

    try:
        role = parse_admin_role(ns.role)
    except ValueError as e:
        raise UsageError(str(e)) from None

    try:
        return AdminUserCreate(email=ns.email, password=ns.password, full_name=ns.full_name, role=role)
    except PydanticValidationError as e:
        # never echo input values: one of them is the password
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise UsageError(problems) from None


def _print_usage(message: str) -> None:
    print(message, file=sys.stderr)
    print(f"Usage: {PROG} <email> <password> <full_name> [role]", file=sys.stderr)
    print(ROLES_LINE, file=sys.stderr)


def _report(admin: AdminUserOut) -> None:
    print("Admin user created successfully:")
    print(f"  id:        {admin.id}")
    print(f"  email:     {admin.email}")
    print(f"  full_name: {admin.full_name}")
    print(f"  role:      {admin.role}")


async def _bootstrap(settings: Settings, payload: AdminUserCreate, engine_factory: EngineFactory) -> AdminUserOut:
    engine = engine_factory(settings)
    try:
        return await bootstrap_admin(engine, payload, bcrypt_rounds=settings.BCRYPT_ROUNDS)
    finally:
        # connection released on success and failure alike
        await engine.dispose()


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    settings: Optional[Settings] = None,
    engine_factory: EngineFactory = create_engine_from_settings,
) -> int:
    """Returns the process exit code."""
    argv = list(sys.argv[1:] if argv is None else argv)

    try:
        payload = parse_args(argv)
    except UsageError as e:
        _print_usage(str(e))
        return 1

    try:
        settings = settings or get_settings()
    except Exception as e:  # pydantic ValidationError for a missing/bad DATABASE_URL
        print(f"Failed to create admin: {e}", file=sys.stderr)
        return 1

    configure_logging(settings.LOG_LEVEL)

    try:
        admin = asyncio.run(_bootstrap(settings, payload, engine_factory))
    except Exception as e:
        err = translate_db_error(e)
        if err is e:
            logger.exception("unexpected error while creating admin %s", payload.email)
        print(f"Failed to create admin: {err}", file=sys.stderr)
        return 1

    _report(admin)
    return 0


if __name__ == "__main__":
    sys.exit(main())
