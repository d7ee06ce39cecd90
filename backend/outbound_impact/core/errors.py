# backend/outbound_impact/core/errors.py
from __future__ import annotations

from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError


class OutboundImpactError(Exception):
    """Base for every error this package raises on purpose."""


class UsageError(OutboundImpactError):
    """Missing or invalid command-line input. Raised before any I/O."""


class DatabaseUnavailableError(OutboundImpactError):
    """The database could not be reached."""


class ConstraintViolation(OutboundImpactError):
    """
    A uniqueness or foreign-key constraint rejected the write.
    The transaction is rolled back; treat as "no change made".
    """


class ValidationError(OutboundImpactError):
    """Application-level invariant the schema does not enforce."""


def _driver_message(exc: BaseException) -> str:
    # DBAPIError.orig is the driver's own exception; its text is what operators recognise
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig).strip() or str(exc)
    return str(exc)


def translate_db_error(exc: BaseException) -> BaseException:
    """
    Map driver / SQLAlchemy failures onto the error taxonomy.
    Anything unrecognised is returned unchanged.
    """
    if isinstance(exc, OutboundImpactError):
        return exc
    if isinstance(exc, IntegrityError):
        return ConstraintViolation(_driver_message(exc))
    if isinstance(exc, (OperationalError, InterfaceError, OSError)):
        return DatabaseUnavailableError(_driver_message(exc))
    return exc
