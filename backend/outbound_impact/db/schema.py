from __future__ import annotations

from sqlalchemy import Table

import outbound_impact.models  # noqa: F401  # force model registration
from outbound_impact.db.base import Base

# Creation order matters only for readability; create_all sorts by FK anyway.
TENANT_TABLE_NAMES: tuple[str, ...] = (
    "organizations",
    "users",
    "uploaded_files",
    "qr_codes",
    "qr_scan_events",
    "campaigns",
    "activity_log",
)

ADMIN_TABLE_NAMES: tuple[str, ...] = ("oi_admin_users",)


def _tables(names: tuple[str, ...]) -> list[Table]:
    return [Base.metadata.tables[name] for name in names]


# Created by the migration runner
TENANT_TABLES: list[Table] = _tables(TENANT_TABLE_NAMES)

# Created by the admin bootstrap, standalone
ADMIN_TABLES: list[Table] = _tables(ADMIN_TABLE_NAMES)
