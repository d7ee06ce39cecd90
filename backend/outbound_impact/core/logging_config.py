# backend/outbound_impact/core/logging_config.py
from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """
    Diagnostics go to stderr; stdout is reserved for the operator-facing
    output of the scripts. No-op when the root logger already has handlers.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)

    # SQLAlchemy echoes every statement at INFO; keep it out of operator output
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
