# src/picklerank/logging_config.py

"""
Centralized logging configuration for PickleRank.

Environment variables:
- LOG_LEVEL: DEBUG|INFO|WARNING|ERROR|CRITICAL (default: INFO)
"""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _resolve_level(level: str | None) -> int:
    level_str = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    return _LEVELS.get(level_str, logging.INFO)


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once; later calls only adjust the level."""
    root = logging.getLogger()
    root.setLevel(_resolve_level(level))

    if not any(getattr(h, "_picklerank", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._picklerank = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    # SQLAlchemy is chatty at INFO; DB_ECHO controls its output instead.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
