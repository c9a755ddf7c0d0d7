"""
Process-wide logging setup.

Modules log through `logging.getLogger(__name__)` with key=value fields;
this only wires the root handler and level once per process.
"""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_configured = False


def log_level() -> int:
    name = os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def configure_logging() -> None:
    global _configured
    if _configured:
        return None
    logging.basicConfig(level=log_level(), format=LOG_FORMAT)
    _configured = True
