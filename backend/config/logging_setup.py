"""
Process-wide logging setup.

Env options:
- GEOSCALE_LOG_LEVEL=DEBUG|INFO|WARNING|ERROR (default INFO)
"""
from __future__ import annotations

import logging
import os
import sys

_INITIALIZED = False
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _level_from_env() -> int:
    name = (os.getenv("GEOSCALE_LOG_LEVEL") or "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level: int | None = None) -> None:
    """
    Attach a single stderr handler to the root logger. Safe to call repeatedly.
    """
    global _INITIALIZED
    root = logging.getLogger()
    root.setLevel(level if level is not None else _level_from_env())
    if _INITIALIZED:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(handler)
    _INITIALIZED = True
