"""Centralized logging helpers.

All modules obtain loggers with ``logging.getLogger(__name__)`` and emit
structured DEBUG records through :func:`extra_context`.  Callers guard those
records with :func:`is_debug_enabled` so hot paths pay nothing when DEBUG is
off.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional

from ..constants import Constants

_CONFIGURED = False


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once.

    The level comes from ``level`` if given, else the PKGMATCH_LOG_LEVEL
    environment variable, else INFO.  Unknown level names fall back to INFO.
    """
    global _CONFIGURED  # pylint: disable=global-statement

    name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or Constants.DEFAULT_LOG_LEVEL).upper()
    value = getattr(logging, name, logging.INFO)
    if not isinstance(value, int):
        value = logging.INFO

    root = logging.getLogger()
    if not _CONFIGURED:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        root.addHandler(handler)
        _CONFIGURED = True
    root.setLevel(value)


def add_file_handler(path: str) -> logging.Handler:
    """Attach a FileHandler writing to ``path`` on the root logger."""
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
    logging.getLogger().addHandler(handler)
    return handler


def is_debug_enabled(logger: logging.Logger) -> bool:
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**kwargs: Any) -> Dict[str, Any]:
    """Build an ``extra=`` mapping for structured log records, dropping None values."""
    return {k: v for k, v in kwargs.items() if v is not None}


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> float:
        end = self._end if self._end is not None else time.perf_counter()
        return round((end - self._start) * 1000.0, 3)
