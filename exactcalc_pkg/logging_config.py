"""Logging configuration for exactcalc.

All package loggers live under the ``exactcalc`` namespace so that a single
call to :func:`setup_logging` controls the whole library.
"""

from __future__ import annotations

import logging
import sys

ROOT_LOGGER_NAME = "exactcalc"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return the package logger for ``name`` (e.g. ``"reals.unified"``)."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Configure handlers for the ``exactcalc`` logger tree.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path; when given, logs go to this file instead of stderr
    """
    global _configured
    root = logging.getLogger(ROOT_LOGGER_NAME)
    numeric_level = getattr(logging, str(level).upper(), logging.WARNING)
    root.setLevel(numeric_level)

    if _configured:
        for handler in root.handlers:
            handler.setLevel(numeric_level)
        return

    if log_file:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.propagate = False
    _configured = True
