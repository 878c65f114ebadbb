"""Centralized logging for the budget tracker.

``configure_logging()`` is called once by ``main.py`` at startup and attaches a
single ``StreamHandler`` to the ``"budget_tracker"`` logger. Services and DAOs
only call ``get_logger("budget_tracker.<module>")`` and never add handlers of
their own.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

from utils.constants import LOGGER_NAME

LEVEL_ENV_VAR = "BUDGET_TRACKER_LOG_LEVEL"
_CONFIGURED = False


def _level_from_name(name: str | None) -> int | None:
    if not name:
        return None
    name = name.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = getattr(logging, name, None)
    return numeric if isinstance(numeric, int) else None


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    for candidate in (level, os.getenv(LEVEL_ENV_VAR)):
        resolved = _level_from_name(candidate)
        if resolved is not None:
            return resolved
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Configure the package logger exactly once.

    ``level`` falls back to ``BUDGET_TRACKER_LOG_LEVEL`` and then INFO.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(
        logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s")
    )

    logger.setLevel(resolved)
    logger.addHandler(handler)
    # Avoid double emission via the root logger.
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger, attaching a NullHandler to the package logger until configured."""
    pkg_logger = logging.getLogger(LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
