# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Logging for the ``hmshttp`` logger tree.

Importing the package only attaches a NullHandler, so applications that never
configure logging see nothing. ``setup_logging`` is for scripts and tests that
want retry and transport diagnostics on stderr without touching the root
logger.
"""

from __future__ import annotations

import logging
import os
from typing import IO

LOGGER_NAME = "hmshttp"
LOG_LEVEL_ENV = "HMSHTTP_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


def resolve_level(level: int | str | None) -> int:
    """Map a level name or number to a logging level; unknown names give WARNING."""
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV, "WARNING")
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.WARNING


def setup_logging(level: int | str | None = None, *, stream: IO[str] | None = None) -> logging.Logger:
    """
    Send ``hmshttp`` records to ``stream`` (stderr by default) at ``level``.

    Calling it again replaces the handler installed by the previous call
    instead of stacking a second one.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolve_level(level))
    for handler in list(logger.handlers):
        if getattr(handler, "_hmshttp_managed", False):
            logger.removeHandler(handler)
            handler.close()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._hmshttp_managed = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger


__all__ = ["LOGGER_NAME", "resolve_level", "setup_logging"]
