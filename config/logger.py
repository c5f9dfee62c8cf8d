"""Logging setup for applications embedding the PlainPlan engine."""

from __future__ import annotations

import logging
import sys

from config.settings import get_settings

__all__ = ["LOG_FORMAT", "PACKAGE_LOGGERS", "configure_logging"]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
PACKAGE_LOGGERS = ("core", "analytics", "config")


def configure_logging(level: str | int | None = None) -> list[logging.Logger]:
    """Attach a stdout handler to the package loggers and return them.

    The level defaults to ``Settings.log_level``. Calling this more than once
    only updates the level; handlers are never duplicated.
    """

    resolved = level if level is not None else get_settings().log_level
    if isinstance(resolved, str):
        resolved = resolved.upper()

    formatter = logging.Formatter(LOG_FORMAT)
    configured: list[logging.Logger] = []
    for name in PACKAGE_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(resolved)
        if not any(getattr(handler, "_plainplan", False) for handler in logger.handlers):
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(formatter)
            handler._plainplan = True  # type: ignore[attr-defined]
            logger.addHandler(handler)
        configured.append(logger)
    return configured
