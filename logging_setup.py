"""Central logging configuration for the expense tracker.

Entrypoints (``app.py``, ``api.py``, ``seed_db.py``) call
``configure_logging()`` once at startup. Library modules only call
``get_logger("expense_tracker.<module>")`` and never attach handlers.
"""

from __future__ import annotations

import logging

import config

_PKG_LOGGER_NAME = "expense_tracker"
_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if level is None:
        level = config.LOG_LEVEL
    if isinstance(level, int):
        return level
    numeric = logging.getLevelName((level or "").strip().upper())
    return numeric if isinstance(numeric, int) else logging.INFO


def configure_logging(level: int | str | None = None) -> None:
    """Attach a single stderr handler to the package logger, once.

    ``level`` defaults to ``EXPENSE_TRACKER_LOG_LEVEL`` when set, otherwise
    ``INFO``.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    logger.setLevel(_parse_level(level))
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
