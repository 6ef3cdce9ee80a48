"""Settings and logging for Scenarios.

Modules should obtain loggers through ``get_logger`` from this package: the
first call configures logging from the process-wide settings.
"""

from __future__ import annotations

from typing import Any

from scenarios.config import logging as _logging
from scenarios.config import settings as _settings
from scenarios.config.logging import configure_logging
from scenarios.config.settings import ScenariosSettings, get_settings, set_settings

__all__ = [
    "ScenariosSettings",
    "configure_logging",
    "get_logger",
    "get_settings",
    "reset_settings",
    "set_settings",
]

_loggers: dict[str, Any] = {}


def get_logger(name: str) -> Any:
    """Structlog logger for ``name``, configuring logging on first use."""
    logger = _loggers.get(name)
    if logger is None:
        if not _loggers:
            configure_logging(get_settings())
        logger = _loggers[name] = _logging.get_logger(name)
    return logger


def reset_settings() -> None:
    """Forget the process-wide settings and every cached logger."""
    _settings.reset_settings()
    _loggers.clear()
