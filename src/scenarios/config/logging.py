"""Structured logging for Scenarios.

structlog builds the event dict and stdlib ``logging`` handlers render it, so
records from third-party libraries (httpx, mcp) and from our own loggers end up
in the same place with the same format.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

import structlog
from structlog.contextvars import merge_contextvars
from structlog.processors import (
    CallsiteParameter,
    CallsiteParameterAdder,
    TimeStamper,
    add_log_level,
    dict_tracebacks,
    format_exc_info,
)
from structlog.stdlib import ProcessorFormatter, add_logger_name, filter_by_level

from scenarios.config.settings import ScenariosSettings

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

RENDERERS: dict[str, Any] = {
    "json": lambda: structlog.processors.JSONRenderer(),
    "structured": lambda: structlog.processors.KeyValueRenderer(
        key_order=["timestamp", "level", "logger", "event"], drop_missing=True
    ),
    "console": lambda: structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
}


def _formatter(log_format: str) -> ProcessorFormatter:
    renderer = RENDERERS.get(log_format, RENDERERS["console"])()
    return ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=[TimeStamper(fmt="iso"), add_log_level, add_logger_name],
    )


def _handlers(settings: ScenariosSettings, level: int) -> list[logging.Handler]:
    """stderr always, plus a rotating file when ``log_file`` is set.

    stdout is left alone because the stdio MCP transport owns it.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.log_file is not None:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                settings.log_file,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )

    formatter = _formatter(settings.log_format)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
    return handlers


def configure_logging(settings: ScenariosSettings) -> None:
    """Install handlers on the root logger and configure structlog.

    Safe to call repeatedly: previous root handlers are replaced.

    Raises:
        ValueError: If ``settings.log_level`` is not a logging level name
    """
    level = logging.getLevelNamesMapping().get(settings.log_level.upper())
    if level is None:
        raise ValueError(f"Unknown log level: {settings.log_level}")

    logging.basicConfig(level=level, handlers=_handlers(settings, level), force=True)

    processors: list[Any] = [
        merge_contextvars,
        filter_by_level,
        TimeStamper(fmt="iso"),
        add_log_level,
        dict_tracebacks,
    ]
    if settings.debug:
        processors.append(
            CallsiteParameterAdder(
                [
                    CallsiteParameter.FILENAME,
                    CallsiteParameter.FUNC_NAME,
                    CallsiteParameter.LINENO,
                ]
            )
        )
    processors += [format_exc_info, ProcessorFormatter.wrap_for_formatter]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)
