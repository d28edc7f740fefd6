"""Logging configuration for homefit.

Structured logging using structlog on top of the standard library, with JSON
output for services and plain console output for interactive use.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

from homefit.core.exceptions import ConfigurationError

# Module-level state for lazy initialization
_configured: bool = False


def configure_logging(
    level: str | None = None,
    json_output: bool | None = None,
    log_file: str | Path | None = None,
) -> structlog.BoundLogger:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to the
            ``HOMEFIT_LOG_LEVEL`` setting.
        json_output: If True, render JSON lines. Defaults to the
            ``HOMEFIT_JSON_LOGS`` setting.
        log_file: Optional path of a rotating log file.

    Returns:
        Configured logger instance.
    """
    global _configured

    if _configured:
        return structlog.get_logger()

    from homefit.core.settings import get_settings

    settings = get_settings()
    log_level = (level or settings.log_level).upper()
    numeric_level = logging.getLevelName(log_level)
    if not isinstance(numeric_level, int):
        raise ConfigurationError(f"Unknown log level: {log_level}")
    if json_output is None:
        json_output = settings.json_logs
    log_file = log_file or settings.log_file

    handlers: list[logging.Handler] = [
        logging.StreamHandler(sys.stderr),
    ]

    # No file output while pytest is running
    if log_file and not os.environ.get("PYTEST_CURRENT_TEST"):
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                str(path), maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
            )
        )

    logging.basicConfig(
        format="%(message)s",
        level=numeric_level,
        handlers=handlers,
        force=True,
    )

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    _configured = True
    return structlog.get_logger()


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger instance, optionally bound to a specific name.

    Logging is configured lazily on first call.

    Args:
        name: Optional logger name (usually module name).

    Returns:
        Bound logger instance.
    """
    if not _configured:
        configure_logging()

    logger = structlog.get_logger()
    if name:
        return logger.bind(logger_name=name)
    return logger
