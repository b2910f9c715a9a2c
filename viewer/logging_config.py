"""Centralized logging configuration for the viewer."""

from __future__ import annotations

import logging
import os
from typing import Iterable

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"
LOG_LEVEL_ENV = "FLYWAY_LOG_LEVEL"

# One request line per poll tick floods INFO output at 10 Hz
HTTP_LOGGERS = ("httpx", "httpcore")


def configure_logging(
    *,
    level: str | None = None,
    format: str = DEFAULT_FORMAT,
    datefmt: str = DEFAULT_DATEFMT,
    quiet_http: bool = True,
    extra_loggers: Iterable[str] | None = None,
) -> logging.Logger:
    """Configure application logging with sensible defaults.

    Args:
        level: Optional explicit log level. Falls back to ``FLYWAY_LOG_LEVEL``
            env var or INFO when not provided.
        format: Log format string.
        datefmt: Date format string.
        quiet_http: Keep the httpx/httpcore loggers at WARNING unless the
            resolved level is DEBUG.
        extra_loggers: Additional logger names to align with the configured level.

    Returns:
        The ``viewer`` package logger.
    """

    raw_level = level if level is not None else os.getenv(LOG_LEVEL_ENV)
    resolved_level = (raw_level or "INFO").upper()
    logging.basicConfig(level=resolved_level, format=format, datefmt=datefmt)

    app_logger = logging.getLogger("viewer")
    app_logger.setLevel(resolved_level)

    http_level = resolved_level
    if quiet_http and resolved_level != "DEBUG":
        http_level = "WARNING"
    for http_logger in HTTP_LOGGERS:
        logging.getLogger(http_logger).setLevel(http_level)

    if extra_loggers:
        for logger_name in extra_loggers:
            logging.getLogger(logger_name).setLevel(resolved_level)

    app_logger.debug("Logging configured", extra={"level": resolved_level, "format": format})
    return app_logger
