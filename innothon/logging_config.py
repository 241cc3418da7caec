"""
Shared logging setup for the Innothon admin API.

One line format for application and server logs:
    2026-01-06T14:05:52Z [api] INFO Built all export with 42 rows

The level comes from LOG_LEVEL:
    INFO (default)  request-level events, exports built
    DEBUG           aggregation and export cache diagnostics
    TRACE           backend query parameters and record counts

Usage:
    from innothon.logging_config import configure_logging, get_logger

    configure_logging(source="api")
    logger = get_logger(__name__)
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterable
from datetime import UTC, datetime

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# Loggers that otherwise install their own handlers or flood INFO
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")
CHATTY_LOGGERS = ("httpx", "httpcore")


def _trace(self: logging.Logger, message: object, *args: object, **kwargs: object) -> None:
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kwargs)  # type: ignore[arg-type]


logging.Logger.trace = _trace  # type: ignore[attr-defined]


class ISO8601Formatter(logging.Formatter):
    """Render records as `<UTC timestamp> [source] LEVEL message`.

    The timestamp is the moment the record was created, not when it was
    formatted.
    """

    def __init__(self, source: str = "app"):
        super().__init__()
        self.source = source

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
        line = f"{created} [{self.source}] {record.levelname} {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class HealthCheckFilter(logging.Filter):
    """Drop access lines for polled endpoints unless the record is DEBUG.

    The dashboard hits /health on every refresh.
    """

    def __init__(self, quiet_paths: Iterable[str] = ("/health", "/api/health")):
        super().__init__()
        self.quiet_paths = tuple(quiet_paths)

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno == logging.DEBUG:
            return True
        text = record.getMessage()
        if "GET" not in text and "200" not in text:
            return True
        return not any(path in text for path in self.quiet_paths)


def resolve_level(debug: bool | None = None) -> int:
    """Level named by LOG_LEVEL; TRACE and DEBUG are recognised, anything else is INFO."""
    requested = os.getenv("LOG_LEVEL", "").strip().upper()
    if requested == "TRACE":
        return TRACE
    if requested == "DEBUG" or debug:
        return logging.DEBUG
    return logging.INFO


def _stdout_handler(source: str, level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ISO8601Formatter(source=source))
    handler.addFilter(HealthCheckFilter())
    return handler


def configure_logging(
    source: str = "app",
    level: int | None = None,
    debug: bool | None = None,
) -> logging.Logger:
    """Install the shared stdout handler on the root and server loggers.

    Args:
        source: Tag shown in brackets on every line (e.g. "api")
        level: Explicit level; defaults to resolve_level()
        debug: Force DEBUG when LOG_LEVEL is unset

    Returns:
        The root logger
    """
    level = resolve_level(debug) if level is None else level
    handler = _stdout_handler(source, level)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.addHandler(handler)
        server_logger.setLevel(level)
        server_logger.propagate = False

    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
