"""Logging utilities for the provider catalog.

This module provides standardized logging functionality for catalog operations.
Library code only attaches a ``NullHandler``; applications (and the CLI) decide
where records go via :func:`configure_logging`.
"""

import logging
from enum import Enum
from typing import Any, Optional

PACKAGE_LOGGER_NAME = "provider_catalog"

logging.getLogger(PACKAGE_LOGGER_NAME).addHandler(logging.NullHandler())


class LogLevel(int, Enum):
    """Log levels for the catalog."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


class LogEvent(str, Enum):
    """Event types for catalog logging."""

    PROVIDER_REGISTRY = "provider_registry"
    PROVIDER_CACHE = "provider_cache"
    CATALOG_FETCH = "catalog_fetch"
    LOCAL_PROBE = "local_probe"
    BACKGROUND_REFRESH = "background_refresh"


def get_logger(name: str) -> logging.Logger:
    """Get a logger nested under the package logger.

    Args:
        name: Short name (``"registry"``) or a dotted module name

    Returns:
        Logger instance
    """
    if name == PACKAGE_LOGGER_NAME or name.startswith(PACKAGE_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER_NAME}.{name}")


_event_logger = get_logger("events")


def _log(level: LogLevel, event: LogEvent, message: str, **data: Any) -> None:
    """Log an event with structured data.

    Args:
        level: Severity level
        event: Event type
        message: Human-readable message
        **data: Structured event data, attached to the record as ``data``
    """
    if not _event_logger.isEnabledFor(level):
        return
    if data:
        details = ", ".join(f"{key}={value}" for key, value in data.items())
        message = f"{message} ({details})"
    _event_logger.log(level, "[%s] %s", event.value, message, extra={"event": event.value, "data": data})


def log_debug(event: LogEvent, message: str, **data: Any) -> None:
    """Log a debug-level event."""
    _log(LogLevel.DEBUG, event, message, **data)


def log_info(event: LogEvent, message: str, **data: Any) -> None:
    """Log an info-level event."""
    _log(LogLevel.INFO, event, message, **data)


def log_warning(event: LogEvent, message: str, **data: Any) -> None:
    """Log a warning-level event."""
    _log(LogLevel.WARNING, event, message, **data)


def log_error(event: LogEvent, message: str, **data: Any) -> None:
    """Log an error-level event."""
    _log(LogLevel.ERROR, event, message, **data)


def configure_logging(level: str = "WARNING", no_color: bool = False, handler: Optional[logging.Handler] = None) -> None:
    """Route package log records to stderr through a Rich handler.

    Calling this again replaces the handler installed by the previous call.

    Args:
        level: Level name (``"DEBUG"``, ``"INFO"``, ...)
        no_color: Disable colored output
        handler: Handler to install instead of the default Rich handler
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)

    if handler is None:
        from rich.console import Console
        from rich.logging import RichHandler

        handler = RichHandler(
            console=Console(stderr=True, no_color=no_color),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))

    for existing in list(package_logger.handlers):
        if getattr(existing, "_provider_catalog_handler", False):
            package_logger.removeHandler(existing)

    handler._provider_catalog_handler = True  # type: ignore[attr-defined]
    package_logger.addHandler(handler)
    package_logger.setLevel(level.upper())
