"""Structured logging configuration.

The library only emits log events through ``structlog.get_logger()``;
applications (and the ``stacklens`` command line) decide how they are
rendered by calling :func:`configure_logging`:
- Configurable log levels and output formats (JSON/console)
- Context injection for correlation
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from enum import StrEnum
from typing import Any

import structlog


class LogFormat(StrEnum):
    """Log output format options."""

    JSON = "json"
    CONSOLE = "console"


class LogLevel(StrEnum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def add_context_processor(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Add contextual information to all log entries.

    Adds standard fields for correlation and debugging:
    - service: Always "stacklens"
    - version: Current package version (if available)

    Args:
        logger: Logger instance (unused)
        method_name: Log method name (unused)
        event_dict: Event dictionary to process

    Returns:
        Event dictionary with added context
    """
    event_dict["service"] = "stacklens"

    try:
        from stacklens._version import __version__

        event_dict["version"] = __version__
    except (ImportError, RuntimeError):
        pass

    return event_dict


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    log_format: LogFormat | str = LogFormat.CONSOLE,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)

    Example:
        # For development (colored console output)
        configure_logging(level="DEBUG", log_format="console")

        # For log aggregation
        configure_logging(level="INFO", log_format="json")
    """
    if isinstance(level, str):
        level = LogLevel(level.upper())
    if isinstance(log_format, str):
        log_format = LogFormat(log_format.lower())

    numeric_level = getattr(logging, level.value)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_context_processor,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == LogFormat.JSON:
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True, exception_formatter=structlog.dev.plain_traceback
            )
        )

    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Reports go to stdout, logs to stderr
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)

    logging.basicConfig(
        format="%(message)s",
        level=numeric_level,
        handlers=[console_handler],
        force=True,
    )


class LogEventNames:
    """Standard log event names for consistency."""

    # Parsing
    PARSE_STARTED = "parse_started"
    PARSE_COMPLETE = "parse_complete"
    ERROR_NORMALIZED = "error_normalized"
    SYNTAX_LOCATION_EXTRACTED = "syntax_location_extracted"
    FRAME_ENHANCED = "frame_enhanced"
    TRANSFORMER_APPLIED = "transformer_applied"

    # Source loading
    CACHE_HIT = "source_cache_hit"
    CACHE_MISS = "source_cache_miss"
    SOURCE_LOADED = "source_loaded"
    SOURCE_UNAVAILABLE = "source_unavailable"
    SOURCE_LOAD_FAILED = "source_load_failed"
    SOURCE_SLICED = "source_sliced"

    # Remote loading
    REMOTE_FETCH = "remote_source_fetch"
    REMOTE_FETCH_FAILED = "remote_source_fetch_failed"
