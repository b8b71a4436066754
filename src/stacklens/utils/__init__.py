"""Utility functions and helpers.

This module provides various utilities for stacklens:
- async_helpers: Exceptions, async retry, timeouts
- logging: Structured logging configuration
"""

from stacklens.utils.async_helpers import (
    ConfigError,
    ParseTimeoutError,
    SourceLoadError,
    StacklensError,
    create_retry,
    with_timeout,
)
from stacklens.utils.logging import (
    LogEventNames,
    LogFormat,
    LogLevel,
    configure_logging,
)

__all__ = [
    # Exceptions
    "ConfigError",
    "ParseTimeoutError",
    "SourceLoadError",
    "StacklensError",
    # Async helpers
    "create_retry",
    "with_timeout",
    # Logging
    "LogEventNames",
    "LogFormat",
    "LogLevel",
    "configure_logging",
]
