"""Async utility functions and the package exception hierarchy.

This module provides:
- Custom exceptions for error handling
- Retry decorators with exponential backoff for remote source loading
- A timeout wrapper for callers that need bounded parse latency
- A helper to call sync-or-async extension points uniformly
"""

from __future__ import annotations

import asyncio
import builtins
import inspect
from collections.abc import Awaitable, Callable
from typing import Any, ParamSpec, TypeVar

import httpx
import structlog
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

log = structlog.get_logger()

P = ParamSpec("P")
T = TypeVar("T")


# =============================================================================
# Custom Exceptions
# =============================================================================


class StacklensError(Exception):
    """Base exception for all stacklens errors."""


class SourceLoadError(StacklensError):
    """A source loader could not provide the text for a file.

    Raised by loaders to signal that a file's source is unavailable. The
    source cache records the file as absent instead of propagating it.
    """

    def __init__(self, message: str, file_name: str | None = None) -> None:
        super().__init__(message)
        self.file_name = file_name


class ConfigError(StacklensError, ValueError):
    """Configuration is invalid."""


class ParseTimeoutError(StacklensError):
    """Parsing an error did not finish in time."""


# =============================================================================
# Retry Decorator
# =============================================================================


def _log_retry(retry_state: RetryCallState) -> None:
    """Log retry attempts for debugging."""
    if retry_state.outcome is None:
        return

    exception = retry_state.outcome.exception()
    if exception:
        log.warning(
            "retrying_operation",
            attempt=retry_state.attempt_number,
            exception_type=type(exception).__name__,
            exception_message=str(exception),
            wait_time=retry_state.next_action.sleep if retry_state.next_action else 0,
        )


def create_retry(
    max_attempts: int = 3,
    min_wait: float = 0.5,
    max_wait: float = 10.0,
    retry_on: tuple[type[Exception], ...] = (httpx.TimeoutException, httpx.NetworkError),
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Create a customized retry decorator.

    Args:
        max_attempts: Maximum number of attempts (including the first one).
        min_wait: Minimum wait time between retries (seconds).
        max_wait: Maximum wait time between retries (seconds).
        retry_on: Tuple of exception types to retry on.

    Returns:
        A retry decorator configured with the given parameters.
    """
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
        retry=retry_if_exception_type(retry_on),
        before_sleep=_log_retry,
        reraise=True,
    )


# =============================================================================
# Timeout Utilities
# =============================================================================


async def with_timeout(
    coro: Awaitable[T],
    timeout: float,
    error_message: str | None = None,
) -> T:
    """Execute an awaitable with a timeout.

    Args:
        coro: The coroutine to execute.
        timeout: Timeout in seconds.
        error_message: Custom error message for timeout.

    Returns:
        The result of the coroutine.

    Raises:
        ParseTimeoutError: If the operation times out.
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except builtins.TimeoutError as e:
        msg = error_message or f"Operation timed out after {timeout}s"
        log.warning("operation_timeout", timeout=timeout)
        raise ParseTimeoutError(msg) from e


# =============================================================================
# Extension Points
# =============================================================================


async def maybe_await(value: Awaitable[T] | T) -> T:
    """Await ``value`` if it is awaitable, otherwise return it as-is.

    Source loaders and transformers may be plain functions or coroutine
    functions; this lets callers treat both the same way.
    """
    if inspect.isawaitable(value):
        return await value
    return value  # type: ignore[return-value]


def describe_callable(func: Callable[..., Any]) -> str:
    """Return a readable name for a registered callable (for logging)."""
    return getattr(func, "__qualname__", None) or type(func).__name__
