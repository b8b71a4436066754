"""Data models for normalized thrown values."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from types import TracebackType
from typing import Any

SYNTAX_ERROR_NAMES = frozenset({"SyntaxError", "IndentationError", "TabError"})


class ErrorKind(StrEnum):
    """Shape of a thrown value."""

    EXCEPTION = "exception"  # A BaseException instance
    ERROR_LIKE = "error_like"  # A record exposing message and stack
    OPAQUE = "opaque"  # Anything else


@dataclass(frozen=True)
class ThrownValue:
    """A thrown value tagged with its shape."""

    kind: ErrorKind
    value: Any


@dataclass(frozen=True)
class NormalizedError:
    """Canonical representation of any thrown value."""

    message: str
    name: str
    kind: ErrorKind
    stack: str | None = None
    cause: Any = None
    hint: str | None = None
    code: str | None = None
    value: Any = None  # Exception or record the error was built from
    traceback: TracebackType | None = None

    @property
    def is_syntax_error(self) -> bool:
        """Whether the error was raised while parsing source text."""
        if isinstance(self.value, SyntaxError):
            return True
        return self.kind == ErrorKind.ERROR_LIKE and self.name in SYNTAX_ERROR_NAMES
