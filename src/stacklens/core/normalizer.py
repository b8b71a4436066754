"""Normalization of arbitrary thrown values.

Anything can end up being reported as an error: exceptions, error
records decoded from JSON payloads, or plain values handed over by
callbacks and futures. ``normalize_error`` turns each of them into a
``NormalizedError`` and never fails.
"""

from __future__ import annotations

import errno
import json
import traceback
from collections.abc import Mapping
from typing import Any

import structlog

from stacklens.models.error import ErrorKind, NormalizedError, ThrownValue
from stacklens.utils.async_helpers import StacklensError
from stacklens.utils.logging import LogEventNames

log = structlog.get_logger()

THROWN_VALUE_HINT = (
    "To get as much information as possible from your errors, make sure to report "
    "exception instances (or records with a message and a stack). See "
    "https://docs.python.org/3/tutorial/errors.html for more information."
)

DEFAULT_ERROR_NAME = "Error"


class UnknownThrownValueError(StacklensError):
    """Stands in for a thrown value that is not an error.

    The message is the JSON form of the value and the value itself is
    kept as the cause.
    """

    def __init__(self, value: Any) -> None:
        super().__init__(to_json(value))
        self.value = value
        self.hint = THROWN_VALUE_HINT


def to_json(value: Any) -> str:
    """Serialize any value to JSON.

    Values JSON cannot represent are serialized through their attribute
    dict, or their ``repr`` as a last resort.
    """
    try:
        return json.dumps(value, default=_json_default)
    except (TypeError, ValueError, RecursionError):
        return json.dumps(repr(value))


def _json_default(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return list(value)
    if hasattr(value, "__dict__") and not isinstance(value, type):
        return vars(value)
    return repr(value)


def classify_thrown_value(value: Any) -> ThrownValue:
    """Tag a thrown value with its shape."""
    if isinstance(value, BaseException):
        return ThrownValue(ErrorKind.EXCEPTION, value)
    if _has_field(value, "message") and _has_field(value, "stack"):
        return ThrownValue(ErrorKind.ERROR_LIKE, value)
    return ThrownValue(ErrorKind.OPAQUE, value)


def normalize_error(value: Any) -> NormalizedError:
    """Coerce any thrown value into a ``NormalizedError``.

    Args:
        value: Exception, error record or any other value

    Returns:
        NormalizedError carrying at least a message and a name
    """
    thrown = classify_thrown_value(value)

    if thrown.kind == ErrorKind.EXCEPTION:
        error = _from_exception(thrown.value)
    elif thrown.kind == ErrorKind.ERROR_LIKE:
        error = _from_record(thrown.value)
    else:
        error = _from_opaque(thrown.value)

    log.debug(LogEventNames.ERROR_NORMALIZED, kind=error.kind, name=error.name)
    return error


def _from_exception(exc: BaseException) -> NormalizedError:
    return NormalizedError(
        message=str(exc),
        name=type(exc).__name__,
        kind=ErrorKind.EXCEPTION,
        stack="".join(traceback.format_exception(exc)),
        cause=_exception_cause(exc),
        hint=_exception_hint(exc),
        code=_exception_code(exc),
        value=exc,
        traceback=exc.__traceback__,
    )


def _from_record(record: Any) -> NormalizedError:
    stack = _get_field(record, "stack")
    name = _get_field(record, "name")
    hint = _get_field(record, "hint") or _get_field(record, "help")
    code = _get_field(record, "code")

    return NormalizedError(
        message=_as_text(_get_field(record, "message")),
        name=str(name) if name else DEFAULT_ERROR_NAME,
        kind=ErrorKind.ERROR_LIKE,
        stack=stack if isinstance(stack, str) else None,
        cause=_get_field(record, "cause"),
        hint=str(hint) if hint else None,
        code=str(code) if code is not None else None,
        value=record,
    )


def _from_opaque(value: Any) -> NormalizedError:
    exc = UnknownThrownValueError(value)
    return NormalizedError(
        message=str(exc),
        name=type(exc).__name__,
        kind=ErrorKind.OPAQUE,
        stack="".join(traceback.format_exception_only(exc)),
        cause=value,
        hint=exc.hint,
        value=exc,
    )


def _exception_cause(exc: BaseException) -> BaseException | None:
    if exc.__cause__ is not None:
        return exc.__cause__
    if exc.__suppress_context__:
        return None
    return exc.__context__


def _exception_hint(exc: BaseException) -> str | None:
    hint = getattr(exc, "hint", None) or getattr(exc, "help", None)
    if hint:
        return str(hint)
    notes = getattr(exc, "__notes__", None)
    if notes:
        return "\n".join(str(note) for note in notes)
    return None


def _exception_code(exc: BaseException) -> str | None:
    code = getattr(exc, "code", None)
    if code is not None:
        return str(code)
    if isinstance(exc, OSError) and exc.errno is not None:
        return errno.errorcode.get(exc.errno, str(exc.errno))
    return None


def _has_field(value: Any, name: str) -> bool:
    if isinstance(value, Mapping):
        return name in value
    return hasattr(value, name)


def _get_field(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else to_json(value)
