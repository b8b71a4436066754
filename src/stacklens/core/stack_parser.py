"""Extraction of raw stack frames from errors.

This module implements the default frame extractor used by ErrorParser.
Frames are returned most recent call first, so frame 0 is where the
error was raised. It supports:
- Exceptions, through their traceback objects
- Python traceback text (including chained tracebacks)
- V8 (Node.js, Chromium) stack text
- Firefox/Safari stack text
"""

from __future__ import annotations

import re
import traceback
from collections.abc import Callable, Iterable
from types import TracebackType

from stacklens.models.error import NormalizedError
from stacklens.models.report import RawFrame

FrameExtractor = Callable[[NormalizedError], Iterable[RawFrame]]

TRACEBACK_HEADER = re.compile(r"Traceback \(most recent call last\):")
PYTHON_FRAME_PATTERN = re.compile(r'^\s*File "([^"]+)", line (\d+)(?:, in (.+))?$')
CHAINED_PATTERN = re.compile(
    r"^(?:The above exception was the direct cause of the following exception:|"
    r"During handling of the above exception, another exception occurred:)$",
    re.MULTILINE,
)
EXCEPTION_PATTERN = re.compile(
    r"^([A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*):\s*(.*)$",
)
EXCEPTION_NO_MSG_PATTERN = re.compile(
    r"^([A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*)$",
)

# at fn (file:line:col) / at file:line:col
V8_FRAME_PATTERN = re.compile(r"^\s*at (?:(.+?) \()?(.+?):(\d+)(?::(\d+))?\)?$")
# fn@file:line:col
GECKO_FRAME_PATTERN = re.compile(r"^\s*([^@\s]*)@(.+?):(\d+)(?::(\d+))?$")


def extract_frames(error: NormalizedError) -> list[RawFrame]:
    """Extract raw frames from a normalized error.

    Exceptions are read from their traceback; error records from their
    stack text. Errors with neither yield no frames.
    """
    if error.traceback is not None:
        return frames_from_traceback(error.traceback)
    if isinstance(error.value, BaseException):
        return []
    if error.stack:
        return parse_stack(error.stack)
    return []


def frames_from_traceback(tb: TracebackType) -> list[RawFrame]:
    """Build raw frames from a traceback object, most recent call first."""
    frames: list[RawFrame] = []
    for summary in reversed(traceback.extract_tb(tb)):
        raw = f'File "{summary.filename}", line {summary.lineno}, in {summary.name}'
        frames.append(
            RawFrame(
                file_name=summary.filename,
                line_number=summary.lineno,
                column_number=summary.colno,
                function_name=summary.name,
                raw=raw,
            )
        )
    return frames


def parse_stack(stack: str) -> list[RawFrame]:
    """Parse stack trace text into raw frames.

    Python tracebacks are detected by their header or frame lines; any
    other text is parsed as a JavaScript engine stack.
    """
    if not stack:
        return []

    lines = stack.splitlines()
    if TRACEBACK_HEADER.search(stack) or any(PYTHON_FRAME_PATTERN.match(line) for line in lines):
        return parse_python_traceback(stack)
    return parse_engine_stack(lines)


def parse_python_traceback(text: str) -> list[RawFrame]:
    """Parse Python traceback text into raw frames, most recent call first.

    For chained tracebacks only the last (outermost) exception's section
    is used; earlier sections belong to the error's cause.
    """
    sections = [s for s in CHAINED_PATTERN.split(text) if s.strip()]
    section = sections[-1] if sections else text

    frames: list[RawFrame] = []

    for line in section.splitlines():
        frame_match = PYTHON_FRAME_PATTERN.match(line)
        if not frame_match:
            continue

        function_name = frame_match.group(3)
        frames.append(
            RawFrame(
                file_name=frame_match.group(1),
                line_number=int(frame_match.group(2)),
                function_name=function_name.strip() if function_name else None,
                raw=line.strip(),
            )
        )

    frames.reverse()
    return frames


def parse_engine_stack(lines: Iterable[str]) -> list[RawFrame]:
    """Parse V8 or Firefox/Safari stack lines into raw frames, in text order."""
    frames: list[RawFrame] = []

    for line in lines:
        match = V8_FRAME_PATTERN.match(line) or GECKO_FRAME_PATTERN.match(line)
        if not match:
            continue

        function_name, file_name, line_number, column_number = match.groups()
        frames.append(
            RawFrame(
                file_name=file_name,
                line_number=int(line_number),
                column_number=int(column_number) if column_number else None,
                function_name=function_name or None,
                raw=line.strip(),
            )
        )

    return frames


def parse_exception_line(text: str) -> tuple[str, str]:
    """Extract exception type and message from the end of traceback text.

    Args:
        text: Traceback text to parse

    Returns:
        Tuple of (exception_type, exception_message), empty strings if
        no exception line is found
    """
    for line in reversed(text.splitlines()):
        line = line.strip()
        if not line:
            continue

        # Skip frame lines and other non-exception lines
        if line.startswith(("File ", "^", "at ")):
            continue

        exc_match = EXCEPTION_PATTERN.match(line)
        if exc_match:
            return (exc_match.group(1), exc_match.group(2))

        exc_no_msg_match = EXCEPTION_NO_MSG_PATTERN.match(line)
        if exc_no_msg_match:
            return (exc_no_msg_match.group(1), "")

    return ("", "")
