"""Slicing of source text into line-numbered windows.

A window is a contiguous run of lines around a target line, used to show
the code surrounding a stack frame. With the default size of 11 the
window holds 5 lines before the target, the target itself and 5 lines
after it. An even size leaves one more line before the target than after
it. Near the start or end of a file the window is shifted so that it
still holds as many lines as the file allows, and it never holds more
than the requested size.
"""

from __future__ import annotations

import math
import re
from functools import cached_property

import structlog

from stacklens.config.schema import DEFAULT_WINDOW_SIZE
from stacklens.models.report import Chunk
from stacklens.utils.logging import LogEventNames

log = structlog.get_logger()

LINE_BREAK = re.compile(r"\r?\n")


def split_lines(contents: str) -> list[str]:
    """Split text on LF/CRLF, keeping empty lines (and a trailing one)."""
    return LINE_BREAK.split(contents)


def window_bounds(
    line_count: int, line_number: int, window_size: int = DEFAULT_WINDOW_SIZE
) -> tuple[int, int]:
    """Compute the 0-based ``[start, end)`` slice for a window.

    Args:
        line_count: Total number of lines in the file
        line_number: 1-based line to center the window on
        window_size: Desired number of lines in the window

    Returns:
        Tuple of (start, end) indexes into the list of lines
    """
    half = math.ceil((window_size - 1) / 2)

    start = 0 if half >= line_number else line_number - half - 1

    # Fewer trailing lines than requested: borrow leading context instead
    start = max(min(start, line_count - window_size), 0)

    return start, start + window_size


def slice_lines(
    lines: list[str], line_number: int, window_size: int = DEFAULT_WINDOW_SIZE
) -> list[Chunk]:
    """Slice pre-split lines into a window of chunks around ``line_number``."""
    start, end = window_bounds(len(lines), line_number, window_size)
    return [
        Chunk(chunk=line, line_number=start + index + 1)
        for index, line in enumerate(lines[start:end])
    ]


def slice_source(
    contents: str | None, line_number: int, window_size: int = DEFAULT_WINDOW_SIZE
) -> list[Chunk] | None:
    """Slice source text into a window of chunks around ``line_number``.

    Returns None (not an empty list) when there is no content.
    """
    if not contents:
        return None
    return slice_lines(split_lines(contents), line_number, window_size)


class SourceFile:
    """Loaded source text for one file identifier.

    ``contents`` is None when the file could not be loaded. The text is
    split into lines once, on first slice.

    Example:
        source_file = SourceFile("/app/main.py", contents)
        chunks = source_file.slice(12, 7)
        # 7 chunks, line numbers 9 to 15
    """

    def __init__(self, file_name: str, contents: str | None = None) -> None:
        self.file_name = file_name
        self.contents = contents

    def __repr__(self) -> str:
        return f"SourceFile({self.file_name!r}, available={self.is_available})"

    @property
    def is_available(self) -> bool:
        """Whether any source text is available for the file."""
        return bool(self.contents)

    @cached_property
    def lines(self) -> list[str]:
        """The file's lines, without line terminators."""
        return split_lines(self.contents) if self.contents else []

    def slice(
        self, line_number: int, window_size: int = DEFAULT_WINDOW_SIZE
    ) -> list[Chunk] | None:
        """Return the window of chunks around ``line_number``, or None."""
        if not self.is_available:
            return None

        chunks = slice_lines(self.lines, line_number, window_size)
        log.debug(
            LogEventNames.SOURCE_SLICED,
            file_name=self.file_name,
            line_number=line_number,
            window_size=window_size,
            first_line=chunks[0].line_number if chunks else None,
            chunks_count=len(chunks),
        )
        return chunks
