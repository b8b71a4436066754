"""Location of syntax errors.

Errors raised while parsing source text carry no frame for the file that
failed to parse: the stack only shows the code that asked for the parse.
The location is recovered from the error itself instead.
"""

from __future__ import annotations

from stacklens.models.error import NormalizedError
from stacklens.models.report import RawFrame


def extract_syntax_location(stack: str | None) -> list[RawFrame]:
    """Derive a frame from a ``<file>:<line>`` first line of stack text.

    Everything before the last colon is the file name, so Windows paths
    such as ``D:\\app\\bad.js:7`` keep their drive letter.

    Returns:
        A single frame, or an empty list if the first line does not hold
        a file name and a positive line number
    """
    if not stack:
        return []

    first_line = stack.split("\n", 1)[0].rstrip("\r")
    file_name, _, line_token = first_line.rpartition(":")

    # Plain ASCII digits only; int() would also take "+7", " 7" or "7_0"
    if not (line_token.isascii() and line_token.isdigit()):
        return []

    line_number = int(line_token)
    if not file_name or line_number < 1:
        return []

    return [RawFrame(file_name=file_name, line_number=line_number, raw=first_line)]


def syntax_error_frames(error: NormalizedError) -> list[RawFrame]:
    """Return the synthetic frame for a syntax error, if one can be found.

    ``SyntaxError`` instances report their location through ``filename``,
    ``lineno`` and ``offset``. Error records only have their stack text.
    """
    exc = error.value
    if isinstance(exc, SyntaxError):
        if exc.filename and exc.lineno:
            return [
                RawFrame(
                    file_name=exc.filename,
                    line_number=exc.lineno,
                    column_number=exc.offset - 1 if exc.offset else None,
                    raw=f'File "{exc.filename}", line {exc.lineno}',
                )
            ]
        return []

    return extract_syntax_location(error.stack)
