"""Tests for report and error models."""

import json

from stacklens.models.error import ErrorKind, NormalizedError
from stacklens.models.report import (
    Chunk,
    FileType,
    FrameType,
    ParsedError,
    RawFrame,
    StackFrame,
)


def make_frame(**kwargs) -> StackFrame:
    defaults = {
        "file_name": "/app/main.py",
        "line_number": 3,
        "function_name": "main",
        "type": FrameType.APP,
        "file_type": FileType.FS,
        "source": [Chunk("a = 1", 2), Chunk("main()", 3), Chunk("", 4)],
    }
    defaults.update(kwargs)
    return StackFrame(**defaults)


class TestStackFrame:
    """Tests for StackFrame model."""

    def test_from_raw(self) -> None:
        """Test that extracted fields are copied and enhancement is unset."""
        raw = RawFrame(
            file_name="/app/main.py",
            line_number=3,
            column_number=4,
            function_name="main",
            args=(1,),
            raw='File "/app/main.py", line 3, in main',
        )

        frame = StackFrame.from_raw(raw)

        assert frame.file_name == "/app/main.py"
        assert frame.column_number == 4
        assert frame.args == (1,)
        assert frame.raw == raw.raw
        assert frame.type is None
        assert frame.file_type is None
        assert frame.source is None

    def test_highlighted_chunk(self) -> None:
        """Test finding the chunk of the frame's line."""
        assert make_frame().highlighted_chunk == Chunk("main()", 3)

    def test_highlighted_chunk_without_source(self) -> None:
        """Test frames without source have no highlighted chunk."""
        assert make_frame(source=None).highlighted_chunk is None
        assert make_frame(line_number=None).highlighted_chunk is None

    def test_to_dict(self) -> None:
        """Test the JSON-ready representation."""
        data = make_frame(args=(object,)).to_dict()

        assert data["file_name"] == "/app/main.py"
        assert data["type"] == "app"
        assert data["file_type"] == "fs"
        assert data["source"][1] == {"chunk": "main()", "line_number": 3}
        assert data["args"] == ["<class 'object'>"]
        json.dumps(data)


class TestParsedError:
    """Tests for ParsedError model."""

    def test_app_frames(self) -> None:
        """Test filtering application frames."""
        app = make_frame()
        module = make_frame(type=FrameType.MODULE)
        report = ParsedError(message="x", name="Error", frames=[module, app])

        assert report.app_frames == [app]

    def test_to_dict(self) -> None:
        """Test that the report serializes to JSON without the raw value."""
        report = ParsedError(
            message="boom",
            name="ValueError",
            frames=[make_frame()],
            cause=KeyError("host"),
            hint="check host",
            code="E1",
            stack="ValueError: boom",
            raw=ValueError("boom"),
        )

        data = report.to_dict()

        assert data["cause"] == "'host'"
        assert "raw" not in data
        assert data["frames"][0]["function_name"] == "main"
        assert json.loads(json.dumps(data))["hint"] == "check host"

    def test_to_dict_without_cause(self) -> None:
        """Test that a missing cause stays None."""
        assert ParsedError(message="x", name="Error").to_dict()["cause"] is None


class TestNormalizedError:
    """Tests for NormalizedError model."""

    def test_syntax_error_exception(self) -> None:
        """Test that SyntaxError instances are syntax errors."""
        error = NormalizedError(
            message="x",
            name="IndentationError",
            kind=ErrorKind.EXCEPTION,
            value=IndentationError("x"),
        )
        assert error.is_syntax_error

    def test_syntax_error_record(self) -> None:
        """Test that records named like syntax errors are syntax errors."""
        error = NormalizedError(message="x", name="SyntaxError", kind=ErrorKind.ERROR_LIKE)
        assert error.is_syntax_error

    def test_other_exception(self) -> None:
        """Test that unrelated exceptions are not syntax errors."""
        error = NormalizedError(
            message="x", name="ValueError", kind=ErrorKind.EXCEPTION, value=ValueError("x")
        )
        assert not error.is_syntax_error
