"""Data models for parsed error reports."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any


class FrameType(StrEnum):
    """Where a frame originated from."""

    NATIVE = "native"  # Interpreter/runtime internals
    MODULE = "module"  # Third-party dependency code
    APP = "app"  # Application code


class FileType(StrEnum):
    """How a frame's file identifier is addressed."""

    FS = "fs"
    HTTP = "http"
    HTTPS = "https"


@dataclass(frozen=True)
class Chunk:
    """A single line of source text with its 1-based line number."""

    chunk: str
    line_number: int


@dataclass(frozen=True)
class RawFrame:
    """A frame as produced by a stack extractor, before enhancement."""

    file_name: str | None = None
    line_number: int | None = None
    column_number: int | None = None
    function_name: str | None = None
    args: tuple[Any, ...] | None = None
    raw: str | None = None


@dataclass
class StackFrame:
    """A single frame of a parsed error.

    ``type``, ``file_type`` and ``source`` are only set for frames with a
    file name. ``source`` is only set for filesystem frames that are not
    native and whose source text could be loaded.
    """

    file_name: str | None = None
    line_number: int | None = None
    column_number: int | None = None
    function_name: str | None = None
    args: tuple[Any, ...] | None = None
    raw: str | None = None
    type: FrameType | None = None
    file_type: FileType | None = None
    source: list[Chunk] | None = None

    @classmethod
    def from_raw(cls, frame: RawFrame) -> StackFrame:
        """Create an (unenhanced) stack frame from an extracted frame."""
        return cls(
            file_name=frame.file_name,
            line_number=frame.line_number,
            column_number=frame.column_number,
            function_name=frame.function_name,
            args=frame.args,
            raw=frame.raw,
        )

    @property
    def highlighted_chunk(self) -> Chunk | None:
        """The source chunk for the frame's own line, if available."""
        if not self.source or self.line_number is None:
            return None
        return next((c for c in self.source if c.line_number == self.line_number), None)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation of the frame."""
        data = asdict(self)
        if self.args is not None:
            data["args"] = [repr(arg) for arg in self.args]
        return data


@dataclass
class ParsedError:
    """A normalized error with enhanced stack frames.

    Transformers registered on the parser may mutate the report in
    place before it is returned.
    """

    message: str
    name: str
    frames: list[StackFrame] = field(default_factory=list)
    cause: Any = None
    hint: str | None = None
    code: str | None = None
    stack: str | None = None
    raw: Any = None  # The exception or record the report was built from

    @property
    def app_frames(self) -> list[StackFrame]:
        """Frames from application code."""
        return [frame for frame in self.frames if frame.type == FrameType.APP]

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation of the report (without ``raw``)."""
        return {
            "message": self.message,
            "name": self.name,
            "hint": self.hint,
            "code": self.code,
            "cause": None if self.cause is None else str(self.cause),
            "stack": self.stack,
            "frames": [frame.to_dict() for frame in self.frames],
        }
