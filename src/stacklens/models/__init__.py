"""Data models and transfer objects."""

from .error import ErrorKind, NormalizedError, ThrownValue
from .report import Chunk, FileType, FrameType, ParsedError, RawFrame, StackFrame

__all__ = [
    # Report models
    "Chunk",
    "FileType",
    "FrameType",
    "ParsedError",
    "RawFrame",
    "StackFrame",
    # Normalized error models
    "ErrorKind",
    "NormalizedError",
    "ThrownValue",
]
