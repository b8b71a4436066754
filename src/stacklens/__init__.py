"""Parse thrown values into structured error reports with source context."""

from stacklens.core import (
    ErrorParser,
    FrameClassifier,
    HttpSourceLoader,
    SourceCache,
    filesystem_source_loader,
)
from stacklens.models import (
    Chunk,
    FileType,
    FrameType,
    NormalizedError,
    ParsedError,
    StackFrame,
)
from stacklens.utils.async_helpers import SourceLoadError, StacklensError

__all__ = [
    "Chunk",
    "ErrorParser",
    "FileType",
    "FrameClassifier",
    "FrameType",
    "HttpSourceLoader",
    "NormalizedError",
    "ParsedError",
    "SourceCache",
    "SourceLoadError",
    "StackFrame",
    "StacklensError",
    "filesystem_source_loader",
]
