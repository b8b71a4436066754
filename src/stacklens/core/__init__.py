"""Core error parsing components.

This module exports the pipeline pieces:
- ErrorParser: Turns any thrown value into a ParsedError
- SourceCache / SourceFile: Loading and slicing of frame source files
- FrameClassifier: Frame origin and file type classification
- HttpSourceLoader: Source loader backed by a remote source server
"""

from stacklens.core.classifier import FrameClassifier, normalize_file_name
from stacklens.core.loaders import HttpSourceLoader, SourceLoader, filesystem_source_loader
from stacklens.core.normalizer import (
    UnknownThrownValueError,
    classify_thrown_value,
    normalize_error,
)
from stacklens.core.offset import apply_offset
from stacklens.core.parser import ErrorParser, Parser, Transformer
from stacklens.core.source_cache import SourceCache
from stacklens.core.source_file import SourceFile, slice_source
from stacklens.core.stack_parser import FrameExtractor, extract_frames, parse_stack
from stacklens.core.syntax_location import extract_syntax_location

__all__ = [
    "ErrorParser",
    "FrameClassifier",
    "FrameExtractor",
    "HttpSourceLoader",
    "Parser",
    "SourceCache",
    "SourceFile",
    "SourceLoader",
    "Transformer",
    "UnknownThrownValueError",
    "apply_offset",
    "classify_thrown_value",
    "extract_frames",
    "extract_syntax_location",
    "filesystem_source_loader",
    "normalize_error",
    "normalize_file_name",
    "parse_stack",
    "slice_source",
]
