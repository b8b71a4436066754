"""Classification of stack frames by file identifier.

Each frame with a file name gets two independent labels:
- its origin (native runtime code, a third-party module or the app)
- how its file is addressed (filesystem path, http or https URL)

File identifiers are normalized before classification: ``file:`` URLs
become filesystem paths and backslashes become forward slashes.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import urlparse
from urllib.request import url2pathname

from stacklens.config.schema import (
    DEFAULT_MODULE_MARKERS,
    DEFAULT_NATIVE_MARKERS,
    DEFAULT_NATIVE_SENTINEL,
    ClassifierConfig,
)
from stacklens.models.report import FileType, FrameType

EXTENDED_LENGTH_PREFIX = "\\\\?\\"

# CPython standard library directory, e.g. /usr/lib/python3.12/
STDLIB_PATTERN = re.compile(r"/lib(?:64)?/python\d+\.\d+/")


def to_unix_slash(file_name: str) -> str:
    """Replace Windows separators, except in extended-length paths."""
    if file_name.startswith(EXTENDED_LENGTH_PREFIX):
        return file_name
    return file_name.replace("\\", "/")


def normalize_file_name(file_name: str) -> str:
    """Normalize a frame's file identifier.

    ``file:`` URLs are resolved to filesystem paths, and the result uses
    forward slashes.
    """
    if file_name.startswith("file:"):
        parsed = urlparse(file_name)
        path = url2pathname(parsed.path)
        if parsed.netloc and parsed.netloc != "localhost":
            path = f"//{parsed.netloc}{path}"
        return to_unix_slash(path)
    return to_unix_slash(file_name)


def is_pseudo_file(file_name: str) -> bool:
    """Check for Python pseudo-file names such as ``<string>`` or ``<stdin>``."""
    return file_name.startswith("<") and file_name.endswith(">")


@dataclass(frozen=True)
class FrameClassifier:
    """Classifies normalized file identifiers.

    Example:
        classifier = FrameClassifier()
        classifier.frame_type("/app/venv/lib/python3.12/site-packages/httpx/_client.py")
        # FrameType.MODULE
    """

    native_markers: tuple[str, ...] = tuple(DEFAULT_NATIVE_MARKERS)
    native_sentinel: str = DEFAULT_NATIVE_SENTINEL
    module_markers: tuple[str, ...] = tuple(DEFAULT_MODULE_MARKERS)

    @classmethod
    def from_config(cls, config: ClassifierConfig) -> FrameClassifier:
        """Create a classifier from configuration."""
        return cls(
            native_markers=tuple(config.native_markers),
            native_sentinel=config.native_sentinel,
            module_markers=tuple(config.module_markers),
        )

    def frame_type(self, file_name: str) -> FrameType:
        """Return the origin of a frame's file."""
        if (
            _contains_any(file_name, self.native_markers)
            or file_name == self.native_sentinel
            or is_pseudo_file(file_name)
        ):
            return FrameType.NATIVE

        if _contains_any(file_name, self.module_markers):
            return FrameType.MODULE

        if STDLIB_PATTERN.search(file_name):
            return FrameType.NATIVE

        return FrameType.APP

    @staticmethod
    def file_type(file_name: str) -> FileType:
        """Return how a frame's file is addressed."""
        if file_name.startswith("http://"):
            return FileType.HTTP
        if file_name.startswith("https://"):
            return FileType.HTTPS
        return FileType.FS


def _contains_any(file_name: str, markers: Iterable[str]) -> bool:
    return any(marker in file_name for marker in markers)
