"""Dropping of leading stack frames."""

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def apply_offset(frames: Sequence[T], offset: int | None) -> list[T]:
    """Drop the first ``offset`` frames.

    Frames that wrap the actual error site (for example a reporting helper
    that re-raises) can be skipped this way. An offset larger than the
    number of frames yields an empty list.
    """
    if offset:
        return list(frames[offset:])
    return list(frames)
