"""Error parser turning any thrown value into a ParsedError.

This module implements the ErrorParser class that ties the pipeline
together:
- Pre-process the thrown value with registered parsers
- Normalize it into a canonical error
- Extract, offset and classify stack frames
- Attach a window of source code to application and module frames
- Post-process the report with registered transformers
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from functools import reduce
from typing import Any

import structlog

from stacklens.config.schema import DEFAULT_WINDOW_SIZE, StacklensConfig
from stacklens.core.classifier import FrameClassifier, normalize_file_name
from stacklens.core.loaders import HttpSourceLoader, SourceLoader, filesystem_source_loader
from stacklens.core.normalizer import normalize_error
from stacklens.core.offset import apply_offset
from stacklens.core.source_cache import SourceCache
from stacklens.core.stack_parser import FrameExtractor, extract_frames
from stacklens.core.syntax_location import syntax_error_frames
from stacklens.models.error import NormalizedError
from stacklens.models.report import FileType, FrameType, ParsedError, RawFrame, StackFrame
from stacklens.utils.async_helpers import describe_callable, maybe_await
from stacklens.utils.logging import LogEventNames

log = structlog.get_logger()

Parser = Callable[[Any], Any]
Transformer = Callable[[ParsedError, NormalizedError], "Awaitable[None] | None"]


class ErrorParser:
    """Parses thrown values into reports with enhanced stack frames.

    Each parser owns a source cache, so files referenced by many frames
    (or many errors) are loaded once per parser.

    Example:
        parser = ErrorParser()
        try:
            risky()
        except Exception as exc:
            report = await parser.parse(exc)
            print(report.frames[0].file_name, report.frames[0].line_number)
    """

    def __init__(
        self,
        offset: int | None = None,
        *,
        window_size: int = DEFAULT_WINDOW_SIZE,
        classifier: FrameClassifier | None = None,
        extractor: FrameExtractor = extract_frames,
    ) -> None:
        """Initialize the ErrorParser.

        Args:
            offset: Number of leading frames to drop
            window_size: Number of source lines attached to each frame
            classifier: Frame classifier (default markers when omitted)
            extractor: Function extracting raw frames from a normalized error
        """
        if offset is not None and offset < 0:
            raise ValueError(f"offset must be >= 0, got {offset}")
        if window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {window_size}")

        self._offset = offset
        self._classifier = classifier or FrameClassifier()
        self._extractor = extractor
        self._source_cache = SourceCache(filesystem_source_loader, window_size)
        self._parsers: list[Parser] = []
        self._transformers: list[Transformer] = []

    @classmethod
    def from_config(cls, config: StacklensConfig) -> ErrorParser:
        """Create a parser from configuration.

        Args:
            config: Validated stacklens configuration

        Returns:
            ErrorParser, reading sources from the remote source server
            when the remote loader is enabled
        """
        parser = cls(
            offset=config.parser.offset,
            window_size=config.parser.window_size,
            classifier=FrameClassifier.from_config(config.classifier),
        )

        remote = config.remote
        if remote.enabled and remote.base_url:
            parser.define_source_loader(
                HttpSourceLoader(
                    remote.base_url,
                    timeout=remote.timeout,
                    max_attempts=remote.max_attempts,
                )
            )

        return parser

    @property
    def offset(self) -> int | None:
        """Return the number of leading frames dropped."""
        return self._offset

    @property
    def source_cache(self) -> SourceCache:
        """Return the parser's source cache."""
        return self._source_cache

    def use_parser(self, parser: Parser) -> ErrorParser:
        """Register a parser.

        Parsers are synchronous functions that pre-process the thrown
        value before it gets normalized. Each receives the previous
        parser's result and returns a (possibly identical) value.

        Example:
            parser.use_parser(
                lambda value: RuntimeError(value.reason) if isinstance(value, Rejection) else value
            )
        """
        self._parsers.append(parser)
        return self

    def use_transformer(self, transformer: Transformer) -> ErrorParser:
        """Register a transformer.

        Transformers post-process the report and may mutate it in place.
        They may be coroutine functions; they run one after the other in
        registration order.

        Example:
            def add_docs_hint(report, error):
                if report.name == "ConnectionError":
                    report.hint = "Is the database running?"

            parser.use_transformer(add_docs_hint)
        """
        self._transformers.append(transformer)
        return self

    def define_source_loader(self, loader: SourceLoader) -> ErrorParser:
        """Replace the source loader used to read frame source files.

        For example, a loader that fetches the file contents from a remote
        server. Sources already cached by this parser are kept.
        """
        self._source_cache.loader = loader
        return self

    async def parse(self, value: Any) -> ParsedError:
        """Parse any thrown value into a ParsedError.

        Args:
            value: Exception, error record or any other value

        Returns:
            ParsedError with classified frames and source windows

        Raises:
            Exception: Whatever a registered parser, transformer or source
                loader raises (except source-unavailable errors)
        """
        log.debug(LogEventNames.PARSE_STARTED, value_type=type(value).__name__)

        value = reduce(lambda result, parser: parser(result), self._parsers, value)

        error = normalize_error(value)

        raw_frames: list[RawFrame] = []
        if error.is_syntax_error:
            raw_frames.extend(syntax_error_frames(error))
            log.debug(LogEventNames.SYNTAX_LOCATION_EXTRACTED, frames_count=len(raw_frames))
        raw_frames.extend(self._extractor(error))

        raw_frames = apply_offset(raw_frames, self._offset)

        report = ParsedError(
            message=error.message,
            name=error.name,
            frames=await self._enhance_frames(raw_frames),
            cause=error.cause,
            hint=error.hint,
            code=error.code,
            stack=error.stack,
            raw=error.value,
        )

        for transformer in self._transformers:
            await maybe_await(transformer(report, error))
            log.debug(
                LogEventNames.TRANSFORMER_APPLIED, transformer=describe_callable(transformer)
            )

        log.debug(
            LogEventNames.PARSE_COMPLETE,
            name=report.name,
            frames_count=len(report.frames),
        )
        return report

    async def _enhance_frames(self, raw_frames: list[RawFrame]) -> list[StackFrame]:
        """Classify frames and attach their source, preserving order."""
        frames: list[StackFrame] = []

        for raw_frame in raw_frames:
            frame = StackFrame.from_raw(raw_frame)

            if not frame.file_name:
                frames.append(frame)
                continue

            frame.file_name = normalize_file_name(frame.file_name)
            frame.type = self._classifier.frame_type(frame.file_name)
            frame.file_type = self._classifier.file_type(frame.file_name)

            if frame.file_type == FileType.FS and frame.type != FrameType.NATIVE:
                frame.source = await self._source_cache.get_source(
                    frame.file_name, frame.line_number
                )

            log.debug(
                LogEventNames.FRAME_ENHANCED,
                file_name=frame.file_name,
                line_number=frame.line_number,
                type=frame.type,
                file_type=frame.file_type,
                has_source=frame.source is not None,
            )
            frames.append(frame)

        return frames
