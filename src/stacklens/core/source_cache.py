"""Per-parser cache of loaded source files.

Entries are keyed by the normalized file identifier, not by content:
two identifiers pointing at identical text are loaded independently.
Entries are never evicted; the cache lives as long as its parser.

Concurrent first lookups of the same identifier from overlapping parse
calls may both invoke the loader. The last result wins, which is
harmless because loader results for one identifier are interchangeable.
"""

from __future__ import annotations

import structlog

from stacklens.config.schema import DEFAULT_WINDOW_SIZE
from stacklens.core.loaders import SourceLoader, filesystem_source_loader
from stacklens.core.source_file import SourceFile
from stacklens.models.report import Chunk
from stacklens.utils.async_helpers import SourceLoadError, describe_callable, maybe_await
from stacklens.utils.logging import LogEventNames

log = structlog.get_logger()


class SourceCache:
    """Lazily loads and memoizes source files by file identifier.

    Failed loads are cached too: a missing file is asked for once and
    then remembered as unavailable.

    Example:
        cache = SourceCache()
        chunks = await cache.get_source("/app/main.py", 42)
    """

    def __init__(
        self,
        loader: SourceLoader = filesystem_source_loader,
        window_size: int = DEFAULT_WINDOW_SIZE,
    ) -> None:
        """Initialize the cache.

        Args:
            loader: Source loader consulted on cache misses
            window_size: Number of lines in each source window
        """
        self._loader = loader
        self._window_size = window_size
        self._files: dict[str, SourceFile] = {}

    def __contains__(self, file_name: object) -> bool:
        return file_name in self._files

    def __len__(self) -> int:
        return len(self._files)

    @property
    def loader(self) -> SourceLoader:
        """Return the loader used on cache misses."""
        return self._loader

    @loader.setter
    def loader(self, loader: SourceLoader) -> None:
        self._loader = loader

    @property
    def window_size(self) -> int:
        """Return the number of lines in each source window."""
        return self._window_size

    async def get(self, file_name: str) -> SourceFile:
        """Return the source file for an identifier, loading it on first use.

        Args:
            file_name: Normalized file identifier

        Returns:
            SourceFile, unavailable if the loader had no text for it

        Raises:
            Exception: Anything the loader raises other than OSError,
                UnicodeDecodeError or SourceLoadError
        """
        cached = self._files.get(file_name)
        if cached is not None:
            log.debug(LogEventNames.CACHE_HIT, file_name=file_name)
            return cached

        log.debug(
            LogEventNames.CACHE_MISS,
            file_name=file_name,
            loader=describe_callable(self._loader),
        )
        source_file = SourceFile(file_name, await self._load(file_name))
        self._files[file_name] = source_file
        return source_file

    async def get_source(self, file_name: str, line_number: int | None) -> list[Chunk] | None:
        """Return the window of source chunks around a line of a file.

        Args:
            file_name: Normalized file identifier
            line_number: 1-based line number (line 1 when unknown)

        Returns:
            List of chunks, or None if the file's source is unavailable
        """
        source_file = await self.get(file_name)
        return source_file.slice(line_number or 1, self._window_size)

    async def _load(self, file_name: str) -> str | None:
        try:
            contents = await maybe_await(self._loader(file_name))
        except (OSError, UnicodeDecodeError, SourceLoadError) as e:
            log.debug(
                LogEventNames.SOURCE_LOAD_FAILED,
                file_name=file_name,
                error_type=type(e).__name__,
                error=str(e),
            )
            return None

        if contents is None:
            log.debug(LogEventNames.SOURCE_UNAVAILABLE, file_name=file_name)
            return None

        log.debug(LogEventNames.SOURCE_LOADED, file_name=file_name, size=len(contents))
        return contents
