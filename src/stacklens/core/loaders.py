"""Source loaders supply the text of a file referenced by a stack frame.

A source loader is any callable taking a file identifier and returning
the file's text, or None when it has no text for it. It may be a plain
function or a coroutine function. Loaders signal an unavailable file by
returning None or by raising ``OSError`` / ``SourceLoadError``; the
source cache records either as absence. An identifier that is not a
usable path is a ``SourceLoadError`` for the filesystem loader.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from urllib.parse import quote

import httpx
import structlog

from stacklens.utils.async_helpers import SourceLoadError, create_retry
from stacklens.utils.logging import LogEventNames

log = structlog.get_logger()

SourceLoader = Callable[[str], "str | None | Awaitable[str | None]"]


async def filesystem_source_loader(file_name: str) -> str | None:
    """Read a file identifier as a path on the local filesystem.

    Args:
        file_name: Absolute (or working-directory relative) file path

    Returns:
        The file's text

    Raises:
        OSError: If the file is missing or cannot be read
        SourceLoadError: If the file name is not a usable path (e.g. it
            contains a NUL character)
    """
    path = Path(file_name)
    try:
        return await asyncio.to_thread(path.read_text, encoding="utf-8", errors="replace")
    except ValueError as e:
        raise SourceLoadError(f"Invalid file path {file_name!r}: {e}", file_name=file_name) from e


class HttpSourceLoader:
    """Fetch source text for file paths from a remote source server.

    The file identifier is appended to ``base_url``, so a frame pointing at
    ``/srv/app/main.py`` is fetched from ``{base_url}/srv/app/main.py``.
    Transient network errors are retried with exponential backoff. A 404
    response means the server has no such file.

    Example:
        parser = ErrorParser()
        parser.define_source_loader(HttpSourceLoader("http://localhost:8000/sources"))
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        max_attempts: int = 3,
        min_wait: float = 0.5,
        max_wait: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the loader.

        Args:
            base_url: URL prefix of the source server
            timeout: Request timeout in seconds
            max_attempts: Attempts per file on transient network errors
            min_wait: Minimum wait between attempts (seconds)
            max_wait: Maximum wait between attempts (seconds)
            client: Shared HTTP client; a short-lived client is used per
                request when omitted
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client
        self._fetch = create_retry(
            max_attempts=max_attempts, min_wait=min_wait, max_wait=max_wait
        )(self._get)

    @property
    def base_url(self) -> str:
        """Return the source server URL prefix."""
        return self._base_url

    def url_for(self, file_name: str) -> str:
        """Build the URL a file identifier is fetched from."""
        return f"{self._base_url}/{quote(file_name.lstrip('/'))}"

    async def __call__(self, file_name: str) -> str | None:
        url = self.url_for(file_name)
        log.debug(LogEventNames.REMOTE_FETCH, file_name=file_name, url=url)

        try:
            response = await self._fetch(url)
        except httpx.HTTPError as e:
            log.warning(
                LogEventNames.REMOTE_FETCH_FAILED,
                file_name=file_name,
                url=url,
                error=str(e),
            )
            raise SourceLoadError(f"Failed to fetch {url}: {e}", file_name=file_name) from e

        if response.status_code == httpx.codes.NOT_FOUND:
            return None

        if response.is_error:
            log.warning(
                LogEventNames.REMOTE_FETCH_FAILED,
                file_name=file_name,
                url=url,
                status_code=response.status_code,
            )
            raise SourceLoadError(
                f"Source server returned {response.status_code} for {url}",
                file_name=file_name,
            )

        return response.text

    async def _get(self, url: str) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, timeout=self._timeout)

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.get(url)
