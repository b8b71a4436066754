"""Tests for source loaders."""

from pathlib import Path

import httpx
import pytest

from stacklens.core.loaders import HttpSourceLoader, filesystem_source_loader
from stacklens.utils.async_helpers import SourceLoadError


def make_loader(handler, **kwargs) -> HttpSourceLoader:
    """Create an HttpSourceLoader backed by a mock transport."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpSourceLoader(
        "http://sources.test/files/", client=client, min_wait=0, max_wait=0, **kwargs
    )


class TestFilesystemSourceLoader:
    """Tests for filesystem_source_loader function."""

    async def test_reads_file(self, tmp_path: Path) -> None:
        """Test reading an existing file."""
        path = tmp_path / "app.py"
        path.write_text("print('hi')\n", encoding="utf-8")

        assert await filesystem_source_loader(str(path)) == "print('hi')\n"

    async def test_invalid_utf8_is_replaced(self, tmp_path: Path) -> None:
        """Test that undecodable bytes do not fail the load."""
        path = tmp_path / "latin1.py"
        path.write_bytes(b"name = '\xe9'\n")

        contents = await filesystem_source_loader(str(path))

        assert contents is not None
        assert contents.startswith("name = '")

    async def test_missing_file_raises(self, tmp_path: Path) -> None:
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            await filesystem_source_loader(str(tmp_path / "missing.py"))

    async def test_nul_in_path_raises_source_load_error(self) -> None:
        """Test that a path with a NUL character is reported as unavailable."""
        with pytest.raises(SourceLoadError) as exc_info:
            await filesystem_source_loader("/tmp/a\x00b.js")
        assert exc_info.value.file_name == "/tmp/a\x00b.js"


class TestHttpSourceLoader:
    """Tests for HttpSourceLoader class."""

    def test_url_for(self) -> None:
        """Test building source URLs from file paths."""
        loader = HttpSourceLoader("http://sources.test/files/")
        assert loader.base_url == "http://sources.test/files"
        assert loader.url_for("/srv/app/main.py") == "http://sources.test/files/srv/app/main.py"
        assert loader.url_for("/srv/my app.py") == "http://sources.test/files/srv/my%20app.py"

    async def test_fetches_source(self) -> None:
        """Test a successful fetch."""
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, text="def main():\n    pass\n")

        loader = make_loader(handler)

        assert await loader("/srv/app/main.py") == "def main():\n    pass\n"
        assert requested == ["http://sources.test/files/srv/app/main.py"]

    async def test_not_found_returns_none(self) -> None:
        """Test that a 404 response means no source."""
        loader = make_loader(lambda request: httpx.Response(404))
        assert await loader("/srv/app/missing.py") is None

    async def test_server_error_raises(self) -> None:
        """Test that error responses raise SourceLoadError."""
        loader = make_loader(lambda request: httpx.Response(500))

        with pytest.raises(SourceLoadError, match="500") as exc_info:
            await loader("/srv/app/main.py")
        assert exc_info.value.file_name == "/srv/app/main.py"

    async def test_retries_network_errors(self) -> None:
        """Test that transient network errors are retried."""
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            if calls == 1:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, text="x = 1\n")

        loader = make_loader(handler, max_attempts=3)

        assert await loader("/srv/app/main.py") == "x = 1\n"
        assert calls == 2

    async def test_gives_up_after_max_attempts(self) -> None:
        """Test that persistent network errors raise SourceLoadError."""
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            raise httpx.ConnectError("connection refused", request=request)

        loader = make_loader(handler, max_attempts=2)

        with pytest.raises(SourceLoadError, match="connection refused"):
            await loader("/srv/app/main.py")
        assert calls == 2
