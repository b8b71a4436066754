"""Tests for frame classification."""

import pytest

from stacklens.config.schema import ClassifierConfig
from stacklens.core.classifier import (
    FrameClassifier,
    is_pseudo_file,
    normalize_file_name,
    to_unix_slash,
)
from stacklens.models.report import FileType, FrameType


class TestNormalizeFileName:
    """Tests for file identifier normalization."""

    def test_plain_path_unchanged(self) -> None:
        """Test that POSIX paths pass through."""
        assert normalize_file_name("/app/src/main.py") == "/app/src/main.py"

    def test_file_url(self) -> None:
        """Test that file URLs become filesystem paths."""
        assert normalize_file_name("file:///app/src/main.js") == "/app/src/main.js"

    def test_file_url_is_unquoted(self) -> None:
        """Test that percent-escapes in file URLs are decoded."""
        assert normalize_file_name("file:///app/my%20file.js") == "/app/my file.js"

    def test_windows_path(self) -> None:
        """Test that backslashes become forward slashes."""
        assert normalize_file_name("C:\\app\\main.py") == "C:/app/main.py"

    def test_extended_length_path_unchanged(self) -> None:
        """Test that extended-length Windows paths are left alone."""
        assert to_unix_slash("\\\\?\\C:\\app\\main.py") == "\\\\?\\C:\\app\\main.py"

    def test_http_url_unchanged(self) -> None:
        """Test that http URLs are not rewritten."""
        url = "http://localhost:3333/src/app.js?t=1"
        assert normalize_file_name(url) == url


class TestFrameType:
    """Tests for FrameClassifier.frame_type."""

    @pytest.mark.parametrize(
        ("file_name", "expected"),
        [
            ("/app/src/main.py", FrameType.APP),
            ("/app/venv/lib/python3.12/site-packages/httpx/_client.py", FrameType.MODULE),
            ("/usr/lib/python3/dist-packages/yaml/__init__.py", FrameType.MODULE),
            ("/app/node_modules/react-dom/index.js", FrameType.MODULE),
            ("http://localhost:3333/node_modules/.vite/deps/react.js", FrameType.MODULE),
            ("/usr/lib/python3.12/asyncio/events.py", FrameType.NATIVE),
            ("/usr/lib64/python3.11/json/decoder.py", FrameType.NATIVE),
            ("<frozen importlib._bootstrap>", FrameType.NATIVE),
            ("<string>", FrameType.NATIVE),
            ("node:internal/modules/cjs/loader", FrameType.NATIVE),
            ("ext:core/01_core.js", FrameType.NATIVE),
            ("native", FrameType.NATIVE),
            ("https://example.com/assets/app.js", FrameType.APP),
        ],
    )
    def test_default_markers(self, file_name: str, expected: FrameType) -> None:
        """Test classification with the default markers."""
        assert FrameClassifier().frame_type(file_name) == expected

    def test_custom_markers_from_config(self) -> None:
        """Test that configured markers replace the defaults."""
        classifier = FrameClassifier.from_config(
            ClassifierConfig(module_markers=["vendor/"], native_markers=["<runtime>"])
        )

        assert classifier.frame_type("/app/vendor/lib.py") == FrameType.MODULE
        assert classifier.frame_type("/app/venv/site-packages/x.py") == FrameType.APP
        assert classifier.frame_type("/app/<runtime>/boot.js") == FrameType.NATIVE

    def test_is_pseudo_file(self) -> None:
        """Test recognition of pseudo-file names."""
        assert is_pseudo_file("<stdin>")
        assert not is_pseudo_file("/app/<weird>/main.py")


class TestFileType:
    """Tests for FrameClassifier.file_type."""

    @pytest.mark.parametrize(
        ("file_name", "expected"),
        [
            ("/app/main.py", FileType.FS),
            ("C:/app/main.py", FileType.FS),
            ("http://localhost:3000/app.js", FileType.HTTP),
            ("https://example.com/app.js", FileType.HTTPS),
            ("node:internal/process", FileType.FS),
        ],
    )
    def test_file_type(self, file_name: str, expected: FileType) -> None:
        """Test detection of how a file is addressed."""
        assert FrameClassifier.file_type(file_name) == expected
