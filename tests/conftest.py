"""Shared test fixtures for stacklens."""

from pathlib import Path
from typing import Any

import pytest

# boom() raises on line 5, outer() calls it on line 9
BOOM_MODULE = '''"""Module used to raise errors from a known location."""


def boom():
    raise ValueError("boom")


def outer():
    return boom()
'''

# Browser stack trace with application and dependency frames
BROWSER_STACK = """ReferenceError: hello is not defined
    at Home (http://localhost:3333/inertia/pages/home.tsx?t=1729422957400:25:5)
    at renderWithHooks (http://localhost:3333/node_modules/.vite/deps/react-dom_client.js?v=251581c7:11548:26)
    at mountIndeterminateComponent (http://localhost:3333/node_modules/.vite/deps/react-dom_client.js?v=251581c7:14926:21)
    at beginWork (http://localhost:3333/node_modules/.vite/deps/react-dom_client.js?v=251581c7:15914:22)"""  # noqa: E501


def load_module(path: Path) -> dict[str, Any]:
    """Execute a Python file and return its namespace.

    Code objects keep the real file path, so tracebacks point at ``path``.
    """
    namespace: dict[str, Any] = {}
    exec(compile(path.read_text(), str(path), "exec"), namespace)  # noqa: S102
    return namespace


@pytest.fixture
def boom_module(tmp_path: Path) -> Path:
    """Write the boom module to a temporary directory."""
    path = tmp_path / "boom.py"
    path.write_text(BOOM_MODULE)
    return path


@pytest.fixture
def boom_error(boom_module: Path) -> ValueError:
    """Return a ValueError raised from the boom module (with traceback)."""
    namespace = load_module(boom_module)
    try:
        namespace["outer"]()
    except ValueError as exc:
        return exc
    raise AssertionError("outer() did not raise")


@pytest.fixture
def numbered_text() -> str:
    """Return 28 lines of text ("line 1" to "line 28") without a trailing newline."""
    return "\n".join(f"line {n}" for n in range(1, 29))


@pytest.fixture
def browser_error() -> dict[str, str]:
    """Return an error record as reported by a browser."""
    return {"name": "ReferenceError", "message": "hello is not defined", "stack": BROWSER_STACK}
