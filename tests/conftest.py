"""Shared pytest fixtures for fastapi-hooks-routing tests."""

from pathlib import Path
from typing import Any

import pytest


@pytest.fixture
def api_source(tmp_path: Path) -> Path:
    """Return the api source directory (tmp_path/src/apis), created empty."""
    source = tmp_path / "src" / "apis"
    source.mkdir(parents=True)
    return source


@pytest.fixture
def create_api_file(api_source: Path):
    """Create an api file under the api source directory.

    Returns a callable that accepts:
    - relative: File path relative to the source (e.g., "todo/index.py")
    - content: Python code as string

    Returns the Path to the created file.
    """

    def _create(relative: str, content: str = "") -> Path:
        api_file = api_source / relative
        api_file.parent.mkdir(parents=True, exist_ok=True)
        api_file.write_text(content)
        return api_file

    return _create


@pytest.fixture
def create_api_tree(api_source: Path, create_api_file):
    """Create several api files from a dict of relative path -> content.

    Example:
        {
            "index.py": "def default(): return {'home': True}",
            "todo/index.py": "def get(): return []",
        }

    Returns the api source directory.
    """

    def _create(tree: dict[str, Any]) -> Path:
        for relative, content in tree.items():
            if not isinstance(content, str):
                msg = f"Invalid tree value type: {type(content)}"
                raise TypeError(msg)
            create_api_file(relative, content)
        return api_source

    return _create


@pytest.fixture
def duplicate_calls() -> list[tuple[str, str, str, str]]:
    """Collects calls made to a recording duplicate-route sink."""
    return []


@pytest.fixture
def record_duplicate(duplicate_calls):
    """Duplicate-route sink that records its arguments."""

    def _record(root: str, existing_file: str, new_file: str, canonical_path: str) -> None:
        duplicate_calls.append((root, existing_file, new_file, canonical_path))

    return _record


@pytest.fixture
def posix():
    """Resolve a path the way routers store it."""

    def _posix(path: Path) -> str:
        return path.resolve().as_posix()

    return _posix
