"""Route resolution core for hooks routing.

Maps an api file, one of its exports and the export style (default or
named) to a canonical URL path, and keeps the table of resolved paths
used for duplicate detection. Directory conventions plug in through
``HooksRouter.describe``.
"""

import logging
import os
import posixpath
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path

from fastapi_hooks_routing.core.parser import parse_filename
from fastapi_hooks_routing.exceptions import DuplicateRouteError, UnroutableFileError

logger = logging.getLogger(__name__)

# Prefix for named exports under the underscore convention
METHOD_PREFIX = "_"

SCRIPT_SUFFIXES: frozenset[str] = frozenset({".py"})

_TEST_FILE_PATTERN = re.compile(r"^(test_.*|.*_test|conftest)$")
_FUNCTION_ID_SEPARATORS = re.compile(r"[^a-z0-9]+")

# (root, existing_file, new_file, canonical_path)
DuplicateRouteHandler = Callable[[str, str, str, str], None]


@dataclass(frozen=True)
class RouteConfig:
    """Route descriptor a convention produces for one api file.

    Attributes:
        base_dir: Directory under the source root that anchors the route.
        base_path: URL prefix for every route under base_dir.
        underscore: Prefix named exports with "_" in their path segment.
    """

    base_dir: str
    base_path: str
    underscore: bool = False


@dataclass(frozen=True)
class ResolvedRoute:
    """A canonical path and the file currently serving it."""

    canonical_path: str
    source_file: str


class RouteTable:
    """Canonical path -> ResolvedRoute mapping owned by one router."""

    def __init__(self) -> None:
        self._routes: dict[str, ResolvedRoute] = {}

    def get(self, canonical_path: str) -> ResolvedRoute | None:
        return self._routes.get(canonical_path)

    def upsert(self, canonical_path: str, source_file: str) -> ResolvedRoute:
        """Insert or overwrite the entry for canonical_path (last writer wins)."""
        resolved = ResolvedRoute(canonical_path=canonical_path, source_file=source_file)
        self._routes[canonical_path] = resolved
        return resolved

    def evict(self, source_file: str) -> list[str]:
        """Remove every entry served by source_file.

        Returns:
            The canonical paths that were freed.
        """
        freed = [path for path, route in self._routes.items() if route.source_file == source_file]
        for path in freed:
            del self._routes[path]
        return freed

    def reset(self) -> None:
        self._routes.clear()

    def snapshot(self) -> dict[str, ResolvedRoute]:
        return dict(self._routes)

    def restore(self, snapshot: dict[str, ResolvedRoute]) -> None:
        """Replace the table contents with an earlier snapshot()."""
        self._routes = dict(snapshot)

    def as_dict(self) -> dict[str, str]:
        return {path: route.source_file for path, route in self._routes.items()}

    def __contains__(self, canonical_path: object) -> bool:
        return canonical_path in self._routes

    def __iter__(self) -> Iterator[ResolvedRoute]:
        return iter(list(self._routes.values()))

    def __len__(self) -> int:
        return len(self._routes)


def log_duplicate_route(root: str, existing_file: str, new_file: str, canonical_path: str) -> None:
    """Default duplicate sink: log a warning naming both files."""
    logger.warning(
        "Duplicate routes detected. %s and %s both resolve to %s",
        _display_path(existing_file, root),
        _display_path(new_file, root),
        canonical_path,
        extra={
            "existing_file": existing_file,
            "new_file": new_file,
            "path": canonical_path,
        },
    )


def raise_on_duplicate_route(
    root: str, existing_file: str, new_file: str, canonical_path: str
) -> None:
    """Escalating duplicate sink: abort resolution on the first collision.

    Raises:
        DuplicateRouteError: Always.
    """
    raise DuplicateRouteError(
        f"Duplicate route {canonical_path}\n"
        f"  First: {_display_path(existing_file, root)}\n"
        f"  Second: {_display_path(new_file, root)}"
    )


def to_posix_path(path: str | Path) -> str:
    """Absolute, symlink-resolved POSIX form of a path."""
    return Path(path).resolve().as_posix()


def join_url(*parts: str) -> str:
    """Join URL parts with single slashes.

    Empty parts are dropped, repeated and trailing slashes collapse, and the
    result always starts with "/".

    Examples:
        join_url("/api", "", "todo", "_get") -> "/api/todo/_get"
        join_url("/", "", "") -> "/"
    """
    segments = [s for part in parts for s in part.split("/") if s and s != "."]
    return "/" + "/".join(segments)


class HooksRouter(ABC):
    """Base class for api routers.

    Subclasses implement ``describe`` to say which api files they route and
    with which RouteConfig. Resolution, duplicate detection and the route
    table are shared.

    Args:
        root: Project root, used for display paths in diagnostics.
        source: Api source directory, absolute or relative to root.
        on_duplicate_route: Sink called on every path collision.
        table: Route table to resolve into (a fresh one by default).
    """

    is_file_system = True

    def __init__(
        self,
        root: str | Path,
        source: str | Path,
        *,
        on_duplicate_route: DuplicateRouteHandler = log_duplicate_route,
        table: RouteTable | None = None,
    ) -> None:
        self.root = to_posix_path(root)
        self._source = to_posix_path(Path(self.root) / source)
        self.on_duplicate_route = on_duplicate_route
        self.table = table if table is not None else RouteTable()

    @property
    def source(self) -> str:
        """Absolute POSIX path of the api source directory."""
        return self._source

    def lambda_directory(self, base_dir: str) -> str:
        return posixpath.normpath(posixpath.join(self.source, base_dir))

    @abstractmethod
    def describe(self, file: str | Path) -> RouteConfig | None:
        """Return the RouteConfig for file, or None if it is not routable."""

    def is_routable_file(self, file: str | Path) -> bool:
        path = Path(file)
        if path.suffix not in SCRIPT_SUFFIXES:
            return False
        if _TEST_FILE_PATTERN.match(path.stem):
            return False
        # private helpers, __init__.py, _middleware.py
        if path.stem.startswith("_"):
            return False
        return self.describe(file) is not None

    def resolve_base_url(self, file: str | Path) -> str:
        """Group-level path of a file: its default-export path without wildcard."""
        url = self.resolve_http_path(file, "", True)
        if url == "/*":
            return "/"
        if url.endswith("/*"):
            return url[:-2]
        return url

    def resolve_http_path(self, file: str | Path, method: str, is_default_export: bool) -> str:
        """Resolve the canonical URL path of one export of an api file.

        Args:
            file: Path to the api file.
            method: Export name, used as the last segment of named exports.
            is_default_export: True for the file's default export, which maps
                to the bare file path.

        Returns:
            The canonical path, also recorded in the route table.

        Raises:
            UnroutableFileError: If the convention does not route file.

        Examples:
            apis/index.py (default) -> "/"
            apis/todo/index.py (named "get", underscore) -> "/todo/_get"
            apis/files/[...slug].py (default) -> "/files/slug/*"
        """
        config = self.describe(file)
        if config is None:
            raise UnroutableFileError(f"File is not routable: {file}")

        source_file = to_posix_path(file)
        lambda_directory = self.lambda_directory(config.base_dir)

        path = Path(source_file)
        parsed = parse_filename(path.stem)
        file_route = "" if parsed.route_segment == "index" else parsed.route_segment
        method_prefix = METHOD_PREFIX if config.underscore else ""
        func = "" if is_default_export else f"{method_prefix}{method}"

        canonical_path = join_url(
            config.base_path,
            posixpath.relpath(posixpath.dirname(source_file), lambda_directory),
            file_route,
            func,
            "*" if parsed.is_catch_all else "",
        )

        existing = self.table.get(canonical_path)
        if existing is not None and existing.source_file != source_file:
            self.on_duplicate_route(self.root, existing.source_file, source_file, canonical_path)
        self.table.upsert(canonical_path, source_file)

        return canonical_path

    def function_id(self, file: str | Path, function_name: str, is_default_export: bool) -> str:
        """Build a stable identifier for one export of an api file.

        Examples:
            apis/todo/index.py, default -> "todo-index"
            apis/todo/index.py, "get" -> "todo-index-get"
        """
        stem = posixpath.splitext(to_posix_path(file))[0]
        relative = posixpath.relpath(stem, self.source)
        base = _FUNCTION_ID_SEPARATORS.sub("-", relative.lower()).strip("-")
        if is_default_export:
            return base
        return f"{base}-{function_name}"

    def evict(self, file: str | Path) -> list[str]:
        """Drop every route served by file, e.g. after it was renamed or deleted."""
        return self.table.evict(to_posix_path(file))

    def reset(self) -> None:
        self.table.reset()

    def _is_inside(self, file: str | Path, directory: str) -> bool:
        """Check that file lies strictly inside directory."""
        child = Path(to_posix_path(file))
        parent = Path(directory)
        if child == parent:
            return False
        try:
            child.relative_to(parent)
            return True
        except ValueError:
            return False


def _display_path(path: str, root: str) -> str:
    try:
        return os.path.relpath(path, root)
    except ValueError:
        return path
