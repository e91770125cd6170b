"""Directory conventions for hooks routing.

Each router decides which api files it routes and under which
RouteConfig. Everything else (resolution, duplicate detection) lives on
HooksRouter.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fastapi_hooks_routing.core.router import (
    DuplicateRouteHandler,
    HooksRouter,
    RouteConfig,
    RouteTable,
    log_duplicate_route,
)


@dataclass(frozen=True)
class RouteSpec:
    """One (base_dir, base_path) rule of a nested convention.

    Attributes:
        base_dir: Directory under the source root, e.g. "lambda".
        base_path: URL prefix for files under base_dir, e.g. "/api".
        underscore: Per-rule override of the router's underscore flag.
    """

    base_dir: str
    base_path: str
    underscore: bool | None = None

    @classmethod
    def from_value(cls, value: "RouteSpec | Mapping[str, Any]") -> "RouteSpec":
        """Accept a RouteSpec or a mapping with base_dir/base_path keys."""
        if isinstance(value, RouteSpec):
            return value
        return cls(
            base_dir=value.get("base_dir", ""),
            base_path=value.get("base_path", "/"),
            underscore=value.get("underscore"),
        )


class FileSystemRouter(HooksRouter):
    """Nested convention: several base directories, each with its own prefix.

    A file belongs to the rule whose directory strictly contains it; with
    nested rules the deepest directory wins.

    Example:
        router = FileSystemRouter(
            root=".",
            source="src/apis",
            routes=[RouteSpec("lambda", "/api"), RouteSpec("render", "/")],
        )
        router.resolve_http_path("src/apis/lambda/todo.py", "", True)  # "/api/todo"
    """

    def __init__(
        self,
        root: str | Path,
        source: str | Path,
        routes: Sequence[RouteSpec | Mapping[str, Any]],
        *,
        underscore: bool = False,
        on_duplicate_route: DuplicateRouteHandler = log_duplicate_route,
        table: RouteTable | None = None,
    ) -> None:
        super().__init__(root, source, on_duplicate_route=on_duplicate_route, table=table)
        self.underscore = underscore
        self.routes = tuple(RouteSpec.from_value(route) for route in routes)
        # Deepest directories first so nested rules shadow their parents
        self._ordered_routes = sorted(
            self.routes,
            key=lambda r: len(Path(self.lambda_directory(r.base_dir)).parts),
            reverse=True,
        )

    def route_spec(self, file: str | Path) -> RouteSpec | None:
        for route in self._ordered_routes:
            if self._is_inside(file, self.lambda_directory(route.base_dir)):
                return route
        return None

    def describe(self, file: str | Path) -> RouteConfig | None:
        route = self.route_spec(file)
        if route is None:
            return None

        underscore = self.underscore if route.underscore is None else route.underscore
        return RouteConfig(
            base_dir=route.base_dir,
            base_path=route.base_path,
            underscore=underscore,
        )


class ApisRouter(FileSystemRouter):
    """Flat convention: every file under the source directory is an api file."""

    def __init__(
        self,
        root: str | Path,
        source: str | Path = "src/apis",
        *,
        base_path: str = "/",
        underscore: bool = False,
        on_duplicate_route: DuplicateRouteHandler = log_duplicate_route,
        table: RouteTable | None = None,
    ) -> None:
        super().__init__(
            root,
            source,
            [RouteSpec(base_dir="", base_path=base_path)],
            underscore=underscore,
            on_duplicate_route=on_duplicate_route,
            table=table,
        )


class LambdaRouter(FileSystemRouter):
    """Legacy nested convention: src/apis/lambda served under /api.

    Named exports get the "_" prefix, so ``def get_list()`` in
    ``lambda/todo.py`` answers on ``/api/todo/_get_list``.
    """

    DEFAULT_ROUTES = (RouteSpec(base_dir="lambda", base_path="/api"),)

    def __init__(
        self,
        root: str | Path,
        source: str | Path = "src/apis",
        *,
        routes: Sequence[RouteSpec | Mapping[str, Any]] | None = None,
        on_duplicate_route: DuplicateRouteHandler = log_duplicate_route,
        table: RouteTable | None = None,
    ) -> None:
        super().__init__(
            root,
            source,
            routes if routes is not None else self.DEFAULT_ROUTES,
            underscore=True,
            on_duplicate_route=on_duplicate_route,
            table=table,
        )


class DeclaredRouter(HooksRouter):
    """Router for apis that declare their own path.

    Files under the source directory are still discovered and loaded, but
    URLs come from each export's declared trigger path instead of the file
    layout.
    """

    is_file_system = False

    def describe(self, file: str | Path) -> RouteConfig | None:
        if not self._is_inside(file, self.source):
            return None
        return RouteConfig(base_dir="", base_path="/", underscore=False)
