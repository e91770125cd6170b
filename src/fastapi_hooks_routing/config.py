"""Project configuration for hooks routing.

Configuration is passed in by the embedding application; this module only
turns it into the matching router.
"""

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fastapi_hooks_routing.core.conventions import ApisRouter, FileSystemRouter, RouteSpec
from fastapi_hooks_routing.core.router import (
    DuplicateRouteHandler,
    HooksRouter,
    log_duplicate_route,
)

# Environment variable selecting the runtime mode
ENV_VAR = "HOOKS_ENV"
DEVELOPMENT = "development"


def is_development() -> bool:
    """Check whether HOOKS_ENV selects development mode."""
    return os.environ.get(ENV_VAR, "").strip().lower() == DEVELOPMENT


@dataclass(frozen=True)
class ProjectConfig:
    """Api project settings.

    Attributes:
        source: Api source directory, relative to the project root.
        routes: Route rules; a single rule with an empty base_dir is the flat
            convention.
        underscore: Prefix named exports with "_".
        dev: Force development mode regardless of HOOKS_ENV.
    """

    source: str = "src/apis"
    routes: Sequence[RouteSpec | Mapping[str, Any]] = (RouteSpec(base_dir="", base_path="/"),)
    underscore: bool = False
    dev: bool = False

    @property
    def development(self) -> bool:
        return self.dev or is_development()


def get_router(
    config: ProjectConfig,
    root: str | Path = ".",
    *,
    on_duplicate_route: DuplicateRouteHandler = log_duplicate_route,
) -> HooksRouter:
    """Build the router described by config.

    Examples:
        get_router(ProjectConfig())  # ApisRouter over src/apis
        get_router(ProjectConfig(routes=[{"base_dir": "lambda", "base_path": "/api"}]))
    """
    specs = [RouteSpec.from_value(route) for route in config.routes]

    if len(specs) == 1 and specs[0].base_dir in ("", "."):
        spec = specs[0]
        return ApisRouter(
            root,
            config.source,
            base_path=spec.base_path,
            underscore=config.underscore if spec.underscore is None else spec.underscore,
            on_duplicate_route=on_duplicate_route,
        )

    return FileSystemRouter(
        root,
        config.source,
        specs,
        underscore=config.underscore,
        on_duplicate_route=on_duplicate_route,
    )
