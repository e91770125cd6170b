"""Router factory for hooks routing.

Composes loader, router and registrar to create a complete FastAPI
router from a directory of api files.
"""

import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from fastapi import APIRouter

from fastapi_hooks_routing.config import is_development
from fastapi_hooks_routing.core.conventions import ApisRouter
from fastapi_hooks_routing.core.loader import load_api_modules
from fastapi_hooks_routing.core.middleware import normalize_middleware
from fastapi_hooks_routing.core.router import HooksRouter
from fastapi_hooks_routing.exceptions import MiddlewareValidationError, RouteValidationError
from fastapi_hooks_routing.fastapi.registrar import DevRouteRegistry, FastAPIRegistrar

logger = logging.getLogger(__name__)


def create_router_from_source(
    source: str | Path,
    *,
    router: HooksRouter | None = None,
    prefix: str = "",
    middleware: Callable[..., Any] | Sequence[Callable[..., Any]] | None = None,
    development: bool | None = None,
    dev_registry: DevRouteRegistry | None = None,
) -> APIRouter:
    """Create a FastAPI APIRouter from a directory of api files.

    Scans source for api files, imports their exported handlers, resolves
    each one to a URL and registers it on a FastAPI APIRouter.

    Args:
        source: Api source directory.
        router: Active router; an ApisRouter over source by default.
        prefix: Optional URL prefix for all routes.
        middleware: Global middleware applied to every api route.
        development: Record routes in dev_registry; defaults to HOOKS_ENV.
        dev_registry: Development route registry to fill.

    Returns:
        A FastAPI APIRouter with all discovered api routes registered.

    Raises:
        RouteDiscoveryError: If source doesn't exist or isn't a directory.
        RouteValidationError: If an api file fails to import or is invalid.
        MiddlewareValidationError: If middleware is not a list or callable.
        UnsupportedTriggerTypeError: If an api declares a non-HTTP trigger.
        InvalidMethodError: If an api declares an unknown HTTP method.

    Example:
        from fastapi import FastAPI
        from fastapi_hooks_routing import create_router_from_source

        app = FastAPI()
        app.include_router(create_router_from_source("src/apis"))
    """
    try:
        global_middleware = normalize_middleware(middleware, source="global middleware")
    except RouteValidationError as exc:
        raise MiddlewareValidationError(str(exc)) from exc

    base = Path(source).resolve()
    if router is None:
        router = ApisRouter(root=Path.cwd(), source=base)
    if development is None:
        development = is_development()

    apis = load_api_modules(base, router)

    registrar = FastAPIRegistrar(router, development=development, dev_registry=dev_registry)
    registrar.register(apis)

    api_router = registrar.bind(APIRouter(prefix=prefix), middleware=global_middleware)

    logger.info(
        "Route registration complete",
        extra={
            "route_count": len(registrar.handlers),
            "prefix": prefix or "(none)",
            "development": development,
        },
    )

    return api_router
