"""Trigger registration for hooks routing.

Turns ApiRoute drafts into BoundHandler dispatch records and binds them
to a FastAPI APIRouter.
"""

import json
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fastapi import APIRouter
from fastapi.routing import APIRoute

from fastapi_hooks_routing.core.api import HTTP_METHODS, ApiRoute
from fastapi_hooks_routing.core.context import request_context_runtime
from fastapi_hooks_routing.core.middleware import build_middleware_chain, use_hooks_middleware
from fastapi_hooks_routing.core.router import HooksRouter, to_posix_path
from fastapi_hooks_routing.exceptions import (
    InvalidMethodError,
    RouteValidationError,
    UnsupportedTriggerTypeError,
)

logger = logging.getLogger(__name__)

WILDCARD_SUFFIX = "/*"

# FastAPI path for the trailing wildcard of catch-all routes
FASTAPI_WILDCARD = "{path:path}"


@dataclass(frozen=True)
class BoundHandler:
    """A handler bound to an HTTP method and URL.

    Attributes:
        method: HTTP method, one of HTTP_METHODS.
        url: Canonical URL; catch-all routes end in "/*".
        handler: The handler function.
        middleware: Adapted (request, call_next) middleware, outermost first.
        function_id: Stable identifier of the export.
        file: Api file the handler was loaded from.
    """

    method: str
    url: str
    handler: Callable[..., Any]
    middleware: tuple[Callable[..., Any], ...]
    function_id: str
    file: Path | None = None

    @property
    def methods(self) -> list[str]:
        """Concrete HTTP methods, with ALL expanded."""
        if self.method == "ALL":
            return [m for m in HTTP_METHODS if m != "ALL"]
        return [self.method]


class DevRouteRegistry:
    """Record of bound HTTP routes for development tooling.

    Passed to the registrar and filled only in development mode.
    """

    def __init__(self) -> None:
        self._records: list[dict[str, str]] = []

    def record(self, bound: BoundHandler) -> None:
        self._records.append(
            {
                "type": "http",
                "path": bound.url,
                "method": bound.method,
                "functionId": bound.function_id,
                "handler": f"{bound.function_id}.handler",
            }
        )

    def routes(self) -> list[dict[str, str]]:
        return [dict(record) for record in self._records]

    def to_json(self) -> str:
        return json.dumps(self._records, indent=2)

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)


def normalize_url(router: HooksRouter, route: ApiRoute) -> str:
    """Compute the URL of an HTTP api route.

    File-system routers derive it from the file layout; other routers use
    the declared trigger path verbatim.

    Raises:
        RouteValidationError: If the route lacks the file or path it needs.
    """
    if router.is_file_system:
        if route.file is None:
            raise RouteValidationError(f"Api route {route.function_id} has no source file")
        return router.resolve_http_path(route.file, route.function_name, route.is_default_export)

    if route.trigger.path is None:
        raise RouteValidationError(f"Api route {route.function_id} has no declared path")
    return route.trigger.path


def to_fastapi_path(url: str) -> str:
    """Translate a canonical URL to FastAPI path syntax.

    Examples:
        "/todo/_get" -> "/todo/_get"
        "/files/slug/*" -> "/files/slug/{path:path}"
        "/*" -> "/{path:path}"
    """
    if url.endswith(WILDCARD_SUFFIX):
        return f"{url[: -len(WILDCARD_SUFFIX)]}/{FASTAPI_WILDCARD}"
    return url


class FastAPIRegistrar:
    """Registers api routes and binds them to FastAPI.

    Args:
        router: Active router, used to compute URLs.
        development: Record bound handlers in the dev registry.
        dev_registry: Registry to record into; created when development is
            on and none is given.
    """

    def __init__(
        self,
        router: HooksRouter,
        *,
        development: bool = False,
        dev_registry: DevRouteRegistry | None = None,
    ) -> None:
        self.router = router
        self.development = development
        if development and dev_registry is None:
            dev_registry = DevRouteRegistry()
        self.dev_registry = dev_registry
        self.handlers: list[BoundHandler] = []

    def register(self, routes: Sequence[ApiRoute]) -> list[BoundHandler]:
        """Create dispatch records for routes.

        Triggers are validated for the whole batch before any URL is
        resolved. If resolution fails partway, the route table is restored,
        so a failing call leaves the registrar, the route table and the dev
        registry as they were.

        Returns:
            The handlers bound by this call.

        Raises:
            UnsupportedTriggerTypeError: If a route's trigger is not HTTP.
            InvalidMethodError: If an HTTP trigger has an unknown method.
            RouteValidationError: If a route lacks the file or path it needs.
            UnroutableFileError: If the router does not route a route's file.
            DuplicateRouteError: If the duplicate sink escalates a collision.
        """
        for route in routes:
            if not route.trigger.is_http:
                raise UnsupportedTriggerTypeError(f"Unsupported trigger type: {route.trigger.type}")
            _validate_method(route)

        snapshot = self.router.table.snapshot()
        try:
            bound = [self.create_http_api(route) for route in routes]
        except Exception:
            self.router.table.restore(snapshot)
            raise

        self.handlers.extend(bound)
        if self.development and self.dev_registry is not None:
            for handler in bound:
                self.dev_registry.record(handler)
        return bound

    def create_http_api(self, route: ApiRoute) -> BoundHandler:
        """Resolve the URL of one HTTP route and build its dispatch record."""
        _validate_method(route)
        url = normalize_url(self.router, route)

        bound = BoundHandler(
            method=route.trigger.method or "",
            url=url,
            handler=route.fn,
            middleware=tuple(use_hooks_middleware(mw) for mw in route.middleware),
            function_id=route.function_id,
            file=route.file,
        )

        logger.debug(
            "Created http api",
            extra={"method": bound.method, "path": url, "function_id": route.function_id},
        )

        return bound

    def bind(
        self,
        api_router: APIRouter,
        *,
        middleware: Sequence[Callable[..., Any]] = (),
    ) -> APIRouter:
        """Add every registered handler to api_router.

        Each endpoint runs inside: request context, then global middleware,
        then its own middleware. Catch-all routes are added after the
        others so specific paths win. Under a file-system router a handler
        is skipped when the route table assigns its URL to another file,
        so the last file resolved to a path is the one served.

        Args:
            api_router: Router to add routes to.
            middleware: Global middleware applied to every route.

        Returns:
            api_router, for chaining.
        """
        global_middleware = tuple(use_hooks_middleware(mw) for mw in middleware)

        # Stable sort keeps load order within each group
        ordered = sorted(self.handlers, key=lambda h: h.url.endswith(WILDCARD_SUFFIX))

        for bound in ordered:
            owner = self._shadowed_by(bound)
            if owner is not None:
                logger.debug(
                    "Skipped shadowed route",
                    extra={"method": bound.method, "path": bound.url, "owner": owner},
                )
                continue

            stack = (request_context_runtime, *global_middleware, *bound.middleware)
            api_router.add_api_route(
                path=to_fastapi_path(bound.url),
                endpoint=bound.handler,
                methods=bound.methods,
                name=bound.function_id,
                description=bound.handler.__doc__,
                route_class_override=_make_middleware_route(stack),
            )

            logger.debug(
                "Bound route",
                extra={
                    "method": bound.method,
                    "path": bound.url,
                    "middleware_count": len(stack) - 1,
                },
            )

        return api_router

    def _shadowed_by(self, bound: BoundHandler) -> str | None:
        """Return the file owning bound.url when it is not bound.file."""
        if not self.router.is_file_system or bound.file is None:
            return None
        resolved = self.router.table.get(bound.url)
        if resolved is None or resolved.source_file == to_posix_path(bound.file):
            return None
        return resolved.source_file


def _validate_method(route: ApiRoute) -> None:
    if route.trigger.method not in HTTP_METHODS:
        raise InvalidMethodError(
            f"Invalid trigger.method {route.trigger.method!r} for {route.function_id}, "
            f"expected one of: {', '.join(sorted(HTTP_METHODS))}"
        )


def _make_middleware_route(
    middleware_stack: Sequence[Callable[..., Any]],
) -> type[APIRoute]:
    """Create a custom APIRoute subclass that wraps handlers with middleware.

    The chain wraps the handler returned by get_route_handler(), so each
    middleware receives the Starlette Request and call_next runs FastAPI's
    parameter resolution and the endpoint.

    Args:
        middleware_stack: Ordered sequence of middleware (outermost first).

    Returns:
        A subclass of APIRoute with middleware wrapping.
    """

    class MiddlewareRoute(APIRoute):
        def get_route_handler(self) -> Callable[..., Any]:
            original_handler = super().get_route_handler()
            return build_middleware_chain(original_handler, middleware_stack)

    return MiddlewareRoute
