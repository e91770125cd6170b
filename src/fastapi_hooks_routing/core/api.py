"""Api declarations for hooks routing.

Provides Trigger, ApiConfig and the ``api`` metaclass for handlers that
declare their trigger or middleware, plus the ApiRoute draft the loader
produces for every exported handler.
"""

import inspect
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fastapi_hooks_routing.core.middleware import normalize_middleware
from fastapi_hooks_routing.exceptions import RouteValidationError

HTTP_TRIGGER = "HTTP"

HTTP_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS", "ALL")


@dataclass(frozen=True)
class Trigger:
    """What invokes an api function.

    Only the HTTP variant is dispatchable; other types are rejected at
    registration.

    Attributes:
        type: Trigger tag, e.g. "HTTP".
        method: HTTP method (upper-case), None until inferred.
        path: Declared URL path, used only by non file-system routers.
    """

    type: str
    method: str | None = None
    path: str | None = None

    @classmethod
    def http(cls, method: str | None = None, path: str | None = None) -> "Trigger":
        return cls(type=HTTP_TRIGGER, method=method.upper() if method else None, path=path)

    @property
    def is_http(self) -> bool:
        return self.type == HTTP_TRIGGER


@dataclass(frozen=True)
class ApiConfig:
    """A handler with a declared trigger and middleware.

    Created by the _ApiMeta metaclass when a class inherits from api.
    Callable, delegating to the wrapped handler function.

    Attributes:
        handler: The actual handler function (async def or def).
        trigger: Declared trigger, or None to infer an HTTP trigger.
        middleware: Sequence of middleware callables.
    """

    handler: Callable[..., Any]
    trigger: Trigger | None = None
    middleware: Sequence[Callable[..., Any]] = ()

    def __post_init__(self) -> None:
        """Preserve handler metadata for FastAPI introspection."""
        object.__setattr__(self, "__wrapped__", self.handler)
        object.__setattr__(self, "__name__", getattr(self.handler, "__name__", "handler"))
        object.__setattr__(self, "__doc__", getattr(self.handler, "__doc__", None))
        object.__setattr__(self, "__module__", getattr(self.handler, "__module__", __name__))

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        """Delegate to the wrapped handler."""
        return self.handler(*args, **kwargs)


class _ApiMeta(type):
    """Metaclass that turns ``class name(api): ...`` into an ApiConfig.

    Reads ``handler``, ``middleware`` and either ``trigger`` or
    ``method``/``path`` from the class body.
    """

    def __new__(
        mcs,
        name: str,
        bases: tuple[type, ...],
        namespace: dict[str, Any],
    ) -> Any:
        if not bases:
            return super().__new__(mcs, name, bases, namespace)

        handler = namespace.get("handler")
        if handler is None:
            raise RouteValidationError(f"class {name}(api) must define a handler(...) function")
        if not callable(handler):
            raise RouteValidationError(
                f"class {name}(api): handler must be a callable, got {type(handler).__name__}"
            )

        middleware = normalize_middleware(namespace.get("middleware"), source=f"class {name}(api)")

        trigger = namespace.get("trigger")
        if trigger is not None and not isinstance(trigger, Trigger):
            raise RouteValidationError(
                f"class {name}(api): trigger must be a Trigger, got {type(trigger).__name__}"
            )
        method = namespace.get("method")
        path = namespace.get("path")
        if trigger is None and (method is not None or path is not None):
            trigger = Trigger.http(method, path)

        return ApiConfig(handler=handler, trigger=trigger, middleware=middleware)


class api(metaclass=_ApiMeta):  # noqa: N801
    """Base class for handlers that declare a trigger or middleware.

    Example:
        from fastapi_hooks_routing import api

        class archive(api):
            method = "PATCH"
            middleware = [require_user]

            async def handler(todo_id: int) -> dict:
                return {"archived": todo_id}

        # `archive` is now an ApiConfig; under the underscore convention
        # it answers PATCH .../_archive
    """


@dataclass
class ApiRoute:
    """One exported handler of an api file, ready for registration.

    Attributes:
        function_id: Stable identifier of the export.
        fn: Handler callable.
        trigger: How the handler is invoked.
        middleware: File-level then handler-level middleware.
        file: Path to the api file.
        function_name: Export name ("default" for the default export).
        is_default_export: True for the file's default export.
    """

    function_id: str
    fn: Callable[..., Any]
    trigger: Trigger
    middleware: tuple[Callable[..., Any], ...] = ()
    file: Path | None = None
    function_name: str = ""
    is_default_export: bool = False


def infer_http_method(name: str, fn: Callable[..., Any]) -> str:
    """Pick the HTTP method of a plain exported handler.

    Verb-named exports use their name; otherwise handlers without
    parameters are GET and handlers with parameters are POST.

    Examples:
        "get" -> "GET", "delete" -> "DELETE"
        "list_todos" with no parameters -> "GET"
        "create_todo(title)" -> "POST"
    """
    if name.upper() in HTTP_METHODS:
        return name.upper()

    try:
        parameters = inspect.signature(fn).parameters
    except (TypeError, ValueError):
        return "POST"
    return "GET" if not parameters else "POST"
