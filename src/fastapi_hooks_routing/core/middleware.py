"""Middleware primitives for hooks routing.

Normalizes middleware declarations, adapts hooks-style ``(next)``
middleware to the ``(request, call_next)`` convention and assembles
middleware chains. Zero framework dependencies.
"""

import inspect
from collections.abc import Callable, Sequence
from typing import Any

from fastapi_hooks_routing.exceptions import RouteValidationError


def normalize_middleware(
    middleware_attr: Any,
    *,
    source: str = "",
) -> tuple[Callable[..., Any], ...]:
    """Normalize a middleware attribute to a tuple of callables.

    Accepts: None, single callable, list, or tuple.
    Returns: tuple of callables (empty if None).

    Args:
        middleware_attr: The middleware value to normalize.
        source: Context for error messages (e.g., "class get(api)").

    Raises:
        RouteValidationError: If middleware_attr is not a valid type or
            contains a non-callable.
    """
    if middleware_attr is None:
        return ()
    if callable(middleware_attr) and not isinstance(middleware_attr, (list, tuple)):
        return (middleware_attr,)
    if isinstance(middleware_attr, (list, tuple)):
        for i, mw in enumerate(middleware_attr):
            if not callable(mw):
                raise RouteValidationError(
                    f"{source + ': ' if source else ''}non-callable middleware at index {i}"
                )
        return tuple(middleware_attr)
    raise RouteValidationError(
        f"{source + ': ' if source else ''}middleware must be a list or callable, "
        f"got {type(middleware_attr).__name__}"
    )


def is_hooks_middleware(fn: Callable[..., Any]) -> bool:
    """Check whether fn is hooks-style middleware taking only ``next``.

    Hooks middleware reads the request through ``use_context()``:

        async def log_time(next):
            start = time.monotonic()
            response = await next()
            logger.info("%s took %.3fs", use_context().url.path, time.monotonic() - start)
            return response
    """
    try:
        parameters = list(inspect.signature(fn).parameters.values())
    except (TypeError, ValueError):
        return False
    return len(parameters) == 1 and parameters[0].kind in (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    )


def use_hooks_middleware(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Adapt hooks-style middleware to ``(request, call_next)``.

    Middleware already written as ``(request, call_next)`` is returned
    unchanged.
    """
    if not is_hooks_middleware(fn):
        return fn

    async def adapted(request: Any, call_next: Any) -> Any:
        async def next_() -> Any:
            return await call_next(request)

        return await fn(next_)

    adapted.__name__ = getattr(fn, "__name__", "hooks_middleware")
    adapted.__qualname__ = adapted.__name__
    return adapted


def build_middleware_chain(
    handler: Callable[..., Any],
    middleware_stack: Sequence[Callable[..., Any]],
) -> Callable[..., Any]:
    """Wrap a handler function with a middleware chain.

    Composes middleware in order so that the first middleware in the list
    is the outermost (executes first). Each middleware receives (request, call_next)
    where call_next invokes the next middleware or handler.

    Args:
        handler: The route handler function.
        middleware_stack: Ordered sequence of middleware (outermost first).

    Returns:
        A wrapped handler function that executes the middleware chain.
        If middleware_stack is empty, returns the handler unchanged.
    """
    if not middleware_stack:
        return handler

    chain = handler
    for mw in reversed(middleware_stack):
        chain = _wrap_with_middleware(chain, mw)
    return chain


async def _noop_app(scope: Any, receive: Any, send: Any) -> None:
    """Placeholder ASGI app for class-based middleware adaptation."""


def dispatch(cls: type, **kwargs: Any) -> Callable[..., Any]:
    """Adapt a class-based middleware for use as api middleware.

    Lazily instantiates the class on first request and delegates to its
    dispatch method. The class must accept ``app`` as its first constructor
    argument and expose an async ``dispatch(request, call_next)`` method.

    Args:
        cls: Middleware class (e.g. a BaseHTTPMiddleware subclass).
        **kwargs: Arguments forwarded to ``cls.__init__`` (after app).

    Returns:
        An async middleware function compatible with the middleware pipeline.
    """
    instance: object | None = None

    async def middleware(request: Any, call_next: Any) -> Any:
        nonlocal instance
        if instance is None:
            instance = cls(app=_noop_app, **kwargs)
        return await instance.dispatch(request, call_next)  # type: ignore[attr-defined]

    middleware.__name__ = f"dispatch({cls.__name__})"
    middleware.__qualname__ = middleware.__name__
    return middleware


def _wrap_with_middleware(
    next_handler: Callable[..., Any],
    middleware: Callable[..., Any],
) -> Callable[..., Any]:
    """Wrap a handler with a single middleware function.

    Args:
        next_handler: The next function in the chain (middleware or handler).
        middleware: The middleware function with signature (request, call_next).

    Returns:
        A new async function that calls middleware(request, call_next).
    """

    async def wrapped(request: Any) -> Any:
        async def call_next(req: Any) -> Any:
            return await next_handler(req)

        return await middleware(request, call_next)

    wrapped.__name__ = (
        f"{getattr(middleware, '__name__', 'middleware')}"
        f"_wrapping_{getattr(next_handler, '__name__', 'handler')}"
    )
    wrapped.__qualname__ = wrapped.__name__

    return wrapped
