"""Per-request context for hooks routing.

Api handlers and hooks-style middleware read the current request with
``use_context()`` instead of taking it as a parameter, and shape the
response with ``set_status``, ``set_header``, ``set_content_type`` and
``redirect``. The collected metadata is applied to the response once the
handler returns.
"""

from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

from fastapi_hooks_routing.exceptions import ContextError

_request_context: ContextVar[Any] = ContextVar("hooks_request_context")
_response_metadata: ContextVar["ResponseMetadata"] = ContextVar("hooks_response_metadata")


@dataclass
class ResponseMetadata:
    """Response changes requested by the handler of the current request.

    Attributes:
        status_code: Status code to send, or None to keep the response's.
        headers: Headers to set, in insertion order.
        content_type: Content-Type to set.
        location: Redirect target, sent as the Location header.
    """

    status_code: int | None = None
    headers: dict[str, str] = field(default_factory=dict)
    content_type: str | None = None
    location: str | None = None

    def __bool__(self) -> bool:
        return bool(
            self.status_code is not None
            or self.headers
            or self.content_type is not None
            or self.location is not None
        )

    def apply(self, response: Any) -> Any:
        if self.status_code is not None:
            response.status_code = self.status_code
        for key, value in self.headers.items():
            response.headers[key] = value
        if self.content_type is not None:
            response.headers["content-type"] = self.content_type
        if self.location is not None:
            response.headers["location"] = self.location
        return response


def use_context() -> Any:
    """Return the request being handled.

    Raises:
        ContextError: If called outside of a request.
    """
    try:
        return _request_context.get()
    except LookupError:
        raise ContextError(
            "use_context() called outside of a request. "
            "Handlers must be registered through create_router_from_source()."
        ) from None


def _metadata(helper: str) -> ResponseMetadata:
    try:
        return _response_metadata.get()
    except LookupError:
        raise ContextError(f"{helper}() called outside of a request.") from None


def set_status(code: int) -> None:
    """Send the response with this status code."""
    _metadata("set_status").status_code = code


def set_header(key: str, value: str) -> None:
    _metadata("set_header").headers[key] = value


def set_content_type(content_type: str) -> None:
    _metadata("set_content_type").content_type = content_type


def redirect(url: str, code: int = 302) -> None:
    """Redirect the client to url once the handler returns.

    Example:
        async def default():
            redirect("/login")
    """
    metadata = _metadata("redirect")
    metadata.status_code = code
    metadata.location = url


async def request_context_runtime(request: Any, call_next: Any) -> Any:
    """Outermost middleware of every api route.

    Binds request to the context for the duration of the call and applies
    the response metadata the handler set.
    """
    metadata = ResponseMetadata()
    request_token = _request_context.set(request)
    metadata_token = _response_metadata.set(metadata)
    try:
        response = await call_next(request)
    finally:
        _response_metadata.reset(metadata_token)
        _request_context.reset(request_token)

    if metadata:
        return metadata.apply(response)
    return response
