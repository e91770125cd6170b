"""FastAPI hooks routing: api files and their exports are the route declaration."""

# Configuration
from fastapi_hooks_routing.config import ProjectConfig, get_router, is_development

# Api declarations and request context
from fastapi_hooks_routing.core.api import ApiConfig, ApiRoute, Trigger, api
from fastapi_hooks_routing.core.context import (
    redirect,
    set_content_type,
    set_header,
    set_status,
    use_context,
)

# Routers: one per directory convention
from fastapi_hooks_routing.core.conventions import (
    ApisRouter,
    DeclaredRouter,
    FileSystemRouter,
    LambdaRouter,
    RouteSpec,
)
from fastapi_hooks_routing.core.middleware import dispatch
from fastapi_hooks_routing.core.router import (
    HooksRouter,
    ResolvedRoute,
    RouteConfig,
    RouteTable,
    log_duplicate_route,
    raise_on_duplicate_route,
)

# Exceptions: for error handling
from fastapi_hooks_routing.exceptions import (
    ContextError,
    DuplicateRouteError,
    HooksRoutingError,
    InvalidMethodError,
    MiddlewareValidationError,
    RouteDiscoveryError,
    RouteValidationError,
    UnroutableFileError,
    UnsupportedTriggerTypeError,
)
from fastapi_hooks_routing.fastapi.registrar import BoundHandler, DevRouteRegistry
from fastapi_hooks_routing.fastapi.router import create_router_from_source

__all__ = [
    # Primary API
    "create_router_from_source",
    "ProjectConfig",
    "get_router",
    "is_development",
    # Api declarations
    "api",
    "ApiConfig",
    "ApiRoute",
    "Trigger",
    "use_context",
    "set_status",
    "set_header",
    "set_content_type",
    "redirect",
    "dispatch",
    # Routers
    "HooksRouter",
    "ApisRouter",
    "DeclaredRouter",
    "FileSystemRouter",
    "LambdaRouter",
    "RouteSpec",
    "RouteConfig",
    "RouteTable",
    "ResolvedRoute",
    "log_duplicate_route",
    "raise_on_duplicate_route",
    # Registration
    "BoundHandler",
    "DevRouteRegistry",
    # Exceptions
    "ContextError",
    "DuplicateRouteError",
    "HooksRoutingError",
    "InvalidMethodError",
    "MiddlewareValidationError",
    "RouteDiscoveryError",
    "RouteValidationError",
    "UnroutableFileError",
    "UnsupportedTriggerTypeError",
]

__version__ = "0.1.0"
