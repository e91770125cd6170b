"""FastAPI adapter for hooks routing."""

from fastapi_hooks_routing.fastapi.registrar import (
    BoundHandler,
    DevRouteRegistry,
    FastAPIRegistrar,
)
from fastapi_hooks_routing.fastapi.router import create_router_from_source

__all__ = [
    "BoundHandler",
    "DevRouteRegistry",
    "FastAPIRegistrar",
    "create_router_from_source",
]
