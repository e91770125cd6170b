"""Basic example demonstrating fastapi-hooks-routing.

Api files live under src/apis/lambda and are served under /api. Named
exports get an underscore-prefixed path segment.

Run with:
    uvicorn main:app --reload

Available endpoints:
    GET    /api                     - Health check (default export)
    GET    /api/todo/_get_list      - List todos
    POST   /api/todo/_add           - Create a todo
    DELETE /api/todo/_remove        - Delete a todo
    GET    /api/files/path/{path}   - Catch-all file lookup

Set HOOKS_ENV=development to log every registered route at startup.
"""

import logging
from pathlib import Path

from fastapi import FastAPI

from fastapi_hooks_routing import (
    DevRouteRegistry,
    ProjectConfig,
    create_router_from_source,
    get_router,
)

logging.basicConfig(level=logging.INFO)

ROOT = Path(__file__).parent
CONFIG = ProjectConfig(routes=[{"base_dir": "lambda", "base_path": "/api"}], underscore=True)

registry = DevRouteRegistry()

app = FastAPI(title="Basic Example")
app.include_router(
    create_router_from_source(
        ROOT / CONFIG.source,
        router=get_router(CONFIG, ROOT),
        development=CONFIG.development,
        dev_registry=registry,
    )
)

if CONFIG.development:
    logging.getLogger(__name__).info("Registered routes:\n%s", registry.to_json())
