"""Todo endpoints."""

import time

from fastapi import HTTPException

from fastapi_hooks_routing import api, use_context

# In-memory storage for demonstration purposes
_todos: dict[int, dict] = {}
_next_id = 1


async def timing(next):
    """Report handler time in a response header."""
    start = time.perf_counter()
    response = await next()
    response.headers["X-Process-Time"] = f"{time.perf_counter() - start:.4f}"
    return response


middleware = [timing]


async def get_list() -> dict:
    """List all todos."""
    return {"todos": list(_todos.values()), "count": len(_todos)}


async def add(title: str) -> dict:
    """Create a todo."""
    global _next_id

    todo = {"id": _next_id, "title": title, "client": use_context().client.host}
    _todos[_next_id] = todo
    _next_id += 1
    return todo


class remove(api):
    method = "DELETE"

    async def handler(todo_id: int) -> dict:
        if todo_id not in _todos:
            raise HTTPException(status_code=404, detail=f"Todo {todo_id} not found")
        return _todos.pop(todo_id)
