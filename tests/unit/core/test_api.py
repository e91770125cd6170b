"""Tests for api declarations: Trigger, the api metaclass and method inference."""

from typing import Any

import pytest

from fastapi_hooks_routing.core.api import (
    HTTP_METHODS,
    HTTP_TRIGGER,
    ApiConfig,
    Trigger,
    api,
    infer_http_method,
)
from fastapi_hooks_routing.exceptions import RouteValidationError


class TestTrigger:
    def test_http_uppercases_method(self):
        trigger = Trigger.http("get", "/todo")
        assert trigger == Trigger(type=HTTP_TRIGGER, method="GET", path="/todo")
        assert trigger.is_http

    def test_http_without_method(self):
        assert Trigger.http().method is None

    def test_other_types_are_not_http(self):
        assert Trigger(type="EVENT").is_http is False

    def test_methods_include_all(self):
        assert set(HTTP_METHODS) == {
            "GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS", "ALL",
        }


class TestApiMetaclass:
    def test_class_becomes_api_config(self):
        async def auth(request: Any, call_next: Any) -> Any:
            return await call_next(request)

        class archive(api):
            method = "patch"
            middleware = [auth]

            def handler(todo_id: int) -> dict:
                return {"archived": todo_id}

        assert isinstance(archive, ApiConfig)
        assert archive.trigger == Trigger.http("PATCH")
        assert archive.middleware == (auth,)

    def test_config_is_callable(self):
        class get(api):
            def handler(name: str) -> str:
                return f"hello {name}"

        assert get("todo") == "hello todo"

    def test_preserves_handler_metadata(self):
        class get(api):
            def handler() -> None:
                """List todos."""

        assert get.__name__ == "handler"
        assert get.__doc__ == "List todos."
        assert get.__wrapped__ is get.handler

    def test_no_method_or_path_leaves_trigger_unset(self):
        class get(api):
            def handler() -> None:
                pass

        assert get.trigger is None
        assert get.middleware == ()

    def test_path_only(self):
        class todos(api):
            path = "/todos"

            def handler() -> None:
                pass

        assert todos.trigger == Trigger(type=HTTP_TRIGGER, method=None, path="/todos")

    def test_explicit_trigger(self):
        class on_event(api):
            trigger = Trigger(type="EVENT")

            def handler() -> None:
                pass

        assert on_event.trigger.type == "EVENT"

    def test_missing_handler_raises(self):
        with pytest.raises(RouteValidationError, match="must define a handler"):

            class get(api):
                method = "GET"

    def test_non_callable_handler_raises(self):
        with pytest.raises(RouteValidationError, match="handler must be a callable"):

            class get(api):
                handler = "nope"

    def test_invalid_trigger_raises(self):
        with pytest.raises(RouteValidationError, match="trigger must be a Trigger"):

            class get(api):
                trigger = "HTTP"

                def handler() -> None:
                    pass

    def test_invalid_middleware_raises(self):
        with pytest.raises(RouteValidationError, match="class get\\(api\\)"):

            class get(api):
                middleware = 42

                def handler() -> None:
                    pass


class TestInferHttpMethod:
    @pytest.mark.parametrize("name", ["get", "post", "put", "delete", "patch", "head", "options"])
    def test_verb_names(self, name):
        assert infer_http_method(name, lambda x: x) == name.upper()

    def test_all_name(self):
        assert infer_http_method("all", lambda: None) == "ALL"

    def test_no_parameters_is_get(self):
        def list_todos():
            return []

        assert infer_http_method("list_todos", list_todos) == "GET"

    def test_parameters_is_post(self):
        def create_todo(title: str):
            return {"title": title}

        assert infer_http_method("create_todo", create_todo) == "POST"

    def test_default_export(self):
        assert infer_http_method("default", lambda: None) == "GET"
