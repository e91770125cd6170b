"""Tests for the directory convention routers."""

from pathlib import Path

import pytest

from fastapi_hooks_routing.core.conventions import (
    ApisRouter,
    DeclaredRouter,
    FileSystemRouter,
    LambdaRouter,
    RouteSpec,
)
from fastapi_hooks_routing.core.router import RouteConfig


class TestRouteSpec:
    def test_from_route_spec_returns_same_object(self):
        spec = RouteSpec("lambda", "/api")
        assert RouteSpec.from_value(spec) is spec

    def test_from_mapping(self):
        spec = RouteSpec.from_value({"base_dir": "lambda", "base_path": "/api", "underscore": True})
        assert spec == RouteSpec("lambda", "/api", True)

    def test_from_mapping_defaults(self):
        assert RouteSpec.from_value({}) == RouteSpec("", "/", None)


class TestApisRouter:
    def test_describes_every_file_under_source(self, tmp_path: Path):
        router = ApisRouter(tmp_path, "src/apis", base_path="/v1")
        assert router.describe(tmp_path / "src/apis/a/b/c.py") == RouteConfig("", "/v1", False)

    def test_rejects_files_outside_source(self, tmp_path: Path):
        router = ApisRouter(tmp_path)
        assert router.describe(tmp_path / "src/other/c.py") is None
        assert router.describe(tmp_path / "src/apis") is None

    def test_underscore_flag(self, tmp_path: Path):
        router = ApisRouter(tmp_path, underscore=True)
        assert router.describe(tmp_path / "src/apis/todo.py").underscore is True

    def test_absolute_source(self, tmp_path: Path):
        source = tmp_path / "elsewhere"
        router = ApisRouter(tmp_path / "project", source)
        assert router.resolve_http_path(source / "todo.py", "", True) == "/todo"

    def test_is_file_system(self, tmp_path: Path):
        assert ApisRouter(tmp_path).is_file_system is True


class TestLambdaRouter:
    def test_default_rule(self, tmp_path: Path):
        router = LambdaRouter(tmp_path)
        assert router.describe(tmp_path / "src/apis/lambda/todo.py") == RouteConfig(
            "lambda", "/api", True
        )

    def test_files_outside_lambda_are_not_routable(self, tmp_path: Path):
        router = LambdaRouter(tmp_path)
        assert router.describe(tmp_path / "src/apis/render/home.py") is None
        assert router.is_routable_file(tmp_path / "src/apis/render/home.py") is False

    def test_custom_routes(self, tmp_path: Path):
        router = LambdaRouter(tmp_path, routes=[RouteSpec("functions", "/fn")])
        file = tmp_path / "src/apis/functions/todo.py"
        assert router.resolve_http_path(file, "get", False) == "/fn/todo/_get"


class TestFileSystemRouter:
    @pytest.fixture
    def router(self, tmp_path: Path) -> FileSystemRouter:
        return FileSystemRouter(
            tmp_path,
            "src/apis",
            [
                RouteSpec("", "/"),
                {"base_dir": "lambda", "base_path": "/api", "underscore": True},
            ],
        )

    def test_deepest_rule_wins(self, router, tmp_path: Path):
        file = tmp_path / "src/apis/lambda/todo.py"
        assert router.describe(file) == RouteConfig("lambda", "/api", True)
        assert router.resolve_http_path(file, "get", False) == "/api/todo/_get"

    def test_parent_rule_covers_the_rest(self, router, tmp_path: Path):
        file = tmp_path / "src/apis/pages/home.py"
        assert router.describe(file) == RouteConfig("", "/", False)
        assert router.resolve_http_path(file, "get", False) == "/pages/home/get"

    def test_rule_order_does_not_matter(self, tmp_path: Path):
        router = FileSystemRouter(
            tmp_path,
            "src/apis",
            [RouteSpec("lambda", "/api"), RouteSpec("", "/")],
        )
        file = tmp_path / "src/apis/lambda/todo.py"
        assert router.describe(file).base_path == "/api"

    def test_router_underscore_applies_when_rule_is_silent(self, tmp_path: Path):
        router = FileSystemRouter(tmp_path, "src/apis", [RouteSpec("lambda", "/api")], underscore=True)
        assert router.describe(tmp_path / "src/apis/lambda/todo.py").underscore is True

    def test_rule_underscore_overrides_router(self, tmp_path: Path):
        router = FileSystemRouter(
            tmp_path,
            "src/apis",
            [RouteSpec("lambda", "/api", underscore=False)],
            underscore=True,
        )
        assert router.describe(tmp_path / "src/apis/lambda/todo.py").underscore is False

    def test_similar_directory_prefix_is_not_inside(self, tmp_path: Path):
        router = FileSystemRouter(tmp_path, "src/apis", [RouteSpec("lambda", "/api")])
        assert router.describe(tmp_path / "src/apis/lambdas/todo.py") is None


class TestDeclaredRouter:
    def test_is_not_file_system(self, tmp_path: Path):
        assert DeclaredRouter(tmp_path, "src/apis").is_file_system is False

    def test_routes_any_script_under_source(self, tmp_path: Path):
        router = DeclaredRouter(tmp_path, "src/apis")
        assert router.is_routable_file(tmp_path / "src/apis/anything/todo.py") is True
        assert router.is_routable_file(tmp_path / "src/other/todo.py") is False
