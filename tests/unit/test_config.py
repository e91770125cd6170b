"""Tests for project configuration and router selection."""

from pathlib import Path

import pytest

from fastapi_hooks_routing.config import ENV_VAR, ProjectConfig, get_router, is_development
from fastapi_hooks_routing.core.conventions import ApisRouter, FileSystemRouter, RouteSpec
from fastapi_hooks_routing.core.router import raise_on_duplicate_route


class TestIsDevelopment:
    @pytest.mark.parametrize("value", ["development", "Development", " development "])
    def test_development_values(self, monkeypatch, value):
        monkeypatch.setenv(ENV_VAR, value)
        assert is_development() is True

    @pytest.mark.parametrize("value", ["production", "", "dev"])
    def test_other_values(self, monkeypatch, value):
        monkeypatch.setenv(ENV_VAR, value)
        assert is_development() is False

    def test_unset(self, monkeypatch):
        monkeypatch.delenv(ENV_VAR, raising=False)
        assert is_development() is False


class TestProjectConfig:
    def test_defaults(self):
        config = ProjectConfig()
        assert config.source == "src/apis"
        assert config.routes == (RouteSpec("", "/"),)
        assert config.underscore is False

    def test_dev_flag_forces_development(self, monkeypatch):
        monkeypatch.delenv(ENV_VAR, raising=False)
        assert ProjectConfig(dev=True).development is True
        assert ProjectConfig().development is False

    def test_env_selects_development(self, monkeypatch):
        monkeypatch.setenv(ENV_VAR, "development")
        assert ProjectConfig().development is True


class TestGetRouter:
    def test_default_is_flat_router(self, tmp_path: Path):
        router = get_router(ProjectConfig(), tmp_path)

        assert isinstance(router, ApisRouter)
        assert router.source == (tmp_path / "src/apis").resolve().as_posix()

    def test_flat_rule_keeps_base_path_and_underscore(self, tmp_path: Path):
        config = ProjectConfig(routes=[{"base_dir": "", "base_path": "/v1"}], underscore=True)
        router = get_router(config, tmp_path)

        path = router.resolve_http_path(tmp_path / "src/apis/todo.py", "get", False)

        assert path == "/v1/todo/_get"

    def test_nested_rules_build_file_system_router(self, tmp_path: Path):
        config = ProjectConfig(
            routes=[
                {"base_dir": "lambda", "base_path": "/api"},
                {"base_dir": "render", "base_path": "/"},
            ]
        )
        router = get_router(config, tmp_path)

        assert type(router) is FileSystemRouter
        assert router.resolve_http_path(tmp_path / "src/apis/lambda/todo.py", "", True) == "/api/todo"
        assert router.resolve_http_path(tmp_path / "src/apis/render/home.py", "", True) == "/home"

    def test_duplicate_sink_is_passed_through(self, tmp_path: Path):
        router = get_router(ProjectConfig(), tmp_path, on_duplicate_route=raise_on_duplicate_route)
        assert router.on_duplicate_route is raise_on_duplicate_route
