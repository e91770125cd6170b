"""Module importer for hooks routing.

Dynamically imports api files and extracts their exported handlers.
The ``default`` attribute of a module is its default export.
"""

import importlib.util
import inspect
import re
import sys
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any

from fastapi_hooks_routing.core.api import ApiConfig
from fastapi_hooks_routing.core.middleware import normalize_middleware
from fastapi_hooks_routing.exceptions import RouteValidationError

# Sentinel export name identifying a module's default export
DEFAULT_EXPORT = "default"

# Root of the synthetic package api modules are registered under
MODULE_NAMESPACE = "_hooks_apis"

_INVALID_IDENTIFIER_CHARS = re.compile(r"\W")


@dataclass(frozen=True)
class ExtractedApi:
    """Handlers and file-level middleware extracted from an api module.

    Attributes:
        exports: Export name -> handler, with DEFAULT_EXPORT for the default export.
        file_middleware: Middleware from the module-level ``middleware`` attribute.
    """

    exports: Mapping[str, Callable[..., Any]]
    file_middleware: Sequence[Callable[..., Any]] = ()


def _validate_file_path(file_path: Path, *, base_path: Path | None = None) -> Path:
    """Validate an api file path for security and correctness.

    Args:
        file_path: Path to the api file.
        base_path: Optional base directory to restrict imports to.

    Returns:
        Resolved absolute path to the api file.

    Raises:
        RouteValidationError: If the path is invalid or insecure.
    """
    # Check for path traversal attempts (.. as path component, not inside filenames)
    if ".." in file_path.parts:
        raise RouteValidationError(f"Path traversal detected in file path: {file_path}")

    resolved_path = file_path.resolve()

    if base_path is not None:
        resolved_base = base_path.resolve()
        try:
            resolved_path.relative_to(resolved_base)
        except ValueError:
            raise RouteValidationError(
                f"Api file outside allowed directory: {resolved_path}\n"
                f"Allowed base: {resolved_base}"
            ) from None

    if resolved_path.suffix != ".py":
        raise RouteValidationError(f"Invalid api file name: {resolved_path.name}")

    return resolved_path


def _path_to_module_name(file_path: Path) -> str:
    """Convert a file path to a deterministic module name.

    Examples:
        /app/src/apis/todo/[...slug].py -> "_hooks_apis.app.src.apis.todo.____slug_"
    """
    relative = file_path.with_suffix("").relative_to(file_path.anchor)
    parts = [_INVALID_IDENTIFIER_CHARS.sub("_", part) for part in relative.parts]
    return ".".join([MODULE_NAMESPACE, *parts])


def _register_parent_packages(module_name: str) -> None:
    """Register parent packages in sys.modules for nested module names.

    Args:
        module_name: Dot-separated module name.
    """
    parts = module_name.split(".")
    for i in range(1, len(parts)):
        parent_name = ".".join(parts[:i])
        if parent_name not in sys.modules:
            parent_module = ModuleType(parent_name)
            parent_module.__path__ = []
            parent_module.__package__ = parent_name
            sys.modules[parent_name] = parent_module


def _import_module_from_file(
    file_path: Path,
    module_name: str,
) -> ModuleType:
    """Low-level module import from file path.

    Handles spec creation, sys.modules registration, and error cleanup.

    Args:
        file_path: Path to the Python file to import.
        module_name: Module name for sys.modules registration.

    Returns:
        The imported module.

    Raises:
        RouteValidationError: If spec creation fails or module execution fails.
    """
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    if spec is None or spec.loader is None:
        raise RouteValidationError(f"Cannot create module spec for: {file_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module

    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        del sys.modules[module_name]
        raise RouteValidationError(
            f"Failed to import module: {file_path}\nError: {type(exc).__name__}: {exc}"
        ) from exc

    return module


def import_api_module(
    file_path: Path | str,
    *,
    base_path: Path | None = None,
    reload: bool = False,
) -> ModuleType:
    """Import an api file as a Python module.

    Args:
        file_path: Path to the api file.
        base_path: Optional base directory to restrict imports to.
        reload: Re-execute the file even if it was imported before, as
            needed after a file-change event.

    Returns:
        The imported module.

    Raises:
        RouteValidationError: If the path is invalid, file doesn't exist,
            or import fails.
    """
    validated_path = _validate_file_path(Path(file_path), base_path=base_path)

    if not validated_path.exists():
        raise RouteValidationError(f"Api file does not exist: {validated_path}")

    module_name = _path_to_module_name(validated_path)

    # Parent packages registered for nested files are placeholders without __file__
    cached = sys.modules.get(module_name)
    if cached is not None and not reload and getattr(cached, "__file__", None) == str(validated_path):
        return cached

    _register_parent_packages(module_name)

    module = _import_module_from_file(validated_path, module_name)

    parent_name, _, child_name = module_name.rpartition(".")
    if parent_name in sys.modules:
        setattr(sys.modules[parent_name], child_name, module)

    return module


def extract_exports(module: ModuleType, file_path: Path | str) -> ExtractedApi:
    """Extract exported handlers and file-level middleware from an api module.

    Public callables defined in the module are named exports. Skipped:
    underscore-prefixed names, classes, objects imported from other
    modules and every middleware, whether listed in the module-level
    ``middleware`` attribute or in a ``class x(api)`` body. The
    ``default`` attribute is the default export, may be imported, and
    hides a named export bound to the same object.

    Args:
        module: The imported api module.
        file_path: Path to the api file (for error messages).

    Returns:
        ExtractedApi containing exports and file middleware.

    Raises:
        RouteValidationError: If ``default`` or ``middleware`` is invalid.
    """
    exports: dict[str, Callable[..., Any]] = {}

    file_middleware = normalize_middleware(
        getattr(module, "middleware", None),
        source=f"file {file_path}",
    )
    middleware_ids = {id(mw) for mw in file_middleware}
    for value in vars(module).values():
        if isinstance(value, ApiConfig):
            middleware_ids.update(id(mw) for mw in value.middleware)

    default = getattr(module, DEFAULT_EXPORT, None)
    if default is not None and not callable(default):
        raise RouteValidationError(
            f"Default export must be callable in api file\n"
            f"  File: {file_path}\n"
            f"  Got: {type(default).__name__}"
        )

    for name in dir(module):
        if name.startswith("_"):
            continue
        if name in ("middleware", DEFAULT_EXPORT):
            continue

        obj = getattr(module, name)

        # ApiConfig is callable and carries the handler's module
        if isinstance(obj, ApiConfig):
            if obj.__module__ == module.__name__ and obj is not default:
                exports[name] = obj
            continue

        if not callable(obj) or inspect.isclass(obj):
            continue

        if getattr(obj, "__module__", None) != module.__name__:
            continue

        if id(obj) in middleware_ids or obj is default:
            continue

        exports[name] = obj

    if default is not None:
        exports[DEFAULT_EXPORT] = default

    return ExtractedApi(exports=exports, file_middleware=file_middleware)


def load_api_exports(file_path: Path | str, *, base_path: Path | None = None) -> ExtractedApi:
    """Import an api file and extract its exports (convenience function).

    Raises:
        RouteValidationError: If the path is invalid, import fails,
            or exports are invalid.
    """
    module = import_api_module(file_path, base_path=base_path)
    return extract_exports(module, file_path)
