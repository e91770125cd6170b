"""Api module loader for hooks routing.

Composes scanner, router and importer: lists candidate files, keeps the
ones the router routes, imports them and turns every exported handler
into an ApiRoute draft.
"""

import logging
from collections.abc import Callable, Sequence
from functools import partial
from pathlib import Path

from fastapi_hooks_routing.core.api import ApiConfig, ApiRoute, Trigger, infer_http_method
from fastapi_hooks_routing.core.importer import DEFAULT_EXPORT, ExtractedApi, load_api_exports
from fastapi_hooks_routing.core.router import HooksRouter
from fastapi_hooks_routing.core.scanner import DEFAULT_IGNORE, DEFAULT_PATTERNS, scan_files
from fastapi_hooks_routing.exceptions import RouteValidationError

logger = logging.getLogger(__name__)

Scanner = Callable[[Path | str, Sequence[str], Sequence[str]], list[Path]]
ModuleLoader = Callable[[Path], ExtractedApi]


def load_api_modules(
    source: Path | str,
    router: HooksRouter,
    *,
    patterns: Sequence[str] = DEFAULT_PATTERNS,
    ignore: Sequence[str] = DEFAULT_IGNORE,
    scanner: Scanner = scan_files,
    module_loader: ModuleLoader | None = None,
) -> list[ApiRoute]:
    """Load every api route under source.

    Args:
        source: Api source directory.
        router: Router deciding which files are api files.
        patterns: Glob patterns passed to the scanner.
        ignore: Ignore patterns passed to the scanner.
        scanner: File enumeration collaborator.
        module_loader: Export loading collaborator; imports files restricted
            to source by default.

    Returns:
        Flattened list of ApiRoute drafts, one per exported handler.

    Raises:
        RouteDiscoveryError: If source doesn't exist or isn't a directory.
        RouteValidationError: If an api file fails to import or declares an
            invalid trigger.
    """
    base = Path(source).resolve()
    if module_loader is None:
        module_loader = partial(load_api_exports, base_path=base)

    files = scanner(base, patterns, ignore)
    api_files = [file for file in files if router.is_routable_file(file)]

    logger.info(
        "Discovered api files",
        extra={"count": len(api_files), "scanned": len(files), "source": str(base)},
    )

    routes: list[ApiRoute] = []
    for file in api_files:
        apis = load_api_module(module_loader(file), file, router)
        logger.debug(
            "Loaded api routes from file",
            extra={"file": str(file), "functions": [api.function_id for api in apis]},
        )
        routes.extend(apis)

    if not routes:
        logger.warning("No api routes found, source is: %s", base, extra={"source": str(base)})

    return routes


def load_api_module(extracted: ExtractedApi, file: Path | str, router: HooksRouter) -> list[ApiRoute]:
    """Turn the exports of one api file into ApiRoute drafts.

    Raises:
        RouteValidationError: If a declared trigger path conflicts with the
            router kind.
    """
    file = Path(file)
    routes: list[ApiRoute] = []

    for name, export in extracted.exports.items():
        is_default_export = name == DEFAULT_EXPORT
        function_id = router.function_id(file, name, is_default_export)

        if isinstance(export, ApiConfig):
            fn = export.handler
            trigger = export.trigger
            middleware = (*extracted.file_middleware, *export.middleware)
        else:
            fn = export
            trigger = None
            middleware = tuple(extracted.file_middleware)

        if trigger is None:
            trigger = Trigger.http(infer_http_method(name, fn))
        elif trigger.is_http and trigger.method is None:
            trigger = Trigger.http(infer_http_method(name, fn), trigger.path)

        _validate_trigger_path(trigger, router, file, name)

        routes.append(
            ApiRoute(
                function_id=function_id,
                fn=fn,
                trigger=trigger,
                middleware=middleware,
                file=file,
                function_name=name,
                is_default_export=is_default_export,
            )
        )

    return routes


def _validate_trigger_path(trigger: Trigger, router: HooksRouter, file: Path, name: str) -> None:
    if not trigger.is_http:
        return

    if router.is_file_system and trigger.path is not None:
        raise RouteValidationError(
            f"Api '{name}' declares path '{trigger.path}' but its route is derived "
            f"from the file location\n"
            f"  File: {file}\n"
            f"  Hint: Move the file instead, or use a DeclaredRouter"
        )
    if not router.is_file_system and trigger.path is None:
        raise RouteValidationError(
            f"Api '{name}' must declare a path\n"
            f"  File: {file}\n"
            f"  Hint: class {name}(api): path = '/...'"
        )
