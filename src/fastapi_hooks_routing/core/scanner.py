"""Directory scanner for hooks routing.

Walks the api source tree and lists candidate files. Deciding which of
them are api files is the router's job.
"""

import fnmatch
from collections.abc import Sequence
from pathlib import Path, PurePosixPath

from fastapi_hooks_routing.exceptions import RouteDiscoveryError

DEFAULT_PATTERNS: tuple[str, ...] = ("**/*.py",)

DEFAULT_IGNORE: tuple[str, ...] = (
    "**/__pycache__/**",
    "**/test_*.py",
    "**/*_test.py",
    "**/conftest.py",
)


def scan_files(
    cwd: Path | str,
    patterns: Sequence[str] = DEFAULT_PATTERNS,
    ignore: Sequence[str] = DEFAULT_IGNORE,
) -> list[Path]:
    """List files under cwd matching any pattern and no ignore pattern.

    Hidden directories are always skipped, and files that resolve outside
    cwd through a symlink are dropped.

    Args:
        cwd: Root directory to scan.
        patterns: Glob patterns relative to cwd.
        ignore: Glob patterns (fnmatch syntax) matched against the POSIX path
            relative to cwd. A leading "**/" also matches at the top level.

    Returns:
        Sorted, de-duplicated list of absolute file paths.

    Raises:
        RouteDiscoveryError: If cwd doesn't exist or isn't a directory.

    Examples:
        files = scan_files("src/apis")
        files = scan_files("src/apis", ignore=("**/internal/**",))
    """
    base = Path(cwd).resolve()

    if not base.exists():
        raise RouteDiscoveryError(f"Source path does not exist: {base}")
    if not base.is_dir():
        raise RouteDiscoveryError(f"Source path is not a directory: {base}")

    found: set[Path] = set()

    for pattern in patterns:
        for file in base.glob(pattern):
            if not file.is_file():
                continue

            relative = file.relative_to(base)

            # Skip hidden directories and files (starting with .)
            if any(part.startswith(".") for part in relative.parts):
                continue

            # Security: Resolve symlinks and verify file is within base path
            resolved_file = file.resolve()
            if not _is_path_within(resolved_file, base):
                continue

            if _matches_any_pattern(PurePosixPath(relative).as_posix(), ignore):
                continue

            found.add(resolved_file)

    return sorted(found)


def _is_path_within(path: Path, base: Path) -> bool:
    """Check if a resolved path is within a base directory.

    Args:
        path: Resolved path to check.
        base: Base directory path.

    Returns:
        True if path is within base, False otherwise.
    """
    try:
        path.relative_to(base)
        return True
    except ValueError:
        return False


def _matches_any_pattern(relative_path: str, patterns: Sequence[str]) -> bool:
    for pattern in patterns:
        if fnmatch.fnmatch(relative_path, pattern):
            return True
        if pattern.startswith("**/") and fnmatch.fnmatch(relative_path, pattern[3:]):
            return True
    return False
