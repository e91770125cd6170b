"""File name parser for hooks routing.

Splits an api file's base name into the route segment it contributes:
- index -> collapsed later by the router
- [...slug] -> catch-all, segment "slug" followed by a trailing wildcard
- anything else -> literal segment
"""

import re
from dataclasses import dataclass

_CATCH_ALL_PATTERN = re.compile(r"\[\.\.\.([^\]]+)\]")


@dataclass(frozen=True)
class ParsedFilename:
    """Result of parsing an api file's base name.

    Attributes:
        is_catch_all: True when the name encodes a [...name] spread.
        route_segment: The literal segment the file contributes to its route.
    """

    is_catch_all: bool
    route_segment: str


def parse_filename(base_name: str) -> ParsedFilename:
    """Parse a file base name (extension already stripped).

    The captured catch-all name is kept as a literal path segment; the
    wildcard itself is appended by the router.

    Examples:
        "index" -> ParsedFilename(False, "index")
        "users" -> ParsedFilename(False, "users")
        "[...slug]" -> ParsedFilename(True, "slug")
    """
    if match := _CATCH_ALL_PATTERN.search(base_name):
        return ParsedFilename(is_catch_all=True, route_segment=match.group(1))

    return ParsedFilename(is_catch_all=False, route_segment=base_name)
