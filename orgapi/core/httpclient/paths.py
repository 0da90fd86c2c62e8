"""URI path template rendering.

Templates are "/"-delimited; a segment starting with ":" names a placeholder:

    >>> render_path("/api/orgs/:id/users", {"id": "a/b"})
    RenderedPath(path='/api/orgs/a/b/users', escaped_path='/api/orgs/a%2Fb/users')
"""
from __future__ import annotations
from typing import Mapping, NamedTuple
from urllib.parse import quote

from .exceptions import PathParamMissingError

PLACEHOLDER_MARKER = ":"

# Sub-delims allowed unescaped inside a single path segment
_SEGMENT_SAFE = "$&+:=@"


class RenderedPath(NamedTuple):
    path: str
    escaped_path: str


def escape_segment(value: str) -> str:
    """Percent-escape a value for use as exactly one path segment."""
    return quote(value, safe=_SEGMENT_SAFE)


def render_path(template: str, path_params: Mapping[str, str]) -> RenderedPath:
    """Substitute placeholders in a path template.

    Args:
        template: Path such as "/api/orgs/:id"
        path_params: Placeholder name to literal value

    Returns:
        RenderedPath with the literal path and the escaped path

    Raises:
        PathParamMissingError: If a placeholder is absent or maps to ""
    """
    rendered = []
    escaped = []
    for segment in template.split("/"):
        if segment.startswith(PLACEHOLDER_MARKER):
            value = path_params.get(segment[1:], "")
            if not value:
                raise PathParamMissingError(segment)
            rendered.append(value)
            escaped.append(escape_segment(value))
        else:
            rendered.append(segment)
            escaped.append(segment)
    return RenderedPath("/".join(rendered), "/".join(escaped))
