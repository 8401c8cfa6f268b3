"""URL path templates -- compile ``/users/:id`` into a substitution function.

Two placeholder styles are understood so schemas can be written either way:

* ``:name`` -- path-to-regexp style, with ``:name?`` for an optional segment;
* ``{name}`` -- OpenAPI style, always required.

Substituted values are percent-encoded as a single path segment. Everything
outside a placeholder is copied through untouched.

See Also:
    :func:`join_url` for combining the rendered path with a base URL.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Mapping
from typing import Any, Callable, Optional
from urllib.parse import quote

from fetchkit.exceptions import TemplateError

Renderer = Callable[[Optional[Mapping[str, Any]]], str]

_ABSOLUTE_URL = re.compile(r"^([a-z][a-z\d+\-.]*:)?//", re.IGNORECASE)

_PLACEHOLDER = re.compile(
    r"(?P<slash>/?)(?::(?P<colon>[A-Za-z_][A-Za-z0-9_]*)(?P<optional>\?)?|\{(?P<brace>[A-Za-z_][A-Za-z0-9_]*)\})"
)


def _encode(value: Any) -> str:
    return quote(str(value), safe="-_.~!$&'()*+,;=:@")


@functools.lru_cache(maxsize=512)
def compile_template(pattern: str) -> Renderer:
    """Compile *pattern* into a function of the path parameters.

    Args:
        pattern: The endpoint path template, e.g. ``/users/:id/posts/:post?``.

    Returns:
        A function taking a mapping of parameter values (or ``None``) and
        returning the concrete path.

    Example::

        >>> compile_template("/users/:id")({"id": "42"})
        '/users/42'
    """
    # Literal text and placeholder tuples, in pattern order.
    parts: list[Any] = []
    position = 0
    for match in _PLACEHOLDER.finditer(pattern):
        parts.append(pattern[position:match.start()])
        name = match.group("colon") or match.group("brace")
        parts.append((match.group("slash"), name, bool(match.group("optional"))))
        position = match.end()
    parts.append(pattern[position:])

    def render(params: Optional[Mapping[str, Any]] = None) -> str:
        values = params or {}
        out: list[str] = []
        for part in parts:
            if isinstance(part, str):
                out.append(part)
                continue
            slash, name, optional = part
            value = values.get(name)
            if value is None:
                if optional:
                    continue
                raise TemplateError(f"Missing path parameter '{name}' for '{pattern}'")
            encoded = _encode(value)
            if not encoded:
                if optional:
                    continue
                raise TemplateError(f"Empty path parameter '{name}' for '{pattern}'")
            out.append(slash + encoded)
        return "".join(out)

    return render


def placeholders(pattern: str) -> list[str]:
    """Return the parameter names in *pattern*, in order; optional ones end with ``?``."""
    names: list[str] = []
    for match in _PLACEHOLDER.finditer(pattern):
        name = match.group("colon") or match.group("brace")
        names.append(name + "?" if match.group("optional") else name)
    return names


def join_url(base_url: str, path: str) -> str:
    """Resolve *path* against *base_url*.

    Absolute URLs are returned unchanged; otherwise the two halves are joined
    with exactly one ``/`` between them.
    """
    if _ABSOLUTE_URL.match(path):
        return path
    if not path:
        return base_url
    if not base_url:
        return path
    return base_url.rstrip("/") + "/" + path.lstrip("/")
