"""HTML-safe strings and escaping helpers.

`Markup` marks text as already safe: escaping it is a no-op, and
concatenating plain text onto it escapes the plain side.

Example:
    >>> html_escape("<b>")
    Markup('&lt;b&gt;')
    >>> html_escape(Markup("<b>"))
    Markup('<b>')
"""

from __future__ import annotations

import html
import json
import re
from typing import Any

_TAG_RE = re.compile(r"<[^>]*>")

_CSS_SAFE = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789")


class Markup(str):
    """A string that is safe to output without escaping."""

    __slots__ = ()

    def __new__(cls, value: Any = "") -> Markup:
        if hasattr(value, "__html__"):
            value = value.__html__()
        return super().__new__(cls, value)

    def __html__(self) -> Markup:
        return self

    def __add__(self, other: Any) -> Markup:
        if isinstance(other, str):
            return Markup(str.__add__(self, html_escape(other)))
        return NotImplemented

    def __radd__(self, other: Any) -> Markup:
        if isinstance(other, str):
            return Markup(str.__add__(html_escape(other), self))
        return NotImplemented

    def __repr__(self) -> str:
        return f"Markup({str.__repr__(self)})"

    def striptags(self) -> str:
        """Remove tags and unescape entities."""
        return html.unescape(_TAG_RE.sub("", self))


def html_escape(value: Any) -> Markup:
    """Escape `& < > " '` unless the value already provides `__html__`."""
    if hasattr(value, "__html__"):
        return Markup(value.__html__())
    if value is None:
        return Markup("")
    return Markup(html.escape(str(value), quote=True))


def escape_attr(value: Any) -> Markup:
    """Escape for an HTML attribute value.

    Same character set as `html_escape`, but safe strings are escaped too:
    attribute context does not trust markup.
    """
    if value is None:
        return Markup("")
    return Markup(html.escape(str(value), quote=True))


def escape_css(value: Any) -> Markup:
    """Escape for a CSS string or identifier (`\\HH ` hex escapes)."""
    if value is None:
        return Markup("")
    return Markup(
        "".join(ch if ch in _CSS_SAFE else f"\\{ord(ch):X} " for ch in str(value))
    )


def escape_js(value: Any) -> Markup:
    """Escape for a JavaScript string literal, without the surrounding quotes."""
    if value is None:
        return Markup("")
    encoded = json.dumps(str(value))[1:-1]
    for char, repl in (("<", "\\u003C"), (">", "\\u003E"), ("&", "\\u0026"), ("'", "\\u0027")):
        encoded = encoded.replace(char, repl)
    return Markup(encoded)


def strip_tags(value: Any) -> str:
    """Remove anything that looks like an HTML tag."""
    if value is None:
        return ""
    return _TAG_RE.sub("", str(value))
