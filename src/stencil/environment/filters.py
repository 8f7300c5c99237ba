"""Built-in filters for Stencil templates.

Filters transform values in template expressions:
`{{ name|upper }}`, `{{ items|join(", ") }}`

Every builtin is a mapping onto a runtime helper from
`stencil.template.helpers` (bound as `_<name>` in the render namespace),
so compiled code calls the helper directly:

    {{ title|trim }}        ->  _trim(title)
    {{ items|join(", ") }}  ->  _join(items, ', ')

Categories:
**Escaping**: `e`/`escape`, `escape_css`, `escape_js`, `escape_attr`

**Strings**: `trim`, `left_trim`, `right_trim`, `striptags`, `slashes`,
`stripslashes`, `nl2br`, `capitalize`, `lower`/`lowercase`,
`upper`/`uppercase`, `url_encode`, `format`, `convert_encoding`

**Collections**: `length`, `sort`, `keys`, `join`

**Serialization**: `json_encode`, `json_decode`

**Other**: `abs`, `default`
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from stencil.environment.registry import Arguments, CallMapping, Generator, Rename

if TYPE_CHECKING:
    from stencil.nodes import Expr


def _default(arguments: Arguments, expr_arguments: Sequence[Expr]) -> str:
    """`value|default(fallback)`: the value is evaluated lazily so an
    undefined name falls back instead of raising.
    """
    value, *rest = arguments.parts
    fallback = rest[0] if rest else "''"
    return f"_default(lambda: {value}, {fallback})"


BUILTIN_FILTERS: dict[str, CallMapping] = {
    # Escaping
    "e": Rename("_escape"),
    "escape": Rename("_escape"),
    "escape_css": Rename("_escape_css"),
    "escape_js": Rename("_escape_js"),
    "escape_attr": Rename("_escape_attr"),
    # Strings
    "trim": Rename("_trim"),
    "left_trim": Rename("_left_trim"),
    "right_trim": Rename("_right_trim"),
    "striptags": Rename("_strip_tags"),
    "slashes": Rename("_slashes"),
    "stripslashes": Rename("_strip_slashes"),
    "nl2br": Rename("_nl2br"),
    "capitalize": Rename("_capitalize"),
    "lower": Rename("_lower"),
    "lowercase": Rename("_lower"),
    "upper": Rename("_upper"),
    "uppercase": Rename("_upper"),
    "url_encode": Rename("_url_encode"),
    "format": Rename("_format"),
    "convert_encoding": Rename("_convert_encoding"),
    # Collections
    "length": Rename("_length"),
    "sort": Rename("_sort"),
    "keys": Rename("_keys"),
    "join": Rename("_join"),
    # Serialization
    "json_encode": Rename("_json_encode"),
    "json_decode": Rename("_json_decode"),
    # Other
    "abs": Rename("abs"),
    "default": Generator(_default),
}
