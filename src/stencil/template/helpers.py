"""Pure runtime helper functions injected into the template namespace.

These functions are called by compiled template code at render time.
None of them close over Environment state: they use only their
parameters.

Thread-Safety:
All functions are stateless and safe for concurrent use.
"""

from __future__ import annotations

import json
import pprint
import re
from collections.abc import Callable, Iterable, Mapping, Sized
from typing import Any
from urllib.parse import quote_plus

from stencil.template.loop_context import LoopContext
from stencil.utils.html import (
    Markup,
    escape_attr,
    escape_css,
    escape_js,
    html_escape,
    strip_tags,
)

# Lookups that mean "not there" for `is defined` and `|default`.
_MISSING_ERRORS = (NameError, LookupError, AttributeError)

_WORD_START_RE = re.compile(r"(^|\s)(\S)")
_SLASHES_RE = re.compile(r"([\\'\"\x00])")
_STRIP_SLASHES_RE = re.compile(r"\\(.?)", re.S)
_NUMERIC_RE = re.compile(r"\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*")


def str_safe(value: Any) -> str:
    """Convert value to string, treating None as empty string."""
    if value is None:
        return ""
    return str(value)


def inclusive_range(start: Any, end: Any) -> list[Any]:
    """Inclusive range between two numbers or two single characters.

    Runs downward when `start > end`:

        >>> inclusive_range(3, 1)
        [3, 2, 1]
        >>> inclusive_range("a", "c")
        ['a', 'b', 'c']
    """
    if isinstance(start, str) and isinstance(end, str) and len(start) == 1 and len(end) == 1:
        return [chr(code) for code in inclusive_range(ord(start), ord(end))]
    start, end = int(start), int(end)
    if start <= end:
        return list(range(start, end + 1))
    return list(range(start, end - 1, -1))


def to_list(value: Any) -> list[Any]:
    """Materialize a loop iterable; mappings iterate their values."""
    if value is None:
        return []
    if isinstance(value, Mapping):
        return list(value.values())
    return list(value)


def iter_items(value: Any) -> list[tuple[Any, Any]]:
    """(key, value) pairs: mapping items, or (index, item) for sequences."""
    if value is None:
        return []
    if isinstance(value, Mapping):
        return list(value.items())
    return list(enumerate(value))


def getattr_dynamic(obj: Any, name: Any) -> Any:
    """Computed member access (`obj.(name)`): mapping key, then attribute."""
    if isinstance(obj, Mapping):
        return obj[name]
    try:
        return getattr(obj, name)
    except (AttributeError, TypeError):
        return obj[name]


def identical(left: Any, right: Any) -> bool:
    """Strict equality: same type and equal value (`===`)."""
    return left is right or (type(left) is type(right) and left == right)


def is_defined(value_fn: Callable[[], Any]) -> bool:
    """True if the expression evaluates without a lookup error and is not None.

    Args:
        value_fn: A lambda that evaluates the tested expression
    """
    try:
        return value_fn() is not None
    except _MISSING_ERRORS:
        return False


def is_empty(value: Any) -> bool:
    """None, False, the empty string and empty collections are empty."""
    if value is None or value is False:
        return True
    if isinstance(value, Sized):
        return len(value) == 0
    return False


def is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return isinstance(value, str) and _NUMERIC_RE.fullmatch(value) is not None


def is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


def is_iterable(value: Any) -> bool:
    """Collections and iterators; strings do not count."""
    return isinstance(value, Iterable) and not isinstance(value, (str, bytes))


def type_of(value: Any) -> str:
    """Name a value's type: boolean, integer, double, string, array, object or null."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "double"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple, Mapping)):
        return "array"
    return "object"


def default(value_fn: Callable[[], Any], default_value: Any = "") -> Any:
    """Fall back to `default_value` when the value is undefined or empty.

    Args:
        value_fn: A lambda that evaluates the filtered expression
        default_value: Replacement value
    """
    try:
        value = value_fn()
    except _MISSING_ERRORS:
        return default_value
    return default_value if is_empty(value) else value


def trim(value: Any, chars: str | None = None) -> str:
    return str_safe(value).strip(chars)


def left_trim(value: Any, chars: str | None = None) -> str:
    return str_safe(value).lstrip(chars)


def right_trim(value: Any, chars: str | None = None) -> str:
    return str_safe(value).rstrip(chars)


def slashes(value: Any) -> str:
    """Backslash-escape quotes, backslashes and NUL."""
    return _SLASHES_RE.sub(r"\\\1", str_safe(value))


def strip_slashes(value: Any) -> str:
    """Undo `slashes`: drop one level of backslashes."""
    return _STRIP_SLASHES_RE.sub(r"\1", str_safe(value))


def nl2br(value: Any) -> str:
    """Insert `<br />` before every line break."""
    return re.sub(r"(\r\n|\n|\r)", r"<br />\1", str_safe(value))


def capitalize(value: Any) -> str:
    """Upper-case the first character of every whitespace-separated word."""
    return _WORD_START_RE.sub(lambda m: m.group(1) + m.group(2).upper(), str_safe(value))


def lower(value: Any) -> str:
    return str_safe(value).lower()


def upper(value: Any) -> str:
    return str_safe(value).upper()


def length(value: Any) -> int:
    """Item count for collections, character count for strings, 0 for None."""
    if value is None:
        return 0
    if isinstance(value, Sized):
        return len(value)
    return len(str(value))


def url_encode(value: Any) -> str:
    return quote_plus(str_safe(value))


def json_encode(value: Any, *options: Any) -> str:
    return json.dumps(value, separators=(",", ":"), default=str)


def json_decode(value: Any, *options: Any) -> Any:
    return json.loads(str_safe(value))


def format_string(fmt: Any, *args: Any) -> str:
    """printf-style formatting: `"%s-%d"|format(a, 1)`."""
    return str_safe(fmt) % args


def sort(value: Any) -> Any:
    """Sorted copy; mappings keep their keys, ordered by value."""
    if isinstance(value, Mapping):
        return dict(sorted(value.items(), key=lambda item: item[1]))
    return sorted(to_list(value))


def keys(value: Any) -> list[Any]:
    if isinstance(value, Mapping):
        return list(value.keys())
    return list(range(len(to_list(value))))


def join(value: Any, glue: str = "") -> str:
    return str_safe(glue).join(str_safe(item) for item in to_list(value))


def convert_encoding(value: Any, to: str = "utf-8", from_: str = "utf-8") -> str:
    """Decode bytes from `from_`; text is limited to what `to` can represent."""
    if isinstance(value, bytes):
        return value.decode(from_, errors="replace")
    return str_safe(value).encode(to, errors="replace").decode(to)


def dump(*values: Any) -> str:
    """Debug representation of one or more values."""
    return "\n".join(pprint.pformat(value) for value in values)


# Builtins reachable from compiled code, used by function calls that fall
# through to a plain Python call (`{{ max(a, b) }}`).
SAFE_BUILTINS: dict[str, Any] = {
    "abs": abs,
    "all": all,
    "any": any,
    "bool": bool,
    "dict": dict,
    "enumerate": enumerate,
    "float": float,
    "int": int,
    "isinstance": isinstance,
    "len": len,
    "list": list,
    "max": max,
    "min": min,
    "range": range,
    "repr": repr,
    "reversed": reversed,
    "round": round,
    "set": set,
    "sorted": sorted,
    "str": str,
    "sum": sum,
    "tuple": tuple,
    "zip": zip,
}

# =============================================================================
# Shared Base Namespace
# =============================================================================
# Static entries shared by every Template. Copied once per render.
#
# Thread-Safety: This dict is read-only after module load.
# =============================================================================

STATIC_NAMESPACE: dict[str, Any] = {
    "__builtins__": SAFE_BUILTINS,
    "_Markup": Markup,
    "_LoopContext": LoopContext,
    "_str": str_safe,
    "_escape": html_escape,
    "_escape_css": escape_css,
    "_escape_js": escape_js,
    "_escape_attr": escape_attr,
    "_range": inclusive_range,
    "_list": to_list,
    "_iter_items": iter_items,
    "_getattr": getattr_dynamic,
    "_identical": identical,
    "_is_defined": is_defined,
    "_is_empty": is_empty,
    "_is_numeric": is_numeric,
    "_is_scalar": is_scalar,
    "_is_iterable": is_iterable,
    "_type_of": type_of,
    "_default": default,
    "_trim": trim,
    "_left_trim": left_trim,
    "_right_trim": right_trim,
    "_strip_tags": strip_tags,
    "_slashes": slashes,
    "_strip_slashes": strip_slashes,
    "_nl2br": nl2br,
    "_capitalize": capitalize,
    "_lower": lower,
    "_upper": upper,
    "_length": length,
    "_url_encode": url_encode,
    "_json_encode": json_encode,
    "_json_decode": json_decode,
    "_format": format_string,
    "_sort": sort,
    "_keys": keys,
    "_join": join,
    "_convert_encoding": convert_encoding,
    "_dump": dump,
}
