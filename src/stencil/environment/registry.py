"""Filter and function registries for the Stencil environment.

A template-level filter or function name maps to one of two entries:

- `Rename(target)`: emit a call to `target` with the compiled arguments.
  For filters the filtered value is the first argument.
- `Generator(callback)`: call `callback(arguments, expr_arguments)` at
  compile time and emit the Python expression text it returns.
  `arguments` is the compiled argument text (`"a, 'b', c=1"`) and
  `expr_arguments` the raw argument nodes.

Registries overlay user entries on a builtin table. User entries always
win on a name collision:

    >>> env.filters["upper"] = "shout"
    >>> env.filters["upper"]
    Rename(target='shout')
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stencil.nodes import Expr


class Arguments(str):
    """Compiled argument text that also keeps each argument's own text.

    Behaves as the plain comma-joined string, so generator callbacks can
    splice it directly. `parts` gives per-argument access:

        >>> args = Arguments(["name", "'-'"])
        >>> str(args), args.parts
        ("name, '-'", ('name', "'-'"))
    """

    parts: tuple[str, ...]

    def __new__(cls, parts: Sequence[str]) -> Arguments:
        obj = super().__new__(cls, ", ".join(parts))
        obj.parts = tuple(parts)
        return obj


@dataclass(frozen=True, slots=True)
class Rename:
    """Emit `target(args...)`; `target` is a dotted Python name."""

    target: str


@dataclass(frozen=True, slots=True)
class Generator:
    """Emit whatever expression text `callback` returns."""

    callback: Callable[[Arguments, Sequence[Expr]], str]


CallMapping = Rename | Generator


def to_mapping(target: str | Callable | CallMapping) -> CallMapping:
    """Normalize a registration target.

    Strings become renames, callables become generators.

    Raises:
        TypeError: For any other value
    """
    if isinstance(target, (Rename, Generator)):
        return target
    if isinstance(target, str):
        return Rename(target)
    if callable(target):
        return Generator(target)
    raise TypeError(
        f"Filter/function target must be a name or a callable, got {type(target).__name__}"
    )


class MappingRegistry:
    """Dict-like overlay of user registrations over a builtin table.

    Supports:
        - env.filters['name'] = 'target' or callback
        - env.filters.update({'name': callback})
        - mapping = env.filters['name']
        - 'name' in env.filters

    Mutations replace the user dict (copy-on-write) so a compile already
    holding a lookup keeps a consistent view.
    """

    __slots__ = ("_builtins", "_user")

    def __init__(self, builtins: Mapping[str, CallMapping]):
        self._builtins = builtins
        self._user: dict[str, CallMapping] = {}

    def __getitem__(self, name: str) -> CallMapping:
        if name in self._user:
            return self._user[name]
        return self._builtins[name]

    def __setitem__(self, name: str, target: str | Callable | CallMapping) -> None:
        new = self._user.copy()
        new[name] = to_mapping(target)
        self._user = new

    def __contains__(self, name: object) -> bool:
        return name in self._user or name in self._builtins

    def __iter__(self) -> Iterator[str]:
        yield from self._user
        yield from (name for name in self._builtins if name not in self._user)

    def __len__(self) -> int:
        return len(set(self._user) | set(self._builtins))

    def get(self, name: str, default: CallMapping | None = None) -> CallMapping | None:
        try:
            return self[name]
        except KeyError:
            return default

    def update(self, mapping: Mapping[str, str | Callable | CallMapping]) -> None:
        """Batch register entries."""
        new = self._user.copy()
        new.update({name: to_mapping(target) for name, target in mapping.items()})
        self._user = new

    def is_user_defined(self, name: str) -> bool:
        return name in self._user

    def copy(self) -> dict[str, CallMapping]:
        """Return the merged table as a plain dict."""
        return {name: self[name] for name in self}
