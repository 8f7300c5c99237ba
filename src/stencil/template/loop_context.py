"""Loop iteration metadata for Stencil ``{% for %}`` blocks."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any


class LoopContext:
    """Loop iteration metadata accessible as `loop` inside `{% for %}` blocks.

    Compiled code creates one per loop that reads `loop`, passing the
    enclosing loop's context so nested loops can reach it through
    `loop.parent`. All properties are computed on access.

    Properties:
        index: 1-based iteration count (1, 2, 3, ...)
        index0: 0-based iteration count (0, 1, 2, ...)
        revindex: Reverse 1-based index (counts down to 1)
        revindex0: Reverse 0-based index (counts down to 0)
        first: True on the first iteration
        last: True on the final iteration
        length: Total number of items in the sequence
        parent: Context of the enclosing loop, or None
        self: This context (`loop.self.index`)

    Methods:
        cycle(*values): Return values[index0 % len(values)]

    Example:
            ```
            {% for row in rows %}
                {% for cell in row %}
                    {{ loop.parent.index }}.{{ loop.index }}
                {% endfor %}
            {% endfor %}
            ```
    """

    __slots__ = ("_index", "_items", "_length", "parent")

    def __init__(self, items: list[Any], parent: LoopContext | None = None) -> None:
        self._items = items
        self._length = len(items)
        self._index = 0
        self.parent = parent

    def __iter__(self) -> Iterator[Any]:
        """Iterate through items, updating index for each."""
        for i, item in enumerate(self._items):
            self._index = i
            yield item

    @property
    def self(self) -> LoopContext:
        return self

    @property
    def index(self) -> int:
        """1-based iteration count."""
        return self._index + 1

    @property
    def index0(self) -> int:
        """0-based iteration count."""
        return self._index

    @property
    def first(self) -> bool:
        """True if this is the first iteration."""
        return self._index == 0

    @property
    def last(self) -> bool:
        """True if this is the last iteration."""
        return self._index == self._length - 1

    @property
    def length(self) -> int:
        """Total number of items in the sequence."""
        return self._length

    @property
    def revindex(self) -> int:
        """Reverse 1-based index (counts down to 1)."""
        return self._length - self._index

    @property
    def revindex0(self) -> int:
        """Reverse 0-based index (counts down to 0)."""
        return self._length - self._index - 1

    def cycle(self, *values: Any) -> Any:
        """Cycle through the given values.

        Example:
            {{ loop.cycle('odd', 'even') }}
        """
        if not values:
            return None
        return values[self._index % len(values)]

    def __repr__(self) -> str:
        return f"<LoopContext {self.index}/{self.length}>"
