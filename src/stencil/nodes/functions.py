"""Macro nodes for the template IR."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from stencil.nodes.base import Node
from stencil.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class MacroParam(Node):
    """A macro parameter with an optional default expression."""

    name: str
    default: Expr | None = None


@dataclass(frozen=True, slots=True)
class Macro(Node):
    """Macro definition: {% macro name(a, b=1) %}...{% endmacro %}"""

    name: str
    params: Sequence[MacroParam]
    body: Sequence[Node]

    @property
    def args(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.params)


@dataclass(frozen=True, slots=True)
class Return(Node):
    """Return a value from a macro: {% return expr %}"""

    expr: Expr
