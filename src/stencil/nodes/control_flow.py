"""Control flow nodes for the template IR."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from stencil.nodes.base import Node
from stencil.nodes.expressions import Expr, Name


@dataclass(frozen=True, slots=True)
class If(Node):
    """Conditional: {% if cond %}...{% elseif cond %}...{% else %}...{% endif %}"""

    test: Expr
    body: Sequence[Node]
    elif_: Sequence[tuple[Expr, Sequence[Node]]] = ()
    else_: Sequence[Node] = ()


@dataclass(frozen=True, slots=True)
class For(Node):
    """For loop: {% for [key,] value in items [if cond] %}...{% else %}...{% endfor %}"""

    target: Name
    iter: Expr
    body: Sequence[Node]
    key: Name | None = None
    empty: Sequence[Node] = ()
    test: Expr | None = None
    has_break: bool = False
    has_continue: bool = False


@dataclass(frozen=True, slots=True)
class Break(Node):
    """Break out of loop: {% break %}"""


@dataclass(frozen=True, slots=True)
class Continue(Node):
    """Skip to next iteration: {% continue %}"""
