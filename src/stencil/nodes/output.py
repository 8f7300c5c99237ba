"""Output nodes for the template IR."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from stencil.nodes.base import Node
from stencil.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class Output(Node):
    """Print: {{ expr }}

    `escape` is None when the ambient autoescape mode decides, False when
    the expression already ends in an escaping filter.
    """

    expr: Expr
    escape: bool | None = None


@dataclass(frozen=True, slots=True)
class Data(Node):
    """Raw text between template constructs."""

    value: str


@dataclass(frozen=True, slots=True)
class Autoescape(Node):
    """Control autoescaping: {% autoescape true %}...{% endautoescape %}"""

    enabled: bool
    body: Sequence[Node]
