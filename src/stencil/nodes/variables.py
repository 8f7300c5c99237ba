"""Assignment and expression-statement nodes for the template IR."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from stencil.nodes.base import Node
from stencil.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class Assignment(Node):
    """One `target op value` pair inside a set statement.

    target is a Name, Getattr or Getitem chain; op is `=`, `+=`, `-=`,
    `*=` or `/=`.
    """

    target: Expr
    op: str
    value: Expr


@dataclass(frozen=True, slots=True)
class Set(Node):
    """Assignment: {% set a = 1, b.c[0] += 2 %}"""

    assignments: Sequence[Assignment]


@dataclass(frozen=True, slots=True)
class Do(Node):
    """Evaluate and discard: {% do expr %}"""

    expr: Expr
