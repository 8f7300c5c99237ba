"""Expression nodes for the template IR."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from stencil.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Expr(Node):
    """Base class for expressions."""


@dataclass(frozen=True, slots=True)
class Const(Expr):
    """Constant value: string, number, boolean, None."""

    value: str | int | float | bool | None


@dataclass(frozen=True, slots=True)
class Name(Expr):
    """Variable reference: {{ user }}"""

    name: str


@dataclass(frozen=True, slots=True)
class List(Expr):
    """Array literal: [a, b, c]"""

    items: Sequence[Expr]


@dataclass(frozen=True, slots=True)
class Dict(Expr):
    """Map literal: ['a': b, 'c': d] or {'a': b}"""

    keys: Sequence[Expr]
    values: Sequence[Expr]


@dataclass(frozen=True, slots=True)
class Getattr(Expr):
    """Property access: obj.attr"""

    obj: Expr
    attr: str


@dataclass(frozen=True, slots=True)
class DynamicGetattr(Expr):
    """Computed property access: obj.(expr)"""

    obj: Expr
    attr: Expr


@dataclass(frozen=True, slots=True)
class Getitem(Expr):
    """Index access: obj[key]"""

    obj: Expr
    key: Expr


@dataclass(frozen=True, slots=True)
class FuncCall(Expr):
    """Call: func(a, b, 'name': c)

    Named arguments keep their source order.
    """

    func: Expr
    args: Sequence[Expr]
    kwargs: Sequence[tuple[str, Expr]] = ()


@dataclass(frozen=True, slots=True)
class Filter(Expr):
    """Filter application: value|name(args)

    `name` is None when the filter was written as a computed expression
    such as `|(a-1)`; the expression is kept in `computed`.
    """

    value: Expr
    name: str | None
    args: Sequence[Expr] = ()
    kwargs: Sequence[tuple[str, Expr]] = ()
    computed: Expr | None = None


@dataclass(frozen=True, slots=True)
class Test(Expr):
    """Test application: value is [not] name(args)"""

    value: Expr
    name: str
    args: Sequence[Expr] = ()
    negated: bool = False


@dataclass(frozen=True, slots=True)
class BinOp(Expr):
    """Binary arithmetic: left op right

    op is one of `+ - * / % **`.
    """

    op: str
    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class UnaryOp(Expr):
    """Prefix operator: -x, +x, not x, !x (op is `-`, `+` or `not`)"""

    op: str
    operand: Expr


@dataclass(frozen=True, slots=True)
class PostfixOp(Expr):
    """Postfix increment/decrement: x++ / x--"""

    op: str
    operand: Expr


@dataclass(frozen=True, slots=True)
class Compare(Expr):
    """Comparison: a == b, a === b, a in b"""

    left: Expr
    ops: Sequence[str]
    comparators: Sequence[Expr]


@dataclass(frozen=True, slots=True)
class BoolOp(Expr):
    """Boolean operation: a and b, a or b"""

    op: str
    values: Sequence[Expr]


@dataclass(frozen=True, slots=True)
class CondExpr(Expr):
    """Ternary: test ? if_true : if_false"""

    test: Expr
    if_true: Expr
    if_false: Expr


@dataclass(frozen=True, slots=True)
class Range(Expr):
    """Inclusive range: start..end (numbers or single characters)"""

    start: Expr
    end: Expr


@dataclass(frozen=True, slots=True)
class Concat(Expr):
    """String concatenation: a ~ b ~ c"""

    nodes: Sequence[Expr]
