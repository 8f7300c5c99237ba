"""Operator tables and small AST builders shared by the compiler mixins."""

from __future__ import annotations

import ast
import keyword
from typing import TYPE_CHECKING

# Template binary operator -> Python AST operator
BINARY_OPS: dict[str, type[ast.operator]] = {
    "+": ast.Add,
    "-": ast.Sub,
    "*": ast.Mult,
    "/": ast.Div,
    "%": ast.Mod,
    "**": ast.Pow,
}

UNARY_OPS: dict[str, type[ast.unaryop]] = {
    "-": ast.USub,
    "+": ast.UAdd,
    "not": ast.Not,
}

COMPARE_OPS: dict[str, type[ast.cmpop]] = {
    "==": ast.Eq,
    "!=": ast.NotEq,
    "<": ast.Lt,
    ">": ast.Gt,
    "<=": ast.LtE,
    ">=": ast.GtE,
    "in": ast.In,
    "not in": ast.NotIn,
}

# Compound assignment (`{% set a += 1 %}`) -> Python AST operator
AUGMENTED_OPS: dict[str, type[ast.operator]] = {
    "+=": ast.Add,
    "-=": ast.Sub,
    "*=": ast.Mult,
    "/=": ast.Div,
}


def safe_identifier(name: str) -> str:
    """Map a template name to a usable Python identifier.

    Python keywords get a trailing underscore (`class` -> `class_`).
    """
    if keyword.iskeyword(name):
        return f"{name}_"
    return name


class OperatorUtilsMixin:
    """Mixin with AST construction helpers used by every compiler mixin."""

    if TYPE_CHECKING:
        # Host attributes (from Compiler.__init__)
        _counter: int

    def _name(self, name: str, store: bool = False) -> ast.Name:
        return ast.Name(id=name, ctx=ast.Store() if store else ast.Load())

    def _call(
        self,
        func: str | ast.expr,
        args: list[ast.expr] | None = None,
        keywords: list[ast.keyword] | None = None,
    ) -> ast.Call:
        if isinstance(func, str):
            func = self._name(func)
        return ast.Call(func=func, args=args or [], keywords=keywords or [])

    def _assign(self, target: str, value: ast.expr) -> ast.Assign:
        return ast.Assign(targets=[self._name(target, store=True)], value=value)

    def _join_call(self, buffer: str) -> ast.Call:
        """`''.join(buffer)`"""
        return self._call(
            ast.Attribute(value=ast.Constant(value=""), attr="join", ctx=ast.Load()),
            [self._name(buffer)],
        )

    def _unique(self, prefix: str) -> str:
        """Fresh compiler-internal variable name: `_<prefix>_<n>`."""
        self._counter += 1
        return f"_{prefix}_{self._counter}"
