"""Basic statement compilation for the Stencil compiler.

Provides mixin for compiling basic output statements (data, output).

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING, Any

from stencil.nodes import Concat, Const, Filter
from stencil.utils.constants import ESCAPING_FILTERS

if TYPE_CHECKING:
    from stencil.nodes import Data, Expr, Output


class BasicStatementMixin:
    """Mixin for compiling basic output statements.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.
    """

    # ─────────────────────────────────────────────────────────────────────────
    # Cross-mixin dependencies (type-check only)
    # ─────────────────────────────────────────────────────────────────────────
    if TYPE_CHECKING:
        _autoescape: list[bool]

        # From ExpressionCompilationMixin
        def _compile_expr(self, node: Any, store: bool = False) -> ast.expr: ...

        # From OperatorUtilsMixin
        def _call(
            self,
            func: str | ast.expr,
            args: list[ast.expr] | None = None,
            keywords: list[ast.keyword] | None = None,
        ) -> ast.Call: ...

        # From Compiler core
        def _emit_output(self, value_expr: ast.expr) -> ast.stmt: ...

    def _compile_data(self, node: Data) -> list[ast.stmt]:
        """Compile raw text data: _append("literal text")"""
        if not node.value:
            return []

        return [self._emit_output(ast.Constant(value=node.value))]

    def _compile_output(self, node: Output) -> list[ast.stmt]:
        """Compile {{ expression }} output.

        _append(_escape(expr)) when escaping applies, else _append(_str(expr)).
        A literal string is appended as is, and so are expressions that
        already produce text (concatenation, escaping filters). An explicit
        escaping filter is never escaped again.
        """
        escape = node.escape if node.escape is not None else self._autoescape[-1]
        expr = self._compile_expr(node.expr)

        if escape and not _is_escaping_filter(node.expr):
            expr = self._call("_escape", [expr])
        elif not self._produces_text(node.expr):
            expr = self._call("_str", [expr])

        return [self._emit_output(expr)]

    def _produces_text(self, node: Expr) -> bool:
        if isinstance(node, Const):
            return isinstance(node.value, str)
        if isinstance(node, Concat):
            return True
        return _is_escaping_filter(node)


def _is_escaping_filter(node: Expr) -> bool:
    return isinstance(node, Filter) and node.name in ESCAPING_FILTERS
