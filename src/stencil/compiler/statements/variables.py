"""Variable assignment compilation for the Stencil compiler.

Provides mixin for compiling set and do statements.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING, Any

from stencil.compiler.utils import AUGMENTED_OPS

if TYPE_CHECKING:
    from stencil.nodes import Do, Set


class VariableAssignmentMixin:
    """Mixin for compiling variable assignment statements.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.
    """

    # ─────────────────────────────────────────────────────────────────────────
    # Cross-mixin dependencies (type-check only)
    # ─────────────────────────────────────────────────────────────────────────
    if TYPE_CHECKING:
        # From ExpressionCompilationMixin
        def _compile_expr(self, node: Any, store: bool = False) -> ast.expr: ...

    def _compile_set(self, node: Set) -> list[ast.stmt]:
        """Compile {% set a = 1, b.c[0] += 2 %}.

        Each assignment becomes one statement, in source order:
            a = 1
            b.c[0] += 2
        """
        stmts: list[ast.stmt] = []
        for assignment in node.assignments:
            target = self._compile_expr(assignment.target, store=True)
            value = self._compile_expr(assignment.value)
            if assignment.op == "=":
                stmts.append(ast.Assign(targets=[target], value=value))
            else:
                stmts.append(
                    ast.AugAssign(target=target, op=AUGMENTED_OPS[assignment.op](), value=value)
                )
        return stmts

    def _compile_do(self, node: Do) -> list[ast.stmt]:
        """Compile {% do expr %}: evaluate and discard."""
        return [ast.Expr(value=self._compile_expr(node.expr))]
