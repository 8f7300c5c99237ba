"""Control flow statement compilation for the Stencil compiler.

Provides mixin for compiling if, for, break and continue.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING, Any

from stencil.nodes import Name

if TYPE_CHECKING:
    from stencil.nodes import For, If, Node


class ControlFlowMixin:
    """Mixin for compiling control flow statements.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.
    """

    # ─────────────────────────────────────────────────────────────────────────
    # Host attributes and cross-mixin dependencies (type-check only)
    # ─────────────────────────────────────────────────────────────────────────
    if TYPE_CHECKING:
        # Host attributes (from Compiler.__init__)
        _loop_contexts: list[bool]

        # From ExpressionCompilationMixin
        def _compile_expr(self, node: Any, store: bool = False) -> ast.expr: ...

        # From OperatorUtilsMixin
        def _name(self, name: str, store: bool = False) -> ast.Name: ...
        def _call(
            self,
            func: str | ast.expr,
            args: list[ast.expr] | None = None,
            keywords: list[ast.keyword] | None = None,
        ) -> ast.Call: ...
        def _assign(self, target: str, value: ast.expr) -> ast.Assign: ...
        def _unique(self, prefix: str) -> str: ...

        # From Compiler core
        def _compile_body(self, nodes: Any) -> list[ast.stmt]: ...

    def _compile_break(self, node: Node) -> list[ast.stmt]:
        """Compile {% break %} loop control."""
        return [ast.Break()]

    def _compile_continue(self, node: Node) -> list[ast.stmt]:
        """Compile {% continue %} loop control."""
        return [ast.Continue()]

    def _compile_if(self, node: If) -> list[ast.stmt]:
        """Compile {% if %} ... {% elseif %} ... {% else %} ... {% endif %}.

        elseif branches become nested `if` statements in `orelse`, which
        `ast.unparse` renders as `elif`.
        """
        orelse = self._compile_body(node.else_)
        for test, body in reversed(node.elif_):
            orelse = [
                ast.If(
                    test=self._compile_expr(test),
                    body=self._compile_body(body) or [ast.Pass()],
                    orelse=orelse,
                )
            ]
        return [
            ast.If(
                test=self._compile_expr(node.test),
                body=self._compile_body(node.body) or [ast.Pass()],
                orelse=orelse,
            )
        ]

    def _uses_loop_variable(self, nodes: Any) -> bool:
        """Check if any node in the tree references the 'loop' variable.

        Loops whose body never reads `loop` iterate the items directly
        without building a LoopContext.

        Args:
            nodes: A node or sequence of nodes to check

        Returns:
            True if 'loop' is referenced anywhere in the tree
        """
        if nodes is None:
            return False

        if isinstance(nodes, (list, tuple)):
            return any(self._uses_loop_variable(n) for n in nodes)

        if isinstance(nodes, Name) and nodes.name == "loop":
            return True

        # Skip non-node types (strings, ints, bools, etc.)
        if not hasattr(nodes, "__dataclass_fields__"):
            return False

        for field_name in nodes.__dataclass_fields__:
            child = getattr(nodes, field_name, None)
            if child is not None and self._uses_loop_variable(child):
                return True

        return False

    def _compile_for(self, node: For) -> list[ast.stmt]:
        """Compile {% for %} loop.

        Generates:
            _loop_items_N = _list(iterable)          # _iter_items(...) for k, v
            if _loop_items_N:
                loop = _LoopContext(_loop_items_N, parent)   # only if `loop` is read
                for item in loop:
                    if cond:                         # `for ... if cond` only
                        ... body ...
                loop = loop.parent
            else:
                ... else body ...

        `parent` is the enclosing loop's `loop` when that loop built a
        context, else None.
        """
        items_var = self._unique("loop_items")
        helper = "_iter_items" if node.key is not None else "_list"
        stmts: list[ast.stmt] = [
            self._assign(items_var, self._call(helper, [self._compile_expr(node.iter)]))
        ]

        value_target = self._compile_expr(node.target, store=True)
        if node.key is not None:
            target: ast.expr = ast.Tuple(
                elts=[self._compile_expr(node.key, store=True), value_target],
                ctx=ast.Store(),
            )
        else:
            target = value_target

        uses_loop = self._uses_loop_variable([node.body, node.test])
        has_parent = bool(self._loop_contexts) and self._loop_contexts[-1]

        self._loop_contexts.append(uses_loop)
        try:
            body = self._compile_body(node.body)
        finally:
            self._loop_contexts.pop()

        if node.test is not None:
            body = [
                ast.If(test=self._compile_expr(node.test), body=body or [ast.Pass()], orelse=[])
            ]

        then: list[ast.stmt] = []
        if uses_loop:
            parent: ast.expr = self._name("loop") if has_parent else ast.Constant(value=None)
            then.append(
                self._assign(
                    "loop", self._call("_LoopContext", [self._name(items_var), parent])
                )
            )
            iterable: ast.expr = self._name("loop")
        else:
            iterable = self._name(items_var)

        then.append(
            ast.For(target=target, iter=iterable, body=body or [ast.Pass()], orelse=[])
        )
        if uses_loop:
            restore = ast.Attribute(value=self._name("loop"), attr="parent", ctx=ast.Load())
            then.append(self._assign("loop", restore))

        stmts.append(
            ast.If(
                test=self._name(items_var),
                body=then,
                orelse=self._compile_body(node.empty),
            )
        )
        return stmts
