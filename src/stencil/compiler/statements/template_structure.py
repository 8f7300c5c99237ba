"""Template structure compilation for the Stencil compiler.

Provides mixin for compiling block, extends and include.

Inheritance is resolved before code generation, so blocks are plain
inline sections by the time they get here and `extends` emits nothing.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING, Any

from stencil.environment.exceptions import InheritanceCycleError
from stencil.nodes import Const

if TYPE_CHECKING:
    from stencil.environment import Environment
    from stencil.nodes import Block, Extends, Include, Node


class TemplateStructureMixin:
    """Mixin for compiling template structure statements.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.
    """

    # ─────────────────────────────────────────────────────────────────────────
    # Host attributes and cross-mixin dependencies (type-check only)
    # ─────────────────────────────────────────────────────────────────────────
    if TYPE_CHECKING:
        # Host attributes (from Compiler.__init__)
        _env: Environment
        _template_name: str | None
        _include_stack: list[str]

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

        # From Compiler core
        def _compile_body(self, nodes: Any) -> list[ast.stmt]: ...
        def _collect_macros(self, nodes: Any) -> None: ...
        def _emit_output(self, value_expr: ast.expr) -> ast.stmt: ...

    def _compile_block(self, node: Block) -> list[ast.stmt]:
        """Compile {% block name %}...{% endblock %} inline."""
        return self._compile_body(node.body)

    def _compile_extends(self, node: Extends) -> list[ast.stmt]:
        return []

    def _compile_include(self, node: Include) -> list[ast.stmt]:
        """Compile {% include "path" [with params] %}.

        A literal path without parameters is compiled now and its code
        inlined. Anything else is rendered by the view at run time:
            _append(_view.partial(path, params))

        Raises:
            InheritanceCycleError: If the include chain loops back
            ResolutionError: If the loader cannot find a literal path
        """
        template = node.template
        if (
            node.params is None
            and isinstance(template, Const)
            and isinstance(template.value, str)
        ):
            path = template.value
            if path in self._include_stack:
                raise InheritanceCycleError(
                    [*self._include_stack, path], node.lineno, self._template_name
                )
            referrer = self._include_stack[-1] if self._include_stack else None
            nodes: list[Node] = self._env.resolve(path, referrer)
            self._include_stack.append(path)
            try:
                self._collect_macros(nodes)
                return self._compile_body(nodes)
            finally:
                self._include_stack.pop()

        args = [self._compile_expr(template)]
        if node.params is not None:
            args.append(self._compile_expr(node.params))
        partial = ast.Attribute(value=self._name("_view"), attr="partial", ctx=ast.Load())
        return [self._emit_output(self._call(partial, args))]
