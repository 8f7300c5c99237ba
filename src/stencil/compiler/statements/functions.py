"""Macro compilation for the Stencil compiler.

Provides mixin for compiling macro definitions and `return`.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING, Any

from stencil.compiler.utils import safe_identifier

if TYPE_CHECKING:
    from stencil.nodes import Macro, Return


def _assigned_names(body: list[ast.stmt]) -> set[str]:
    """Template names the generated statements bind (set targets, loop targets).

    Compiler temporaries start with an underscore and are skipped.
    """
    return {
        node.id
        for stmt in body
        for node in ast.walk(stmt)
        if isinstance(node, ast.Name)
        and isinstance(node.ctx, ast.Store)
        and not node.id.startswith("_")
    }


class FunctionCompilationMixin:
    """Mixin for compiling macros.

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
        def _join_call(self, buffer: str) -> ast.Call: ...

        # From Compiler core
        def _compile_body(self, nodes: Any) -> list[ast.stmt]: ...

    def _compile_macro(self, node: Macro) -> list[ast.stmt]:
        """Compile {% macro name(args) %}...{% endmacro %}.

        Calls to `name(...)` anywhere in the compile unit resolve to the
        generated function.

        Generates:
            def _macro_name(arg1, arg2=default):
                _macro_buf = []
                _append = _macro_buf.append
                _scope = _macro_name.__globals__
                local = _scope.get('local')
                ... body ...
                return _Markup(''.join(_macro_buf))

        Default expressions are evaluated when the definition runs. A
        parameter without a default that follows one with a default gets
        None.

        Names the body assigns are locals of the generated function. Each
        one that is not a parameter starts from the template variable of
        the same name (None when unset), so `{% set n = n + 1 %}` reads the
        template value and assignments never leak out of the macro.
        """
        args: list[ast.arg] = []
        defaults: list[ast.expr] = []
        for param in node.params:
            args.append(ast.arg(arg=safe_identifier(param.name)))
            if param.default is not None:
                defaults.append(self._compile_expr(param.default))
            elif defaults:
                defaults.append(ast.Constant(value=None))

        # Loop contexts of the template do not reach into the function scope.
        saved_loops = self._loop_contexts
        self._loop_contexts = []
        try:
            body = self._compile_body(node.body)
        finally:
            self._loop_contexts = saved_loops

        func_name = f"_macro_{node.name}"
        params = {arg.arg for arg in args}
        seeded = sorted(name for name in _assigned_names(body) if name not in params)
        seed: list[ast.stmt] = []
        if seeded:
            seed.append(
                self._assign(
                    "_scope",
                    ast.Attribute(value=self._name(func_name), attr="__globals__", ctx=ast.Load()),
                )
            )
            scope_get = ast.Attribute(value=self._name("_scope"), attr="get", ctx=ast.Load())
            seed.extend(
                self._assign(name, self._call(scope_get, [ast.Constant(value=name)]))
                for name in seeded
            )

        func_body: list[ast.stmt] = [
            self._assign("_macro_buf", ast.List(elts=[], ctx=ast.Load())),
            self._assign(
                "_append",
                ast.Attribute(value=self._name("_macro_buf"), attr="append", ctx=ast.Load()),
            ),
            *seed,
            *body,
            ast.Return(value=self._call("_Markup", [self._join_call("_macro_buf")])),
        ]

        return [
            ast.FunctionDef(
                name=func_name,
                args=ast.arguments(
                    posonlyargs=[],
                    args=args,
                    vararg=None,
                    kwonlyargs=[],
                    kw_defaults=[],
                    kwarg=None,
                    defaults=defaults,
                ),
                body=func_body,
                decorator_list=[],
                returns=None,
                type_params=[],
            )
        ]

    def _compile_return(self, node: Return) -> list[ast.stmt]:
        """Compile {% return expr %} inside a macro."""
        return [ast.Return(value=self._compile_expr(node.expr))]
