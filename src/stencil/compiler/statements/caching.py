"""Cache block compilation for the Stencil compiler.

Provides mixin for compiling fragment cache blocks, which follow the
"probe, capture output on a miss, save, emit" pattern.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from stencil.nodes import Cache


class CachingMixin:
    """Mixin for compiling cache statements.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.
    """

    # ─────────────────────────────────────────────────────────────────────────
    # Host attributes and cross-mixin dependencies (type-check only)
    # ─────────────────────────────────────────────────────────────────────────
    if TYPE_CHECKING:
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
        def _unique(self, prefix: str) -> str: ...

        # From Compiler core
        def _compile_body(self, nodes: Any) -> list[ast.stmt]: ...
        def _emit_output(self, value_expr: ast.expr) -> ast.stmt: ...

    def _compile_cache(self, node: Cache) -> list[ast.stmt]:
        """Compile {% cache key [lifetime] %}...{% endcache %}.

        Fragment caching through the view's `viewCache` service.

        Generates:
            _cache_N = _view.get_service('viewCache')
            _cached_N = _cache_N.start(key, lifetime)
            if _cached_N is None:
                _cache_buf_N = []
                _save_append_N = _append
                _append = _cache_buf_N.append
                try:
                    ... body ...
                finally:
                    _append = _save_append_N
                _cached_N = ''.join(_cache_buf_N)
                _cache_N.save(key, _cached_N, lifetime)
            _append(_cached_N)

        The lifetime argument is passed only when the tag gives one.
        """
        cache_var = self._unique("cache")
        suffix = cache_var.removeprefix("_cache_")
        cached_var = f"_cached_{suffix}"
        buf_var = f"_cache_buf_{suffix}"
        save_var = f"_save_append_{suffix}"

        key = self._compile_expr(node.key)
        ttl = [self._compile_expr(node.ttl)] if node.ttl is not None else []

        def method(name: str) -> ast.Attribute:
            return ast.Attribute(value=self._name(cache_var), attr=name, ctx=ast.Load())

        service = self._call(
            ast.Attribute(value=self._name("_view"), attr="get_service", ctx=ast.Load()),
            [ast.Constant(value="viewCache")],
        )

        miss: list[ast.stmt] = [
            self._assign(buf_var, ast.List(elts=[], ctx=ast.Load())),
            self._assign(save_var, self._name("_append")),
            self._assign(
                "_append",
                ast.Attribute(value=self._name(buf_var), attr="append", ctx=ast.Load()),
            ),
            # break, continue and return inside the body must not leave the
            # capture buffer installed.
            ast.Try(
                body=self._compile_body(node.body) or [ast.Pass()],
                handlers=[],
                orelse=[],
                finalbody=[self._assign("_append", self._name(save_var))],
            ),
            self._assign(cached_var, self._join_call(buf_var)),
            ast.Expr(value=self._call(method("save"), [key, self._name(cached_var), *ttl])),
        ]

        return [
            self._assign(cache_var, service),
            self._assign(cached_var, self._call(method("start"), [key, *ttl])),
            ast.If(
                test=ast.Compare(
                    left=self._name(cached_var),
                    ops=[ast.Is()],
                    comparators=[ast.Constant(value=None)],
                ),
                body=miss,
                orelse=[],
            ),
            self._emit_output(self._name(cached_var)),
        ]
