"""Expression compilation for the Stencil compiler.

Turns expression nodes into Python `ast.expr` trees. Filters and
functions are resolved here against the environment's registries:

    {{ name|trim }}            ->  _trim(name)
    {{ link_to('a', 'b') }}    ->  _view.tag.link_to('a', 'b')
    {{ a ~ "-" ~ b }}          ->  _str(a) + '-' + _str(b)
    {{ 1..3 }}                 ->  _range(1, 3)
    {{ a === b }}              ->  _identical(a, b)

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

import ast
import keyword
from collections.abc import Sequence
from typing import TYPE_CHECKING

from stencil.compiler.utils import (
    BINARY_OPS,
    COMPARE_OPS,
    UNARY_OPS,
    safe_identifier,
)
from stencil.environment.exceptions import (
    CompileError,
    UnknownFilterError,
    UnknownFilterTypeError,
)
from stencil.environment.registry import Arguments, CallMapping, Rename
from stencil.environment.tests import BUILTIN_TESTS
from stencil.nodes import Const, Name

if TYPE_CHECKING:
    from stencil.environment import Environment
    from stencil.nodes import Expr, Macro


class ExpressionCompilationMixin:
    """Mixin for compiling expressions.

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
        _macros: dict[str, Macro]

        # From OperatorUtilsMixin
        def _name(self, name: str, store: bool = False) -> ast.Name: ...
        def _call(
            self,
            func: str | ast.expr,
            args: list[ast.expr] | None = None,
            keywords: list[ast.keyword] | None = None,
        ) -> ast.Call: ...

    def _compile_expr(self, node: Expr, store: bool = False) -> ast.expr:
        """Compile an expression node.

        With `store`, produce an assignment target (Name, Attribute or
        Subscript with a Store context).
        """
        handler = getattr(self, f"_compile_{type(node).__name__.lower()}_expr", None)
        if handler is None:
            raise CompileError(
                f"Cannot compile expression {type(node).__name__}",
                node.lineno,
                self._template_name,
            )
        if store:
            return handler(node, store=True)
        return handler(node)

    # ─────────────────────────────────────────────────────────────────────────
    # Atoms and access
    # ─────────────────────────────────────────────────────────────────────────

    def _compile_const_expr(self, node: Expr) -> ast.expr:
        return ast.Constant(value=node.value)

    def _compile_name_expr(self, node: Expr, store: bool = False) -> ast.expr:
        return self._name(safe_identifier(node.name), store=store)

    def _compile_list_expr(self, node: Expr) -> ast.expr:
        return ast.List(elts=[self._compile_expr(item) for item in node.items], ctx=ast.Load())

    def _compile_dict_expr(self, node: Expr) -> ast.expr:
        return ast.Dict(
            keys=[self._compile_expr(k) for k in node.keys],
            values=[self._compile_expr(v) for v in node.values],
        )

    def _compile_getattr_expr(self, node: Expr, store: bool = False) -> ast.expr:
        return ast.Attribute(
            value=self._compile_expr(node.obj),
            attr=safe_identifier(node.attr),
            ctx=ast.Store() if store else ast.Load(),
        )

    def _compile_dynamicgetattr_expr(self, node: Expr) -> ast.expr:
        return self._call(
            "_getattr", [self._compile_expr(node.obj), self._compile_expr(node.attr)]
        )

    def _compile_getitem_expr(self, node: Expr, store: bool = False) -> ast.expr:
        return ast.Subscript(
            value=self._compile_expr(node.obj),
            slice=self._compile_expr(node.key),
            ctx=ast.Store() if store else ast.Load(),
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Operators
    # ─────────────────────────────────────────────────────────────────────────

    def _compile_binop_expr(self, node: Expr) -> ast.expr:
        return ast.BinOp(
            left=self._compile_expr(node.left),
            op=BINARY_OPS[node.op](),
            right=self._compile_expr(node.right),
        )

    def _compile_unaryop_expr(self, node: Expr) -> ast.expr:
        return ast.UnaryOp(op=UNARY_OPS[node.op](), operand=self._compile_expr(node.operand))

    def _compile_postfixop_expr(self, node: Expr) -> ast.expr:
        # x++ / x-- yield the adjacent value; nothing is stored back.
        return ast.BinOp(
            left=self._compile_expr(node.operand),
            op=ast.Add() if node.op == "++" else ast.Sub(),
            right=ast.Constant(value=1),
        )

    def _compile_compare_expr(self, node: Expr) -> ast.expr:
        left = self._compile_expr(node.left)
        (op,) = node.ops
        (right_node,) = node.comparators
        right = self._compile_expr(right_node)

        if op == "===":
            return self._call("_identical", [left, right])
        if op == "!==":
            return ast.UnaryOp(op=ast.Not(), operand=self._call("_identical", [left, right]))
        if isinstance(right_node, Const) and right_node.value is None and op in ("==", "!="):
            cmp: ast.cmpop = ast.Is() if op == "==" else ast.IsNot()
            return ast.Compare(left=left, ops=[cmp], comparators=[right])
        return ast.Compare(left=left, ops=[COMPARE_OPS[op]()], comparators=[right])

    def _compile_boolop_expr(self, node: Expr) -> ast.expr:
        return ast.BoolOp(
            op=ast.And() if node.op == "and" else ast.Or(),
            values=[self._compile_expr(v) for v in node.values],
        )

    def _compile_condexpr_expr(self, node: Expr) -> ast.expr:
        return ast.IfExp(
            test=self._compile_expr(node.test),
            body=self._compile_expr(node.if_true),
            orelse=self._compile_expr(node.if_false),
        )

    def _compile_range_expr(self, node: Expr) -> ast.expr:
        return self._call("_range", [self._compile_expr(node.start), self._compile_expr(node.end)])

    def _compile_concat_expr(self, node: Expr) -> ast.expr:
        """a ~ b ~ 'c' -> _str(a) + _str(b) + 'c'"""
        parts: list[ast.expr] = []
        for child in node.nodes:
            if isinstance(child, Const) and isinstance(child.value, str):
                parts.append(ast.Constant(value=child.value))
            else:
                parts.append(self._call("_str", [self._compile_expr(child)]))
        result = parts[0]
        for part in parts[1:]:
            result = ast.BinOp(left=result, op=ast.Add(), right=part)
        return result

    def _compile_test_expr(self, node: Expr) -> ast.expr:
        builder = BUILTIN_TESTS[node.name]
        result = builder(
            self._compile_expr(node.value), [self._compile_expr(arg) for arg in node.args]
        )
        if node.negated:
            return ast.UnaryOp(op=ast.Not(), operand=result)
        return result

    # ─────────────────────────────────────────────────────────────────────────
    # Calls and filters
    # ─────────────────────────────────────────────────────────────────────────

    def _compile_keywords(self, kwargs: Sequence[tuple[str, Expr]]) -> list[ast.keyword]:
        """Named arguments; keys that are not identifiers go through `**{...}`."""
        keywords: list[ast.keyword] = []
        extra_keys: list[ast.expr] = []
        extra_values: list[ast.expr] = []
        for key, value in kwargs:
            compiled = self._compile_expr(value)
            if key.isidentifier() and not keyword.iskeyword(key):
                keywords.append(ast.keyword(arg=key, value=compiled))
            else:
                extra_keys.append(ast.Constant(value=key))
                extra_values.append(compiled)
        if extra_keys:
            extra = ast.Dict(keys=extra_keys, values=extra_values)
            keywords.append(ast.keyword(arg=None, value=extra))
        return keywords

    def _compile_funccall_expr(self, node: Expr) -> ast.expr:
        """Resolve a call: macro, registered or builtin function, else passthrough."""
        args = [self._compile_expr(arg) for arg in node.args]
        keywords = self._compile_keywords(node.kwargs)

        if not isinstance(node.func, Name):
            return self._call(self._compile_expr(node.func), args, keywords)

        name = node.func.name
        if name in self._macros:
            return self._call(f"_macro_{name}", args, keywords)

        mapping = self._env.functions.get(name)
        if mapping is not None:
            return self._apply_mapping(
                mapping, args, keywords, node.args, f"function '{name}'", node.lineno
            )
        return self._call(safe_identifier(name), args, keywords)

    def _compile_filter_expr(self, node: Expr) -> ast.expr:
        """Compile value|name(args); the value is the first argument."""
        if node.name is None:
            raise UnknownFilterTypeError(node.lineno, self._template_name)

        mapping = self._env.filters.get(node.name)
        if mapping is None:
            raise UnknownFilterError(node.name, node.lineno, self._template_name)

        args = [self._compile_expr(node.value), *(self._compile_expr(a) for a in node.args)]
        keywords = self._compile_keywords(node.kwargs)
        return self._apply_mapping(
            mapping,
            args,
            keywords,
            [node.value, *node.args],
            f"filter '{node.name}'",
            node.lineno,
        )

    def _apply_mapping(
        self,
        mapping: CallMapping,
        args: list[ast.expr],
        keywords: list[ast.keyword],
        expr_arguments: Sequence[Expr],
        label: str,
        lineno: int,
    ) -> ast.expr:
        if isinstance(mapping, Rename):
            target = self._parse_generated(mapping.target, label, lineno)
            return self._call(target, args, keywords)

        parts = [ast.unparse(arg) for arg in args]
        for kw in keywords:
            value = ast.unparse(kw.value)
            parts.append(f"{kw.arg}={value}" if kw.arg else f"**{value}")
        code = mapping.callback(Arguments(parts), tuple(expr_arguments))
        return self._parse_generated(code, label, lineno)

    def _parse_generated(self, code: object, label: str, lineno: int) -> ast.expr:
        if not isinstance(code, str):
            raise CompileError(
                f"Code generated for {label} must be a string, got {type(code).__name__}",
                lineno,
                self._template_name,
            )
        try:
            return ast.parse(code.strip(), mode="eval").body
        except SyntaxError:
            raise CompileError(
                f"Invalid code generated for {label}: {code!r}", lineno, self._template_name
            ) from None
