"""Built-in tests for Stencil templates.

Tests are boolean predicates used with `is` in conditionals:
`{% if value is test %}` or `{% if value is test(arg) %}`

Each test is a builder that turns the compiled operand (and arguments)
into a Python expression:

    x is defined          ->  _is_defined(lambda: x)
    x is empty            ->  _is_empty(x)
    x is even / odd       ->  x % 2 == 0 / x % 2 != 0
    x is numeric          ->  _is_numeric(x)
    x is scalar           ->  _is_scalar(x)
    x is iterable         ->  _is_iterable(x)
    x is sameas(y)        ->  _identical(x, y)
    x is divisibleby(n)   ->  x % n == 0
    x is type('string')   ->  _type_of(x) == 'string'

Negation:
`{% if user is not defined %}` wraps the result in `not`.
"""

from __future__ import annotations

import ast
from collections.abc import Callable, Sequence

TestBuilder = Callable[[ast.expr, Sequence[ast.expr]], ast.expr]


def _call(func: str, *args: ast.expr) -> ast.Call:
    return ast.Call(func=ast.Name(id=func, ctx=ast.Load()), args=list(args), keywords=[])


def _helper(func: str) -> TestBuilder:
    def build(value: ast.expr, args: Sequence[ast.expr]) -> ast.expr:
        return _call(func, value)

    return build


def _modulo(value: ast.expr, divisor: ast.expr, op: ast.cmpop) -> ast.Compare:
    return ast.Compare(
        left=ast.BinOp(left=value, op=ast.Mod(), right=divisor),
        ops=[op],
        comparators=[ast.Constant(value=0)],
    )


def _test_defined(value: ast.expr, args: Sequence[ast.expr]) -> ast.expr:
    lazy = ast.Lambda(
        args=ast.arguments(
            posonlyargs=[],
            args=[],
            vararg=None,
            kwonlyargs=[],
            kw_defaults=[],
            kwarg=None,
            defaults=[],
        ),
        body=value,
    )
    return _call("_is_defined", lazy)


def _test_even(value: ast.expr, args: Sequence[ast.expr]) -> ast.expr:
    return _modulo(value, ast.Constant(value=2), ast.Eq())


def _test_odd(value: ast.expr, args: Sequence[ast.expr]) -> ast.expr:
    return _modulo(value, ast.Constant(value=2), ast.NotEq())


def _test_sameas(value: ast.expr, args: Sequence[ast.expr]) -> ast.expr:
    return _call("_identical", value, *args[:1])


def _test_divisibleby(value: ast.expr, args: Sequence[ast.expr]) -> ast.expr:
    divisor = args[0] if args else ast.Constant(value=1)
    return _modulo(value, divisor, ast.Eq())


def _test_type(value: ast.expr, args: Sequence[ast.expr]) -> ast.expr:
    return ast.Compare(
        left=_call("_type_of", value),
        ops=[ast.Eq()],
        comparators=[args[0] if args else ast.Constant(value=None)],
    )


BUILTIN_TESTS: dict[str, TestBuilder] = {
    "defined": _test_defined,
    "empty": _helper("_is_empty"),
    "even": _test_even,
    "odd": _test_odd,
    "numeric": _helper("_is_numeric"),
    "scalar": _helper("_is_scalar"),
    "iterable": _helper("_is_iterable"),
    "sameas": _test_sameas,
    "divisibleby": _test_divisibleby,
    "type": _test_type,
}
