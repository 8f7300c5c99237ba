"""Expression parsing for the template parser.

Precedence, loosest first:

    ternary          c ? a : b
    or
    and
    not              not x
    comparison       == != === !== < > <= >= in, not in, is [not] <test>
    range            a..b
    concat           a ~ b
    additive         + -
    multiplicative   * / %
    unary            - + !
    power            **
    postfix          a.b  a.(expr)  a[i]  a(args)  a++  a--  a|filter(args)

Filters chain left to right, each one wrapping the previous result.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from stencil._types import KEYWORDS, Token, TokenType
from stencil.nodes import (
    BinOp,
    BoolOp,
    Compare,
    Concat,
    CondExpr,
    Const,
    Dict,
    DynamicGetattr,
    Expr,
    Filter,
    FuncCall,
    Getattr,
    Getitem,
    List,
    Name,
    PostfixOp,
    Range,
    Test,
    UnaryOp,
)

if TYPE_CHECKING:
    from stencil.environment.exceptions import TemplateSyntaxError

TEST_NAMES = frozenset(
    {
        "defined",
        "empty",
        "even",
        "odd",
        "numeric",
        "scalar",
        "iterable",
        "sameas",
        "divisibleby",
        "type",
    }
)

_COMPARE_OPS = {
    TokenType.EQ: "==",
    TokenType.NE: "!=",
    TokenType.IDENTICAL: "===",
    TokenType.NOT_IDENTICAL: "!==",
    TokenType.LT: "<",
    TokenType.GT: ">",
    TokenType.LE: "<=",
    TokenType.GE: ">=",
}

_CONSTANTS = {"true": True, "false": False, "null": None}


class ExpressionParsingMixin:
    """Mixin for parsing expressions.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.
    """

    if TYPE_CHECKING:
        _tokens: Sequence[Token]
        _pos: int

        @property
        def _current(self) -> Token: ...
        def _peek(self, offset: int = 0) -> Token: ...
        def _advance(self) -> Token: ...
        def _match(self, *types: TokenType) -> bool: ...
        def _match_keyword(self, *names: str, offset: int = 0) -> bool: ...
        def _expect(self, token_type: TokenType) -> Token: ...
        def _error(
            self, token: Token | None = None, suggestion: str | None = None
        ) -> TemplateSyntaxError: ...

    def _parse_expression(self) -> Expr:
        return self._parse_ternary()

    def _parse_ternary(self) -> Expr:
        expr = self._parse_or()
        if self._match(TokenType.QUESTION):
            self._advance()
            if_true = self._parse_ternary()
            self._expect(TokenType.COLON)
            if_false = self._parse_ternary()
            return CondExpr(expr.lineno, expr.col_offset, expr, if_true, if_false)
        return expr

    def _parse_or(self) -> Expr:
        left = self._parse_and()
        values = [left]
        while self._match_keyword("or"):
            self._advance()
            values.append(self._parse_and())
        if len(values) == 1:
            return left
        return BoolOp(left.lineno, left.col_offset, "or", tuple(values))

    def _parse_and(self) -> Expr:
        left = self._parse_not()
        values = [left]
        while self._match_keyword("and"):
            self._advance()
            values.append(self._parse_not())
        if len(values) == 1:
            return left
        return BoolOp(left.lineno, left.col_offset, "and", tuple(values))

    def _parse_not(self) -> Expr:
        if self._match_keyword("not"):
            start = self._advance()
            return UnaryOp(start.lineno, start.col_offset, "not", self._parse_not())
        return self._parse_comparison()

    def _parse_comparison(self) -> Expr:
        left = self._parse_range()
        while True:
            token = self._current
            if token.type in _COMPARE_OPS:
                self._advance()
                right = self._parse_range()
                left = Compare(
                    left.lineno, left.col_offset, left, (_COMPARE_OPS[token.type],), (right,)
                )
            elif self._match_keyword("in"):
                self._advance()
                right = self._parse_range()
                left = Compare(left.lineno, left.col_offset, left, ("in",), (right,))
            elif self._match_keyword("not") and self._match_keyword("in", offset=1):
                self._advance()
                self._advance()
                right = self._parse_range()
                left = Compare(left.lineno, left.col_offset, left, ("not in",), (right,))
            elif self._match_keyword("is"):
                left = self._parse_is(left)
            else:
                return left

    def _parse_is(self, left: Expr) -> Expr:
        """Parse `is [not] <test>` or the `is [not] <expr>` equality form."""
        self._advance()  # consume 'is'
        negated = False
        if self._match_keyword("not"):
            self._advance()
            negated = True

        token = self._current
        if token.type is TokenType.NAME and token.value in TEST_NAMES:
            self._advance()
            args: tuple[Expr, ...] = ()
            if self._match(TokenType.LPAREN):
                positional, _ = self._parse_call_args()
                args = tuple(positional)
            return Test(left.lineno, left.col_offset, left, token.value, args, negated)

        right = self._parse_range()
        op = "!=" if negated else "=="
        return Compare(left.lineno, left.col_offset, left, (op,), (right,))

    def _parse_range(self) -> Expr:
        left = self._parse_concat()
        if self._match(TokenType.RANGE):
            self._advance()
            right = self._parse_concat()
            return Range(left.lineno, left.col_offset, left, right)
        return left

    def _parse_concat(self) -> Expr:
        left = self._parse_additive()
        nodes = [left]
        while self._match(TokenType.TILDE):
            self._advance()
            nodes.append(self._parse_additive())
        if len(nodes) == 1:
            return left
        return Concat(left.lineno, left.col_offset, tuple(nodes))

    def _parse_additive(self) -> Expr:
        left = self._parse_multiplicative()
        while self._match(TokenType.ADD, TokenType.SUB):
            op = self._advance().value
            right = self._parse_multiplicative()
            left = BinOp(left.lineno, left.col_offset, op, left, right)
        return left

    def _parse_multiplicative(self) -> Expr:
        left = self._parse_unary()
        while self._match(TokenType.MUL, TokenType.DIV, TokenType.MOD):
            op = self._advance().value
            right = self._parse_unary()
            left = BinOp(left.lineno, left.col_offset, op, left, right)
        return left

    def _parse_unary(self) -> Expr:
        if self._match(TokenType.SUB, TokenType.ADD):
            token = self._advance()
            return UnaryOp(token.lineno, token.col_offset, token.value, self._parse_unary())
        if self._match(TokenType.NOT):
            token = self._advance()
            return UnaryOp(token.lineno, token.col_offset, "not", self._parse_unary())
        return self._parse_power()

    def _parse_power(self) -> Expr:
        base = self._parse_postfix()
        if self._match(TokenType.POW):
            self._advance()
            exponent = self._parse_unary()
            return BinOp(base.lineno, base.col_offset, "**", base, exponent)
        return base

    def _parse_postfix(self) -> Expr:
        expr = self._parse_primary()
        while True:
            token = self._current
            match token.type:
                case TokenType.DOT:
                    self._advance()
                    if self._match(TokenType.NAME):
                        attr = self._advance().value
                        expr = Getattr(expr.lineno, expr.col_offset, expr, attr)
                    elif self._match(TokenType.LPAREN):
                        self._advance()
                        attr_expr = self._parse_expression()
                        self._expect(TokenType.RPAREN)
                        expr = DynamicGetattr(expr.lineno, expr.col_offset, expr, attr_expr)
                    else:
                        raise self._error()
                case TokenType.LBRACKET:
                    self._advance()
                    key = self._parse_expression()
                    self._expect(TokenType.RBRACKET)
                    expr = Getitem(expr.lineno, expr.col_offset, expr, key)
                case TokenType.LPAREN:
                    args, kwargs = self._parse_call_args()
                    expr = FuncCall(expr.lineno, expr.col_offset, expr, tuple(args), tuple(kwargs))
                case TokenType.INCR | TokenType.DECR:
                    self._advance()
                    expr = PostfixOp(expr.lineno, expr.col_offset, token.value, expr)
                case TokenType.PIPE:
                    expr = self._parse_filter(expr)
                case _:
                    return expr

    def _parse_filter(self, value: Expr) -> Filter:
        """Parse `|name`, `|name(args)` or the computed form `|(expr)`."""
        pipe = self._advance()
        if self._match(TokenType.NAME):
            name = self._advance().value
            args: list[Expr] = []
            kwargs: list[tuple[str, Expr]] = []
            if self._match(TokenType.LPAREN):
                args, kwargs = self._parse_call_args()
            return Filter(pipe.lineno, pipe.col_offset, value, name, tuple(args), tuple(kwargs))
        if self._match(TokenType.LPAREN):
            computed = self._parse_primary()
            return Filter(pipe.lineno, pipe.col_offset, value, None, computed=computed)
        raise self._error()

    def _parse_call_args(self) -> tuple[list[Expr], list[tuple[str, Expr]]]:
        """Parse `(a, b, 'name': c, other: d)`.

        A string or identifier directly followed by `:` starts a named
        argument; positional and named arguments may be mixed.
        """
        self._expect(TokenType.LPAREN)
        args: list[Expr] = []
        kwargs: list[tuple[str, Expr]] = []
        if self._match(TokenType.RPAREN):
            self._advance()
            return args, kwargs

        while True:
            if (
                self._match(TokenType.STRING, TokenType.NAME)
                and self._peek(1).type is TokenType.COLON
            ):
                key = self._advance().value
                self._advance()  # consume ':'
                kwargs.append((key, self._parse_expression()))
            else:
                args.append(self._parse_expression())
            if self._match(TokenType.COMMA):
                self._advance()
                continue
            self._expect(TokenType.RPAREN)
            return args, kwargs

    def _parse_primary(self) -> Expr:
        token = self._current
        match token.type:
            case TokenType.STRING:
                self._advance()
                return Const(token.lineno, token.col_offset, token.value)
            case TokenType.INTEGER:
                self._advance()
                return Const(token.lineno, token.col_offset, int(token.value))
            case TokenType.FLOAT:
                self._advance()
                return Const(token.lineno, token.col_offset, float(token.value))
            case TokenType.NAME:
                lowered = token.value.lower()
                if lowered in _CONSTANTS:
                    self._advance()
                    return Const(token.lineno, token.col_offset, _CONSTANTS[lowered])
                if token.value in KEYWORDS:
                    raise self._error()
                self._advance()
                return Name(token.lineno, token.col_offset, token.value)
            case TokenType.LPAREN:
                self._advance()
                expr = self._parse_expression()
                self._expect(TokenType.RPAREN)
                return expr
            case TokenType.LBRACKET:
                return self._parse_bracket_literal()
            case TokenType.LBRACE:
                return self._parse_brace_literal()
        raise self._error()

    def _parse_map_key(self) -> Expr:
        """Map keys: strings, numbers, or bare identifiers (read as strings)."""
        token = self._current
        if token.type is TokenType.NAME and token.value.lower() not in _CONSTANTS:
            self._advance()
            return Const(token.lineno, token.col_offset, token.value)
        return self._parse_expression()

    def _parse_bracket_literal(self) -> Expr:
        """Parse `[a, b]` or `[k: v, ...]`; a `key:` pattern makes it a map."""
        start = self._advance()
        if self._match(TokenType.RBRACKET):
            self._advance()
            return List(start.lineno, start.col_offset, ())

        is_map = self._peek(1).type is TokenType.COLON
        if is_map:
            keys, values = self._parse_map_items(TokenType.RBRACKET)
            return Dict(start.lineno, start.col_offset, keys, values)

        items = [self._parse_expression()]
        while self._match(TokenType.COMMA):
            self._advance()
            if self._match(TokenType.RBRACKET):
                break
            items.append(self._parse_expression())
        self._expect(TokenType.RBRACKET)
        return List(start.lineno, start.col_offset, tuple(items))

    def _parse_brace_literal(self) -> Expr:
        start = self._advance()
        if self._match(TokenType.RBRACE):
            self._advance()
            return Dict(start.lineno, start.col_offset, (), ())
        keys, values = self._parse_map_items(TokenType.RBRACE)
        return Dict(start.lineno, start.col_offset, keys, values)

    def _parse_map_items(self, closer: TokenType) -> tuple[tuple[Expr, ...], tuple[Expr, ...]]:
        keys: list[Expr] = []
        values: list[Expr] = []
        while True:
            keys.append(self._parse_map_key())
            self._expect(TokenType.COLON)
            values.append(self._parse_expression())
            if self._match(TokenType.COMMA):
                self._advance()
                if self._match(closer):
                    break
                continue
            break
        self._expect(closer)
        return tuple(keys), tuple(values)
