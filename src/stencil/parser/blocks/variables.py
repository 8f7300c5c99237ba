"""Assignment block parsing (set, do)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from stencil._types import KEYWORDS, Token, TokenType
from stencil.nodes import Assignment, Do, Getattr, Getitem, Name, Set

if TYPE_CHECKING:
    from stencil.environment.exceptions import TemplateSyntaxError
    from stencil.nodes import Expr

_ASSIGN_OPS = {
    TokenType.ASSIGN: "=",
    TokenType.ADD_ASSIGN: "+=",
    TokenType.SUB_ASSIGN: "-=",
    TokenType.MUL_ASSIGN: "*=",
    TokenType.DIV_ASSIGN: "/=",
}


class VariableBlockParsingMixin:
    """Mixin for parsing set and do statements."""

    if TYPE_CHECKING:

        @property
        def _current(self) -> Token: ...
        def _advance(self) -> Token: ...
        def _match(self, *types: TokenType) -> bool: ...
        def _expect(self, token_type: TokenType) -> Token: ...
        def _error(
            self, token: Token | None = None, suggestion: str | None = None
        ) -> TemplateSyntaxError: ...
        def _parse_expression(self) -> Expr: ...

    def _parse_set_target(self) -> Expr:
        """Parse an assignable path: name, name.attr, name[expr], chained."""
        token = self._current
        if token.type is not TokenType.NAME or token.value in KEYWORDS:
            raise self._error()
        self._advance()
        target: Expr = Name(token.lineno, token.col_offset, token.value)
        while True:
            if self._match(TokenType.DOT):
                self._advance()
                if not self._match(TokenType.NAME):
                    raise self._error()
                target = Getattr(token.lineno, token.col_offset, target, self._advance().value)
            elif self._match(TokenType.LBRACKET):
                self._advance()
                key = self._parse_expression()
                self._expect(TokenType.RBRACKET)
                target = Getitem(token.lineno, token.col_offset, target, key)
            else:
                return target

    def _parse_set(self) -> Set:
        """Parse {% set a = 1, b.c[0] += 2 %}."""
        start = self._advance()  # consume 'set'
        assignments: list[Assignment] = []
        while True:
            target = self._parse_set_target()
            op_token = self._current
            if op_token.type not in _ASSIGN_OPS:
                raise self._error()
            self._advance()
            value = self._parse_expression()
            assignments.append(
                Assignment(target.lineno, target.col_offset, target, _ASSIGN_OPS[op_token.type], value)
            )
            if not self._match(TokenType.COMMA):
                break
            self._advance()
        self._expect(TokenType.BLOCK_END)
        return Set(lineno=start.lineno, col_offset=start.col_offset, assignments=tuple(assignments))

    def _parse_do(self) -> Do:
        """Parse {% do expr %}."""
        start = self._advance()  # consume 'do'
        expr = self._parse_expression()
        self._expect(TokenType.BLOCK_END)
        return Do(lineno=start.lineno, col_offset=start.col_offset, expr=expr)
