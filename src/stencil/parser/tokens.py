"""Token navigation for the template parser.

Cursor movement over the eager token list plus the single place where
syntax errors are built, so every error names its token the same way.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from stencil._types import Token, TokenType
from stencil.environment.exceptions import ErrorCode, TemplateSyntaxError


class TokenNavigationMixin:
    """Mixin providing token cursor helpers.

    Host attributes (from Parser.__init__): `_tokens`, `_pos`, `_name`,
    `_source`.
    """

    if TYPE_CHECKING:
        _tokens: Sequence[Token]
        _pos: int
        _name: str | None
        _source: str | None

    @property
    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _peek(self, offset: int = 0) -> Token:
        index = self._pos + offset
        if index >= len(self._tokens):
            return self._tokens[-1]
        return self._tokens[index]

    def _advance(self) -> Token:
        """Consume and return the current token (EOF is never consumed)."""
        token = self._tokens[self._pos]
        if token.type is not TokenType.EOF:
            self._pos += 1
        return token

    def _match(self, *types: TokenType) -> bool:
        return self._current.type in types

    def _match_keyword(self, *names: str, offset: int = 0) -> bool:
        token = self._peek(offset)
        return token.type is TokenType.NAME and token.value in names

    def _expect(self, token_type: TokenType) -> Token:
        if self._current.type is not token_type:
            raise self._error()
        return self._advance()

    def _expect_keyword(self, name: str) -> Token:
        if not self._match_keyword(name):
            raise self._error()
        return self._advance()

    def _at_end(self, token: Token) -> bool:
        """True when `token` is EOF or the last token before it."""
        if token.type is TokenType.EOF:
            return True
        for index in range(max(0, self._pos - 2), len(self._tokens) - 1):
            if self._tokens[index] is token:
                return self._tokens[index + 1].type is TokenType.EOF
        return False

    def _error(
        self,
        token: Token | None = None,
        suggestion: str | None = None,
    ) -> TemplateSyntaxError:
        """Build a syntax error naming the offending token.

        Errors at (or right before) end of input read `unexpected EOF` and
        carry no line number.
        """
        token = token or self._current
        if self._at_end(token):
            error = TemplateSyntaxError(
                "Syntax error, unexpected EOF",
                None,
                self._name,
                source=self._source,
                hint=suggestion,
            )
            error.code = ErrorCode.UNEXPECTED_EOF
            return error
        return TemplateSyntaxError(
            f"Syntax error, unexpected token {token.describe()}",
            token.lineno,
            self._name,
            source=self._source,
            col_offset=token.col_offset,
            hint=suggestion,
        )
