"""Open-block stack for the template parser.

Every opening construct pushes a marker; its end tag pops it. A closer
that does not match the innermost open construct, or input that ends
while markers remain, is a syntax error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from stencil._types import Token, TokenType

if TYPE_CHECKING:
    from stencil.environment.exceptions import TemplateSyntaxError


class BlockStackMixin:
    """Mixin managing the explicit stack of open constructs.

    Stack entries are `(block_type, lineno, col_offset)`.
    """

    if TYPE_CHECKING:
        _block_stack: list[tuple[str, int, int]]

        @property
        def _current(self) -> Token: ...
        def _advance(self) -> Token: ...
        def _match(self, *types: TokenType) -> bool: ...
        def _expect(self, token_type: TokenType) -> Token: ...
        def _match_keyword(self, *names: str, offset: int = 0) -> bool: ...
        def _error(
            self, token: Token | None = None, suggestion: str | None = None
        ) -> TemplateSyntaxError: ...

    def _push_block(self, block_type: str, token: Token) -> None:
        self._block_stack.append((block_type, token.lineno, token.col_offset))

    def _pop_block(self, block_type: str) -> None:
        opened, _, _ = self._block_stack.pop()
        assert opened == block_type, f"block stack corrupted: {opened} != {block_type}"

    def _unclosed_hint(self) -> str | None:
        if not self._block_stack:
            return None
        block_type, lineno, _ = self._block_stack[-1]
        return f"'{block_type}' opened on line {lineno} needs {{% end{block_type} %}}"

    def _consume_end_tag(self, block_type: str) -> None:
        """Consume `{% end<block_type> %}` and pop the matching marker."""
        if self._current.type is not TokenType.BLOCK_BEGIN:
            raise self._error(suggestion=self._unclosed_hint())
        self._advance()
        if not self._match_keyword(f"end{block_type}"):
            raise self._error(suggestion=self._unclosed_hint())
        self._advance()
        self._expect(TokenType.BLOCK_END)
        self._pop_block(block_type)
