"""Property-based tests for the Stencil lexer.

Uses hypothesis to verify structural invariants that must hold for
*all* inputs, not just hand-picked examples:

- Plain text round-trips through tokenization unchanged
- Variable prints produce balanced delimiter tokens
- Arbitrary input never causes an unhandled crash
- Comments never produce tokens
"""

from __future__ import annotations

from hypothesis import given, settings

from stencil._types import TokenType
from stencil.environment.exceptions import ScanningError, TemplateSyntaxError
from stencil.lexer import tokenize

from .strategies import (
    arbitrary_template_source,
    comment_only_template,
    plain_text,
    template_fragment,
    volt_variable,
)

_BEGIN_END_PAIRS = {
    TokenType.VARIABLE_BEGIN: TokenType.VARIABLE_END,
    TokenType.BLOCK_BEGIN: TokenType.BLOCK_END,
}


class TestLexerProperties:
    """Property-based lexer invariants."""

    @given(source=plain_text)
    @settings(max_examples=200)
    def test_plain_text_roundtrip(self, source: str) -> None:
        """Text without delimiters produces a single DATA token with the original content."""
        tokens = tokenize(source)
        assert [t.type for t in tokens] == [TokenType.DATA, TokenType.EOF]
        assert tokens[0].value == source

    @given(source=volt_variable)
    @settings(max_examples=200)
    def test_variable_has_balanced_delimiters(self, source: str) -> None:
        types = [t.type for t in tokenize(source)]
        assert types == [
            TokenType.VARIABLE_BEGIN,
            TokenType.NAME,
            TokenType.VARIABLE_END,
            TokenType.EOF,
        ]

    @given(source=arbitrary_template_source)
    @settings(max_examples=300)
    def test_no_unhandled_crash(self, source: str) -> None:
        """The lexer raises only template errors on malformed input."""
        try:
            tokens = tokenize(source)
        except (ScanningError, TemplateSyntaxError):
            return
        assert tokens[-1].type is TokenType.EOF

    @given(source=template_fragment)
    @settings(max_examples=200)
    def test_fragment_delimiter_balance(self, source: str) -> None:
        types = [t.type for t in tokenize(source)]
        for begin, end in _BEGIN_END_PAIRS.items():
            assert types.count(begin) == types.count(end)

    @given(source=comment_only_template)
    @settings(max_examples=100)
    def test_comments_produce_no_tokens(self, source: str) -> None:
        assert [t.type for t in tokenize(source)] == [TokenType.EOF]
