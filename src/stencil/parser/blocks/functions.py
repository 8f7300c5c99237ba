"""Macro block parsing (macro, return)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from stencil._types import KEYWORDS, TokenType
from stencil.nodes import Macro, MacroParam, Return
from stencil.parser.blocks.core import BlockStackMixin

if TYPE_CHECKING:
    from stencil.nodes import Expr, Node


class FunctionBlockParsingMixin(BlockStackMixin):
    """Mixin for parsing macro definitions.

    A macro body is a fresh scope for loop control: break/continue from
    an enclosing for loop are not legal inside it.
    """

    if TYPE_CHECKING:
        _loop_flags: list[dict[str, bool]]
        _macro_depth: int

        def _parse_body(self, stop_on_continuation: bool = False) -> list[Node]: ...
        def _parse_expression(self) -> Expr: ...

    def _parse_macro(self) -> Macro:
        """Parse {% macro name(a, b = default) %}...{% endmacro %}."""
        start = self._advance()  # consume 'macro'
        self._push_block("macro", start)

        token = self._current
        if token.type is not TokenType.NAME or token.value in KEYWORDS:
            raise self._error()
        name = self._advance().value

        params: list[MacroParam] = []
        self._expect(TokenType.LPAREN)
        while not self._match(TokenType.RPAREN):
            param = self._current
            if param.type is not TokenType.NAME or param.value in KEYWORDS:
                raise self._error()
            self._advance()
            default = None
            if self._match(TokenType.ASSIGN):
                self._advance()
                default = self._parse_expression()
            params.append(MacroParam(param.lineno, param.col_offset, param.value, default))
            if not self._match(TokenType.COMMA):
                break
            self._advance()
        self._expect(TokenType.RPAREN)
        self._expect(TokenType.BLOCK_END)

        saved_flags, self._loop_flags = self._loop_flags, []
        self._macro_depth += 1
        try:
            body = self._parse_body()
        finally:
            self._macro_depth -= 1
            self._loop_flags = saved_flags

        self._consume_end_tag("macro")
        return Macro(
            lineno=start.lineno,
            col_offset=start.col_offset,
            name=name,
            params=tuple(params),
            body=tuple(body),
        )

    def _parse_return(self) -> Return:
        """Parse {% return expr %}; only legal inside a macro."""
        start = self._current
        if not self._macro_depth:
            raise self._error(start, suggestion="{% return %} must be inside a {% macro %}")
        self._advance()
        expr = self._parse_expression()
        self._expect(TokenType.BLOCK_END)
        return Return(lineno=start.lineno, col_offset=start.col_offset, expr=expr)
