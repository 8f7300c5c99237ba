"""Control flow block parsing (if, for, break, continue)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from stencil._types import Token, TokenType
from stencil.nodes import Break, Continue, For, If, Name
from stencil.parser.blocks.core import BlockStackMixin

if TYPE_CHECKING:
    from stencil.nodes import Expr, Node


class ControlFlowBlockParsingMixin(BlockStackMixin):
    """Mixin for parsing control flow blocks.

    `_loop_flags` holds one `{"break": bool, "continue": bool}` entry per
    enclosing for loop; break/continue are only legal while it is
    non-empty.
    """

    if TYPE_CHECKING:
        _loop_flags: list[dict[str, bool]]

        def _peek(self, offset: int = 0) -> Token: ...
        def _expect_keyword(self, name: str) -> Token: ...
        def _parse_body(self, stop_on_continuation: bool = False) -> list[Node]: ...
        def _parse_expression(self) -> Expr: ...

    def _parse_if(self) -> If:
        """Parse {% if %}...{% elseif %}...{% else %}...{% endif %}."""
        start = self._advance()  # consume 'if'
        self._push_block("if", start)

        test = self._parse_expression()
        self._expect(TokenType.BLOCK_END)
        body = self._parse_body(stop_on_continuation=True)

        elif_: list[tuple[Expr, tuple[Node, ...]]] = []
        else_: list[Node] = []
        seen_else = False

        while self._match(TokenType.BLOCK_BEGIN):
            keyword = self._peek(1)
            if keyword.type is not TokenType.NAME or keyword.value not in ("elseif", "elif", "else"):
                break
            if seen_else:
                raise self._error(keyword)
            self._advance()  # consume '{%'
            self._advance()  # consume keyword
            if keyword.value == "else":
                self._expect(TokenType.BLOCK_END)
                else_ = self._parse_body(stop_on_continuation=True)
                seen_else = True
            else:
                cond = self._parse_expression()
                self._expect(TokenType.BLOCK_END)
                elif_.append((cond, tuple(self._parse_body(stop_on_continuation=True))))

        self._consume_end_tag("if")
        return If(
            lineno=start.lineno,
            col_offset=start.col_offset,
            test=test,
            body=tuple(body),
            elif_=tuple(elif_),
            else_=tuple(else_),
        )

    def _parse_loop_variable(self) -> Name:
        token = self._current
        if token.type is not TokenType.NAME or token.value in ("in", "if", "for"):
            raise self._error()
        self._advance()
        return Name(token.lineno, token.col_offset, token.value)

    def _parse_for(self) -> For:
        """Parse {% for [key,] value in iter [if cond] %}...[{% else %}...]{% endfor %}."""
        start = self._advance()  # consume 'for'
        self._push_block("for", start)

        key: Name | None = None
        target = self._parse_loop_variable()
        if self._match(TokenType.COMMA):
            self._advance()
            key, target = target, self._parse_loop_variable()

        self._expect_keyword("in")
        iterable = self._parse_expression()

        test = None
        if self._match_keyword("if"):
            self._advance()
            test = self._parse_expression()
        self._expect(TokenType.BLOCK_END)

        flags = {"break": False, "continue": False}
        self._loop_flags.append(flags)
        try:
            body = self._parse_body(stop_on_continuation=True)
        finally:
            self._loop_flags.pop()

        empty: list[Node] = []
        if self._match(TokenType.BLOCK_BEGIN) and self._match_keyword("else", "elsefor", offset=1):
            self._advance()  # consume '{%'
            self._advance()  # consume 'else'
            self._expect(TokenType.BLOCK_END)
            empty = self._parse_body(stop_on_continuation=True)

        self._consume_end_tag("for")
        return For(
            lineno=start.lineno,
            col_offset=start.col_offset,
            target=target,
            iter=iterable,
            body=tuple(body),
            key=key,
            empty=tuple(empty),
            test=test,
            has_break=flags["break"],
            has_continue=flags["continue"],
        )

    def _parse_break(self) -> Break:
        """Parse {% break %}; only legal inside a for loop."""
        token = self._current
        if not self._loop_flags:
            raise self._error(token, suggestion="{% break %} must be inside a {% for %} loop")
        self._advance()
        self._expect(TokenType.BLOCK_END)
        self._loop_flags[-1]["break"] = True
        return Break(lineno=token.lineno, col_offset=token.col_offset)

    def _parse_continue(self) -> Continue:
        """Parse {% continue %}; only legal inside a for loop."""
        token = self._current
        if not self._loop_flags:
            raise self._error(token, suggestion="{% continue %} must be inside a {% for %} loop")
        self._advance()
        self._expect(TokenType.BLOCK_END)
        self._loop_flags[-1]["continue"] = True
        return Continue(lineno=token.lineno, col_offset=token.col_offset)
