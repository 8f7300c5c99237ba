"""Statement parsing for the template parser.

Drives the walk over DATA, print and tag regions, dispatches tags through
`_BLOCK_PARSERS`, and enforces the child-template rules once a template
has declared `extends`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from stencil._types import Token, TokenType
from stencil.environment.exceptions import StructuralError
from stencil.nodes import Data, Filter, Output
from stencil.utils.constants import ESCAPING_FILTERS

if TYPE_CHECKING:
    from stencil.environment.exceptions import TemplateSyntaxError
    from stencil.nodes import Expr, Extends, Node

# Tag keyword -> parser method name
_BLOCK_PARSERS: dict[str, str] = {
    "if": "_parse_if",
    "for": "_parse_for",
    "break": "_parse_break",
    "continue": "_parse_continue",
    "set": "_parse_set",
    "do": "_parse_do",
    "block": "_parse_block_tag",
    "extends": "_parse_extends",
    "include": "_parse_include",
    "cache": "_parse_cache",
    "autoescape": "_parse_autoescape",
    "macro": "_parse_macro",
    "return": "_parse_return",
}

# Tags that close an open construct
_END_KEYWORDS = frozenset(
    {"endif", "endfor", "endblock", "endautoescape", "endcache", "endmacro"}
)

# Tags that continue an open construct (if/for)
_CONTINUATION_KEYWORDS = frozenset({"else", "elseif", "elif", "elsefor"})


class StatementParsingMixin:
    """Mixin for parsing statement sequences."""

    if TYPE_CHECKING:
        _name: str | None
        _source: str | None
        _block_stack: list[tuple[str, int, int]]

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
        def _parse_expression(self) -> Expr: ...
        def _parse_extends(self) -> Extends: ...

    def _parse_template_body(self) -> tuple[list[Node], Extends | None]:
        """Parse the top level of a template.

        `extends` must be the first statement. After it, only blocks may
        follow; whitespace-only text is dropped and anything else raises
        before its contents are parsed.
        """
        nodes: list[Node] = []
        extends: Extends | None = None

        while not self._match(TokenType.EOF):
            token = self._current

            if extends is not None:
                if token.type is TokenType.DATA:
                    if token.value.strip():
                        raise self._structural_child_content(token)
                    self._advance()
                    continue
                if token.type is TokenType.BLOCK_BEGIN and self._match_keyword("block", offset=1):
                    nodes.append(self._parse_statement())
                    continue
                if token.type is TokenType.BLOCK_BEGIN and self._match_keyword("extends", offset=1):
                    raise StructuralError.extends_not_first(
                        self._peek(1).lineno, name=self._name, source=self._source
                    )
                raise self._structural_child_content(token)

            if token.type is TokenType.BLOCK_BEGIN and self._match_keyword("extends", offset=1):
                if nodes:
                    raise StructuralError.extends_not_first(
                        self._peek(1).lineno, name=self._name, source=self._source
                    )
                self._advance()  # consume '{%'
                extends = self._parse_extends()
                nodes.append(extends)
                continue

            nodes.append(self._parse_statement())

        return nodes, extends

    def _structural_child_content(self, token: Token) -> StructuralError:
        return StructuralError.child_content(token.lineno, name=self._name, source=self._source)

    def _parse_body(self, stop_on_continuation: bool = False) -> list[Node]:
        """Parse statements until the end tag of the innermost open construct.

        With `stop_on_continuation`, also stops at else/elseif/elsefor so
        the caller can handle the next branch.
        """
        nodes: list[Node] = []
        while not self._match(TokenType.EOF):
            if self._match(TokenType.BLOCK_BEGIN) and self._block_stack:
                keyword = self._peek(1)
                if keyword.type is TokenType.NAME and (
                    keyword.value in _END_KEYWORDS
                    or (stop_on_continuation and keyword.value in _CONTINUATION_KEYWORDS)
                ):
                    break
            nodes.append(self._parse_statement())
        return nodes

    def _parse_statement(self) -> Node:
        token = self._current
        match token.type:
            case TokenType.DATA:
                self._advance()
                return Data(lineno=token.lineno, col_offset=token.col_offset, value=token.value)
            case TokenType.VARIABLE_BEGIN:
                return self._parse_output()
            case TokenType.BLOCK_BEGIN:
                return self._parse_block()
        raise self._error()

    def _parse_block(self) -> Node:
        """Parse a `{% ... %}` tag via the dispatch table."""
        self._advance()  # consume '{%'
        keyword = self._current
        if keyword.type is TokenType.NAME and keyword.value in _BLOCK_PARSERS:
            return getattr(self, _BLOCK_PARSERS[keyword.value])()
        raise self._error()

    def _parse_output(self) -> Output:
        """Parse {{ expr }}.

        A print whose outermost filter already escapes is marked so that
        autoescape does not escape it again.
        """
        start = self._advance()  # consume '{{'
        expr = self._parse_expression()
        self._expect(TokenType.VARIABLE_END)

        escape = None
        if isinstance(expr, Filter) and expr.name in ESCAPING_FILTERS:
            escape = False
        return Output(lineno=start.lineno, col_offset=start.col_offset, expr=expr, escape=escape)
