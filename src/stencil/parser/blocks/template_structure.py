"""Template structure block parsing (block, extends, include)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from stencil._types import TokenType
from stencil.environment.exceptions import StructuralError
from stencil.nodes import Block, Extends, Include
from stencil.parser.blocks.core import BlockStackMixin

if TYPE_CHECKING:
    from stencil.nodes import Expr, Node


class TemplateStructureBlockParsingMixin(BlockStackMixin):
    """Mixin for parsing template structure blocks."""

    if TYPE_CHECKING:
        _name: str | None
        _source: str | None

        def _parse_body(self, stop_on_continuation: bool = False) -> list[Node]: ...
        def _parse_expression(self) -> Expr: ...

    def _parse_block_tag(self) -> Block:
        """Parse {% block name %}...{% endblock %}."""
        start = self._advance()  # consume 'block'
        self._push_block("block", start)

        if self._current.type is not TokenType.NAME:
            raise self._error()
        name = self._advance().value

        self._expect(TokenType.BLOCK_END)
        body = self._parse_body()
        self._consume_end_tag("block")

        return Block(
            lineno=start.lineno,
            col_offset=start.col_offset,
            name=name,
            body=tuple(body),
        )

    def _parse_extends(self) -> Extends:
        """Parse {% extends "base.volt" %}.

        Nested occurrences are rejected here; the template loop rejects
        top-level ones that do not come first.
        """
        start = self._current
        if self._block_stack:
            raise StructuralError.extends_not_first(
                start.lineno, name=self._name, source=self._source
            )
        self._advance()  # consume 'extends'
        template = self._parse_expression()
        self._expect(TokenType.BLOCK_END)

        return Extends(
            lineno=start.lineno,
            col_offset=start.col_offset,
            template=template,
        )

    def _parse_include(self) -> Include:
        """Parse {% include "partial.volt" [with params] %}."""
        start = self._advance()  # consume 'include'
        template = self._parse_expression()

        params = None
        if self._match_keyword("with"):
            self._advance()
            params = self._parse_expression()
        self._expect(TokenType.BLOCK_END)

        return Include(
            lineno=start.lineno,
            col_offset=start.col_offset,
            template=template,
            params=params,
        )
