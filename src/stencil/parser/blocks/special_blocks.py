"""Special block parsing (autoescape, cache)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from stencil._types import TokenType
from stencil.nodes import Autoescape, Cache
from stencil.parser.blocks.core import BlockStackMixin

if TYPE_CHECKING:
    from stencil.nodes import Expr, Node


class SpecialBlockParsingMixin(BlockStackMixin):
    """Mixin for parsing autoescape and cache blocks."""

    if TYPE_CHECKING:

        def _parse_body(self, stop_on_continuation: bool = False) -> list[Node]: ...
        def _parse_expression(self) -> Expr: ...

    def _parse_autoescape(self) -> Autoescape:
        """Parse {% autoescape true|false %}...{% endautoescape %}."""
        start = self._advance()  # consume 'autoescape'
        self._push_block("autoescape", start)

        if not self._match_keyword("true", "false"):
            raise self._error()
        enabled = self._advance().value == "true"
        self._expect(TokenType.BLOCK_END)

        body = self._parse_body()
        self._consume_end_tag("autoescape")
        return Autoescape(
            lineno=start.lineno,
            col_offset=start.col_offset,
            enabled=enabled,
            body=tuple(body),
        )

    def _parse_cache(self) -> Cache:
        """Parse {% cache key [lifetime] %}...{% endcache %}."""
        start = self._advance()  # consume 'cache'
        self._push_block("cache", start)

        key = self._parse_expression()
        ttl = None
        if not self._match(TokenType.BLOCK_END):
            ttl = self._parse_expression()
        self._expect(TokenType.BLOCK_END)

        body = self._parse_body()
        self._consume_end_tag("cache")
        return Cache(
            lineno=start.lineno,
            col_offset=start.col_offset,
            key=key,
            body=tuple(body),
            ttl=ttl,
        )
