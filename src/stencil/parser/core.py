"""Template parser core.

Combines the token navigation, expression, statement and block mixins
into the `Parser` that turns a token list into a `Template` node.

Example:
    >>> from stencil.lexer import tokenize
    >>> from stencil.parser import Parser
    >>> template = Parser(tokenize("A{{ x }}")).parse()
    >>> len(template.body)
    2
"""

from __future__ import annotations

from collections.abc import Sequence

from stencil._types import Token, TokenType
from stencil.nodes import Template
from stencil.parser.blocks import (
    ControlFlowBlockParsingMixin,
    FunctionBlockParsingMixin,
    SpecialBlockParsingMixin,
    TemplateStructureBlockParsingMixin,
    VariableBlockParsingMixin,
)
from stencil.parser.expressions import ExpressionParsingMixin
from stencil.parser.statements import StatementParsingMixin
from stencil.parser.tokens import TokenNavigationMixin


class Parser(
    TokenNavigationMixin,
    ExpressionParsingMixin,
    StatementParsingMixin,
    ControlFlowBlockParsingMixin,
    TemplateStructureBlockParsingMixin,
    FunctionBlockParsingMixin,
    VariableBlockParsingMixin,
    SpecialBlockParsingMixin,
):
    """Recursive-descent parser producing the template IR.

    Attributes:
        _tokens: Token list ending in EOF
        _pos: Cursor into `_tokens`
        _name: Template name for error messages
        _source: Template source for error snippets
        _block_stack: Open constructs awaiting their end tag
        _loop_flags: break/continue usage per enclosing for loop
        _macro_depth: Nesting depth of macro definitions
    """

    __slots__ = (
        "_block_stack",
        "_loop_flags",
        "_macro_depth",
        "_name",
        "_pos",
        "_source",
        "_tokens",
    )

    def __init__(
        self,
        tokens: Sequence[Token],
        name: str | None = None,
        source: str | None = None,
    ):
        if not tokens or tokens[-1].type is not TokenType.EOF:
            lineno = tokens[-1].lineno if tokens else 1
            tokens = [*tokens, Token(TokenType.EOF, "", lineno)]
        self._tokens = tokens
        self._pos = 0
        self._name = name
        self._source = source
        self._block_stack: list[tuple[str, int, int]] = []
        self._loop_flags: list[dict[str, bool]] = []
        self._macro_depth = 0

    def parse(self) -> Template:
        """Parse the whole token stream.

        Raises:
            TemplateSyntaxError: On malformed input
            StructuralError: On extends placement violations
        """
        body, extends = self._parse_template_body()
        return Template(lineno=1, col_offset=0, body=tuple(body), extends=extends)
