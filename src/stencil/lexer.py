"""Template lexer.

Splits template source into literal-text regions and tag regions and turns
the inside of every `{{ ... }}` and `{% ... %}` into expression tokens.
Comments (`{# ... #}`) produce no tokens, but the newlines they contain
still advance the line counter. An unterminated comment swallows the rest
of the input.

There are no whitespace-control markers: `{{-1}}` prints minus one.

`{% raw %}...{% endraw %}` is resolved here: its content is emitted as a
single DATA token and never tokenized.

Example:
    >>> [t.type.name for t in tokenize("A{{ x }}")]
    ['DATA', 'VARIABLE_BEGIN', 'NAME', 'VARIABLE_END', 'EOF']
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from stencil._types import OPERATORS, Token, TokenType
from stencil.environment.exceptions import ScanningError, TemplateSyntaxError

_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NUMBER_RE = re.compile(r"\d+(\.\d+)?", re.ASCII)
_STRING_RE = re.compile(r"""("([^"\\]*(?:\\.[^"\\]*)*)"|'([^'\\]*(?:\\.[^'\\]*)*)')""", re.S)
_WHITESPACE_RE = re.compile(r"\s+")
_STRING_ESCAPES = re.compile(r"\\([\\'\"])")


@dataclass(frozen=True, slots=True)
class LexerConfig:
    """Delimiter configuration.

    Attributes:
        variable_start/variable_end: Print delimiters
        block_start/block_end: Tag delimiters
        comment_start/comment_end: Comment delimiters
    """

    variable_start: str = "{{"
    variable_end: str = "}}"
    block_start: str = "{%"
    block_end: str = "%}"
    comment_start: str = "{#"
    comment_end: str = "#}"


DEFAULT_CONFIG = LexerConfig()


def unescape_string(body: str) -> str:
    """Resolve `\\\\`, `\\'` and `\\"`; any other backslash is kept verbatim."""
    return _STRING_ESCAPES.sub(r"\1", body)


class Lexer:
    """Tokenizer for one template source.

    The lexer is single-use: create one per source and call `tokenize()`.
    """

    __slots__ = (
        "_config",
        "_line_start",
        "_lineno",
        "_name",
        "_pos",
        "_raw_end_re",
        "_raw_start_re",
        "_source",
    )

    def __init__(self, source: str, config: LexerConfig | None = None, name: str | None = None):
        self._source = source
        self._config = config or DEFAULT_CONFIG
        self._name = name
        self._pos = 0
        self._lineno = 1
        self._line_start = 0
        cfg = self._config
        self._raw_start_re = re.compile(r"\s*raw\s*" + re.escape(cfg.block_end))
        self._raw_end_re = re.compile(
            re.escape(cfg.block_start) + r"\s*endraw\s*" + re.escape(cfg.block_end)
        )

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _advance_to(self, end: int) -> None:
        """Move to `end`, counting the newlines skipped over."""
        chunk = self._source[self._pos : end]
        newlines = chunk.count("\n")
        if newlines:
            self._lineno += newlines
            self._line_start = self._pos + chunk.rindex("\n") + 1
        self._pos = end

    def _token(self, type_: TokenType, value: str, start: int, lineno: int | None = None) -> Token:
        return Token(
            type_,
            value,
            self._lineno if lineno is None else lineno,
            max(0, start - self._line_start),
        )

    def _scanning_error(self, at: int) -> ScanningError:
        return ScanningError.before(
            self._source[at + 1 :], self._lineno, name=self._name, source=self._source
        )

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def tokenize(self) -> Iterator[Token]:
        """Yield tokens for the whole source, ending with EOF."""
        cfg = self._config
        source = self._source
        openers = (
            (cfg.variable_start, TokenType.VARIABLE_BEGIN),
            (cfg.block_start, TokenType.BLOCK_BEGIN),
            (cfg.comment_start, None),
        )

        while self._pos < len(source):
            found = [
                (idx, delim, kind)
                for delim, kind in openers
                if (idx := source.find(delim, self._pos)) != -1
            ]
            if not found:
                yield from self._emit_data(source[self._pos :])
                self._advance_to(len(source))
                break

            # Earliest opener wins; on a tie the longer delimiter wins.
            idx, delim, kind = min(found, key=lambda f: (f[0], -len(f[1])))
            inner = idx + len(delim)
            yield from self._emit_data(source[self._pos : idx])
            self._advance_to(idx)

            if kind is None:
                self._skip_comment(inner)
                continue

            if kind is TokenType.BLOCK_BEGIN and (raw := self._raw_start_re.match(source, inner)):
                yield from self._lex_raw(raw.end())
                continue

            yield self._token(kind, delim, idx)
            self._advance_to(inner)
            end_delim = cfg.variable_end if kind is TokenType.VARIABLE_BEGIN else cfg.block_end
            end_type = (
                TokenType.VARIABLE_END if kind is TokenType.VARIABLE_BEGIN else TokenType.BLOCK_END
            )
            yield from self._lex_expression(end_delim, end_type)

        yield Token(TokenType.EOF, "", self._lineno, self._pos - self._line_start)

    def _emit_data(self, text: str) -> Iterator[Token]:
        if text:
            yield Token(TokenType.DATA, text, self._lineno, self._pos - self._line_start)

    def _skip_comment(self, inner: int) -> None:
        cfg = self._config
        end = self._source.find(cfg.comment_end, inner)
        if end == -1:
            self._advance_to(len(self._source))
            return
        self._advance_to(end + len(cfg.comment_end))

    def _lex_raw(self, body_start: int) -> Iterator[Token]:
        match = self._raw_end_re.search(self._source, body_start)
        if match is None:
            raise TemplateSyntaxError(
                "Syntax error, unexpected EOF", None, self._name, source=self._source
            )
        body = self._source[body_start : match.start()]
        self._advance_to(body_start)
        if body:
            yield Token(TokenType.DATA, body, self._lineno, body_start - self._line_start)
        self._advance_to(match.end())

    def _lex_expression(self, end_delim: str, end_type: TokenType) -> Iterator[Token]:
        """Tokenize the inside of a tag up to and including its end delimiter.

        Stops silently at end of input so the parser reports `unexpected EOF`.
        """
        source = self._source
        length = len(source)
        brace_depth = 0

        while self._pos < length:
            pos = self._pos
            ws = _WHITESPACE_RE.match(source, pos)
            if ws:
                self._advance_to(ws.end())
                continue

            if brace_depth == 0:
                if source.startswith(end_delim, pos):
                    yield self._token(end_type, end_delim, pos)
                    self._advance_to(pos + len(end_delim))
                    return

            char = source[pos]

            if char in "0123456789":
                match = _NUMBER_RE.match(source, pos)
                assert match is not None
                type_ = TokenType.FLOAT if match.group(1) else TokenType.INTEGER
                yield self._token(type_, match.group(), pos)
                self._advance_to(match.end())
                continue

            if char.isalpha() or char == "_":
                match = _NAME_RE.match(source, pos)
                if match is None:
                    raise self._scanning_error(pos)
                yield self._token(TokenType.NAME, match.group(), pos)
                self._advance_to(match.end())
                continue

            if char in "\"'":
                match = _STRING_RE.match(source, pos)
                if match is None:
                    raise self._scanning_error(pos)
                body = match.group(2) if char == '"' else match.group(3)
                yield self._token(TokenType.STRING, unescape_string(body), pos)
                self._advance_to(match.end())
                continue

            for op, type_ in OPERATORS:
                if source.startswith(op, pos):
                    if type_ is TokenType.LBRACE:
                        brace_depth += 1
                    elif type_ is TokenType.RBRACE:
                        brace_depth -= 1
                    yield self._token(type_, op, pos)
                    self._advance_to(pos + len(op))
                    break
            else:
                raise self._scanning_error(pos)


def tokenize(source: str, config: LexerConfig | None = None, name: str | None = None) -> list[Token]:
    """Tokenize template source eagerly.

    Args:
        source: Template text
        config: Delimiter configuration (defaults to `{{ }}`, `{% %}`, `{# #}`)
        name: Template name for error messages

    Raises:
        ScanningError: On characters that start no token
    """
    return list(Lexer(source, config, name).tokenize())
