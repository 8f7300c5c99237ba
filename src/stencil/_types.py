"""Token types and the Token record shared by the lexer and parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Kinds of tokens produced by the lexer.

    Keywords are not separate token types: they are lexed as NAME and
    recognized by the parser, so `{{ if }}` can be reported as an
    unexpected `IF` rather than an unknown character.
    """

    # Regions
    DATA = "data"
    VARIABLE_BEGIN = "variable_begin"
    VARIABLE_END = "variable_end"
    BLOCK_BEGIN = "block_begin"
    BLOCK_END = "block_end"

    # Literals and names
    NAME = "name"
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"

    # Arithmetic
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    POW = "**"
    INCR = "++"
    DECR = "--"

    # Concatenation and access
    TILDE = "~"
    DOT = "."
    RANGE = ".."
    PIPE = "|"

    # Punctuation
    COMMA = ","
    COLON = ":"
    QUESTION = "?"
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    LBRACE = "{"
    RBRACE = "}"

    # Assignment
    ASSIGN = "="
    ADD_ASSIGN = "+="
    SUB_ASSIGN = "-="
    MUL_ASSIGN = "*="
    DIV_ASSIGN = "/="

    # Comparison
    EQ = "=="
    NE = "!="
    IDENTICAL = "==="
    NOT_IDENTICAL = "!=="
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="
    NOT = "!"

    EOF = "eof"


# Longest operators first so the lexer can match greedily.
OPERATORS: tuple[tuple[str, TokenType], ...] = (
    ("===", TokenType.IDENTICAL),
    ("!==", TokenType.NOT_IDENTICAL),
    ("**", TokenType.POW),
    ("++", TokenType.INCR),
    ("--", TokenType.DECR),
    ("..", TokenType.RANGE),
    ("==", TokenType.EQ),
    ("!=", TokenType.NE),
    ("<=", TokenType.LE),
    (">=", TokenType.GE),
    ("+=", TokenType.ADD_ASSIGN),
    ("-=", TokenType.SUB_ASSIGN),
    ("*=", TokenType.MUL_ASSIGN),
    ("/=", TokenType.DIV_ASSIGN),
    ("+", TokenType.ADD),
    ("-", TokenType.SUB),
    ("*", TokenType.MUL),
    ("/", TokenType.DIV),
    ("%", TokenType.MOD),
    ("~", TokenType.TILDE),
    (".", TokenType.DOT),
    ("|", TokenType.PIPE),
    (",", TokenType.COMMA),
    (":", TokenType.COLON),
    ("?", TokenType.QUESTION),
    ("(", TokenType.LPAREN),
    (")", TokenType.RPAREN),
    ("[", TokenType.LBRACKET),
    ("]", TokenType.RBRACKET),
    ("{", TokenType.LBRACE),
    ("}", TokenType.RBRACE),
    ("=", TokenType.ASSIGN),
    ("<", TokenType.LT),
    (">", TokenType.GT),
    ("!", TokenType.NOT),
)

KEYWORDS = frozenset(
    {
        "and", "or", "not", "in", "is",
        "if", "else", "elseif", "elif", "endif",
        "for", "elsefor", "endfor",
        "set", "do", "return",
        "block", "endblock", "extends", "include", "with",
        "cache", "endcache", "autoescape", "endautoescape",
        "macro", "endmacro", "raw", "endraw",
        "break", "continue",
        "true", "false", "null",
    }
)


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexical token.

    Attributes:
        type: Token kind
        value: Lexeme (unescaped for strings, raw text for DATA)
        lineno: 1-based line where the token starts
        col_offset: 0-based column where the token starts
    """

    type: TokenType
    value: str
    lineno: int
    col_offset: int = 0

    def describe(self) -> str:
        """Render the token the way syntax errors name it.

        Keywords are upper-cased (`IF`), identifiers and literals carry
        their value (`IDENTIFIER(y)`, `INTEGER(10)`), and operators are
        shown as their symbol (`~`, `++`) except `.` which reads `DOT`.
        """
        match self.type:
            case TokenType.NAME:
                if self.value in KEYWORDS:
                    return self.value.upper()
                return f"IDENTIFIER({self.value})"
            case TokenType.INTEGER:
                return f"INTEGER({self.value})"
            case TokenType.FLOAT:
                return f"DOUBLE({self.value})"
            case TokenType.STRING:
                return f"STRING({self.value})"
            case TokenType.DOT:
                return "DOT"
            case TokenType.RANGE:
                return "RANGE"
            case TokenType.DATA:
                return "RAW_FRAGMENT"
            case TokenType.VARIABLE_BEGIN:
                return "OPEN_EDELIMITER"
            case TokenType.VARIABLE_END:
                return "CLOSE_EDELIMITER"
            case TokenType.BLOCK_BEGIN:
                return "OPEN_DELIMITER"
            case TokenType.BLOCK_END:
                return "CLOSE_DELIMITER"
            case TokenType.EOF:
                return "EOF"
        return self.value

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, line={self.lineno})"
