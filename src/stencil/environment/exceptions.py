"""Exceptions raised while compiling templates.

Exception Hierarchy:
TemplateError (base)
├── ScanningError             # Unlexable input
├── TemplateSyntaxError       # Parser could not build a statement/expression
├── StructuralError           # extends placement / child-template rules
│   └── InheritanceCycleError # extends or include chain loops back
├── CompileError              # Code generation failure
│   ├── UnknownFilterError    # Filter name not registered
│   └── UnknownFilterTypeError  # Filter given as a computed expression
└── ResolutionError           # Loader could not find a template

Error Messages:
`str(error)` is the user-facing message and is stable, so callers can
surface it verbatim:

    Syntax error, unexpected token IF in eval code on line 4
    Unknown filter "unknown" in eval code on line 1
    Syntax error, unexpected EOF in eval code

`format_compact()` adds the error code, a source snippet and a hint for
terminal display.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from stencil.environment import terminal
from stencil.utils.constants import DEFAULT_TEMPLATE_NAME

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------


class ErrorCode(Enum):
    """Searchable error codes.

    Format: S-{CATEGORY}-{NUMBER}
    Categories: LEX (lexer), PAR (parser), STR (structure), GEN (code
    generation), TPL (template loading)
    """

    # Lexer errors (S-LEX-xxx)
    SCANNING_ERROR = "S-LEX-001"

    # Parser errors (S-PAR-xxx)
    UNEXPECTED_TOKEN = "S-PAR-001"
    UNEXPECTED_EOF = "S-PAR-002"
    UNCLOSED_BLOCK = "S-PAR-003"

    # Structural errors (S-STR-xxx)
    EXTENDS_NOT_FIRST = "S-STR-001"
    CHILD_CONTENT = "S-STR-002"
    INHERITANCE_CYCLE = "S-STR-003"

    # Code generation errors (S-GEN-xxx)
    UNKNOWN_FILTER = "S-GEN-001"
    UNKNOWN_FILTER_TYPE = "S-GEN-002"
    INVALID_GENERATOR = "S-GEN-003"

    # Template loading errors (S-TPL-xxx)
    TEMPLATE_NOT_FOUND = "S-TPL-001"

    @property
    def category(self) -> str:
        """Error category (e.g., 'lexer', 'parser', 'structure')."""
        prefix = self.value.split("-")[1]
        return {
            "LEX": "lexer",
            "PAR": "parser",
            "STR": "structure",
            "GEN": "codegen",
            "TPL": "template",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template source context around an error line.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
        column: Optional column offset for caret pointer.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        """Format snippet in Rust-inspired diagnostic style."""
        parts: list[str] = [terminal.dim_text("   |")]
        for lineno, content in self.lines:
            parts.append(
                terminal.format_source_line(lineno, content, is_error=lineno == self.error_line)
            )
        if self.column is not None:
            caret = " " * self.column + "^"
            parts.append(f"{terminal.dim_text('   |')} {terminal.error_line(caret)}")
        parts.append(terminal.dim_text("   |"))
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 2,
    column: int | None = None,
) -> SourceSnippet:
    """Build a SourceSnippet from template source.

    Args:
        source: Full template source text.
        error_line: 1-based line number of the error.
        context_lines: Number of lines to show before/after the error line.
        column: Optional column offset for caret pointer.
    """
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column)


class TemplateError(Exception):
    """Base exception for all template compilation errors.

    All errors carry the template name and (usually) the 1-based line of
    the offending construct, enabling broad handling:

        >>> try:
        ...     env.compile_string(source)
        ... except TemplateError as e:
        ...     log.error("compile failed: %s", e)

    Attributes:
        message: Message without location suffix
        lineno: 1-based line, or None when the error is at end of input
        name: Template name ("eval code" for string compiles)
        source: Template source, when known, for snippets
        col_offset: Optional 0-based column
        hint: Optional suggestion shown by format_compact()
    """

    code: ErrorCode | None = None

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        name: str | None = None,
        *,
        source: str | None = None,
        col_offset: int | None = None,
        hint: str | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.name = name or DEFAULT_TEMPLATE_NAME
        self.source = source
        self.col_offset = col_offset
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.lineno is None:
            return f"{self.message} in {self.name}"
        return f"{self.message} in {self.name} on line {self.lineno}"

    def with_context(self, name: str | None, source: str | None) -> TemplateError:
        """Attach template name/source after the fact and refresh the message.

        Used when an error raised deep in the pipeline surfaces through a
        compile call that knows the template's identity.
        """
        if name:
            self.name = name
        if source is not None and self.source is None:
            self.source = source
        self.args = (self._format_message(),)
        return self

    def format_compact(self) -> str:
        """Format error as a structured, human-readable summary.

        Format::

            S-PAR-001: Syntax error, unexpected token IF in eval code on line 4
               |
            >  4 |     if
               |
            Hint: ...
        """
        parts: list[str] = []

        header = str(self)
        if self.code:
            header = f"{terminal.error_code(self.code.value)}: {header}"
        parts.append(header)

        if self.source and self.lineno:
            snippet = build_source_snippet(self.source, self.lineno, column=self.col_offset)
            if snippet.lines:
                parts.append(snippet.format())

        if self.hint:
            parts.append(terminal.hint(f"Hint: {self.hint}"))

        return "\n".join(parts)


class ScanningError(TemplateError):
    """Input the lexer cannot turn into tokens.

    The message quotes up to 16 characters of the text following the
    offending character:

        Scanning error before 'album.uri, "<img...' in eval code on line 1
    """

    code = ErrorCode.SCANNING_ERROR

    PREVIEW_LENGTH = 16

    @classmethod
    def before(cls, remaining: str, lineno: int, **kwargs) -> ScanningError:
        if not remaining:
            return cls("Scanning error near to EOF", None, **kwargs)
        if len(remaining) > cls.PREVIEW_LENGTH:
            remaining = remaining[: cls.PREVIEW_LENGTH] + "..."
        return cls(f"Scanning error before '{remaining}'", lineno, **kwargs)


class TemplateSyntaxError(TemplateError):
    """Parse-time syntax error.

    Names the offending token (`IF`, `DOT`, `IDENTIFIER(y)`, `~`) and its
    line, or reports `EOF` without a line when input ended too early.
    """

    code = ErrorCode.UNEXPECTED_TOKEN


class StructuralError(TemplateError):
    """Inheritance placement violation.

    Raised when `extends` is not the first statement, or when a child
    template holds top-level content other than blocks.
    """

    code = ErrorCode.CHILD_CONTENT

    @classmethod
    def extends_not_first(cls, lineno: int, **kwargs) -> StructuralError:
        error = cls(
            "Extends statement must be placed at the first line in the template",
            lineno,
            **kwargs,
        )
        error.code = ErrorCode.EXTENDS_NOT_FIRST
        return error

    @classmethod
    def child_content(cls, lineno: int, **kwargs) -> StructuralError:
        return cls(
            "Child templates only may contain blocks",
            lineno,
            hint="Wrap the content in a {% block %} defined by the parent template",
            **kwargs,
        )


class InheritanceCycleError(StructuralError):
    """An extends/include chain refers back to a template already on it."""

    code = ErrorCode.INHERITANCE_CYCLE

    def __init__(self, chain: list[str], lineno: int | None = None, name: str | None = None):
        self.chain = chain
        super().__init__(
            "Template cycle detected: " + " -> ".join(chain),
            lineno,
            name,
            hint="Remove the extends/include that points back into the chain",
        )


class CompileError(TemplateError):
    """Code generation failure."""

    code = ErrorCode.INVALID_GENERATOR


class UnknownFilterError(CompileError):
    """A literal filter name has no builtin or registered mapping."""

    code = ErrorCode.UNKNOWN_FILTER

    def __init__(self, filter_name: str, lineno: int | None = None, name: str | None = None):
        self.filter_name = filter_name
        super().__init__(
            f'Unknown filter "{filter_name}"',
            lineno,
            name,
            hint="Register it with Environment.add_filter()",
        )


class UnknownFilterTypeError(CompileError):
    """A filter was written as a computed expression, e.g. `|(a-1)`."""

    code = ErrorCode.UNKNOWN_FILTER_TYPE

    def __init__(self, lineno: int | None = None, name: str | None = None):
        super().__init__("Unknown filter type", lineno, name)


class ResolutionError(TemplateError):
    """A loader could not locate an extends/include target."""

    code = ErrorCode.TEMPLATE_NOT_FOUND
