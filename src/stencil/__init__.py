"""Stencil — ahead-of-time compiler from Volt-style templates to Python source.

Templates are compiled once into flat Python statements that a view layer
executes. The compiler never renders anything itself.

Quickstart:
    >>> from stencil import Environment
    >>> env = Environment()
    >>> env.compile_string("Hello, {{ name }}!")
    "_append('Hello, ')\\n_append(_str(name))\\n_append('!')"

Rendering through the reference runtime:
    >>> env.from_string("{% for i in 1..3 %}{{ i }}{% endfor %}").render()
    '123'

File-based templates:
    >>> from stencil import Environment, FileSystemLoader
    >>> env = Environment(loader=FileSystemLoader("views/"), compiled_path="cache/")
    >>> env.compile("index.volt")  # writes cache/<flattened absolute path>.py

Architecture:
    Template Source → Lexer → Parser → IR → InheritanceResolver → Compiler
    → Python AST → ast.unparse → generated source

Pipeline stages:
1. **Lexer**: Tokenizes template source into a token stream
2. **Parser**: Builds the immutable IR from tokens
3. **InheritanceResolver**: Merges extends chains and `super()` references
4. **Compiler**: Transforms the IR to a Python `ast.Module` and unparses it

Thread-Safety:
    Compilation is idempotent (same input, options and registries give
    byte-identical output). An Environment should not be reconfigured
    while other threads compile with it.
"""

from stencil._types import Token, TokenType
from stencil.environment import (
    Arguments,
    ChoiceLoader,
    CompileError,
    DictLoader,
    Environment,
    ErrorCode,
    FileSystemLoader,
    FunctionLoader,
    Generator,
    InheritanceCycleError,
    Rename,
    ResolutionError,
    ScanningError,
    StructuralError,
    TemplateError,
    TemplateSyntaxError,
    UnknownFilterError,
    UnknownFilterTypeError,
)
from stencil.lexer import LexerConfig
from stencil.template import LoopContext, Markup, Template, View, ViewCache
from stencil.utils.html import html_escape

__version__ = "0.1.0"

__all__ = [
    "Arguments",
    "ChoiceLoader",
    "CompileError",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "FunctionLoader",
    "Generator",
    "InheritanceCycleError",
    "LexerConfig",
    "LoopContext",
    "Markup",
    "Rename",
    "ResolutionError",
    "ScanningError",
    "StructuralError",
    "Template",
    "TemplateError",
    "TemplateSyntaxError",
    "Token",
    "TokenType",
    "UnknownFilterError",
    "UnknownFilterTypeError",
    "View",
    "ViewCache",
    "__version__",
    "html_escape",
]
