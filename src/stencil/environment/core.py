"""Core Environment class for Stencil.

The Environment is the compiler facade. It owns:
- Compile options (autoescape, delimiters, compiled-file naming)
- Filter and function registries (builtin tables overlaid by user entries)
- The loader used to resolve `extends`/`include` targets

Pipeline per compile:

    source ──tokenize──► tokens ──Parser──► Template IR
           ──InheritanceResolver──► merged statements ──Compiler──► Python source

Thread-Safety:
    Registration mutates the registries copy-on-write, but an Environment
    is meant to be configured first and then used for compiling. Callers
    compiling in parallel while registering should use one Environment
    per thread.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from stencil.compiler import Compiler, InheritanceResolver
from stencil.environment.exceptions import ResolutionError, TemplateError
from stencil.environment.filters import BUILTIN_FILTERS
from stencil.environment.functions import BUILTIN_FUNCTIONS
from stencil.environment.loaders import FileSystemLoader
from stencil.environment.registry import CallMapping, MappingRegistry
from stencil.lexer import LexerConfig, tokenize
from stencil.parser import Parser
from stencil.utils.constants import DEFAULT_TEMPLATE_NAME

if TYPE_CHECKING:
    from stencil.environment.loaders import Loader
    from stencil.nodes import Node
    from stencil.nodes import Template as TemplateNode
    from stencil.template import Template

logger = logging.getLogger(__name__)

# Option name -> attribute backing it
_OPTIONS: dict[str, str] = {
    "autoescape": "autoescape",
    "lexer_config": "lexer_config",
    "compiled_path": "compiled_path",
    "compiled_separator": "compiled_separator",
    "compiled_extension": "compiled_extension",
}

CompiledPath = str | Path | Callable[[str], str | Path] | None


class Environment:
    """Central configuration and compile entry point for Stencil.

    Attributes:
        loader: Template source provider for extends/include/compile by path
        autoescape: Default escaping mode for prints
        lexer_config: Delimiter configuration
        compiled_path: Directory for compiled files, or a callable mapping a
            template path to its compiled path. None writes next to the source.
        compiled_separator: Replaces path separators when flattening a
            template path into a file name under `compiled_path`
        compiled_extension: Suffix appended to compiled file names
        filters: Filter registry (name → rename or generator)
        functions: Function registry (name → rename or generator)

    Example:
            >>> env = Environment()
            >>> env.compile_string("Hello {{ name }}!")
            "_append('Hello ')\\n_append(_str(name))\\n_append('!')"

            >>> env.add_filter("shout", "helpers.shout")
            >>> env.compile_string("{{ name|shout }}")
            '_append(_str(helpers.shout(name)))'
    """

    def __init__(
        self,
        loader: Loader | None = None,
        autoescape: bool = False,
        lexer_config: LexerConfig | None = None,
        compiled_path: CompiledPath = None,
        compiled_separator: str = "%%",
        compiled_extension: str = ".py",
    ):
        self.loader: Loader = loader if loader is not None else FileSystemLoader(os.getcwd())
        self.autoescape = autoescape
        self.lexer_config = lexer_config or LexerConfig()
        self.compiled_path = compiled_path
        self.compiled_separator = compiled_separator
        self.compiled_extension = compiled_extension
        self.filters = MappingRegistry(BUILTIN_FILTERS)
        self.functions = MappingRegistry(BUILTIN_FUNCTIONS)

    # ─────────────────────────────────────────────────────────────────────────
    # Options and registration
    # ─────────────────────────────────────────────────────────────────────────

    def set_option(self, name: str, value: Any) -> None:
        """Set a compile option by name.

        Raises:
            ValueError: If `name` is not a recognized option
        """
        if name not in _OPTIONS:
            raise ValueError(f"Option '{name}' is not valid")
        setattr(self, _OPTIONS[name], value)

    def get_option(self, name: str) -> Any:
        """Read a compile option by name.

        Raises:
            ValueError: If `name` is not a recognized option
        """
        if name not in _OPTIONS:
            raise ValueError(f"Option '{name}' is not valid")
        return getattr(self, _OPTIONS[name])

    def add_function(self, name: str, target: str | Callable | CallMapping) -> None:
        """Register a template function.

        Args:
            name: Name used in templates (`{{ name(...) }}`)
            target: Python name to call instead (rename), or a callable
                `(arguments, expr_arguments) -> str` returning the
                expression to emit (generator)
        """
        self.functions[name] = target

    def add_filter(self, name: str, target: str | Callable | CallMapping) -> None:
        """Register a template filter.

        A rename receives the filtered value as its first argument. A
        generator sees it as the first compiled argument.
        """
        self.filters[name] = target

    # ─────────────────────────────────────────────────────────────────────────
    # Parsing and resolution
    # ─────────────────────────────────────────────────────────────────────────

    def parse(self, source: str, name: str = DEFAULT_TEMPLATE_NAME) -> list[Node]:
        """Parse source into its top-level statement nodes.

        Raises:
            ScanningError: On unlexable input
            TemplateSyntaxError: On malformed input
            StructuralError: On extends placement violations
        """
        return list(self._parse(source, name).body)

    def _parse(self, source: str, name: str) -> TemplateNode:
        tokens = tokenize(source, self.lexer_config, name)
        return Parser(tokens, name, source).parse()

    def load(self, path: str, referrer: str | None = None) -> TemplateNode:
        """Read and parse a template through the loader.

        Args:
            path: Logical template path
            referrer: Template that asked for `path`, named in a
                ResolutionError

        Raises:
            ResolutionError: If the loader cannot find `path`
        """
        try:
            source, _filename = self.loader.get_source(path)
        except ResolutionError as e:
            raise e.with_context(referrer, None) from None
        return self._parse(source, path)

    def resolve(self, path: str, referrer: str | None = None) -> list[Node]:
        """Load `path` and merge its extends chain into one statement list."""
        return self._resolve(self.load(path, referrer), path)

    def _resolve(self, template: TemplateNode, name: str) -> list[Node]:
        resolver = InheritanceResolver(self)
        nodes = resolver.resolve(template, name)
        if len(resolver.chain) > 1:
            logger.debug("Resolved %s through %s", name, " -> ".join(resolver.chain))
        return nodes

    # ─────────────────────────────────────────────────────────────────────────
    # Compilation
    # ─────────────────────────────────────────────────────────────────────────

    def compile_string(self, source: str, name: str = DEFAULT_TEMPLATE_NAME) -> str:
        """Compile template source to Python source.

        Args:
            source: Template text
            name: Template name for error messages and relative resolution

        Returns:
            Generated Python statements; empty for empty templates

        Raises:
            TemplateError: Any scanning, syntax, structural, resolution or
                code generation failure. Nothing is partially returned.
        """
        logger.debug("Compiling %s", name)
        try:
            nodes = self._resolve(self._parse(source, name), name)
            code = Compiler(self).compile(nodes, name)
        except TemplateError as e:
            if e.name == name:
                e.with_context(None, source)
            raise
        logger.debug("Compiled %s (%d characters)", name, len(code))
        return code

    def compile_file(self, path: str | Path, compiled_path: str | Path) -> str:
        """Compile the template at `path` and write the result to `compiled_path`.

        `path` is read through the loader, so it is relative to the
        loader's search paths unless absolute.

        Returns:
            The generated code
        """
        name = Path(path).as_posix()
        source, _filename = self.loader.get_source(name)
        code = self.compile_string(source, name)
        self._write(code, Path(compiled_path))
        return code

    def compile(self, path: str | Path) -> Path:
        """Compile the template at `path` to its derived compiled path.

        The compiled path is derived from the file the loader read, or from
        `path` itself for loaders without files.

        Returns:
            Path of the written file
        """
        name = Path(path).as_posix()
        source, filename = self.loader.get_source(name)
        target = self.compiled_path_for(filename or name)
        self._write(self.compile_string(source, name), target)
        return target

    def _write(self, code: str, target: Path) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(code, encoding="utf-8")
        logger.debug("Wrote %s", target)

    def compiled_path_for(self, path: str | Path) -> Path:
        """Derive where the compiled version of `path` is written.

        - No `compiled_path`: next to the source, with `compiled_extension`
          appended (`views/index.volt` → `views/index.volt.py`)
        - A directory: the template's absolute path flattened with
          `compiled_separator` and lower-cased
          (`/app/views/index.volt` → `<dir>/app%%views%%index.volt.py`)
        - A callable: called with the template path; its result is used as is
        """
        compiled = self.compiled_path
        if callable(compiled):
            return Path(compiled(str(path)))
        if compiled is None:
            return Path(f"{path}{self.compiled_extension}")

        sep = self.compiled_separator
        flat = str(Path(path).resolve())
        for char in ("/", "\\", ":"):
            flat = flat.replace(char, sep)
        while flat.startswith(sep):
            flat = flat[len(sep) :]
        return Path(compiled) / f"{flat.lower()}{self.compiled_extension}"

    # ─────────────────────────────────────────────────────────────────────────
    # Reference runtime
    # ─────────────────────────────────────────────────────────────────────────

    def from_string(self, source: str, name: str = DEFAULT_TEMPLATE_NAME) -> Template:
        """Compile source into an executable Template.

        Example:
            >>> env.from_string("{% for i in 1..3 %}{{ i }}{% endfor %}").render()
            '123'
        """
        from stencil.template import Template

        return Template(self.compile_string(source, name), name)

    def get_template(self, path: str) -> Template:
        """Load and compile a template by path into an executable Template."""
        from stencil.template import Template

        source, _filename = self.loader.get_source(path)
        return Template(self.compile_string(source, path), path)
