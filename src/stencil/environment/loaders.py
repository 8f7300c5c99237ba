"""Template loaders for the Stencil environment.

Loaders provide template source to the Environment when it resolves
`extends`/`include` targets or compiles a template by path. They implement
`get_source(name)` returning `(source, filename)`.

Built-in Loaders:
- `FileSystemLoader`: Load from filesystem directories
- `DictLoader`: Load from in-memory dictionary (testing/embedded)
- `ChoiceLoader`: Try multiple loaders in order
- `FunctionLoader`: Wrap a callable as a loader (quick one-offs)

Custom Loaders:
Implement the Loader protocol:

    ```python
    class DatabaseLoader:
        def get_source(self, name: str) -> tuple[str, str | None]:
            row = db.query("SELECT source FROM templates WHERE name = ?", name)
            if not row:
                raise ResolutionError(f"Template '{name}' not found")
            return row.source, f"db://{name}"
    ```

Thread-Safety:
Loaders should be safe for concurrent `get_source()` calls. All built-in
loaders are.
"""

from __future__ import annotations

from collections.abc import Callable
from difflib import get_close_matches
from pathlib import Path
from typing import Protocol

from stencil.environment.exceptions import ResolutionError


class Loader(Protocol):
    def get_source(self, name: str) -> tuple[str, str | None]: ...


class FileSystemLoader:
    """Load templates from filesystem directories.

    Searches one or more directories for templates by name; the first
    matching file is returned. Absolute names are read as is.

    Search Order:
        Directories are searched in order. First match wins:
            ```python
            loader = FileSystemLoader(["views/custom/", "views/default/"])
            ```

    Example:
            >>> loader = FileSystemLoader("views/")
            >>> source, filename = loader.get_source("layouts/main.volt")
            >>> print(filename)
            'views/layouts/main.volt'

    Raises:
        ResolutionError: If template not found in any search path
    """

    __slots__ = ("_encoding", "_paths")

    def __init__(
        self,
        paths: str | Path | list[str | Path],
        encoding: str = "utf-8",
    ):
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self._paths = [Path(p) for p in paths]
        self._encoding = encoding

    def get_source(self, name: str) -> tuple[str, str]:
        """Load template source from filesystem."""
        candidate = Path(name)
        if candidate.is_absolute() and candidate.is_file():
            return candidate.read_text(self._encoding), str(candidate)
        for base in self._paths:
            path = base / name
            if path.is_file():
                return path.read_text(self._encoding), str(path)
        raise ResolutionError(
            f"Template '{name}' not found in: {', '.join(str(p) for p in self._paths)}",
        )

    def list_templates(self) -> list[str]:
        """List all files in the search paths."""
        templates = set()
        for base in self._paths:
            if base.is_dir():
                for path in base.rglob("*"):
                    if path.is_file():
                        templates.add(path.relative_to(base).as_posix())
        return sorted(templates)


class DictLoader:
    """Load templates from an in-memory dictionary.

    Maps template names to source strings. Useful for testing, embedded
    templates, or dynamically generated templates.

    Example:
            >>> loader = DictLoader({
            ...     "base.volt": "<html>{% block content %}{% endblock %}</html>",
            ...     "page.volt": '{% extends "base.volt" %}{% block content %}Hi{% endblock %}',
            ... })
            >>> env = Environment(loader=loader)
            >>> env.get_template("page.volt").render()
            '<html>Hi</html>'

    Raises:
        ResolutionError: If template name not in mapping
    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: dict[str, str]):
        self._mapping = mapping

    def get_source(self, name: str) -> tuple[str, None]:
        if name not in self._mapping:
            available = sorted(self._mapping.keys())
            msg = f"Template '{name}' not found"
            matches = get_close_matches(name, available, n=1, cutoff=0.6)
            if matches:
                msg += f". Did you mean '{matches[0]}'?"
            elif available:
                msg += f". Available: {', '.join(available[:10])}"
                if len(available) > 10:
                    msg += f" ... ({len(available)} total)"
            raise ResolutionError(msg)
        return self._mapping[name], None

    def list_templates(self) -> list[str]:
        return sorted(self._mapping.keys())


class ChoiceLoader:
    """Try multiple loaders in order, returning the first match.

    Example:
            >>> loader = ChoiceLoader([
            ...     DictLoader({"nav.volt": "<nav>Custom</nav>"}),
            ...     FileSystemLoader("views/"),
            ... ])

    Raises:
        ResolutionError: If no loader can find the template
    """

    __slots__ = ("_loaders",)

    def __init__(self, loaders: list[Loader]):
        self._loaders = loaders

    def get_source(self, name: str) -> tuple[str, str | None]:
        """Try each loader in order, return first match."""
        for loader in self._loaders:
            try:
                return loader.get_source(name)
            except ResolutionError:
                continue
        raise ResolutionError(
            f"Template '{name}' not found in any of {len(self._loaders)} loaders",
        )


class FunctionLoader:
    """Wrap a callable as a loader.

    The callable receives the template name and returns the source string,
    a `(source, filename)` tuple, or None when the template does not exist.

    Example:
            >>> loader = FunctionLoader(lambda name: PAGES.get(name))
    """

    __slots__ = ("_load_func",)

    def __init__(self, load_func: Callable[[str], str | tuple[str, str | None] | None]):
        self._load_func = load_func

    def get_source(self, name: str) -> tuple[str, str | None]:
        result = self._load_func(name)
        if result is None:
            raise ResolutionError(f"Template '{name}' not found")
        if isinstance(result, str):
            return result, None
        return result
