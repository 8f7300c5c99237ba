"""Executable wrapper around generated template code.

The compiler's output is plain Python source meant to be run by a view
layer. `Template` is that view layer in its smallest form: it compiles
the source once and executes it per render in a fresh namespace holding
the runtime helpers, the `_view` collaborator, the template variables and
an `_append` bound to a local buffer.
"""

from __future__ import annotations

from typing import Any

from stencil.template.helpers import STATIC_NAMESPACE
from stencil.template.view import View

# Names the generated code reserves; variables may not shadow them.
_RESERVED = frozenset({"_append", "_view"})


class Template:
    """Generated code ready for rendering.

    Each `render()` call executes the code in its own namespace, so one
    Template may be rendered from several threads at once.

    Attributes:
        code: Generated Python source
        name: Template name (for error messages)

    Example:
            >>> from stencil import Environment
            >>> env = Environment()
            >>> t = env.from_string("Hello, {{ name|upper }}!")
            >>> t.render(name="World")
            'Hello, WORLD!'
    """

    __slots__ = ("_code_obj", "code", "name")

    def __init__(self, code: str, name: str | None = None):
        self.code = code
        self.name = name
        self._code_obj = compile(code, f"<template {name or 'eval code'}>", "exec")

    def render(self, *args: Any, view: View | None = None, **kwargs: Any) -> str:
        """Render with the given variables.

        Args:
            *args: Optional single dict of variables
            view: `_view` collaborator; a bare `View()` when omitted
            **kwargs: Variables as keyword arguments

        Returns:
            Rendered text
        """
        variables: dict[str, Any] = {}
        if args:
            if len(args) == 1 and isinstance(args[0], dict):
                variables.update(args[0])
            else:
                raise TypeError(
                    f"render() takes at most 1 positional argument (a dict), got {len(args)}"
                )
        variables.update(kwargs)

        reserved = _RESERVED.intersection(variables)
        if reserved:
            raise ValueError(f"Reserved template variable names: {', '.join(sorted(reserved))}")

        buf: list[str] = []
        namespace: dict[str, Any] = dict(STATIC_NAMESPACE)
        namespace.update(variables)
        namespace["_view"] = view if view is not None else View()
        namespace["_append"] = buf.append
        exec(self._code_obj, namespace)
        return "".join(buf)

    def __repr__(self) -> str:
        return f"<Template {self.name or '(inline)'}>"
