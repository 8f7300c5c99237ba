"""Special block compilation for the Stencil compiler.

Provides mixin for compiling autoescape blocks.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from stencil.nodes import Autoescape


class SpecialBlockMixin:
    """Mixin for compiling special blocks.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.
    """

    # ─────────────────────────────────────────────────────────────────────────
    # Host attributes and cross-mixin dependencies (type-check only)
    # ─────────────────────────────────────────────────────────────────────────
    if TYPE_CHECKING:
        # Host attributes (from Compiler.__init__)
        _autoescape: list[bool]

        # From Compiler core
        def _compile_body(self, nodes: Any) -> list[ast.stmt]: ...

    def _compile_autoescape(self, node: Autoescape) -> list[ast.stmt]:
        """Compile {% autoescape true|false %}...{% endautoescape %}.

        Escaping is decided at compile time, so the block only switches the
        mode used for the prints inside it; no code is emitted for the tags.
        """
        self._autoescape.append(node.enabled)
        try:
            return self._compile_body(node.body)
        finally:
            self._autoescape.pop()
