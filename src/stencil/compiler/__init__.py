"""Stencil compiler: template IR to Python source.

- `InheritanceResolver` merges an extends chain into one statement list
- `Compiler` turns the merged statements into Python source text
"""

from __future__ import annotations

from stencil.compiler.core import Compiler
from stencil.compiler.inheritance import InheritanceResolver, collect_blocks

__all__ = ["Compiler", "InheritanceResolver", "collect_blocks"]
