"""Template parser: tokens in, IR out."""

from __future__ import annotations

from stencil.parser.core import Parser
from stencil.parser.expressions import TEST_NAMES

__all__ = ["TEST_NAMES", "Parser"]
