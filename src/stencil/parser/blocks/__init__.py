"""Block parsing mixins, one per family of tags."""

from __future__ import annotations

from stencil.parser.blocks.control_flow import ControlFlowBlockParsingMixin
from stencil.parser.blocks.core import BlockStackMixin
from stencil.parser.blocks.functions import FunctionBlockParsingMixin
from stencil.parser.blocks.special_blocks import SpecialBlockParsingMixin
from stencil.parser.blocks.template_structure import TemplateStructureBlockParsingMixin
from stencil.parser.blocks.variables import VariableBlockParsingMixin

__all__ = [
    "BlockStackMixin",
    "ControlFlowBlockParsingMixin",
    "FunctionBlockParsingMixin",
    "SpecialBlockParsingMixin",
    "TemplateStructureBlockParsingMixin",
    "VariableBlockParsingMixin",
]
