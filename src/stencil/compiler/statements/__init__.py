"""Statement compilation for the Stencil compiler.

Provides mixins for compiling statement nodes to Python AST statements.

The statements package is organized into logical modules:
- basic: Basic output (data, output)
- control_flow: Control flow (if, for, break, continue)
- variables: Variable assignments (set, do)
- template_structure: Template structure (block, extends, include)
- functions: Macros (macro, return)
- caching: Cache blocks
- special_blocks: Autoescape blocks

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from stencil.compiler.statements.basic import BasicStatementMixin
from stencil.compiler.statements.caching import CachingMixin
from stencil.compiler.statements.control_flow import ControlFlowMixin
from stencil.compiler.statements.functions import FunctionCompilationMixin
from stencil.compiler.statements.special_blocks import SpecialBlockMixin
from stencil.compiler.statements.template_structure import TemplateStructureMixin
from stencil.compiler.statements.variables import VariableAssignmentMixin


class StatementCompilationMixin(
    BasicStatementMixin,
    ControlFlowMixin,
    VariableAssignmentMixin,
    TemplateStructureMixin,
    FunctionCompilationMixin,
    CachingMixin,
    SpecialBlockMixin,
):
    """Combined mixin for compiling all statement types.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks in each individual mixin.
    """
