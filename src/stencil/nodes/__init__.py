"""Template IR nodes.

Immutable, slotted dataclasses. Expressions nest inside statements and
statements nest inside bodies; nothing is mutated after parsing.
"""

from __future__ import annotations

from stencil.nodes.base import Node
from stencil.nodes.control_flow import Break, Continue, For, If
from stencil.nodes.expressions import (
    BinOp,
    BoolOp,
    Compare,
    Concat,
    CondExpr,
    Const,
    Dict,
    DynamicGetattr,
    Expr,
    Filter,
    FuncCall,
    Getattr,
    Getitem,
    List,
    Name,
    PostfixOp,
    Range,
    Test,
    UnaryOp,
)
from stencil.nodes.functions import Macro, MacroParam, Return
from stencil.nodes.output import Autoescape, Data, Output
from stencil.nodes.structure import Block, Cache, Extends, Include, Template
from stencil.nodes.variables import Assignment, Do, Set

__all__ = [
    "Assignment",
    "Autoescape",
    "BinOp",
    "Block",
    "BoolOp",
    "Break",
    "Cache",
    "Compare",
    "Concat",
    "CondExpr",
    "Const",
    "Continue",
    "Data",
    "Dict",
    "Do",
    "DynamicGetattr",
    "Expr",
    "Extends",
    "Filter",
    "For",
    "FuncCall",
    "Getattr",
    "Getitem",
    "If",
    "Include",
    "List",
    "Macro",
    "MacroParam",
    "Name",
    "Node",
    "Output",
    "PostfixOp",
    "Range",
    "Return",
    "Set",
    "Template",
    "Test",
    "UnaryOp",
]
