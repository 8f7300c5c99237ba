"""Base node class for the template IR."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all IR nodes.

    All nodes track their source location for error reporting.
    Nodes are immutable once parsed.

    """

    lineno: int
    col_offset: int
