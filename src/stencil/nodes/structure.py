"""Template structure nodes for the template IR."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from stencil.nodes.base import Node
from stencil.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class Extends(Node):
    """Template inheritance: {% extends "base.volt" %}"""

    template: Expr


@dataclass(frozen=True, slots=True)
class Block(Node):
    """Named block for inheritance: {% block name %}...{% endblock %}"""

    name: str
    body: Sequence[Node]


@dataclass(frozen=True, slots=True)
class Include(Node):
    """Include another template: {% include "partial.volt" [with params] %}"""

    template: Expr
    params: Expr | None = None


@dataclass(frozen=True, slots=True)
class Cache(Node):
    """Fragment caching: {% cache key [lifetime] %}...{% endcache %}"""

    key: Expr
    body: Sequence[Node]
    ttl: Expr | None = None


@dataclass(frozen=True, slots=True)
class Template(Node):
    """Root node representing a complete template."""

    body: Sequence[Node]
    extends: Extends | None = None
