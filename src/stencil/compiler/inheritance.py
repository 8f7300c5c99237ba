"""Template inheritance resolution.

Merges a template's `extends` chain into one statement list rooted at the
base template, before code generation:

1. Load the chain leaf → ... → root through the environment's loader.
2. Walk the root body; every block takes the body of the nearest
   descendant that defines it (the leaf wins).
3. `{{ super() }}` inside a block body splices in the next ancestor's
   version of the same block, itself resolved the same way.

Descendant blocks whose name never appears in the merged output are
dead. They are logged and kept in `dead_blocks`; the
resolver does not treat them as errors.

Example:
    base.volt:   [{% block a %}A{% endblock %}]
    child.volt:  {% extends "base.volt" %}{% block a %}<{{ super() }}>{% endblock %}

    resolved:    [<A>]
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import replace
from typing import TYPE_CHECKING

from stencil.environment.exceptions import CompileError, InheritanceCycleError
from stencil.nodes import Block, Const, FuncCall, If, Name, Output, Template

if TYPE_CHECKING:
    from stencil.environment import Environment
    from stencil.nodes import Node

logger = logging.getLogger(__name__)

# Fields holding nested statement lists
_BODY_FIELDS = ("body", "else_", "empty")


def _is_super_call(node: Node) -> bool:
    """`{{ super() }}` as a whole print statement."""
    if not isinstance(node, Output):
        return False
    expr = node.expr
    return (
        isinstance(expr, FuncCall)
        and isinstance(expr.func, Name)
        and expr.func.name == "super"
        and not expr.args
    )


def _map_bodies(node: Node, fn: Callable[[Sequence[Node]], list[Node]]) -> Node:
    """Copy `node` with `fn` applied to each nested statement list."""
    changes: dict[str, object] = {
        field: tuple(fn(getattr(node, field)))
        for field in _BODY_FIELDS
        if field in getattr(node, "__dataclass_fields__", ())
    }
    if isinstance(node, If) and node.elif_:
        changes["elif_"] = tuple((test, tuple(fn(body))) for test, body in node.elif_)
    return replace(node, **changes) if changes else node


def _iter_bodies(node: Node) -> Iterator[Sequence[Node]]:
    for field in _BODY_FIELDS:
        if field in getattr(node, "__dataclass_fields__", ()):
            yield getattr(node, field)
    if isinstance(node, If):
        for _, body in node.elif_:
            yield body


def collect_blocks(
    nodes: Sequence[Node], into: dict[str, Block] | None = None
) -> dict[str, Block]:
    """Map block name → first Block node with that name, searching nested bodies."""
    blocks: dict[str, Block] = {} if into is None else into
    for node in nodes:
        if isinstance(node, Block):
            blocks.setdefault(node.name, node)
        for body in _iter_bodies(node):
            collect_blocks(body, blocks)
    return blocks


class InheritanceResolver:
    """Resolve one template's extends chain.

    Attributes:
        chain: Template names, leaf first
        dead_blocks: (template name, block name) of overrides that were
            never used in the merged output
    """

    __slots__ = ("_env", "_levels", "_used", "chain", "dead_blocks")

    def __init__(self, env: Environment):
        self._env = env
        self._levels: list[dict[str, Block]] = []
        self._used: set[tuple[int, str]] = set()
        self.chain: list[str] = []
        self.dead_blocks: list[tuple[str, str]] = []

    def resolve(self, template: Template, name: str) -> list[Node]:
        """Return the merged statement list for `template`.

        A template without `extends` is returned unchanged.

        Raises:
            InheritanceCycleError: If the chain refers back to a member
            ResolutionError: If the loader cannot find a parent
            CompileError: If an extends path is not a string literal
        """
        self.chain = [name]
        self.dead_blocks = []
        if template.extends is None:
            return list(template.body)

        templates = [template]
        current = template
        while current.extends is not None:
            extends = current.extends
            path = extends.template
            if not (isinstance(path, Const) and isinstance(path.value, str)):
                raise CompileError(
                    "Extends path must be a string literal", extends.lineno, self.chain[-1]
                )
            if path.value in self.chain:
                raise InheritanceCycleError(
                    [*self.chain, path.value], extends.lineno, self.chain[-1]
                )
            logger.debug("Resolving parent template %s of %s", path.value, self.chain[-1])
            current = self._env.load(path.value, referrer=self.chain[-1])
            self.chain.append(path.value)
            templates.append(current)

        self._levels = [collect_blocks(t.body) for t in templates]
        self._used = set()
        root = len(templates) - 1
        body = self._substitute(templates[root].body, frozenset(), None)

        rendered = {block_name for _, block_name in self._used}
        self.dead_blocks = [
            (self.chain[level], block_name)
            for level, blocks in enumerate(self._levels[:root])
            for block_name in blocks
            if block_name not in rendered
        ]
        for template_name, block_name in self.dead_blocks:
            logger.info("Block '%s' in %s is never rendered", block_name, template_name)
        return body

    def _substitute(
        self,
        nodes: Sequence[Node],
        active: frozenset[str],
        current: tuple[str, int] | None,
    ) -> list[Node]:
        """Replace blocks by their nearest override and `super()` by the parent version.

        Args:
            nodes: Statements to rewrite
            active: Names of the blocks being resolved (a block nested in
                itself keeps its own body)
            current: (block name, level) whose body is being rewritten,
                for `super()`
        """
        result: list[Node] = []
        for node in nodes:
            if current is not None and _is_super_call(node):
                block_name, level = current
                parent_level = self._nearest_level(block_name, level + 1)
                result.extend(self._resolve_block(block_name, parent_level, active))
            elif isinstance(node, Block) and node.name not in active:
                level = self._nearest_level(node.name, 0)
                body = self._resolve_block(node.name, level, active)
                result.append(replace(node, body=tuple(body)))
            else:
                result.append(
                    _map_bodies(node, lambda body: self._substitute(body, active, current))
                )
        return result

    def _nearest_level(self, block_name: str, start: int) -> int | None:
        for level in range(start, len(self._levels)):
            if block_name in self._levels[level]:
                return level
        return None

    def _resolve_block(
        self, block_name: str, level: int | None, active: frozenset[str]
    ) -> list[Node]:
        if level is None:
            return []
        self._used.add((level, block_name))
        return self._substitute(
            self._levels[level][block_name].body,
            active | {block_name},
            (block_name, level),
        )
