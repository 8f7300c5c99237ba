"""Stencil Compiler Core: main Compiler class.

The Compiler transforms resolved template IR into a Python `ast.Module`
and renders it as source text with `ast.unparse`. Uses a mixin-based
design for maintainability.

Design Principles:
1. **AST-to-AST**: Generate `ast.Module`, never concatenated source strings
2. **StringBuilder**: Output via `_append(...)`; the caller joins the buffer
3. **Flat module**: Statements run at module level, so template variables
   are plain global names and blocks are inlined
4. **O(1) dispatch**: Dict-based node type → handler lookup

Generated code for `Hello {{ name }}!`:

    ```python
    _append('Hello ')
    _append(_str(name))
    _append('!')
    ```

Identical IR, configuration and registries always produce byte-identical
text.
"""

from __future__ import annotations

import ast
from collections.abc import Callable, Iterator, Sequence
from typing import TYPE_CHECKING

from stencil.compiler.expressions import ExpressionCompilationMixin
from stencil.compiler.statements import StatementCompilationMixin
from stencil.compiler.utils import OperatorUtilsMixin
from stencil.environment.exceptions import CompileError
from stencil.nodes import Macro, Template

if TYPE_CHECKING:
    from stencil.environment import Environment
    from stencil.nodes import Node


class Compiler(
    OperatorUtilsMixin,
    ExpressionCompilationMixin,
    StatementCompilationMixin,
):
    """Compile resolved template IR to Python source.

    Attributes:
        _env: Parent Environment (filter/function registries, loader)
        _template_name: Template name for error messages
        _autoescape: Autoescape mode stack; the top decides for prints
        _loop_contexts: Per enclosing for loop, whether it built a LoopContext
        _macros: Macros defined in the compile unit, by name
        _include_stack: Templates being inlined, outermost first
        _counter: Counter for unique variable names

    Node Dispatch:
        Uses O(1) dict lookup for node type → handler:
            ```python
            dispatch = {
                "Data": self._compile_data,
                "Output": self._compile_output,
                "If": self._compile_if,
                ...
            }
            handler = dispatch[type(node).__name__]
            ```

    Example:
            >>> from stencil import Environment
            >>> env = Environment()
            >>> compiler = Compiler(env)
            >>> compiler.compile(env.parse("{{ 'hello' }}"))
            "_append('hello')"
    """

    __slots__ = (
        "_autoescape",
        "_counter",
        "_env",
        "_include_stack",
        "_loop_contexts",
        "_macros",
        "_node_dispatch",
        "_template_name",
    )

    def __init__(self, env: Environment):
        self._env = env
        self._template_name: str | None = None
        self._autoescape: list[bool] = [bool(env.autoescape)]
        self._loop_contexts: list[bool] = []
        self._macros: dict[str, Macro] = {}
        self._include_stack: list[str] = []
        self._counter = 0

    def compile(self, nodes: Template | Sequence[Node], name: str | None = None) -> str:
        """Compile IR to Python source text.

        Args:
            nodes: Resolved statement nodes (or a Template node)
            name: Template name for error messages and include cycle checks

        Returns:
            Generated source; empty string when nothing is emitted

        Raises:
            CompileError: On unknown filters or invalid generated code
            InheritanceCycleError: On include cycles
            ResolutionError: If an included template cannot be found
        """
        if isinstance(nodes, Template):
            nodes = nodes.body
        self._template_name = name
        self._autoescape = [bool(self._env.autoescape)]
        self._loop_contexts = []
        self._macros = {}
        self._include_stack = [name] if name else []
        self._counter = 0

        self._collect_macros(nodes)
        module = ast.Module(body=self._compile_body(nodes), type_ignores=[])
        ast.fix_missing_locations(module)
        return ast.unparse(module)

    def _collect_macros(self, nodes: Sequence[Node]) -> None:
        """Register every macro in the tree so calls resolve regardless of order."""
        for macro in _walk_macros(nodes):
            self._macros[macro.name] = macro

    def _emit_output(self, value_expr: ast.expr) -> ast.stmt:
        """Generate output statement: _append(value)

        All output generation in compiled templates flows through this method.
        """
        return ast.Expr(value=self._call("_append", [value_expr]))

    def _compile_body(self, nodes: Sequence[Node]) -> list[ast.stmt]:
        stmts: list[ast.stmt] = []
        for node in nodes:
            stmts.extend(self._compile_node(node))
        return stmts

    def _compile_node(self, node: Node) -> list[ast.stmt]:
        """Compile a single IR node to Python statements.

        Complexity: O(1) type dispatch using class name lookup.
        """
        handler = self._get_node_dispatch().get(type(node).__name__)
        if handler is None:
            raise CompileError(
                f"Cannot compile statement {type(node).__name__}",
                node.lineno,
                self._template_name,
            )
        return handler(node)

    def _get_node_dispatch(self) -> dict[str, Callable]:
        """Get node type dispatch table (cached on first call)."""
        if not hasattr(self, "_node_dispatch"):
            self._node_dispatch = {
                "Data": self._compile_data,
                "Output": self._compile_output,
                "If": self._compile_if,
                "For": self._compile_for,
                "Break": self._compile_break,
                "Continue": self._compile_continue,
                "Set": self._compile_set,
                "Do": self._compile_do,
                "Block": self._compile_block,
                "Extends": self._compile_extends,
                "Include": self._compile_include,
                "Cache": self._compile_cache,
                "Autoescape": self._compile_autoescape,
                "Macro": self._compile_macro,
                "Return": self._compile_return,
            }
        return self._node_dispatch


def _walk_macros(value: object) -> Iterator[Macro]:
    """Yield macro definitions in document order, including nested ones."""
    if isinstance(value, Macro):
        yield value
    if isinstance(value, (list, tuple)):
        for item in value:
            yield from _walk_macros(item)
    elif hasattr(value, "__dataclass_fields__"):
        for field_name in value.__dataclass_fields__:
            yield from _walk_macros(getattr(value, field_name))
