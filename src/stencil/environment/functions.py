"""Built-in functions for Stencil templates.

View services:
    - `content()` / `get_content()`: the content rendered by the previous
      view level
    - `partial(path, params)`: render a partial through the view
    - `url(...)`, `static_url(...)`: URL service lookups
    - `super()`: parent block content (spliced by the inheritance
      resolver; empty anywhere else)
    - `dump(value, ...)`: debug representation

Tag helpers (`link_to`, `text_field`, `stylesheet_link`, ...) are routed to
the view's tag service: `{{ link_to("a", "b") }}` compiles to
`_view.tag.link_to('a', 'b')`.

Names with no builtin or registered mapping compile to a plain call of the
same name.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from stencil.environment.registry import Arguments, CallMapping, Generator, Rename
from stencil.utils.constants import TAG_HELPERS

if TYPE_CHECKING:
    from stencil.nodes import Expr


def _view_call(target: str) -> Generator:
    def generate(arguments: Arguments, expr_arguments: Sequence[Expr]) -> str:
        return f"_view.{target}({arguments})"

    return Generator(generate)


def _constant(code: str) -> Generator:
    return Generator(lambda arguments, expr_arguments: code)


BUILTIN_FUNCTIONS: dict[str, CallMapping] = {
    "content": _view_call("get_content"),
    "get_content": _view_call("get_content"),
    "partial": _view_call("partial"),
    "url": _view_call("url.get"),
    "static_url": _view_call("url.get_static"),
    "super": _constant("''"),
    "dump": Rename("_dump"),
}

BUILTIN_FUNCTIONS.update({name: _view_call(f"tag.{name}") for name in sorted(TAG_HELPERS)})
