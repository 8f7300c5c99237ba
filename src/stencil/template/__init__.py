"""Stencil reference runtime: executes generated code for rendering and tests."""

from stencil.template.core import Template
from stencil.template.loop_context import LoopContext
from stencil.template.view import TagHelpers, UrlHelper, View, ViewCache
from stencil.utils.html import Markup

__all__ = [
    "LoopContext",
    "Markup",
    "TagHelpers",
    "Template",
    "UrlHelper",
    "View",
    "ViewCache",
]
