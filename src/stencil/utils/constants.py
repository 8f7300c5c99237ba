"""Shared constants for stencil."""

from __future__ import annotations

# Filters whose result is already escaped; a print ending in one of these
# is never escaped a second time by autoescape.
ESCAPING_FILTERS: frozenset[str] = frozenset(
    {"e", "escape", "escape_css", "escape_js", "escape_attr"}
)

# Tag helper functions dispatched to the view's tag service
# (`link_to(...)` -> `_view.tag.link_to(...)`).
TAG_HELPERS: frozenset[str] = frozenset(
    {
        "link_to",
        "image",
        "form",
        "end_form",
        "text_field",
        "password_field",
        "hidden_field",
        "file_field",
        "check_field",
        "radio_field",
        "submit_button",
        "image_input",
        "email_field",
        "date_field",
        "numeric_field",
        "select",
        "select_static",
        "text_area",
        "stylesheet_link",
        "javascript_include",
        "get_title",
        "get_doctype",
        "friendly_title",
    }
)

# Name given to templates compiled from a string.
DEFAULT_TEMPLATE_NAME = "eval code"
