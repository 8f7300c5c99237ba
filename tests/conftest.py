"""Pytest configuration and fixtures for Stencil tests."""

import pytest

from stencil import DictLoader, Environment

LAYOUT_TEMPLATES = {
    "base.volt": (
        "<html>"
        "<head>{% block head %}<title>Base</title>{% endblock %}</head>"
        "<body>{% block body %}{% endblock %}</body>"
        "</html>"
    ),
    "child.volt": '{% extends "base.volt" %}{% block body %}Hello World{% endblock %}',
    "super.volt": (
        '{% extends "base.volt" %}'
        "{% block head %}{{ super() }}<meta charset=\"utf-8\">{% endblock %}"
    ),
    "partial.volt": "<p>Partial content</p>",
    "greeting.volt": "<p>Hello {{ name }}</p>",
    "macros.volt": (
        "{% macro greet(name) %}Hello {{ name }}{% endmacro %}"
        "{% macro add(a, b) %}{{ a + b }}{% endmacro %}"
    ),
    "templates/a.volt": "[A{% block body %}{% endblock %}]",
    "templates/b.volt": (
        '{% extends "templates/a.volt" %}'
        "{% block body %}[###{% block inner %}{% endblock %}###]{% endblock %}"
    ),
    "templates/c.volt": '{% extends "templates/b.volt" %}{% block inner %}[B]{% endblock %}',
}


@pytest.fixture
def env():
    """Create a basic Stencil Environment over an empty in-memory loader."""
    return Environment(loader=DictLoader({}))


@pytest.fixture
def env_autoescape():
    """Create a Stencil Environment with autoescape enabled."""
    return Environment(loader=DictLoader({}), autoescape=True)


@pytest.fixture
def env_with_loader():
    """Create a Stencil Environment with DictLoader and test templates."""
    return Environment(loader=DictLoader(dict(LAYOUT_TEMPLATES)))


@pytest.fixture
def render(env_with_loader):
    """Compile and render a template string in one call."""

    def _render(source: str, **variables) -> str:
        return env_with_loader.from_string(source).render(**variables)

    return _render


def assert_template_equal(template_result: str, expected: str) -> None:
    """Assert template result equals expected, normalizing whitespace.

    Args:
        template_result: The actual template rendering result.
        expected: The expected output.
    """
    # Normalize whitespace for comparison
    actual_normalized = " ".join(template_result.split())
    expected_normalized = " ".join(expected.split())
    assert actual_normalized == expected_normalized, (
        f"Template output mismatch:\n"
        f"  Actual: {actual_normalized!r}\n"
        f"  Expected: {expected_normalized!r}"
    )


def assert_contains(template_result: str, *expected_parts: str) -> None:
    """Assert template result contains all expected parts.

    Args:
        template_result: The actual template rendering result.
        expected_parts: Strings that should all be present in the result.
    """
    for part in expected_parts:
        assert part in template_result, (
            f"Template output missing expected content:\n"
            f"  Missing: {part!r}\n"
            f"  Actual: {template_result!r}"
        )
