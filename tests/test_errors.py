"""Error messages surfaced by compile calls.

The message text of every TemplateError is stable and names the
template and (except at end of input) the line, so these tests compare
`str(error)` verbatim.
"""

from __future__ import annotations

import pytest

from stencil import Environment
from stencil.environment.exceptions import (
    CompileError,
    ErrorCode,
    ScanningError,
    StructuralError,
    TemplateError,
    TemplateSyntaxError,
    UnknownFilterError,
    UnknownFilterTypeError,
)
from stencil.environment.terminal import strip_colors


def error_for(env: Environment, source: str, exc_type: type[TemplateError] = TemplateError):
    with pytest.raises(exc_type) as exc_info:
        env.parse(source)
    return exc_info.value


class TestSyntaxErrors:
    """Unexpected tokens and unexpected end of input."""

    @pytest.mark.parametrize("source", ["{{", "{{ }}"])
    def test_unexpected_eof(self, env, source):
        error = error_for(env, source, TemplateSyntaxError)
        assert str(error) == "Syntax error, unexpected EOF in eval code"
        assert error.lineno is None
        assert error.code is ErrorCode.UNEXPECTED_EOF

    def test_unexpected_operator(self, env):
        error = error_for(env, "{{ ++v }}", TemplateSyntaxError)
        assert str(error) == "Syntax error, unexpected token ++ in eval code on line 1"
        assert error.code is ErrorCode.UNEXPECTED_TOKEN

    def test_line_counts_newlines_inside_print(self, env):
        error = error_for(env, "{{\n\t\t\t\t++v }}", TemplateSyntaxError)
        assert str(error) == "Syntax error, unexpected token ++ in eval code on line 2"

    def test_keyword_in_print(self, env):
        error = error_for(env, "{{\n\n\n\t\t\t\tif\n\t\t\tfor }}", TemplateSyntaxError)
        assert str(error) == "Syntax error, unexpected token IF in eval code on line 4"

    def test_leading_dot(self, env):
        source = (
            "{% block some %}\n"
            "\t\t\t\t{% for x in y %}\n"
            '\t\t\t\t\t{{ ."hello".y }}\n'
            "\t\t\t\t{% endfor %}\n"
            "\t\t\t{% endblock %}"
        )
        error = error_for(env, source, TemplateSyntaxError)
        assert str(error) == "Syntax error, unexpected token DOT in eval code on line 3"

    def test_lines_inside_comments_are_counted(self, env):
        source = (
            "{#\n"
            "\n"
            "\t\t\t\tThis is a multi-line comment\n"
            "\n"
            "\t\t\t#}{% block some %}\n"
            "\t\t\t\t{# This is a single-line comment #}\n"
            "\t\t\t\t{% for x in y %}\n"
            '\t\t\t\t\t{{ "hello"++y }}\n'
            "\t\t\t\t{% endfor %}\n"
            "\t\t\t{% endblock %}"
        )
        error = error_for(env, source, TemplateSyntaxError)
        assert str(error) == "Syntax error, unexpected token IDENTIFIER(y) in eval code on line 8"

    def test_doubled_concat_operator(self, env):
        source = (
            "{# Hello #}\n"
            "\n"
            "\t\t\t{% for robot in robots %}\n"
            '\t\t\t\t{{ link_to("hello", robot.id ~ ~ robot.name) }}\n'
            "\t\t\t{% endfor %}\n"
            "\n"
            "\t\t\t"
        )
        error = error_for(env, source, TemplateSyntaxError)
        assert str(error) == "Syntax error, unexpected token ~ in eval code on line 4"


class TestScanningErrors:
    def test_dollar_sign(self, env):
        source = (
            '{{ link_to("album/" ~ album.id ~ "/" ~ $album.uri, '
            '"<img src=\\"" ~ album.url ~ "\\" alt=\\"" ~ album.name ~ "\\"/>") }}'
        )
        error = error_for(env, source, ScanningError)
        assert str(error) == (
            "Scanning error before 'album.uri, \"<img...' in eval code on line 1"
        )
        assert error.code is ErrorCode.SCANNING_ERROR


class TestStructuralErrors:
    """extends placement and child-template content."""

    @pytest.mark.parametrize(
        "source",
        [
            '{{ "hello"}}{% extends "some/file.volt" %}',
            '<div>{% extends "some/file.volt" %}{% set a = 1 %}</div>',
        ],
    )
    def test_extends_not_first(self, env, source):
        error = error_for(env, source, StructuralError)
        assert str(error) == (
            "Extends statement must be placed at the first line in the template "
            "in eval code on line 1"
        )
        assert error.code is ErrorCode.EXTENDS_NOT_FIRST

    def test_second_extends(self, env):
        error = error_for(
            env, '{% extends "a.volt" %}\n{% extends "b.volt" %}', StructuralError
        )
        assert error.code is ErrorCode.EXTENDS_NOT_FIRST
        assert error.lineno == 2

    @pytest.mark.parametrize(
        "source",
        [
            '{% extends "some/file.volt" %}{{ "hello"}}',
            '{% extends "some/file.volt" %}{{% if true %}} {%endif%}',
            '{% extends "some/file.volt" %}{{% set a = 1 %}',
            '{% extends "some/file.volt" %}text',
            '{% extends "some/file.volt" %}{% set a = 1 %}',
        ],
    )
    def test_child_content(self, env, source):
        error = error_for(env, source, StructuralError)
        assert str(error) == "Child templates only may contain blocks in eval code on line 1"
        assert error.code is ErrorCode.CHILD_CONTENT
        assert error.hint

    def test_whitespace_after_extends_is_allowed(self, env):
        nodes = env.parse('{% extends "a.volt" %}\n\n  {% block x %}{% endblock %}\n')
        assert [type(n).__name__ for n in nodes] == ["Extends", "Block"]


class TestCompileErrors:
    """Errors raised while generating code."""

    @pytest.mark.parametrize("source", ['{{ "hello"|unknown }}', '{{ "hello"|unknown(1, 2, 3) }}'])
    def test_unknown_filter(self, env, source):
        with pytest.raises(UnknownFilterError) as exc_info:
            env.compile_string(source)
        assert str(exc_info.value) == 'Unknown filter "unknown" in eval code on line 1'
        assert exc_info.value.filter_name == "unknown"

    def test_computed_filter(self, env):
        with pytest.raises(UnknownFilterTypeError) as exc_info:
            env.compile_string('{{ "hello"|(a-1) }}')
        assert str(exc_info.value) == "Unknown filter type in eval code on line 1"

    def test_compile_errors_share_base_class(self, env):
        with pytest.raises(CompileError):
            env.compile_string("{{ x|nope }}")

    def test_error_carries_source_for_snippets(self, env):
        source = "line one\n{{ x|nope }}\nline three"
        with pytest.raises(UnknownFilterError) as exc_info:
            env.compile_string(source)
        error = exc_info.value
        assert error.lineno == 2
        assert error.source == source
        assert ">  2 | {{ x|nope }}" in strip_colors(error.format_compact())

    def test_named_template(self, env):
        with pytest.raises(TemplateSyntaxError) as exc_info:
            env.compile_string("{{ ++v }}", "views/index.volt")
        assert str(exc_info.value) == (
            "Syntax error, unexpected token ++ in views/index.volt on line 1"
        )


class TestErrorCodes:
    def test_categories(self):
        assert ErrorCode.SCANNING_ERROR.category == "lexer"
        assert ErrorCode.UNEXPECTED_EOF.category == "parser"
        assert ErrorCode.CHILD_CONTENT.category == "structure"
        assert ErrorCode.UNKNOWN_FILTER.category == "codegen"
        assert ErrorCode.TEMPLATE_NOT_FOUND.category == "template"

    def test_codes_are_unique(self):
        values = [code.value for code in ErrorCode]
        assert len(values) == len(set(values))
