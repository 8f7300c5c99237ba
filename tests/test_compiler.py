"""Tests for the code the Stencil compiler generates.

Generated text is deterministic, so most tests compare it verbatim.
"""

from __future__ import annotations

import pytest

from stencil import Environment
from stencil.compiler import Compiler
from stencil.environment.exceptions import CompileError, InheritanceCycleError, ResolutionError
from stencil.environment.loaders import DictLoader


class TestOutput:
    """Text and print statements."""

    def test_string_literal(self, env):
        assert env.compile_string('{{ "hello" }}') == "_append('hello')"

    def test_text_and_variable(self, env):
        assert env.compile_string("Hello {{ name }}!") == (
            "_append('Hello ')\n_append(_str(name))\n_append('!')"
        )

    def test_empty_template(self, env):
        assert env.compile_string("") == ""

    def test_comment_only_template(self, env):
        assert env.compile_string("{# nothing to see #}") == ""

    def test_concat_is_not_wrapped(self, env):
        assert env.compile_string("{{ a ~ '-' ~ b }}") == "_append(_str(a) + '-' + _str(b))"

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("{{ 1..100 }}", "_append(_str(_range(1, 100)))"),
            ("{{ a === b }}", "_append(_str(_identical(a, b)))"),
            ("{{ a !== b }}", "_append(_str(not _identical(a, b)))"),
            ("{{ x == null }}", "_append(_str(x is None))"),
            ("{{ x != null }}", "_append(_str(x is not None))"),
            ("{{ x++ }}", "_append(_str(x + 1))"),
            ("{{ x-- }}", "_append(_str(x - 1))"),
            ("{{ a.(b) }}", "_append(_str(_getattr(a, b)))"),
            ("{{ a.b }}", "_append(_str(a.b))"),
            ("{{ a['b'] }}", "_append(_str(a['b']))"),
            ("{{ class }}", "_append(_str(class_))"),
            ("{{ a ? b : c }}", "_append(_str(b if a else c))"),
            ("{{ not a }}", "_append(_str(not a))"),
            ("{{ a and b or c }}", "_append(_str(a and b or c))"),
            ("{{ 2 ** 3 % 5 }}", "_append(_str(2 ** 3 % 5))"),
            ("{{ [1, 2] }}", "_append(_str([1, 2]))"),
            ("{{ ['a': 1] }}", "_append(_str({'a': 1}))"),
            ("{{ a in b }}", "_append(_str(a in b))"),
            ("{{ true }}", "_append(_str(True))"),
        ],
    )
    def test_expressions(self, env, source, expected):
        assert env.compile_string(source) == expected


class TestCalls:
    """Function resolution and named arguments."""

    def test_named_arguments(self, env):
        assert env.compile_string("{{ f(a: 1) }}") == "_append(_str(f(a=1)))"

    def test_non_identifier_named_argument(self, env):
        assert env.compile_string("{{ f('data-x': 1) }}") == "_append(_str(f(**{'data-x': 1})))"

    def test_python_keyword_named_argument(self, env):
        assert env.compile_string("{{ f(class: 'x') }}") == "_append(_str(f(**{'class': 'x'})))"

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("{{ link_to('a', 'b') }}", "_append(_str(_view.tag.link_to('a', 'b')))"),
            ("{{ content() }}", "_append(_str(_view.get_content()))"),
            ("{{ get_content() }}", "_append(_str(_view.get_content()))"),
            ("{{ partial('x') }}", "_append(_str(_view.partial('x')))"),
            ("{{ url('a') }}", "_append(_str(_view.url.get('a')))"),
            ("{{ static_url('a.css') }}", "_append(_str(_view.url.get_static('a.css')))"),
            ("{{ dump(a) }}", "_append(_str(_dump(a)))"),
            ("{{ super() }}", "_append(_str(''))"),
            ("{{ max(a, b) }}", "_append(_str(max(a, b)))"),
            ("{{ obj.method(1) }}", "_append(_str(obj.method(1)))"),
        ],
    )
    def test_builtin_functions(self, env, source, expected):
        assert env.compile_string(source) == expected

    def test_registered_function_rename(self, env):
        env.add_function("now", "time.time")
        assert env.compile_string("{{ now() }}") == "_append(_str(time.time()))"

    def test_registered_function_overrides_builtin(self, env):
        env.add_function("content", "my_content")
        assert env.compile_string("{{ content() }}") == "_append(_str(my_content()))"

    def test_function_generator(self, env):
        env.add_function("shout", lambda arguments, expr_arguments: f"{arguments}.upper()")
        assert env.compile_string("{{ shout(name) }}") == "_append(_str(name.upper()))"


class TestFilters:
    """Filter compilation."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("{{ x|trim }}", "_append(_str(_trim(x)))"),
            ("{{ items|join(', ') }}", "_append(_str(_join(items, ', ')))"),
            ("{{ x|default('n/a') }}", "_append(_str(_default(lambda: x, 'n/a')))"),
            ("{{ x|default }}", "_append(_str(_default(lambda: x, '')))"),
            ("{{ x|upper|lower }}", "_append(_str(_lower(_upper(x))))"),
            ("{{ x|length }}", "_append(_str(_length(x)))"),
            ("{{ x|abs }}", "_append(_str(abs(x)))"),
            ("{{ x|e }}", "_append(_escape(x))"),
            ("{{ x|escape_js }}", "_append(_escape_js(x))"),
        ],
    )
    def test_builtin_filters(self, env, source, expected):
        assert env.compile_string(source) == expected

    def test_user_rename(self, env):
        env.add_filter("shout", "helpers.shout")
        assert env.compile_string("{{ name|shout }}") == "_append(_str(helpers.shout(name)))"

    def test_user_rename_with_arguments(self, env):
        env.add_filter("pad", "str.rjust")
        assert env.compile_string("{{ name|pad(10) }}") == "_append(_str(str.rjust(name, 10)))"

    def test_user_generator(self, env):
        env.add_filter("double", lambda arguments, expr_arguments: f"({arguments}) * 2")
        assert env.compile_string("{{ x|double }}") == "_append(_str(x * 2))"

    def test_generator_sees_argument_parts(self, env):
        seen = {}

        def generate(arguments, expr_arguments):
            seen["parts"] = arguments.parts
            seen["nodes"] = len(expr_arguments)
            return f"{arguments.parts[1]}.join({arguments.parts[0]})"

        env.add_filter("glue", generate)
        assert env.compile_string("{{ items|glue('-') }}") == "_append(_str('-'.join(items)))"
        assert seen == {"parts": ("items", "'-'"), "nodes": 2}

    def test_user_filter_overrides_builtin(self, env):
        env.add_filter("upper", "custom_upper")
        assert env.compile_string("{{ x|upper }}") == "_append(_str(custom_upper(x)))"

    def test_invalid_generated_code(self, env):
        env.add_filter("bad", lambda arguments, expr_arguments: f"{arguments} +")
        with pytest.raises(CompileError) as exc_info:
            env.compile_string("{{ x|bad }}")
        assert str(exc_info.value) == (
            "Invalid code generated for filter 'bad': 'x +' in eval code on line 1"
        )

    def test_generator_must_return_text(self, env):
        env.add_filter("none", lambda arguments, expr_arguments: None)
        with pytest.raises(CompileError, match="must be a string"):
            env.compile_string("{{ x|none }}")


class TestEscaping:
    """Autoescape decisions made at compile time."""

    def test_autoescape_wraps_prints(self, env_autoescape):
        assert env_autoescape.compile_string("{{ x }}") == "_append(_escape(x))"

    def test_autoescape_leaves_text_alone(self, env_autoescape):
        assert env_autoescape.compile_string("<b>") == "_append('<b>')"

    def test_explicit_escape_is_not_doubled(self, env_autoescape):
        assert env_autoescape.compile_string("{{ x|e }}") == "_append(_escape(x))"
        assert env_autoescape.compile_string("{{ x|escape_attr }}") == "_append(_escape_attr(x))"

    def test_autoescape_block_enables(self, env):
        source = "{% autoescape true %}{{ x }}{% endautoescape %}{{ x }}"
        assert env.compile_string(source) == "_append(_escape(x))\n_append(_str(x))"

    def test_autoescape_block_disables(self, env_autoescape):
        source = "{% autoescape false %}{{ x }}{% endautoescape %}"
        assert env_autoescape.compile_string(source) == "_append(_str(x))"

    def test_option_toggles_autoescape(self, env):
        env.set_option("autoescape", True)
        assert env.compile_string("{{ x }}") == "_append(_escape(x))"


class TestStatements:
    """Tag compilation."""

    def test_set(self, env):
        assert env.compile_string("{% set a = 1 %}") == "a = 1"

    def test_set_path(self, env):
        assert env.compile_string("{% set a[0].y = 2 %}") == "a[0].y = 2"

    def test_set_compound(self, env):
        assert env.compile_string("{% set a += 1, b = a %}") == "a += 1\nb = a"

    def test_do(self, env):
        assert env.compile_string("{% do items.append(1) %}") == "items.append(1)"

    def test_if_elseif_else(self, env):
        source = "{% if a %}A{% elseif b %}B{% else %}C{% endif %}"
        assert env.compile_string(source) == (
            "if a:\n"
            "    _append('A')\n"
            "elif b:\n"
            "    _append('B')\n"
            "else:\n"
            "    _append('C')"
        )

    def test_empty_if_body(self, env):
        assert env.compile_string("{% if a %}{% endif %}") == "if a:\n    pass"

    @pytest.mark.parametrize(
        ("test", "expected"),
        [
            ("is defined", "_is_defined(lambda: x)"),
            ("is not defined", "not _is_defined(lambda: x)"),
            ("is even", "x % 2 == 0"),
            ("is odd", "x % 2 != 0"),
            ("is empty", "_is_empty(x)"),
            ("is divisibleby(3)", "x % 3 == 0"),
            ("is sameas(y)", "_identical(x, y)"),
            ("is type('string')", "_type_of(x) == 'string'"),
            ("is null", "x is None"),
        ],
    )
    def test_tests(self, env, test, expected):
        source = f"{{% if x {test} %}}T{{% endif %}}"
        assert env.compile_string(source) == f"if {expected}:\n    _append('T')"

    def test_for(self, env):
        assert env.compile_string("{% for i in items %}{{ i }}{% endfor %}") == (
            "_loop_items_1 = _list(items)\n"
            "if _loop_items_1:\n"
            "    for i in _loop_items_1:\n"
            "        _append(_str(i))"
        )

    def test_for_key_value_with_else(self, env):
        source = "{% for k, v in items %}{{ k }}{% else %}none{% endfor %}"
        assert env.compile_string(source) == (
            "_loop_items_1 = _iter_items(items)\n"
            "if _loop_items_1:\n"
            "    for k, v in _loop_items_1:\n"
            "        _append(_str(k))\n"
            "else:\n"
            "    _append('none')"
        )

    def test_for_with_condition(self, env):
        source = "{% for i in 1..10 if i > 5 %}{{ i }}{% endfor %}"
        assert env.compile_string(source) == (
            "_loop_items_1 = _list(_range(1, 10))\n"
            "if _loop_items_1:\n"
            "    for i in _loop_items_1:\n"
            "        if i > 5:\n"
            "            _append(_str(i))"
        )

    def test_for_builds_loop_context_when_used(self, env):
        source = "{% for i in items %}{{ loop.index }}{% endfor %}"
        assert env.compile_string(source) == (
            "_loop_items_1 = _list(items)\n"
            "if _loop_items_1:\n"
            "    loop = _LoopContext(_loop_items_1, None)\n"
            "    for i in loop:\n"
            "        _append(_str(loop.index))\n"
            "    loop = loop.parent"
        )

    def test_nested_loop_context_gets_parent(self, env):
        source = (
            "{% for a in x %}{% for b in y %}{{ loop.parent.index }}{% endfor %}{% endfor %}"
        )
        code = env.compile_string(source)
        assert "loop = _LoopContext(_loop_items_1, None)" in code
        assert "loop = _LoopContext(_loop_items_2, loop)" in code

    def test_break_and_continue(self, env):
        source = (
            "{% for i in x %}{% if i %}{% break %}{% else %}{% continue %}{% endif %}{% endfor %}"
        )
        assert env.compile_string(source) == (
            "_loop_items_1 = _list(x)\n"
            "if _loop_items_1:\n"
            "    for i in _loop_items_1:\n"
            "        if i:\n"
            "            break\n"
            "        else:\n"
            "            continue"
        )

    def test_cache(self, env):
        assert env.compile_string("{% cache 'sidebar' %}S{% endcache %}") == (
            "_cache_1 = _view.get_service('viewCache')\n"
            "_cached_1 = _cache_1.start('sidebar')\n"
            "if _cached_1 is None:\n"
            "    _cache_buf_1 = []\n"
            "    _save_append_1 = _append\n"
            "    _append = _cache_buf_1.append\n"
            "    try:\n"
            "        _append('S')\n"
            "    finally:\n"
            "        _append = _save_append_1\n"
            "    _cached_1 = ''.join(_cache_buf_1)\n"
            "    _cache_1.save('sidebar', _cached_1)\n"
            "_append(_cached_1)"
        )

    def test_cache_with_lifetime(self, env):
        code = env.compile_string("{% cache key 60 %}S{% endcache %}")
        assert "_cached_1 = _cache_1.start(key, 60)" in code
        assert "_cache_1.save(key, _cached_1, 60)" in code

    def test_macro(self, env):
        source = "{% macro greet(name, punct = '!') %}Hi {{ name }}{{ punct }}{% endmacro %}"
        assert env.compile_string(source) == (
            "def _macro_greet(name, punct='!'):\n"
            "    _macro_buf = []\n"
            "    _append = _macro_buf.append\n"
            "    _append('Hi ')\n"
            "    _append(_str(name))\n"
            "    _append(_str(punct))\n"
            "    return _Markup(''.join(_macro_buf))"
        )

    def test_macro_parameter_after_default_gets_none(self, env):
        code = env.compile_string("{% macro m(a = 1, b) %}{% endmacro %}")
        assert code.startswith("def _macro_m(a=1, b=None):")

    def test_macro_seeds_assigned_names(self, env):
        code = env.compile_string(
            "{% macro m(a) %}{% set a = 1, n = n + a %}"
            "{% for x in a %}{{ x }}{% endfor %}{% endmacro %}"
        )
        assert (
            "    _append = _macro_buf.append\n"
            "    _scope = _macro_m.__globals__\n"
            "    n = _scope.get('n')\n"
            "    x = _scope.get('x')\n"
            "    a = 1\n"
        ) in code
        assert "a = _scope" not in code

    def test_macro_return(self, env):
        code = env.compile_string("{% macro add(a, b) %}{% return a + b %}{% endmacro %}")
        assert "    return a + b\n" in code

    def test_macro_call_resolves_before_definition(self, env):
        code = env.compile_string(
            "{{ greet('a') }}{% macro greet(n) %}{{ n }}{% endmacro %}"
        )
        assert code.startswith("_append(_str(_macro_greet('a')))")

    def test_macro_wins_over_registered_function(self, env):
        env.add_function("greet", "other_greet")
        code = env.compile_string("{% macro greet() %}{% endmacro %}{{ greet() }}")
        assert code.endswith("_append(_str(_macro_greet()))")


class TestIncludeAndExtends:
    """Templates pulled in through the loader."""

    def test_literal_include_is_inlined(self, env_with_loader):
        code = env_with_loader.compile_string('{% include "partial.volt" %}')
        assert code == "_append('<p>Partial content</p>')"

    def test_include_with_params_goes_through_view(self, env_with_loader):
        code = env_with_loader.compile_string(
            "{% include 'greeting.volt' with ['name': 'x'] %}"
        )
        assert code == "_append(_view.partial('greeting.volt', {'name': 'x'}))"

    def test_dynamic_include_goes_through_view(self, env):
        assert env.compile_string("{% include path %}") == "_append(_view.partial(path))"

    def test_missing_include(self, env_with_loader):
        with pytest.raises(ResolutionError) as exc_info:
            env_with_loader.compile_string("{% include 'nope.volt' %}")
        assert "nope.volt" in str(exc_info.value)

    def test_include_cycle(self):
        env = Environment(
            loader=DictLoader(
                {
                    "a.volt": "A{% include 'b.volt' %}",
                    "b.volt": "B{% include 'a.volt' %}",
                }
            )
        )
        with pytest.raises(InheritanceCycleError) as exc_info:
            env.compile_string("{% include 'a.volt' %}")
        assert exc_info.value.chain == ["eval code", "a.volt", "b.volt", "a.volt"]

    def test_macros_of_included_template_are_callable(self, env_with_loader):
        code = env_with_loader.compile_string(
            "{% include 'macros.volt' %}{{ greet('x') }}"
        )
        assert "def _macro_greet(name):" in code
        assert code.endswith("_append(_str(_macro_greet('x')))")

    def test_extends_merges_parent(self, env_with_loader):
        code = env_with_loader.compile_string(
            '{% extends "base.volt" %}{% block body %}Hello World{% endblock %}'
        )
        assert code == (
            "_append('<html><head>')\n"
            "_append('<title>Base</title>')\n"
            "_append('</head><body>')\n"
            "_append('Hello World')\n"
            "_append('</body></html>')"
        )


class TestDeterminism:
    def test_same_input_same_output(self, env):
        source = (
            "{% for i in items %}{% cache i %}{{ loop.index }}{% endcache %}{% endfor %}"
            "{% macro m(a) %}{{ a }}{% endmacro %}{{ m(1) }}"
        )
        assert env.compile_string(source) == env.compile_string(source)

    def test_compiler_instances_are_reusable(self, env):
        compiler = Compiler(env)
        first = compiler.compile(env.parse("{% for i in x %}{{ i }}{% endfor %}"))
        second = compiler.compile(env.parse("{% for i in x %}{{ i }}{% endfor %}"))
        assert first == second
        assert "_loop_items_1" in second
