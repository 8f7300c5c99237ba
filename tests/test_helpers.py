"""Tests for the runtime helpers and the reference view."""

from __future__ import annotations

import pytest

from stencil import DictLoader, Environment, LoopContext, Markup, View, ViewCache, html_escape
from stencil.template import TagHelpers, UrlHelper, helpers
from stencil.utils.html import escape_attr, strip_tags


class TestRuntimeHelpers:
    @pytest.mark.parametrize(
        ("start", "end", "expected"),
        [
            (1, 3, [1, 2, 3]),
            (3, 1, [3, 2, 1]),
            (2, 2, [2]),
            ("a", "c", ["a", "b", "c"]),
            ("c", "a", ["c", "b", "a"]),
        ],
    )
    def test_inclusive_range(self, start, end, expected):
        assert helpers.inclusive_range(start, end) == expected

    def test_str_safe(self):
        assert helpers.str_safe(None) == ""
        assert helpers.str_safe(3) == "3"

    def test_to_list(self):
        assert helpers.to_list(None) == []
        assert helpers.to_list({"a": 1}) == [1]
        assert helpers.to_list(x for x in "ab") == ["a", "b"]

    def test_iter_items(self):
        assert helpers.iter_items({"a": 1}) == [("a", 1)]
        assert helpers.iter_items(["x"]) == [(0, "x")]
        assert helpers.iter_items(None) == []

    def test_getattr_dynamic(self):
        class Obj:
            name = "n"

        assert helpers.getattr_dynamic({"k": 1}, "k") == 1
        assert helpers.getattr_dynamic(Obj(), "name") == "n"
        assert helpers.getattr_dynamic(["a", "b"], 1) == "b"

    def test_identical(self):
        assert helpers.identical(1, 1)
        assert not helpers.identical(1, 1.0)
        assert not helpers.identical(True, 1)
        assert helpers.identical("a", "a")

    def test_is_defined(self):
        assert helpers.is_defined(lambda: 0)
        assert not helpers.is_defined(lambda: None)
        assert not helpers.is_defined(lambda: {}["missing"])

    def test_is_defined_propagates_other_errors(self):
        with pytest.raises(ZeroDivisionError):
            helpers.is_defined(lambda: 1 / 0)

    @pytest.mark.parametrize("value", [None, False, "", [], {}, ()])
    def test_is_empty(self, value):
        assert helpers.is_empty(value)

    @pytest.mark.parametrize("value", [0, 0.0, "0", [0], True])
    def test_is_not_empty(self, value):
        assert not helpers.is_empty(value)

    def test_is_numeric(self):
        assert helpers.is_numeric(1)
        assert helpers.is_numeric(" 1.5e3 ")
        assert not helpers.is_numeric("abc")
        assert not helpers.is_numeric(True)

    def test_is_scalar_and_iterable(self):
        assert helpers.is_scalar("a") and helpers.is_scalar(1.5)
        assert not helpers.is_scalar([1])
        assert helpers.is_iterable([1]) and helpers.is_iterable({})
        assert not helpers.is_iterable("abc")

    @pytest.mark.parametrize(
        ("value", "name"),
        [
            (None, "null"),
            (True, "boolean"),
            (1, "integer"),
            (1.5, "double"),
            ("s", "string"),
            ([1], "array"),
            ({"a": 1}, "array"),
            (object(), "object"),
        ],
    )
    def test_type_of(self, value, name):
        assert helpers.type_of(value) == name

    def test_default(self):
        assert helpers.default(lambda: "x", "d") == "x"
        assert helpers.default(lambda: "", "d") == "d"
        assert helpers.default(lambda: undefined_name, "d") == "d"  # noqa: F821
        assert helpers.default(lambda: 0, "d") == 0

    def test_string_helpers(self):
        assert helpers.trim("  a  ") == "a"
        assert helpers.left_trim("  a  ") == "a  "
        assert helpers.right_trim("  a  ") == "  a"
        assert helpers.capitalize("hello big world") == "Hello Big World"
        assert helpers.nl2br("a\r\nb") == "a<br />\r\nb"
        assert helpers.upper(None) == ""

    def test_slashes_round_trip(self):
        value = "it's \"quoted\" \\ here"
        escaped = helpers.slashes(value)
        assert escaped == "it\\'s \\\"quoted\\\" \\\\ here"
        assert helpers.strip_slashes(escaped) == value

    def test_length(self):
        assert helpers.length(None) == 0
        assert helpers.length("abc") == 3
        assert helpers.length({"a": 1}) == 1
        assert helpers.length(12345) == 5

    def test_collections(self):
        assert helpers.sort([3, 1, 2]) == [1, 2, 3]
        assert helpers.sort({"b": 2, "a": 3}) == {"b": 2, "a": 3}
        assert list(helpers.sort({"x": 2, "y": 1})) == ["y", "x"]
        assert helpers.keys({"a": 1, "b": 2}) == ["a", "b"]
        assert helpers.keys(["x", "y"]) == [0, 1]
        assert helpers.join([1, None, "c"], "-") == "1--c"

    def test_json(self):
        assert helpers.json_encode({"a": [1, "b"]}) == '{"a":[1,"b"]}'
        assert helpers.json_decode('{"a": 1}') == {"a": 1}

    def test_format_and_url_encode(self):
        assert helpers.format_string("%s=%d", "a", 1) == "a=1"
        assert helpers.url_encode("a b/c") == "a+b%2Fc"

    def test_convert_encoding(self):
        assert helpers.convert_encoding("café".encode("latin-1"), "utf-8", "latin-1") == "café"
        assert helpers.convert_encoding("café", "ascii") == "caf?"

    def test_dump(self):
        assert helpers.dump({"a": 1}, [2]) == "{'a': 1}\n[2]"

    def test_static_namespace_builtins_are_restricted(self):
        builtins = helpers.STATIC_NAMESPACE["__builtins__"]
        assert "max" in builtins
        assert "open" not in builtins
        assert "__import__" not in builtins

    def test_unlisted_builtins_are_unavailable(self, env):
        template = env.from_string("{{ open('x') }}")
        with pytest.raises(NameError):
            template.render()


class TestLoopContext:
    def test_properties(self):
        loop = LoopContext(["a", "b", "c"])
        seen = [
            (item, loop.index, loop.index0, loop.revindex, loop.first, loop.last)
            for item in loop
        ]
        assert seen == [
            ("a", 1, 0, 3, True, False),
            ("b", 2, 1, 2, False, False),
            ("c", 3, 2, 1, False, True),
        ]
        assert loop.length == 3

    def test_parent_and_self(self):
        outer = LoopContext([1])
        inner = LoopContext([2], outer)
        assert inner.parent is outer
        assert inner.self is inner
        assert outer.parent is None

    def test_cycle(self):
        loop = LoopContext([1, 2, 3])
        assert [loop.cycle("a", "b") for _ in loop] == ["a", "b", "a"]
        assert loop.cycle() is None

    def test_repr(self):
        assert repr(LoopContext([1, 2])) == "<LoopContext 1/2>"


class TestHtml:
    def test_escape(self):
        assert html_escape("<a href='x'>&</a>") == "&lt;a href=&#x27;x&#x27;&gt;&amp;&lt;/a&gt;"
        assert isinstance(html_escape("x"), Markup)
        assert html_escape(None) == ""

    def test_markup_is_not_escaped_twice(self):
        assert html_escape(Markup("<b>")) == "<b>"

    def test_markup_concatenation_escapes_plain_side(self):
        assert Markup("<b>") + "<i>" == "<b>&lt;i&gt;"
        assert "<i>" + Markup("<b>") == "&lt;i&gt;<b>"
        assert isinstance(Markup("a") + "b", Markup)

    def test_markup_from_html_object(self):
        class Widget:
            def __html__(self):
                return "<w>"

        assert Markup(Widget()) == "<w>"
        assert html_escape(Widget()) == "<w>"

    def test_markup_striptags(self):
        assert Markup("<p>a &amp; b</p>").striptags() == "a & b"
        assert repr(Markup("x")) == "Markup('x')"

    def test_escape_attr_escapes_markup(self):
        assert escape_attr(Markup("<b>")) == "&lt;b&gt;"

    def test_strip_tags(self):
        assert strip_tags("<p>hi <b>there</b></p>") == "hi there"
        assert strip_tags(None) == ""


class TestViewCache:
    def test_miss_then_hit(self):
        cache = ViewCache()
        assert cache.start("k") is None
        cache.save("k", "content")
        assert cache.start("k") == "content"
        assert (cache.hits, cache.misses) == (1, 1)

    def test_lifetime(self):
        now = [100.0]
        cache = ViewCache(clock=lambda: now[0])
        cache.save("k", "v", 5)
        now[0] = 104.9
        assert cache.start("k") == "v"
        now[0] = 105.0
        assert cache.start("k") is None

    def test_default_lifetime(self):
        now = [0.0]
        cache = ViewCache(default_lifetime=1, clock=lambda: now[0])
        cache.save("k", "v")
        now[0] = 2.0
        assert cache.start("k") is None

    def test_clear(self):
        cache = ViewCache()
        cache.save("k", "v")
        cache.clear()
        assert cache.start("k") is None


class TestUrlHelper:
    def test_join(self):
        url = UrlHelper("/app/")
        assert url.get("posts") == "/app/posts"
        assert url.get("/posts") == "/app/posts"
        assert url.get() == "/app/"

    def test_query_arguments(self):
        assert UrlHelper().get("search", {"q": "a b"}) == "/search?q=a+b"

    def test_absolute_urls_are_kept(self):
        url = UrlHelper("/app/", static_base_uri="https://cdn.example.com/")
        assert url.get("https://other.example.com/x") == "https://other.example.com/x"
        assert url.get_static("css/a.css") == "https://cdn.example.com/css/a.css"


class TestTagHelpers:
    @pytest.fixture
    def tag(self):
        return TagHelpers(UrlHelper("/"), title="My <Site>")

    def test_link_to(self, tag):
        assert tag.link_to("posts", "Posts") == '<a href="/posts">Posts</a>'
        assert tag.link_to({"action": "a", "text": "A", "class": "c"}) == (
            '<a href="/a" class="c">A</a>'
        )

    def test_link_to_sequence(self, tag):
        assert tag.link_to(["posts/1", "One"]) == '<a href="/posts/1">One</a>'

    def test_image_and_assets(self, tag):
        assert tag.image("img/logo.png", alt="Logo") == '<img src="/img/logo.png" alt="Logo" />'
        assert tag.stylesheet_link("css/app.css") == (
            '<link href="/css/app.css" rel="stylesheet" type="text/css" />'
        )
        assert tag.javascript_include("js/app.js") == (
            '<script src="/js/app.js" type="text/javascript"></script>'
        )

    def test_fields(self, tag):
        assert tag.text_field("email") == '<input type="text" id="email" name="email" />'
        assert tag.hidden_field({"name": "id", "value": 3}) == (
            '<input type="hidden" id="id" name="id" value="3" />'
        )
        assert tag.check_field("agree").startswith('<input type="checkbox"')

    def test_select_static(self, tag):
        html = tag.select_static({"name": "color", "value": "b"}, {"r": "Red", "b": "Blue"})
        assert html == (
            '<select id="color" name="color">'
            '<option value="r">Red</option>'
            '<option value="b" selected="selected">Blue</option>'
            "</select>"
        )

    def test_text_area_escapes_value(self, tag):
        assert tag.text_area({"name": "body", "value": "<x>"}) == (
            '<textarea id="body" name="body">&lt;x&gt;</textarea>'
        )

    def test_form(self, tag):
        assert tag.form("save") == '<form action="/save" method="post">'
        assert tag.end_form() == "</form>"

    def test_title_and_doctype(self, tag):
        assert tag.get_title() == "<title>My &lt;Site&gt;</title>"
        assert tag.get_doctype() == "<!DOCTYPE html>"

    def test_friendly_title(self, tag):
        assert tag.friendly_title("Hello, World!") == "hello-world"
        assert tag.friendly_title("Hello World", "_", lowercase=False) == "Hello_World"

    def test_submit_button(self, tag):
        assert tag.submit_button("Save") == '<input type="submit" value="Save" />'


class TestView:
    def test_get_content(self):
        assert View(content="inner").get_content() == "inner"

    def test_default_cache_service(self):
        view = View()
        cache = view.get_service("viewCache")
        assert isinstance(cache, ViewCache)
        assert view.get_service("viewCache") is cache

    def test_unknown_service(self):
        with pytest.raises(LookupError, match="Service 'db'"):
            View().get_service("db")

    def test_registered_service(self):
        cache = ViewCache()
        assert View(services={"viewCache": cache}).get_service("viewCache") is cache

    def test_partial(self):
        env = Environment(loader=DictLoader({"p.volt": "[{{ x }}]"}))
        assert View(env).partial("p.volt", {"x": 1}) == "[1]"

    def test_partial_requires_environment(self):
        with pytest.raises(RuntimeError):
            View().partial("p.volt")
