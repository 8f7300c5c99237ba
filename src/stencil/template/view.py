"""Reference view collaborator for compiled templates.

Compiled code never touches the filesystem, caches or URL routing on its
own. Everything of that kind goes through the `_view` name bound at
render time:

    _view.get_content()                 # content of the inner view
    _view.partial(path, params=None)    # render another template
    _view.get_service('viewCache')      # fragment cache service
    _view.tag.link_to(...)              # HTML tag helpers
    _view.url.get(...)                  # URL building

`View` is a small in-process implementation used by `Template.render()`
and the test suite. Applications embedding the generated code supply
their own object with the same surface.
"""

from __future__ import annotations

import re
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from stencil.utils.html import Markup, escape_attr

if TYPE_CHECKING:
    from stencil.environment import Environment


class ViewCache:
    """In-memory fragment cache implementing the `start`/`save` protocol.

    `start(key)` returns the cached fragment or None on a miss. After a
    miss, the caller renders the fragment and hands it to `save()`.

    Example:
            >>> cache = ViewCache()
            >>> cache.start("sidebar") is None
            True
            >>> cache.save("sidebar", "<ul>...</ul>", 60)
            >>> cache.start("sidebar")
            '<ul>...</ul>'
    """

    __slots__ = ("_clock", "_entries", "default_lifetime", "hits", "misses")

    def __init__(self, default_lifetime: float | None = None, clock=time.monotonic):
        self._entries: dict[Any, tuple[str, float | None]] = {}
        self._clock = clock
        self.default_lifetime = default_lifetime
        self.hits = 0
        self.misses = 0

    def start(self, key: Any, lifetime: float | None = None) -> str | None:
        entry = self._entries.get(key)
        if entry is not None:
            content, expires = entry
            if expires is None or expires > self._clock():
                self.hits += 1
                return content
            del self._entries[key]
        self.misses += 1
        return None

    def save(self, key: Any, content: str, lifetime: float | None = None) -> None:
        if lifetime is None:
            lifetime = self.default_lifetime
        expires = None if lifetime is None else self._clock() + float(lifetime)
        self._entries[key] = (content, expires)

    def clear(self) -> None:
        self._entries.clear()


def _attributes(attrs: Mapping[str, Any]) -> str:
    return "".join(
        f' {name}="{escape_attr(value)}"' for name, value in attrs.items() if value is not None
    )


def _params(params: Any, first: str) -> dict[str, Any]:
    """Normalize helper arguments: a mapping, or a positional value for `first`."""
    if isinstance(params, Mapping):
        return dict(params)
    if isinstance(params, (list, tuple)):
        return {first: params[0], **({"text": params[1]} if len(params) > 1 else {})}
    return {first: params}


def _option(value: Any, label: Any, selected: bool) -> str:
    flag = ' selected="selected"' if selected else ""
    return f'<option value="{escape_attr(value)}"{flag}>{escape_attr(label)}</option>'


class TagHelpers:
    """HTML helpers reachable as `_view.tag.<name>(...)`.

    Covers the common helpers. Unknown helper names raise AttributeError
    at render time, naming the helper.
    """

    __slots__ = ("_doctype", "_title", "_url")

    def __init__(self, url: UrlHelper, title: str = "", doctype: str = "<!DOCTYPE html>"):
        self._url = url
        self._title = title
        self._doctype = doctype

    def link_to(self, params: Any, text: Any = None, **attrs: Any) -> Markup:
        options = _params(params, "action")
        if text is not None:
            options["text"] = text
        label = options.pop("text", "")
        href = self._url.get(options.pop("action", ""))
        attributes = _attributes({**options, **attrs})
        return Markup(f'<a href="{escape_attr(href)}"{attributes}>{label}</a>')

    def image(self, params: Any, **attrs: Any) -> Markup:
        options = _params(params, "src")
        src = self._url.get_static(options.pop("src", ""))
        return Markup(f'<img src="{escape_attr(src)}"{_attributes({**options, **attrs})} />')

    def stylesheet_link(self, href: Any, **attrs: Any) -> Markup:
        url = self._url.get_static(href)
        options = {"rel": "stylesheet", "type": "text/css", **attrs}
        return Markup(f'<link href="{escape_attr(url)}"{_attributes(options)} />')

    def javascript_include(self, src: Any, **attrs: Any) -> Markup:
        url = self._url.get_static(src)
        options = {"type": "text/javascript", **attrs}
        return Markup(f'<script src="{escape_attr(url)}"{_attributes(options)}></script>')

    def _input(self, type_: str, params: Any, attrs: Mapping[str, Any]) -> Markup:
        options = _params(params, "name")
        options.pop("text", None)
        name = options.get("name")
        options = {"type": type_, "id": name, **options, **attrs}
        return Markup(f"<input{_attributes(options)} />")

    def text_field(self, params: Any, **attrs: Any) -> Markup:
        return self._input("text", params, attrs)

    def password_field(self, params: Any, **attrs: Any) -> Markup:
        return self._input("password", params, attrs)

    def hidden_field(self, params: Any, **attrs: Any) -> Markup:
        return self._input("hidden", params, attrs)

    def email_field(self, params: Any, **attrs: Any) -> Markup:
        return self._input("email", params, attrs)

    def file_field(self, params: Any, **attrs: Any) -> Markup:
        return self._input("file", params, attrs)

    def check_field(self, params: Any, **attrs: Any) -> Markup:
        return self._input("checkbox", params, attrs)

    def radio_field(self, params: Any, **attrs: Any) -> Markup:
        return self._input("radio", params, attrs)

    def date_field(self, params: Any, **attrs: Any) -> Markup:
        return self._input("date", params, attrs)

    def numeric_field(self, params: Any, **attrs: Any) -> Markup:
        return self._input("number", params, attrs)

    def image_input(self, params: Any, **attrs: Any) -> Markup:
        options = _params(params, "src")
        options["src"] = self._url.get_static(options.get("src", ""))
        options = {"type": "image", **options, **attrs}
        return Markup(f"<input{_attributes(options)} />")

    def select_static(self, params: Any, values: Any = (), **attrs: Any) -> Markup:
        """`<select>` over `values`: a mapping of value to label, or a sequence."""
        options = _params(params, "name")
        selected = options.pop("value", None)
        if isinstance(values, Mapping):
            pairs = list(values.items())
        else:
            pairs = [(value, value) for value in values]
        rendered = "".join(
            _option(value, label, selected is not None and str(value) == str(selected))
            for value, label in pairs
        )
        options = {"id": options.get("name"), **options, **attrs}
        return Markup(f"<select{_attributes(options)}>{rendered}</select>")

    select = select_static

    def submit_button(self, params: Any, **attrs: Any) -> Markup:
        options = {"type": "submit", "value": params, **attrs}
        return Markup(f"<input{_attributes(options)} />")

    def text_area(self, params: Any, **attrs: Any) -> Markup:
        options = _params(params, "name")
        value = options.pop("value", options.pop("text", ""))
        options = {"id": options.get("name"), **options, **attrs}
        return Markup(f"<textarea{_attributes(options)}>{escape_attr(value)}</textarea>")

    def form(self, params: Any = "", **attrs: Any) -> Markup:
        options = _params(params, "action")
        action = self._url.get(options.pop("action", ""))
        options = {"action": action, "method": "post", **options, **attrs}
        return Markup(f"<form{_attributes(options)}>")

    def end_form(self) -> Markup:
        return Markup("</form>")

    def get_title(self) -> Markup:
        return Markup(f"<title>{escape_attr(self._title)}</title>")

    def get_doctype(self) -> Markup:
        return Markup(self._doctype)

    def friendly_title(self, text: Any, separator: str = "-", lowercase: bool = True) -> str:
        """URL slug: runs of non-alphanumerics collapse into `separator`."""
        slug = re.sub(r"[^A-Za-z0-9]+", separator, str(text)).strip(separator)
        return slug.lower() if lowercase else slug


class UrlHelper:
    """URL building for `url()` and `static_url()`."""

    __slots__ = ("base_uri", "static_base_uri")

    def __init__(self, base_uri: str = "/", static_base_uri: str | None = None):
        self.base_uri = base_uri
        self.static_base_uri = static_base_uri if static_base_uri is not None else base_uri

    def get(self, uri: Any = "", args: Mapping[str, Any] | None = None) -> str:
        url = _join_uri(self.base_uri, uri)
        if args:
            url += "?" + urlencode(args)
        return url

    def get_static(self, uri: Any = "") -> str:
        return _join_uri(self.static_base_uri, uri)


def _join_uri(base: str, uri: Any) -> str:
    uri = "" if uri is None else str(uri)
    if "://" in uri or uri.startswith("//"):
        return uri
    return base.rstrip("/") + "/" + uri.lstrip("/")


class View:
    """In-process `_view` implementation.

    Attributes:
        env: Environment used to render partials (None disables `partial()`)
        content: Text returned by `get_content()`
        services: Named services for `get_service()`; a `viewCache`
            is created on first use when none is registered
        url: URL helper
        tag: Tag helpers

    Example:
            >>> view = View(env, content="<p>inner</p>")
            >>> env.from_string("<main>{{ content() }}</main>").render(view=view)
            '<main><p>inner</p></main>'
    """

    def __init__(
        self,
        env: Environment | None = None,
        content: str = "",
        services: Mapping[str, Any] | None = None,
        base_uri: str = "/",
        title: str = "",
    ):
        self.env = env
        self.content = content
        self.services: dict[str, Any] = dict(services or {})
        self.url = UrlHelper(base_uri)
        self.tag = TagHelpers(self.url, title)

    def get_content(self) -> str:
        return self.content

    def partial(self, path: str, params: Mapping[str, Any] | None = None) -> str:
        """Render the template at `path` with `params` as its variables."""
        if self.env is None:
            raise RuntimeError(f"Cannot render partial '{path}' without an Environment")
        template = self.env.get_template(path)
        return template.render(view=self, **dict(params or {}))

    def get_service(self, name: str) -> Any:
        if name not in self.services:
            if name != "viewCache":
                raise LookupError(f"Service '{name}' is not registered in the view")
            self.services[name] = ViewCache()
        return self.services[name]
