"""DictLoader -- in-memory templates without filesystem.

Templates from a dictionary. No templates directory needed.
Use case: tests, generated templates, single-file apps.

Run:
    python app.py
"""

from stencil import DictLoader, Environment

templates = {
    "base.volt": """\
<!DOCTYPE html>
<html>
<head><title>{{ title }}</title></head>
<body>
    <nav>
    {% for item in nav_items %}
        <a href="{{ item['url'] }}">{{ item['label'] }}</a>
    {% endfor %}
    </nav>
    <main>{% block content %}{% endblock %}</main>
</body>
</html>
""",
    "page.volt": """\
{% extends "base.volt" %}
{% block content %}
    <h1>{{ heading }}</h1>
    <p>{{ message }}</p>
{% endblock %}
""",
}

env = Environment(loader=DictLoader(templates))
template = env.get_template("page.volt")

output = template.render(
    title="DictLoader Demo",
    nav_items=[
        {"url": "/", "label": "Home"},
        {"url": "/about", "label": "About"},
    ],
    heading="In-Memory Templates",
    message="No filesystem required. Templates loaded from a dict.",
)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
