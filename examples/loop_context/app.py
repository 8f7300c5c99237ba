"""Loop context -- loop.first, loop.last, loop.index, loop.length.

Demonstrates the loop variable in {% for %} blocks for styling
first/last items, row numbers, and progress indicators, plus the
{% else %} branch for empty sequences.

Run:
    python app.py
"""

from stencil import DictLoader, Environment

templates = {
    "table.volt": """\
<table>
{% for item in items %}
  <tr class="{{ loop.first ? 'first' : '' }}{{ loop.last ? 'last' : '' }}">
    <td>{{ loop.index }}</td><td>{{ item }}</td><td>{{ loop.index }}/{{ loop.length }}</td>
  </tr>
{% else %}
  <tr><td>No items</td></tr>
{% endfor %}
</table>
""",
}

env = Environment(loader=DictLoader(templates))
template = env.get_template("table.volt")

items = ["Alpha", "Beta", "Gamma", "Delta"]
output = template.render(items=items)
empty_output = template.render(items=[])


def main() -> None:
    print(output)
    print(empty_output)


if __name__ == "__main__":
    main()
