"""Custom filters and functions -- extending stencil with add_filter/add_function.

Stencil compiles templates ahead of time, so a registration says what code
to emit, not what to call:

- a string registers a rename: `{{ total|money }}` -> `fmt.money(total)`.
  The named object has to exist when the generated code runs, so `fmt` is
  passed in as a template variable here.
- a callable registers a generator: it receives the compiled arguments and
  returns the Python expression to emit, evaluated entirely inside the
  generated code.

Run:
    python app.py
"""

from stencil import DictLoader, Environment


class Formatters:
    """Runtime helpers reached through the `fmt` template variable."""

    @staticmethod
    def money(amount: float, currency: str = "$") -> str:
        """Format amount as currency."""
        return f"{currency}{amount:,.2f}"


def pluralize(arguments, expr_arguments) -> str:
    """`n|pluralize('item', 'items')` -> `('item' if n == 1 else 'items')`."""
    count, singular, plural = arguments.parts
    return f"({singular} if {count} == 1 else {plural})"


templates = {
    "invoice.volt": """\
<h1>Invoice</h1>
<p>{{ item_count }} {{ item_count|pluralize('item', 'items') }}</p>
<ul>
{% for item in items %}
  <li>{{ item['name'] }}: {{ (item['price'] * item['qty'])|money }}</li>
{% endfor %}
</ul>
<p>Total: {{ total|money }} ({{ total|money('€') }})</p>
<p>Due: {{ due_date() }}</p>
""",
}

env = Environment(loader=DictLoader(templates))
env.add_filter("money", "fmt.money")
env.add_filter("pluralize", pluralize)
env.add_function("due_date", lambda arguments, expr_arguments: "'on receipt'")

code = env.compile_string(templates["invoice.volt"], "invoice.volt")
template = env.get_template("invoice.volt")

output = template.render(
    fmt=Formatters,
    total=1234.56,
    item_count=3,
    items=[
        {"name": "Widget A", "price": 19.99, "qty": 2},
        {"name": "Widget B", "price": 5.00, "qty": 1},
    ],
)


def main() -> None:
    print(code)
    print()
    print(output)


if __name__ == "__main__":
    main()
