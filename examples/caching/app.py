"""Fragment caching -- the {% cache %} directive.

Demonstrates caching expensive template fragments. The {% cache "key" %}
block asks the view's `viewCache` service for the fragment, renders it on
a miss and stores the result. Renders sharing one View share its cache.

Run:
    python app.py
"""

from stencil import DictLoader, Environment, View

templates = {
    "dashboard.volt": """\
<h1>{{ title }}</h1>
{% cache "report" 300 %}
<section>{{ compute() }}</section>
{% endcache %}
<p>Users: {{ stats['users'] }}, revenue: {{ stats['revenue'] }}</p>
""",
}

env = Environment(loader=DictLoader(templates))
template = env.get_template("dashboard.volt")
view = View()

# Mutable counter to prove caching works -- the cached block only calls
# compute() on the first render.
call_count = 0


def expensive_computation() -> str:
    """Simulate an expensive operation that should be cached."""
    global call_count  # noqa: PLW0603
    call_count += 1
    return f"Result (computed {call_count} time(s))"


# First render -- populates the cache
first_output = template.render(
    view=view,
    title="Dashboard",
    compute=expensive_computation,
    stats={"users": 1200, "revenue": "$45K"},
)
count_after_first = call_count

# Second render -- cache hit, expensive_computation should NOT run again
second_output = template.render(
    view=view,
    title="Dashboard",
    compute=expensive_computation,
    stats={"users": 9999, "revenue": "$99K"},  # different data, but cache wins
)
count_after_second = call_count

cache = view.get_service("viewCache")


def main() -> None:
    print("=== First render ===")
    print(first_output)
    print(f"\nexpensive_computation called {count_after_first} time(s)")

    print("\n=== Second render (cached) ===")
    print(second_output)
    print(f"\nexpensive_computation called {count_after_second} time(s) total")
    print(f"cache hits: {cache.hits}, misses: {cache.misses}")


if __name__ == "__main__":
    main()
