"""Hello World -- the simplest stencil example.

Compile a template from a string, look at the generated Python, and run it
with context variables. No templates directory needed.

Run:
    python app.py
"""

from stencil import DictLoader, Environment

env = Environment(loader=DictLoader({}))

# Compile to Python source
code = env.compile_string("Hello, {{ name }}!")

# Compile and render through the reference runtime
template = env.from_string("Hello, {{ name }}!")
output = template.render(name="World")


def main() -> None:
    print(code)
    print()
    print(output)
    print()

    # Multiple renders with different context
    for name in ["Stencil", "Volt", "Python"]:
        print(template.render(name=name))


if __name__ == "__main__":
    main()
