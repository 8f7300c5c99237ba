"""File-based templates -- the most common real-world pattern.

Loads templates from disk with FileSystemLoader, demonstrates template
inheritance (extends/block/super) and includes, then compiles a page to a
Python file the way a deployment step would.

Run:
    python app.py
"""

import tempfile
from pathlib import Path

from stencil import Environment, FileSystemLoader

templates_dir = Path(__file__).parent / "templates"
env = Environment(loader=FileSystemLoader(str(templates_dir)))

nav_items = [
    {"url": "/", "label": "Home"},
    {"url": "/about", "label": "About"},
]

# Render both pages
home_template = env.get_template("home.volt")
about_template = env.get_template("about.volt")

home_output = home_template.render(
    site_name="My Site",
    nav_items=nav_items,
    title="Welcome",
    message="This is a stencil-powered site with template inheritance.",
)

about_output = about_template.render(
    site_name="My Site",
    nav_items=nav_items,
    title="About Us",
    description="Templates compiled ahead of time to plain Python.",
)

# Compile to disk: one flat .py file per template under the output directory
output_dir = Path(tempfile.mkdtemp(prefix="stencil-"))
env.set_option("compiled_path", output_dir)
compiled_file = env.compile("home.volt")
compiled_code = compiled_file.read_text(encoding="utf-8")


def main() -> None:
    print("=== Home Page ===")
    print(home_output)
    print()
    print("=== About Page ===")
    print(about_output)
    print()
    print(f"=== {compiled_file.name} ===")
    print(compiled_code)


if __name__ == "__main__":
    main()
