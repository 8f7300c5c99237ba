"""Tests for the hello example."""


class TestHelloApp:
    """Verify the hello example compiles and renders correctly."""

    def test_generated_code(self, example_app) -> None:
        assert example_app.code == "_append('Hello, ')\n_append(_str(name))\n_append('!')"

    def test_output(self, example_app) -> None:
        assert example_app.output == "Hello, World!"

    def test_rerender_with_different_context(self, example_app) -> None:
        result = example_app.template.render(name="Stencil")
        assert result == "Hello, Stencil!"
