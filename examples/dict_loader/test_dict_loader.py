"""Tests for the dict_loader example."""


class TestDictLoaderApp:
    """Verify the dict_loader example renders correctly."""

    def test_output_contains_expected_content(self, example_app) -> None:
        assert "<h1>In-Memory Templates</h1>" in example_app.output
        assert "No filesystem required" in example_app.output
        assert "<title>DictLoader Demo</title>" in example_app.output

    def test_nav_items_rendered(self, example_app) -> None:
        assert '<a href="/">Home</a>' in example_app.output
        assert '<a href="/about">About</a>' in example_app.output

    def test_block_lands_in_layout(self, example_app) -> None:
        main = example_app.output.split("<main>")[1].split("</main>")[0]
        assert "In-Memory Templates" in main
