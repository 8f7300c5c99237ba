"""Tests for the loop_context example."""


class TestLoopContextApp:
    """Verify loop.first, loop.last, loop.index, loop.length work correctly."""

    def test_first_row_has_first_class(self, example_app) -> None:
        assert 'class="first"' in example_app.output

    def test_last_row_has_last_class(self, example_app) -> None:
        assert 'class="last"' in example_app.output

    def test_loop_index_rendered(self, example_app) -> None:
        assert "<td>1</td>" in example_app.output
        assert "<td>4</td>" in example_app.output

    def test_loop_length_rendered(self, example_app) -> None:
        assert "1/4" in example_app.output
        assert "4/4" in example_app.output

    def test_all_items_present(self, example_app) -> None:
        for item in example_app.items:
            assert f"<td>{item}</td>" in example_app.output

    def test_empty_sequence_uses_else(self, example_app) -> None:
        assert "No items" in example_app.empty_output
        assert "No items" not in example_app.output
