"""Tests for the table widget."""

from cftui.tui.widgets import HIGHLIGHT_STYLE, Fixed, Table


def make_table(rows: int = 3) -> Table:
    return Table(["#", "Name"], [Fixed(3), 1]).set_items([[str(k), f"Problem {k}"] for k in range(rows)])


def row_styles(table: Table, height: int = 10) -> list:
    return [row.style for row in table.renderable(height).renderable.rows]


class TestTable:
    """Tests for Table selection and highlighting."""

    def test_first_row_highlighted_before_navigation(self):
        """Test that the row keys act on is highlighted from the start."""
        table = make_table()
        assert table.selected() == 0
        assert row_styles(table) == [HIGHLIGHT_STYLE, None, None]

    def test_highlight_follows_selection(self):
        """Test that moving down highlights the next row."""
        table = make_table()
        table.next()
        table.next()
        assert table.selected() == 1
        assert row_styles(table) == [None, HIGHLIGHT_STYLE, None]

    def test_selection_clamped_when_rows_shrink(self):
        """Test that a selection past the end moves to the last row."""
        table = make_table(5)
        table.select(4)
        table.set_items([["0", "Problem 0"], ["1", "Problem 1"]])
        assert table.selected() == 1
        assert row_styles(table) == [None, HIGHLIGHT_STYLE]
