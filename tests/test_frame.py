"""Tests for rectangles and the off-screen frame."""

from rich.console import Console
from rich.text import Text

from cftui.tui.frame import Frame, Rect


def make_frame(width: int = 20, height: int = 5) -> Frame:
    console = Console(width=width, height=height, color_system=None)
    return Frame(console, width, height)


class TestRect:
    """Tests for Rect."""

    def test_split_top(self):
        """Test cutting a band off the top."""
        top, rest = Rect(0, 0, 80, 24).split_top(3)
        assert top == Rect(0, 0, 80, 3)
        assert rest == Rect(0, 3, 80, 21)

    def test_split_top_larger_than_rect(self):
        """Test that the band never exceeds the rect."""
        top, rest = Rect(0, 0, 10, 2).split_top(3)
        assert top == Rect(0, 0, 10, 2)
        assert rest.empty

    def test_centered(self):
        """Test the middle cell of the default popup ratio."""
        assert Rect(0, 0, 100, 50).centered((1, 3, 1), (1, 3, 1)) == Rect(20, 10, 60, 30)

    def test_intersection(self):
        """Test clipping a rect to the screen."""
        assert Rect(15, 3, 10, 10).intersection(Rect(0, 0, 20, 5)) == Rect(15, 3, 5, 2)
        assert Rect(30, 0, 5, 5).intersection(Rect(0, 0, 20, 5)).empty


class TestFrame:
    """Tests for Frame.render()."""

    def test_starts_blank(self):
        """Test that a new frame is all spaces."""
        assert make_frame().plain_lines() == [" " * 20] * 5

    def test_render_into_area(self):
        """Test that text lands at the area's position and fills its width."""
        frame = make_frame()
        frame.render(Text("hello"), Rect(2, 1, 10, 1))

        lines = frame.plain_lines()
        assert lines[1] == "  hello" + " " * 13
        assert lines[0] == " " * 20
        assert all(len(line) == 20 for line in lines)

    def test_later_render_occludes(self):
        """Test that a second render overwrites its whole area."""
        frame = make_frame()
        frame.render(Text("\n".join(["x" * 20] * 5)), frame.area)
        frame.render(Text("ok"), Rect(5, 2, 4, 1))

        lines = frame.plain_lines()
        assert lines[2] == "x" * 5 + "ok  " + "x" * 11
        assert lines[1] == "x" * 20

    def test_render_is_clipped(self):
        """Test that areas past the screen edge are cut off."""
        frame = make_frame()
        frame.render(Text("abcdefgh"), Rect(16, 4, 8, 3))

        lines = frame.plain_lines()
        assert lines[4] == " " * 16 + "abcd"
        assert len(lines) == 5
