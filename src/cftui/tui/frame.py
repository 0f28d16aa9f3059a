"""A screen-sized buffer of segments that renderables are drawn into at a given area."""

from dataclasses import dataclass

from rich.console import Console, ConsoleOptions, RenderableType, RenderResult
from rich.segment import Segment


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def intersection(self, other: "Rect") -> "Rect":
        x = max(self.x, other.x)
        y = max(self.y, other.y)
        right = min(self.x + self.width, other.x + other.width)
        bottom = min(self.y + self.height, other.y + other.height)
        return Rect(x, y, max(right - x, 0), max(bottom - y, 0))

    def split_top(self, height: int) -> tuple["Rect", "Rect"]:
        """Cut a band of the given height off the top."""
        height = min(height, self.height)
        top = Rect(self.x, self.y, self.width, height)
        rest = Rect(self.x, self.y + height, self.width, self.height - height)
        return top, rest

    def centered(
        self,
        vertical: tuple[int, int, int],
        horizontal: tuple[int, int, int],
    ) -> "Rect":
        """The middle cell of a 3x3 grid split by (top, middle, bottom) and
        (left, middle, right) ratios."""
        top, middle, _ = vertical
        y = self.height * top // sum(vertical)
        height = self.height * middle // sum(vertical)
        left, center, _ = horizontal
        x = self.width * left // sum(horizontal)
        width = self.width * center // sum(horizontal)
        return Rect(self.x + x, self.y + y, width, height)


class Frame:
    """Off-screen buffer for one draw.

    Every render() overwrites its area completely, so later renders occlude
    earlier ones.
    """

    def __init__(self, console: Console, width: int, height: int) -> None:
        self.console = console
        self.width = width
        self.height = height
        self.lines: list[list[Segment]] = [[Segment(" " * width)] for _ in range(height)]

    @property
    def area(self) -> Rect:
        return Rect(0, 0, self.width, self.height)

    def render(self, renderable: RenderableType, area: Rect) -> None:
        area = area.intersection(self.area)
        if area.empty:
            return

        options = self.console.options.update_dimensions(area.width, area.height)
        rendered = self.console.render_lines(renderable, options, pad=True)
        for offset, line in enumerate(rendered[: area.height]):
            row = area.y + offset
            parts = list(
                Segment.divide(self.lines[row], [area.x, area.x + area.width, self.width])
            )
            self.lines[row] = [*parts[0], *line, *parts[2]]

    def plain_lines(self) -> list[str]:
        return ["".join(segment.text for segment in line) for line in self.lines]

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        for row, line in enumerate(self.lines):
            yield from line
            if row < len(self.lines) - 1:
                yield Segment.line()
