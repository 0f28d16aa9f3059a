"""Base widgets: selectable table, tab bar, scrollable paragraph and loading placeholder."""

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from rich import box
from rich.align import Align
from rich.panel import Panel
from rich.table import Table as RichTable
from rich.text import Text

from cftui.exceptions import InvalidSelectionError
from cftui.tui.frame import Frame, Rect


TextLike = Union[str, Text]


@dataclass(frozen=True)
class Fixed:
    """A column of a fixed number of cells. Plain ints are ratios."""

    width: int


Width = Union[int, Fixed]

HEADER_STYLE = "black on magenta"
HIGHLIGHT_STYLE = "reverse"
TABS_STYLE = "cyan"

# Panel border plus the header row and its separator.
TABLE_CHROME_HEIGHT = 4


def to_text(value: TextLike) -> Text:
    return value if isinstance(value, Text) else Text(str(value))


class Table:
    """A table with one selected row and a window that follows the selection."""

    def __init__(
        self,
        header: Iterable[TextLike],
        widths: Iterable[Width],
        title: TextLike = "",
    ) -> None:
        self.header = [to_text(h) for h in header]
        self.widths = list(widths)
        self.title = to_text(title)
        self.items: list[list[Text]] = []
        self._selected: Optional[int] = None
        self._offset = 0

    def selected(self) -> int:
        return self._selected or 0

    def select(self, index: int) -> None:
        self._selected = index

    def next(self) -> None:
        if self._selected is None or not self.items:
            self._selected = 0
        else:
            self._selected = min(self._selected + 1, len(self.items) - 1)

    def prev(self) -> None:
        if self._selected is None:
            self._selected = 0
        else:
            self._selected = max(self._selected - 1, 0)

    def set_items(self, items: Iterable[Iterable[TextLike]]) -> "Table":
        self.items = [[to_text(cell) for cell in row] for row in items]
        if self._selected is not None and self._selected >= len(self.items):
            self._selected = max(len(self.items) - 1, 0)
        return self

    def set_header(self, header: Iterable[TextLike], widths: Iterable[Width]) -> "Table":
        self.header = [to_text(h) for h in header]
        self.widths = list(widths)
        return self

    def _window(self, visible: int) -> range:
        visible = max(visible, 1)
        selected = self.selected()
        if selected < self._offset:
            self._offset = selected
        elif selected >= self._offset + visible:
            self._offset = selected - visible + 1
        return range(self._offset, min(self._offset + visible, len(self.items)))

    def renderable(self, height: int) -> Panel:
        table = RichTable(
            box=box.SIMPLE_HEAD,
            show_edge=False,
            expand=True,
            header_style=HEADER_STYLE,
            pad_edge=False,
        )
        for header, width in zip(self.header, self.widths):
            if isinstance(width, Fixed):
                table.add_column(header, width=width.width, no_wrap=True, overflow="ellipsis")
            else:
                table.add_column(header, ratio=width, no_wrap=True, overflow="ellipsis")

        for index in self._window(height - TABLE_CHROME_HEIGHT):
            style = HIGHLIGHT_STYLE if index == self.selected() else None
            table.add_row(*self.items[index], style=style)

        return Panel(table, title=self.title, title_align="left", box=box.SQUARE)

    def render(self, frame: Frame, area: Rect) -> None:
        frame.render(self.renderable(area.height), area)


class Tabs:
    """A row of titles with one selected, wrapping around at both ends."""

    def __init__(self, titles: Iterable[TextLike]) -> None:
        self.titles = [to_text(t) for t in titles]
        self.index = 0

    def selected(self) -> int:
        return self.index

    def select(self, index: int) -> None:
        if not 0 <= index < len(self.titles):
            raise InvalidSelectionError(index)
        self.index = index

    def prev(self) -> None:
        self.index = (self.index - 1) % len(self.titles)

    def next(self) -> None:
        self.index = (self.index + 1) % len(self.titles)

    def renderable(self) -> Panel:
        line = Text(style=TABS_STYLE)
        for i, title in enumerate(self.titles):
            if i:
                line.append(" │ ")
            title = title.copy()
            if i == self.index:
                title.stylize(HIGHLIGHT_STYLE)
            line.append_text(title)
        return Panel(line, box=box.ROUNDED)

    def render(self, frame: Frame, area: Rect) -> None:
        frame.render(self.renderable(), area)


class Paragraph:
    """Titled, scrollable block of lines."""

    def __init__(self, title: TextLike, lines: Iterable[TextLike] = ()) -> None:
        self.title = to_text(title)
        self.lines = [to_text(line) for line in lines]
        self.scroll = 0

    def scroll_up(self) -> None:
        self.scroll = max(self.scroll - 1, 0)

    def scroll_down(self) -> None:
        self.scroll = min(self.scroll + 1, max(len(self.lines) - 1, 0))

    def push_line(self, line: TextLike) -> None:
        self.lines.append(to_text(line))

    def push_lines(self, lines: Iterable[TextLike]) -> None:
        self.lines.extend(to_text(line) for line in lines)

    def change_line(self, index: int, line: TextLike) -> None:
        """Replace line index, padding with blank lines if it doesn't exist yet."""
        while len(self.lines) <= index:
            self.lines.append(Text(""))
        self.lines[index] = to_text(line)

    def set_text(self, lines: Iterable[TextLike]) -> None:
        self.lines = [to_text(line) for line in lines]
        self.scroll = min(self.scroll, max(len(self.lines) - 1, 0))

    def plain(self) -> list[str]:
        return [line.plain for line in self.lines]

    def renderable(self) -> Panel:
        body = Text("\n").join(self.lines[self.scroll :])
        return Panel(body, title=self.title, title_align="left", box=box.ROUNDED)

    def render(self, frame: Frame, area: Rect) -> None:
        frame.render(self.renderable(), area)


def render_loading(frame: Frame, area: Rect) -> None:
    loading = Align.center(Text("Loading..."), vertical="middle")
    frame.render(Panel(loading, box=box.ROUNDED), area)
