"""Components: the widgets a view owns, and the fetching table they are mostly built on."""

import logging
import webbrowser
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from rich.text import Text

from cftui.exceptions import CFError, InvalidSelectionError
from cftui.tui import tasks
from cftui.tui.context import Context
from cftui.tui.event import Event, is_enter_key, is_left_key, is_next, is_prev, is_right_key
from cftui.tui.frame import Frame, Rect
from cftui.tui.msg import (
    NOOP,
    Channel,
    ChangedTo,
    ChangeToTab,
    EnterNewView,
    ErrorPopup,
    OpenedWebsite,
)
from cftui.tui.widgets import Table, Tabs, Width, render_loading


logger = logging.getLogger(__name__)


def describe(error: BaseException) -> str:
    """User-facing text for an error shown in a popup."""
    if isinstance(error, CFError):
        return error.message
    return str(error) or repr(error)


def open_url(url: str) -> OpenedWebsite:
    webbrowser.open(url)
    return OpenedWebsite(url)


class Component:
    """A widget owned by exactly one view.

    on() returns the synchronous effect of an event. Anything that finishes
    later is reported on the sender the owning view handed out.
    """

    def on(self, event: Event) -> Any:
        return NOOP

    def render(self, frame: Frame, area: Rect) -> None:
        raise NotImplementedError

    def tick(self) -> None:
        pass

    def update(self) -> None:
        pass


class TabsComponent(Component):
    """Tab bar. Left/right keys ask the view to switch tabs."""

    def __init__(self, titles: Sequence[str]) -> None:
        self.component = Tabs(titles)

    def selected(self) -> int:
        return self.component.selected()

    def select(self, index: int) -> None:
        self.component.select(index)

    def on(self, event: Event) -> Any:
        count = len(self.component.titles)
        if is_right_key(event):
            return ChangeToTab((self.selected() + 1) % count)
        if is_left_key(event):
            return ChangeToTab((self.selected() - 1) % count)
        return NOOP

    def render(self, frame: Frame, area: Rect) -> None:
        self.component.render(frame, area)


@dataclass(frozen=True)
class Fetched:
    records: tuple
    rows: tuple


@dataclass(frozen=True)
class FetchFailed:
    error: Exception


def _run_fetch(
    job: Callable[[], Fetched],
    handler: Channel,
    sender: Channel,
    error_title: str,
) -> None:
    try:
        result = job()
    except Exception as e:
        logger.exception(error_title)
        handler.send(FetchFailed(e))
        sender.send(EnterNewView(ErrorPopup(error_title, describe(e))))
        return
    handler.send(result)


class FetchingTable(Component):
    """A table filled by a background fetch.

    updating counts fetches in flight and every fetch reports exactly once on
    the private handler channel, success or not. A failed fetch keeps the
    rows already shown.
    """

    title = ""
    header: tuple[str, ...] = ()
    widths: tuple[Width, ...] = ()
    error_title = "Error"

    def __init__(self, sender: Channel, context: Context) -> None:
        self.sender = sender
        self.context = context
        self.handler: Channel = Channel()
        self.component = Table(self.header, self.widths, self.title)
        self.updating = 0
        self.records: tuple = ()

    def fetch(self) -> Callable[[], Fetched]:
        """Return the job to run off the loop. It must only read its arguments."""
        raise NotImplementedError

    def update(self) -> None:
        job = self.fetch()
        self.updating += 1
        tasks.spawn(
            _run_fetch,
            job,
            self.handler,
            self.sender,
            self.error_title,
            name=f"fetch-{type(self).__name__}",
        )

    def tick(self) -> None:
        for result in self.handler.drain():
            self.updating = max(self.updating - 1, 0)
            if isinstance(result, Fetched):
                self.apply(result)

    def apply(self, result: Fetched) -> None:
        self.records = result.records
        self.component.set_items(result.rows)

    def selected_record(self) -> Any:
        index = self.component.selected()
        if not 0 <= index < len(self.records):
            raise InvalidSelectionError(index)
        return self.records[index]

    def enter(self) -> Any:
        return NOOP

    def on(self, event: Event) -> Any:
        if is_prev(event):
            self.component.prev()
            return ChangedTo(self.component.selected())
        if is_next(event):
            self.component.next()
            return ChangedTo(self.component.selected())
        if is_enter_key(event):
            return self.enter()
        return NOOP

    def render(self, frame: Frame, area: Rect) -> None:
        if self.updating:
            render_loading(frame, area)
        else:
            self.component.render(frame, area)


def rows(records: Sequence[Any], format_row: Callable[[Any], list[Text]]) -> tuple:
    return tuple(tuple(format_row(record)) for record in records)
