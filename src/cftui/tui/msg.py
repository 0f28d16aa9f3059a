"""Messages exchanged between components, views and the app, and the channels carrying them."""

import queue
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Generic, Iterator, Optional, TypeVar

from rich.text import Text

from cftui.models import Contest, ScriptSet, TestCase

if TYPE_CHECKING:
    from pathlib import Path

    from cftui.tui.context import Context
    from cftui.tui.view import View


T = TypeVar("T")


class Channel(Generic[T]):
    """Unbounded FIFO channel.

    The channel is its own sender: any thread may call send(). Only the
    owner on the loop thread receives.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue = queue.SimpleQueue()

    def send(self, item: T) -> None:
        self._queue.put(item)

    def try_next(self) -> Optional[T]:
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def drain(self) -> Iterator[T]:
        """Yield everything queued so far, in emission order."""
        while True:
            try:
                yield self._queue.get_nowait()
            except queue.Empty:
                return

    def empty(self) -> bool:
        return self._queue.empty()


# Messages. Components may emit any of them; only AppClose, EnterNewView,
# ExitCurrentView and NoOp reach the app.


@dataclass(frozen=True)
class AppClose:
    pass


@dataclass(frozen=True)
class EnterNewView:
    constructor: "ViewConstructor"


@dataclass(frozen=True)
class ExitCurrentView:
    pass


@dataclass(frozen=True)
class ChangeToTab:
    index: int


@dataclass(frozen=True)
class ChangedTo:
    index: int


@dataclass(frozen=True)
class OpenedWebsite:
    url: str


@dataclass(frozen=True)
class Update:
    pass


@dataclass(frozen=True)
class NoOp:
    pass


NOOP = NoOp()


# Content updates for an updatable popup.


@dataclass(frozen=True)
class Push:
    line: Text


@dataclass(frozen=True)
class PushLines:
    lines: tuple[Text, ...]


@dataclass(frozen=True)
class Change:
    index: int
    line: Text


@dataclass(frozen=True)
class Set:
    lines: tuple[Text, ...]


# A popup covering the middle of the screen, as (top, middle, bottom) and
# (left, middle, right) ratios.
Ratio = tuple[tuple[int, int, int], tuple[int, int, int]]

DEFAULT_RATIO: Ratio = ((1, 3, 1), (1, 3, 1))

UpdateFn = Callable[[Channel, Channel], None]
HandleSelectionFn = Callable[[int, Channel], None]


class ViewConstructor:
    """Everything needed to build a view once the app hands out a sender."""

    def construct(self, sender: Channel, context: "Context") -> "View":
        raise NotImplementedError


@dataclass(frozen=True)
class MainBrowser(ViewConstructor):
    def construct(self, sender: Channel, context: "Context") -> "View":
        from cftui.tui.browser.main import MainBrowserView

        return MainBrowserView(sender, context)


@dataclass(frozen=True)
class ContestBrowser(ViewConstructor):
    contest: Contest

    def construct(self, sender: Channel, context: "Context") -> "View":
        from cftui.tui.browser.contest import ContestBrowserView

        return ContestBrowserView(sender, context, self.contest)


@dataclass(frozen=True)
class StaticPopup(ViewConstructor):
    title: str
    text: str
    ratio: Ratio = DEFAULT_RATIO

    def construct(self, sender: Channel, context: "Context") -> "View":
        from cftui.tui.popup import StaticPopupView

        return StaticPopupView(sender, Text(self.title), self.text, self.ratio)


@dataclass(frozen=True)
class ErrorPopup(ViewConstructor):
    title: str
    text: str

    def construct(self, sender: Channel, context: "Context") -> "View":
        from cftui.tui.popup import StaticPopupView

        return StaticPopupView(sender, Text(self.title, style="bold red"), self.text)


@dataclass(frozen=True)
class UpdatablePopup(ViewConstructor):
    ratio: Ratio
    update: UpdateFn
    title: str
    text: tuple[Text, ...] = ()

    def construct(self, sender: Channel, context: "Context") -> "View":
        from cftui.tui.popup import UpdatablePopupView

        return UpdatablePopupView(sender, self.ratio, self.update, Text(self.title), self.text)


@dataclass(frozen=True)
class SelectPopup(ViewConstructor):
    ratio: Ratio
    handle_selection: HandleSelectionFn
    title: str
    header: tuple[str, ...]
    widths: tuple[int, ...]
    items: tuple[tuple[str, ...], ...]

    def construct(self, sender: Channel, context: "Context") -> "View":
        from cftui.tui.popup import SelectPopupView

        return SelectPopupView(
            sender,
            self.ratio,
            self.handle_selection,
            Text(self.title),
            self.header,
            self.widths,
            self.items,
        )


@dataclass(frozen=True)
class JudgePopup(ViewConstructor):
    scripts: ScriptSet
    test_cases: tuple[TestCase, ...]
    source: "Path"
    title: str
    ratio: Ratio = DEFAULT_RATIO

    def construct(self, sender: Channel, context: "Context") -> "View":
        from cftui.tui.popup import JudgePopupView

        return JudgePopupView(
            sender,
            self.ratio,
            self.scripts,
            self.test_cases,
            self.source,
            Text(self.title),
            context.timeout,
        )
