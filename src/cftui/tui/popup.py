"""Popups: small views drawn over the view below them."""

import logging
from pathlib import Path
from typing import Any, Iterable, Sequence

from rich.text import Text

from cftui.display import format_verdict
from cftui.exceptions import CommandError, InvalidSelectionError
from cftui.judge import Judge, Pending, Verdict
from cftui.models import ScriptSet, TestCase
from cftui.tui import tasks
from cftui.tui.component import describe
from cftui.tui.context import Context
from cftui.tui.event import Event, Tick, is_enter_key, is_exit_key, is_next, is_prev
from cftui.tui.frame import Frame, Rect
from cftui.tui.msg import (
    DEFAULT_RATIO,
    NOOP,
    Change,
    Channel,
    EnterNewView,
    ErrorPopup,
    ExitCurrentView,
    HandleSelectionFn,
    Push,
    PushLines,
    Ratio,
    Set,
    UpdateFn,
)
from cftui.tui.view import View
from cftui.tui.widgets import Paragraph, Table, Width


logger = logging.getLogger(__name__)


class PopupView(View):
    fullscreen = False

    def __init__(self, sender: Channel, context: Context | None, ratio: Ratio = DEFAULT_RATIO) -> None:
        super().__init__(sender, context)
        self.ratio = ratio

    def area(self, frame: Frame) -> Rect:
        vertical, horizontal = self.ratio
        return frame.area.centered(vertical, horizontal)

    def tick(self) -> None:
        pass

    def on_key(self, event: Event) -> Any:
        return NOOP

    def on(self, event: Event) -> Any:
        if isinstance(event, Tick):
            self.tick()
            return NOOP
        if is_exit_key(event):
            return ExitCurrentView()
        return self.on_key(event)


class ParagraphPopupView(PopupView):
    def __init__(
        self,
        sender: Channel,
        context: Context | None,
        ratio: Ratio,
        title: Text,
        lines: Iterable[Text | str],
    ) -> None:
        super().__init__(sender, context, ratio)
        self.component = Paragraph(title, lines)

    def on_key(self, event: Event) -> Any:
        if is_prev(event):
            self.component.scroll_up()
        elif is_next(event):
            self.component.scroll_down()
        return NOOP

    def render(self, frame: Frame) -> None:
        self.component.render(frame, self.area(frame))


class StaticPopupView(ParagraphPopupView):
    """Fixed title and text. Error popups are static popups with a red title."""

    def __init__(
        self,
        sender: Channel,
        title: Text,
        text: str,
        ratio: Ratio = DEFAULT_RATIO,
        context: Context | None = None,
    ) -> None:
        super().__init__(sender, context, ratio, title, text.splitlines())


class UpdatablePopupView(ParagraphPopupView):
    """Text driven by content updates from the caller's update function.

    update(updates, popup_sender) is called once on construction; it usually
    spawns a task that sends Push/PushLines/Change/Set on updates and error
    popups on popup_sender.
    """

    def __init__(
        self,
        sender: Channel,
        ratio: Ratio,
        update: UpdateFn,
        title: Text,
        text: Sequence[Text],
        context: Context | None = None,
    ) -> None:
        super().__init__(sender, context, ratio, title, text)
        self.updates: Channel = Channel()
        update(self.updates, self.handler)

    def tick(self) -> None:
        for cmd in self.updates.drain():
            self.apply(cmd)

    def apply(self, cmd: Any) -> None:
        if isinstance(cmd, Push):
            self.component.push_line(cmd.line)
        elif isinstance(cmd, PushLines):
            self.component.push_lines(cmd.lines)
        elif isinstance(cmd, Change):
            self.component.change_line(cmd.index, cmd.line)
        elif isinstance(cmd, Set):
            self.component.set_text(cmd.lines)


class SelectPopupView(PopupView):
    """Pick one row of a table.

    Enter closes the popup before calling handle_selection, so the callback
    may push a view of its own.
    """

    def __init__(
        self,
        sender: Channel,
        ratio: Ratio,
        handle_selection: HandleSelectionFn,
        title: Text,
        header: Sequence[str],
        widths: Sequence[Width],
        items: Sequence[Sequence[str]],
        context: Context | None = None,
    ) -> None:
        super().__init__(sender, context, ratio)
        self.handle_selection = handle_selection
        self.items = items
        self.component = Table(header, widths, title)
        self.component.set_items(items)
        self.component.select(0)

    def on_key(self, event: Event) -> Any:
        if is_prev(event):
            self.component.prev()
        elif is_next(event):
            self.component.next()
        elif is_enter_key(event):
            index = self.component.selected()
            if not 0 <= index < len(self.items):
                raise InvalidSelectionError(index)
            self.sender.send(ExitCurrentView())
            self.handle_selection(index, self.sender)
        return NOOP

    def render(self, frame: Frame) -> None:
        area = self.area(frame)
        self.component.render(frame, area)


def _run_judge(judge: Judge, test_cases: Sequence[TestCase], results: Channel, popup_sender: Channel) -> None:
    try:
        judge.run(list(test_cases), lambda id, verdict: results.send((id, verdict)))
    except CommandError as e:
        logger.warning("Judge aborted: %s", e.message)
        popup_sender.send(EnterNewView(ErrorPopup(f"Error from Test: {e.stage} Command", e.detail)))
    except Exception as e:
        logger.exception("Judge failed")
        popup_sender.send(EnterNewView(ErrorPopup("Error from Test", describe(e))))


class JudgePopupView(ParagraphPopupView):
    """Runs the judge in the background and shows each verdict as it arrives."""

    def __init__(
        self,
        sender: Channel,
        ratio: Ratio,
        scripts: ScriptSet,
        test_cases: Sequence[TestCase],
        source: Path,
        title: Text,
        timeout: float,
        context: Context | None = None,
    ) -> None:
        self.verdicts: list[Verdict] = [Pending() for _ in test_cases]
        super().__init__(sender, context, ratio, title, self.format())
        self.results: Channel = Channel()
        self.judge = Judge(scripts, source, timeout)
        tasks.spawn(_run_judge, self.judge, tuple(test_cases), self.results, self.handler, name="judge")

    def format(self) -> list[Text]:
        lines: list[Text] = []
        for id, verdict in enumerate(self.verdicts, start=1):
            lines.extend(format_verdict(id, verdict))
        return lines

    def tick(self) -> None:
        changed = False
        for id, verdict in self.results.drain():
            self.verdicts[id - 1] = verdict
            changed = True
        if changed:
            self.component.set_text(self.format())

    def on_exit(self) -> None:
        self.judge.cancel()
