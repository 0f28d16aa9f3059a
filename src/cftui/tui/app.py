"""The app: a stack of views, one render/input loop and the channel views report on."""

import logging

from cftui.tui.component import describe
from cftui.tui.context import Context
from cftui.tui.event import Event, is_terminate_key
from cftui.tui.frame import Frame
from cftui.tui.msg import (
    AppClose,
    Channel,
    EnterNewView,
    ErrorPopup,
    ExitCurrentView,
    MainBrowser,
    ViewConstructor,
)
from cftui.tui.terminal import Terminal
from cftui.tui.view import View


logger = logging.getLogger(__name__)

DEFAULT_TICK_RATE = 0.25


class App:
    """Owns the view stack.

    Each iteration draws the views from the last fullscreen one up, waits for
    an event or a tick, gives it to the top view and then applies what the
    views asked for. The stack never drops below one view: popping the last
    one stops the loop instead.
    """

    def __init__(
        self,
        terminal: Terminal,
        context: Context,
        initial: ViewConstructor = MainBrowser(),
        tick_rate: float = DEFAULT_TICK_RATE,
    ) -> None:
        self.terminal = terminal
        self.context = context
        self.tick_rate = tick_rate
        self.handler: Channel = Channel()
        self.views: list[View] = []
        self.running = True
        self.enter_new_view(initial)

    @property
    def top(self) -> View:
        return self.views[-1]

    def push(self, view: View) -> None:
        self.views.append(view)
        logger.debug("push %s (%d views)", type(view).__name__, len(self.views))

    def enter_new_view(self, constructor: ViewConstructor) -> None:
        self.push(constructor.construct(self.handler, self.context))

    def pop(self) -> None:
        if len(self.views) <= 1:
            self.close()
            return
        view = self.views.pop()
        view.on_exit()
        logger.debug("pop %s (%d views)", type(view).__name__, len(self.views))

    def exit_current_view(self) -> None:
        self.pop()

    def close(self) -> None:
        self.running = False

    def visible_views(self) -> list[View]:
        start = 0
        for index, view in enumerate(self.views):
            if view.fullscreen:
                start = index
        return self.views[start:]

    def render(self, frame: Frame) -> None:
        for view in self.visible_views():
            view.render(frame)

    def handle_event(self, event: Event) -> None:
        if is_terminate_key(event):
            self.close()
            return
        try:
            self.top.handle_event(event)
        except Exception as e:
            logger.exception("Error from View")
            self.handler.send(EnterNewView(ErrorPopup("Error from View", describe(e))))

    def handle_msgs(self) -> None:
        for msg in self.handler.drain():
            if isinstance(msg, AppClose):
                self.close()
            elif isinstance(msg, ExitCurrentView):
                self.exit_current_view()
            elif isinstance(msg, EnterNewView):
                try:
                    self.enter_new_view(msg.constructor)
                except Exception as e:
                    logger.exception("Failed to open %s", type(msg.constructor).__name__)
                    self.handler.send(EnterNewView(ErrorPopup("Error from View", describe(e))))
            if not self.running:
                return

    def step(self, event: Event) -> None:
        self.handle_event(event)
        if self.running:
            self.handle_msgs()

    def run(self) -> None:
        try:
            while self.running:
                self.terminal.draw(self.render)
                self.step(self.terminal.next_event(self.tick_rate))
        finally:
            self.teardown()

    def teardown(self) -> None:
        for view in reversed(self.views):
            view.on_exit()
