"""Views: the entries of the app's stack."""

import logging
from typing import Any, Sequence

from cftui.exceptions import InvalidSelectionError
from cftui.tui.component import Component, TabsComponent
from cftui.tui.context import Context
from cftui.tui.event import Event, Tick, is_exit_key, is_refresh_key
from cftui.tui.frame import Frame
from cftui.tui.msg import (
    NOOP,
    AppClose,
    Channel,
    ChangeToTab,
    EnterNewView,
    ExitCurrentView,
    NoOp,
    Update,
)


logger = logging.getLogger(__name__)

TABS_HEIGHT = 3


class View:
    """One screen on the app's stack.

    The app sends events to the top view only. Components report to the view
    through handler; the view forwards navigation to the app through sender.
    """

    fullscreen = True

    def __init__(self, sender: Channel, context: Context) -> None:
        self.sender = sender
        self.context = context
        self.handler: Channel = Channel()

    def render(self, frame: Frame) -> None:
        raise NotImplementedError

    def on(self, event: Event) -> Any:
        return NOOP

    def handle_event(self, event: Event) -> None:
        """Apply the event, then everything the components reported meanwhile."""
        try:
            self.handle_msg(self.on(event))
        finally:
            for msg in self.handler.drain():
                self.handle_msg(msg)

    def handle_msg(self, msg: Any) -> None:
        if isinstance(msg, (AppClose, EnterNewView, ExitCurrentView)):
            self.sender.send(msg)
        elif isinstance(msg, ChangeToTab):
            self.change_to_tab(msg.index)

    def change_to_tab(self, index: int) -> None:
        raise InvalidSelectionError(index)

    def on_exit(self) -> None:
        """Called when the view leaves the stack."""


class BrowserView(View):
    """A tab bar above one content component per tab.

    Events go to the tab bar first; the selected component only sees them if
    the tab bar had nothing to do.
    """

    tab_titles: tuple[str, ...] = ()

    def __init__(self, sender: Channel, context: Context) -> None:
        super().__init__(sender, context)
        self.tabs = TabsComponent(self.tab_titles)
        self.components: Sequence[Component] = self.build_components()
        for component in self.components:
            component.update()

    def build_components(self) -> Sequence[Component]:
        raise NotImplementedError

    @property
    def current(self) -> Component:
        return self.components[self.tabs.selected()]

    def on(self, event: Event) -> Any:
        if isinstance(event, Tick):
            for component in self.components:
                component.tick()
            return NOOP
        if is_exit_key(event):
            return ExitCurrentView()
        if is_refresh_key(event):
            self.current.update()
            return Update()

        msg = self.tabs.on(event)
        if not isinstance(msg, NoOp):
            return msg
        return self.current.on(event)

    def change_to_tab(self, index: int) -> None:
        self.tabs.select(index)
        logger.debug("%s: tab %d", type(self).__name__, index)

    def render(self, frame: Frame) -> None:
        tabs_area, content_area = frame.area.split_top(TABS_HEIGHT)
        self.tabs.render(frame, tabs_area)
        self.current.render(frame, content_area)
