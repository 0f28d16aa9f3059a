"""Raw-mode terminal driving a full-screen rich Live display."""

import collections
import os
import select
import sys
import termios
import time
import tty
from typing import Callable, Optional

from rich.console import Console
from rich.live import Live

from cftui.tui.event import TICK, Event, parse_keys
from cftui.tui.frame import Frame


MOUSE_ENABLE = "\x1b[?1000h\x1b[?1006h"
MOUSE_DISABLE = "\x1b[?1000l\x1b[?1006l"


class Terminal:
    """Owns stdin and the screen while the app runs.

    Use as a context manager: entering switches stdin to raw mode, turns on
    mouse wheel reporting and the alternate screen; leaving restores all of it.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()
        self._fd = sys.stdin.fileno()
        self._saved: Optional[list] = None
        self._live: Optional[Live] = None
        self._pending: collections.deque = collections.deque()
        self._last_tick = time.monotonic()

    def __enter__(self) -> "Terminal":
        self._saved = termios.tcgetattr(self._fd)
        tty.setraw(self._fd)
        # Keep output processing so rich's newlines still return the carriage.
        attrs = termios.tcgetattr(self._fd)
        attrs[1] |= termios.OPOST | termios.ONLCR
        termios.tcsetattr(self._fd, termios.TCSANOW, attrs)

        self.console.file.write(MOUSE_ENABLE)
        self.console.file.flush()
        self._live = Live(console=self.console, screen=True, auto_refresh=False)
        self._live.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None
        self.console.file.write(MOUSE_DISABLE)
        self.console.file.flush()
        if self._saved is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved)
            self._saved = None

    def draw(self, render: Callable[[Frame], None]) -> None:
        width, height = self.console.size
        frame = Frame(self.console, width, height)
        render(frame)
        if self._live is not None:
            self._live.update(frame, refresh=True)

    def next_event(self, tick_rate: float) -> Event:
        """Block for input at most until the next tick is due."""
        timeout = self._last_tick + tick_rate - time.monotonic()
        if timeout <= 0:
            self._last_tick = time.monotonic()
            return TICK
        if self._pending:
            return self._pending.popleft()

        ready, _, _ = select.select([self._fd], [], [], timeout)
        if ready:
            data = os.read(self._fd, 1024).decode("utf-8", errors="replace")
            self._pending.extend(parse_keys(data))
        if self._pending:
            return self._pending.popleft()

        self._last_tick = time.monotonic()
        return TICK
