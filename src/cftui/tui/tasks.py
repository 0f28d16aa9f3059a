"""Background work started off the render loop."""

import threading
from typing import Any, Callable


def spawn(target: Callable[..., Any], *args: Any, name: str = "cftui-task") -> threading.Thread:
    """Run target(*args) on a daemon thread and return the thread.

    The target must catch its own exceptions and report them over a channel.
    """
    thread = threading.Thread(target=target, args=args, name=name, daemon=True)
    thread.start()
    return thread
