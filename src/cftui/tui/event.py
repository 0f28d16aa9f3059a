"""Input events and the key predicates every view agrees on."""

import re
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class KeyEvent:
    code: str
    ctrl: bool = False
    shift: bool = False


@dataclass(frozen=True)
class MouseEvent:
    kind: str  # "scroll_up" or "scroll_down"


@dataclass(frozen=True)
class Tick:
    pass


Event = Union[KeyEvent, MouseEvent, Tick]

TICK = Tick()

ESCAPE_SEQUENCES = {
    "\x1b[A": KeyEvent("up"),
    "\x1b[B": KeyEvent("down"),
    "\x1b[C": KeyEvent("right"),
    "\x1b[D": KeyEvent("left"),
    "\x1bOA": KeyEvent("up"),
    "\x1bOB": KeyEvent("down"),
    "\x1bOC": KeyEvent("right"),
    "\x1bOD": KeyEvent("left"),
    "\x1b[Z": KeyEvent("tab", shift=True),
    "\x1b[15~": KeyEvent("f5"),
    "\x1b[[E": KeyEvent("f5"),
    "\x1b[5~": KeyEvent("pageup"),
    "\x1b[6~": KeyEvent("pagedown"),
    "\x1b[H": KeyEvent("home"),
    "\x1b[F": KeyEvent("end"),
}

SINGLE_KEYS = {
    "\r": KeyEvent("enter"),
    "\n": KeyEvent("enter"),
    "\t": KeyEvent("tab"),
    "\x7f": KeyEvent("backspace"),
}

SGR_MOUSE = re.compile(r"\x1b\[<(\d+);(\d+);(\d+)([Mm])")
CSI = re.compile(r"\x1b(\[\[[A-E]|\[[0-9;?<]*[ -/]*[@-~]|O[@-~])")


def _parse_single(ch: str) -> KeyEvent:
    if ch in SINGLE_KEYS:
        return SINGLE_KEYS[ch]
    code = ord(ch)
    if code < 32:
        return KeyEvent(chr(code + 96), ctrl=True)
    if ch.isupper():
        return KeyEvent(ch, shift=True)
    return KeyEvent(ch)


def parse_keys(data: str) -> list[Union[KeyEvent, MouseEvent]]:
    """Split raw terminal input into events.

    Unknown escape sequences and mouse buttons other than the wheel are dropped.
    """
    events: list[Union[KeyEvent, MouseEvent]] = []
    i = 0
    while i < len(data):
        ch = data[i]
        if ch != "\x1b":
            events.append(_parse_single(ch))
            i += 1
            continue

        mouse = SGR_MOUSE.match(data, i)
        if mouse:
            button = int(mouse.group(1))
            if button == 64:
                events.append(MouseEvent("scroll_up"))
            elif button == 65:
                events.append(MouseEvent("scroll_down"))
            i = mouse.end()
            continue

        sequence = CSI.match(data, i)
        if sequence:
            key = ESCAPE_SEQUENCES.get(sequence.group(0))
            if key is not None:
                events.append(key)
            i = sequence.end()
            continue

        events.append(KeyEvent("esc"))
        i += 1
    return events


def is_key(event: Event, code: str, ctrl: bool = False, shift: bool = False) -> bool:
    return (
        isinstance(event, KeyEvent)
        and event.code == code
        and event.ctrl == ctrl
        and event.shift == shift
    )


def is_up_key(event: Event) -> bool:
    return is_key(event, "k") or is_key(event, "up")


def is_down_key(event: Event) -> bool:
    return is_key(event, "j") or is_key(event, "down")


def is_right_key(event: Event) -> bool:
    return is_key(event, "l") or is_key(event, "right") or is_key(event, "tab")


def is_left_key(event: Event) -> bool:
    return is_key(event, "h") or is_key(event, "left") or is_key(event, "tab", shift=True)


def is_refresh_key(event: Event) -> bool:
    return is_key(event, "f5") or is_key(event, "r")


def is_enter_key(event: Event) -> bool:
    return is_key(event, "enter")


def is_exit_key(event: Event) -> bool:
    return is_key(event, "q") or is_key(event, "esc")


def is_terminate_key(event: Event) -> bool:
    return is_key(event, "c", ctrl=True)


def is_scroll_up(event: Event) -> bool:
    return isinstance(event, MouseEvent) and event.kind == "scroll_up"


def is_scroll_down(event: Event) -> bool:
    return isinstance(event, MouseEvent) and event.kind == "scroll_down"


def is_prev(event: Event) -> bool:
    return is_up_key(event) or is_scroll_up(event)


def is_next(event: Event) -> bool:
    return is_down_key(event) or is_scroll_down(event)
