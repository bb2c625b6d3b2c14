"""Single-keypress reader for the terminal client.

Handles arrow keys, WASD, digits (tile numbers) and the command keys
without requiring Enter.  Works on macOS / Linux (tty+termios) and
Windows (msvcrt).
"""

from __future__ import annotations

import os
import sys


# -- low-level character readers -----------------------------------------------


def _getch_unix() -> str:
    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        ch = sys.stdin.read(1)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)
    return ch


def _getch_windows() -> str:
    import msvcrt  # type: ignore[import-not-found]

    return msvcrt.getch().decode("utf-8", errors="ignore")


_getch = _getch_windows if os.name == "nt" else _getch_unix


# -- key mapping ---------------------------------------------------------------

_KEY_MAP: dict[str, str] = {
    "w": "up",
    "W": "up",
    "s": "down",
    "S": "down",
    "a": "left",
    "A": "left",
    "d": "right",
    "D": "right",
    "q": "quit",
    "Q": "quit",
    "\x03": "quit",  # Ctrl-C
    "x": "shuffle",
    "X": "shuffle",
    "r": "reset",
    "R": "reset",
    "v": "solve",
    "V": "solve",
    "h": "hint",
    "H": "hint",
    "i": "image",
    "I": "image",
    "\t": "difficulty",
    "\x7f": "backspace",
    "\x08": "backspace",
    "\r": "enter",
    "\n": "enter",
}

_ARROW_MAP: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
}

MOVE_KEYS = frozenset({"up", "down", "left", "right"})


def resolve(ch: str) -> str:
    """Map a raw character to its action string.

    Digits come back unchanged so the caller can build tile numbers.
    """
    return _KEY_MAP.get(ch, ch if ch.isprintable() else "")


# -- public API ----------------------------------------------------------------


def get_key() -> str:
    """Read a single keypress and return a normalised action string.

    Blocks until a key is pressed.

    Possible return values:
        "up", "down", "left", "right"  slide the tile next to the gap
        "0".."9"                       digit of a tile number
        "enter", "backspace"           confirm / edit a tile number
        "shuffle"                      x (new game)
        "reset"                        r
        "solve"                        v (snap to solved)
        "hint"                         h (toggle tile numbers)
        "image"                        i (next image)
        "difficulty"                   Tab
        "quit"                         q / Ctrl-C / Escape
        "<char>"                       other printable char
        ""                             unrecognised key
    """
    ch = _getch()

    # Arrow keys (Unix escape sequences: ESC [ A/B/C/D)
    if ch == "\x1b":
        ch2 = _getch()
        if ch2 == "[":
            ch3 = _getch()
            return _ARROW_MAP.get(ch3, "")
        return "quit"  # bare Escape

    return resolve(ch)


def get_key_timeout(timeout: float) -> str | None:
    """Read a single keypress, giving up after *timeout* seconds.

    Returns the normalised action string (same as ``get_key``) or
    ``None`` when no key arrived.  Reads with ``os.read`` (unbuffered) so
    ``select`` still sees the rest of a multi-byte arrow sequence.
    """
    if os.name == "nt":
        import msvcrt  # type: ignore[import-not-found]
        import time as _time

        end = _time.monotonic() + timeout
        while _time.monotonic() < end:
            if msvcrt.kbhit():
                return get_key()
            _time.sleep(0.02)
        return None

    import select
    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        ready, _, _ = select.select([fd], [], [], timeout)
        if not ready:
            return None

        ch = os.read(fd, 1).decode("utf-8", errors="ignore")

        # Arrow keys: ESC [ A/B/C/D
        if ch == "\x1b":
            r2, _, _ = select.select([fd], [], [], 0.1)
            if not r2:
                return "quit"  # bare Escape
            ch2 = os.read(fd, 1).decode("utf-8", errors="ignore")
            if ch2 != "[":
                return "quit"
            r3, _, _ = select.select([fd], [], [], 0.1)
            if not r3:
                return ""
            ch3 = os.read(fd, 1).decode("utf-8", errors="ignore")
            return _ARROW_MAP.get(ch3, "")

        return resolve(ch)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)
