from __future__ import annotations

import os
import sys

from bsw.cli.state import (
    AppendChar,
    Back,
    Confirm,
    DeleteChar,
    Intent,
    Mode,
    MoveCursor,
    Quit,
    ToggleAll,
    ToggleOne,
)

__all__ = ["intent_for_key", "is_interactive_terminal", "read_key"]

# Seconds to wait for the rest of an escape sequence before treating ESC as a key.
_ESCAPE_GRACE_SECONDS = 0.05


def is_interactive_terminal() -> bool:
    return bool(sys.stdin.isatty() and sys.stdout.isatty())


def _name_for_char(ch: str) -> str:
    if ch in ("\r", "\n"):
        return "enter"
    if ch in ("\x08", "\x7f"):
        return "backspace"
    if ch == "\x03":
        return "ctrl+c"
    if ch == " ":
        return "space"
    return ch


def _read_key_windows() -> str:
    import msvcrt

    ch = msvcrt.getwch()
    if ch == "\x1b":
        return "esc"
    if ch in ("\x00", "\xe0"):
        ch2 = msvcrt.getwch()
        if ch2 == "H":
            return "up"
        if ch2 == "P":
            return "down"
        return "other"
    return _name_for_char(ch)


def _read_utf8_char(fd: int) -> str:
    first = os.read(fd, 1)
    if not first:
        return "ctrl+c"
    lead = first[0]
    extra = 0
    if lead >= 0xF0:
        extra = 3
    elif lead >= 0xE0:
        extra = 2
    elif lead >= 0xC0:
        extra = 1
    data = first + (os.read(fd, extra) if extra else b"")
    return data.decode("utf-8", errors="replace")


def _read_key_posix() -> str:
    import select
    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        ch = _read_utf8_char(fd)
        if ch != "\x1b":
            return _name_for_char(ch)
        ready, _, _ = select.select([fd], [], [], _ESCAPE_GRACE_SECONDS)
        if not ready:
            return "esc"
        seq = os.read(fd, 2).decode("ascii", errors="replace")
        if seq == "[A":
            return "up"
        if seq == "[B":
            return "down"
        return "other"
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)


def read_key() -> str:
    """Block for one key press and return its name.

    Names: "up", "down", "enter", "space", "backspace", "esc", "ctrl+c",
    "other", or the typed character itself.
    """
    if os.name == "nt":
        return _read_key_windows()
    return _read_key_posix()


def intent_for_key(mode: Mode, key: str) -> Intent | None:
    """Translate a key name into an intent for the given screen.

    Returns None for keys that mean nothing on that screen.
    """
    if key == "ctrl+c":
        return Quit()

    if mode is Mode.ENTER_BRANCH_NAME:
        if key == "enter":
            return Confirm()
        if key == "esc":
            return Back()
        if key == "backspace":
            return DeleteChar()
        if key == "space":
            return AppendChar(" ")
        if len(key) == 1:
            return AppendChar(key)
        return None

    if key == "q":
        return Quit()
    if mode is Mode.SHOW_RESULTS:
        return Quit() if key in ("enter", "esc") else None
    if mode is Mode.PROCESSING:
        return None
    if key in ("up", "k"):
        return MoveCursor(-1)
    if key in ("down", "j"):
        return MoveCursor(1)
    if key == "enter":
        return Confirm()

    if mode is Mode.CHOOSE_REPOSITORIES:
        if key == "space":
            return ToggleOne()
        if key == "a":
            return ToggleAll()
        if key == "esc":
            return Back()
    return None
