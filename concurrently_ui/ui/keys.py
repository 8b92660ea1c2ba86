"""Raw terminal input: key presses and mouse wheel events (cross-platform).

Keys are decoded to plain names ("up", "page_down", "wheel_up", "q", ...)
which the adapters map to handlers or scroll actions.
"""

import os
import sys
import time
from typing import Any, Optional, TextIO

IS_WINDOWS = sys.platform == "win32"

if IS_WINDOWS:
    import msvcrt
else:
    import fcntl
    import select
    import termios
    import tty

ESC = "\x1b"

# xterm button-event tracking with SGR extended coordinates
ENABLE_MOUSE = "\x1b[?1000h\x1b[?1006h"
DISABLE_MOUSE = "\x1b[?1006l\x1b[?1000l"

MOUSE_WHEEL_UP = 64
MOUSE_WHEEL_DOWN = 65

KEY_MAP = {
    "\r": "enter", "\n": "enter",
    "q": "q", "Q": "q",
    "m": "m", "M": "m",
    "j": "down", "J": "down",
    "k": "up", "K": "up",
    "g": "top",
    "G": "bottom",
    "f": "page_down", "\x06": "page_down",
    "b": "page_up", "\x02": "page_up",
}


def decode_mouse(seq: str) -> str:
    """Decode an SGR mouse report body such as ``[<64;10;5M``."""
    body = seq[2:].rstrip("Mm")
    parts = body.split(";")
    if len(parts) != 3:
        return ""
    try:
        button = int(parts[0])
    except ValueError:
        return ""
    if button == MOUSE_WHEEL_UP:
        return "wheel_up"
    if button == MOUSE_WHEEL_DOWN:
        return "wheel_down"
    return ""


def decode_escape(seq: str) -> str:
    """Decode the bytes that followed an ESC into a key name."""
    if seq.startswith("[<"):
        return decode_mouse(seq)
    if seq.startswith("[1;2A"):
        return "top"
    if seq.startswith("[1;2B"):
        return "bottom"
    if seq.startswith("[A") or seq == "OA":
        return "up"
    if seq.startswith("[B") or seq == "OB":
        return "down"
    if seq.startswith("[C") or seq == "OC":
        return "right"
    if seq.startswith("[D") or seq == "OD":
        return "left"
    if seq.startswith("[5~"):
        return "page_up"
    if seq.startswith("[6~"):
        return "page_down"
    if seq.startswith("[H") or seq.startswith("[1~") or seq == "OH":
        return "top"
    if seq.startswith("[F") or seq.startswith("[4~") or seq == "OF":
        return "bottom"
    return ""


def decode_input(data: str) -> list[str]:
    """Decode a burst of input into key names, dropping unknown sequences."""
    if not data.startswith(ESC):
        key = KEY_MAP.get(data[:1], "")
        return [key] if key else []

    keys = []
    for seq in data.split(ESC)[1:]:
        key = decode_escape(seq)
        if key:
            keys.append(key)
    return keys


class KeyReader:
    """Non-blocking key reader for the controlling terminal."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdin
        self._old_settings: Optional[list[Any]] = None

    # =========================================================================
    # Terminal Management
    # =========================================================================

    def setup(self) -> None:
        """Switch the terminal to cbreak mode (Ctrl-C still raises SIGINT)."""
        if IS_WINDOWS:
            return
        try:
            self._old_settings = termios.tcgetattr(self.stream)
            tty.setcbreak(self.stream.fileno())
        except (termios.error, AttributeError, ValueError):
            self._old_settings = None

    def restore(self) -> None:
        """Restore terminal settings saved by setup()."""
        if IS_WINDOWS or not self._old_settings:
            return
        try:
            termios.tcsetattr(self.stream, termios.TCSADRAIN, self._old_settings)
        except (termios.error, ValueError):
            pass
        self._old_settings = None

    # =========================================================================
    # Reading
    # =========================================================================

    def read_keys(self, timeout: float) -> list[str]:
        """Wait up to `timeout` for input and decode it."""
        if IS_WINDOWS:
            return self._read_keys_windows(timeout)
        return self._read_keys_unix(timeout)

    def _read_keys_unix(self, timeout: float) -> list[str]:
        try:
            ready, _, _ = select.select([self.stream], [], [], timeout)
        except (OSError, ValueError):
            time.sleep(timeout)
            return []
        if not ready:
            return []

        fd = self.stream.fileno()
        ch = os.read(fd, 1).decode("utf-8", errors="ignore")
        if not ch:
            return []
        if ch != ESC:
            return decode_input(ch)

        old_flags = fcntl.fcntl(fd, fcntl.F_GETFL)
        fcntl.fcntl(fd, fcntl.F_SETFL, old_flags | os.O_NONBLOCK)
        try:
            time.sleep(0.01)
            seq = b""
            try:
                seq = os.read(fd, 64)
            except OSError:
                pass
        finally:
            fcntl.fcntl(fd, fcntl.F_SETFL, old_flags)

        return decode_input(ESC + seq.decode("utf-8", errors="ignore"))

    def _read_keys_windows(self, timeout: float) -> list[str]:
        deadline = time.monotonic() + timeout
        while not msvcrt.kbhit():
            if time.monotonic() >= deadline:
                return []
            time.sleep(0.01)

        ch = msvcrt.getch()
        if ch in (b"\x00", b"\xe0"):
            scan_codes = {
                b"H": "up",
                b"P": "down",
                b"I": "page_up",
                b"Q": "page_down",
                b"G": "top",
                b"O": "bottom",
            }
            key = scan_codes.get(msvcrt.getch(), "") if msvcrt.kbhit() else ""
            return [key] if key else []

        return decode_input(ch.decode("utf-8", errors="ignore"))
