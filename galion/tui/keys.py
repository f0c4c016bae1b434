# Galion Key Reader
# Raw terminal keyboard input with a bounded wait

import os
import select
import sys
import termios
from collections import deque
from typing import Any, Optional, TextIO

from galion.tui.events import (
    KEY_BACKSPACE,
    KEY_BACKTAB,
    KEY_CTRL_C,
    KEY_DELETE,
    KEY_DOWN,
    KEY_ENTER,
    KEY_ESCAPE,
    KEY_LEFT,
    KEY_RIGHT,
    KEY_TAB,
    KEY_UP,
)

ESCAPE_SEQUENCES: dict[bytes, str] = {
    b"\x1b[A": KEY_UP,
    b"\x1b[B": KEY_DOWN,
    b"\x1b[C": KEY_RIGHT,
    b"\x1b[D": KEY_LEFT,
    b"\x1bOA": KEY_UP,
    b"\x1bOB": KEY_DOWN,
    b"\x1bOC": KEY_RIGHT,
    b"\x1bOD": KEY_LEFT,
    b"\x1b[Z": KEY_BACKTAB,
    b"\x1b[3~": KEY_DELETE,
}

# Seconds to wait for the rest of a sequence split across reads
ESCAPE_TIMEOUT = 0.05

CONTROL_KEYS: dict[int, str] = {
    0x03: KEY_CTRL_C,
    0x09: KEY_TAB,
    0x0A: KEY_ENTER,
    0x0D: KEY_ENTER,
    0x08: KEY_BACKSPACE,
    0x7F: KEY_BACKSPACE,
}


def _utf8_length(lead: int) -> int:
    """Length of the UTF-8 sequence starting with lead, 0 if lead is invalid."""
    if lead < 0x80:
        return 1
    if 0xC0 <= lead < 0xE0:
        return 2
    if 0xE0 <= lead < 0xF0:
        return 3
    if 0xF0 <= lead < 0xF8:
        return 4
    return 0


def decode_keys(data: bytes, final: bool = False) -> tuple[list[str], bytes]:
    """
    Split raw terminal input into key names and typed characters.

    An escape sequence or UTF-8 character cut off at the end of data is
    returned unconsumed so it can be completed by the next read.

    Args:
        data: Bytes read from the terminal.
        final: No more input is coming. A trailing lone escape byte is then
            the Esc key and other incomplete bytes are dropped.

    Returns:
        Tuple of (keys, incomplete trailing bytes to prepend to the next read).
    """
    keys: list[str] = []
    i = 0
    while i < len(data):
        byte = data[i]

        if byte == 0x1B:
            for sequence, name in ESCAPE_SEQUENCES.items():
                if data.startswith(sequence, i):
                    keys.append(name)
                    i += len(sequence)
                    break
            else:
                if i + 1 == len(data) and not final:
                    return keys, data[i:]
                # Unknown sequences are dropped up to their final byte
                if i + 1 < len(data) and data[i + 1] in b"[O":
                    j = i + 2
                    while j < len(data) and not 0x40 <= data[j] <= 0x7E:
                        j += 1
                    if j == len(data) and not final:
                        return keys, data[i:]
                    i = j + 1
                else:
                    keys.append(KEY_ESCAPE)
                    i += 1
            continue

        if byte in CONTROL_KEYS:
            keys.append(CONTROL_KEYS[byte])
            i += 1
            continue

        if byte < 0x20:
            i += 1
            continue

        length = _utf8_length(byte)
        if length == 0:
            i += 1
            continue
        if i + length > len(data):
            if final:
                break
            return keys, data[i:]
        keys.append(data[i : i + length].decode("utf-8", errors="replace"))
        i += length

    return keys, b""


class KeyReader:
    """
    Reads keys from a terminal in cbreak mode without echo or signals.

    Ctrl-C arrives as a key instead of raising KeyboardInterrupt. Use as a
    context manager so the terminal settings are restored.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdin
        self.fd = self.stream.fileno()
        self._saved: Optional[list[Any]] = None
        self._pending: deque[str] = deque()
        self._partial = b""

    def __enter__(self) -> "KeyReader":
        self._saved = termios.tcgetattr(self.fd)
        attrs = termios.tcgetattr(self.fd)
        attrs[3] &= ~(termios.ECHO | termios.ICANON | termios.ISIG)
        attrs[6][termios.VMIN] = 1
        attrs[6][termios.VTIME] = 0
        termios.tcsetattr(self.fd, termios.TCSADRAIN, attrs)
        return self

    def __exit__(self, *exc_info: Any) -> None:
        if self._saved is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved)
            self._saved = None

    def read_key(self, timeout: float) -> Optional[str]:
        """
        Wait up to timeout seconds for a key.

        Returns:
            The key name or typed character, None if no key arrived.
        """
        if self._pending:
            return self._pending.popleft()

        if not self._wait(timeout):
            return None

        while True:
            data = self._partial + os.read(self.fd, 1024)
            keys, self._partial = decode_keys(data)
            self._pending.extend(keys)
            if not self._partial:
                break
            # The rest of a split sequence follows at once; a lone Esc does not
            if not self._wait(ESCAPE_TIMEOUT):
                keys, self._partial = decode_keys(self._partial, final=True)
                self._pending.extend(keys)
                break

        if self._pending:
            return self._pending.popleft()
        return None

    def _wait(self, timeout: float) -> bool:
        ready, _, _ = select.select([self.fd], [], [], timeout)
        return bool(ready)
