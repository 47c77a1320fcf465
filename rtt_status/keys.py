"""Single-key input: reading keys from the terminal and what they do."""

import codecs
import os
import select
import sys
from dataclasses import dataclass
from time import sleep


@dataclass
class InputDispatcher:
    """Display and quit flags, changed only through on_key()."""
    show_intermediary: bool = True
    should_quit: bool = False

    def on_key(self, c: str) -> None:
        if c == "q":
            self.should_quit = True
        elif c == "i":
            self.show_intermediary = not self.show_intermediary


class KeyReader:
    """
    Reads single characters from stdin without waiting for Enter.

    Inside the context a TTY stdin is switched to cbreak mode (no echo, no
    line buffering) and restored on exit. When stdin is not a TTY no key is
    ever delivered and read_key() just waits out its timeout.
    """

    def __init__(self, stream=None):
        self.stream = stream if stream is not None else sys.stdin
        self._fd: int | None = None
        self._old_settings = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def __enter__(self) -> "KeyReader":
        if not self.stream.isatty():
            return self

        import termios

        self._fd = self.stream.fileno()
        self._old_settings = termios.tcgetattr(self._fd)
        new_settings = termios.tcgetattr(self._fd)
        new_settings[3] = new_settings[3] & ~termios.ICANON & ~termios.ECHO
        termios.tcsetattr(self._fd, termios.TCSADRAIN, new_settings)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._fd is not None and self._old_settings is not None:
            import termios

            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._old_settings)
        self._fd = None
        self._old_settings = None

    def read_key(self, timeout: float) -> str | None:
        """Wait up to `timeout` seconds for one key.

        Bytes come straight off the file descriptor so that nothing is left in
        a stream buffer where select() cannot see it; the rest of a burst such
        as an escape sequence stays pending for the next call.
        """
        timeout = max(0.0, timeout)
        if self._fd is None:
            sleep(timeout)
            return None

        rlist, _, _ = select.select([self._fd], [], [], timeout)
        while rlist:
            data = os.read(self._fd, 1)
            if not data:
                return None
            char = self._decoder.decode(data)
            if char:
                return char
            # partway through a multi-byte character
            rlist, _, _ = select.select([self._fd], [], [], 0)
        return None
