"""Raw-mode terminal access for the REPL.

:class:`ProcessTerminal` puts the controlling terminal into raw mode,
enables bracketed paste, and yields complete key sequences from stdin with
blocking reads. When stdin is not a terminal the same reader works on the
piped bytes without touching terminal modes.
"""

from __future__ import annotations

import codecs
import contextlib
import logging
import os
import select
import sys
import termios
import tty
from collections.abc import Iterator
from typing import Protocol

from mailrepl.stdin_buffer import StdinBuffer

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_BRACKETED_PASTE_ENABLE = "\x1b[?2004h"
_BRACKETED_PASTE_DISABLE = "\x1b[?2004l"

# Seconds to wait for the rest of an escape sequence before treating a
# lone ESC as the Escape key.
ESCAPE_TIMEOUT = 0.01

_READ_SIZE = 4096


class Terminal(Protocol):
    """Interface for terminal I/O operations."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def read_sequences(self) -> Iterator[str]: ...

    def write(self, data: str) -> None: ...

    @property
    def columns(self) -> int: ...


class ProcessTerminal:
    """Concrete terminal backed by ``sys.stdin``/``sys.stdout``."""

    def __init__(self) -> None:
        self._stdin_fd = sys.stdin.fileno()
        self._interactive = os.isatty(self._stdin_fd)
        self._original_termios: list | None = None
        self._stdin_buffer = StdinBuffer()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @property
    def interactive(self) -> bool:
        return self._interactive

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(sys.stdout.fileno()).columns
        except (ValueError, OSError):
            return 80

    # -- start / stop -------------------------------------------------------

    def start(self) -> None:
        """Enable raw mode and bracketed paste."""
        if not self._interactive or self._original_termios is not None:
            return
        self._original_termios = termios.tcgetattr(self._stdin_fd)
        tty.setraw(self._stdin_fd)
        self.write(_BRACKETED_PASTE_ENABLE)
        logger.debug("Terminal switched to raw mode")

    def stop(self) -> None:
        """Restore the terminal state saved by :meth:`start`."""
        if self._original_termios is None:
            return
        self.write(_BRACKETED_PASTE_DISABLE)
        termios.tcsetattr(self._stdin_fd, termios.TCSADRAIN, self._original_termios)
        self._original_termios = None
        self._stdin_buffer.clear()
        logger.debug("Terminal restored")

    @contextlib.contextmanager
    def suspended(self) -> Iterator[None]:
        """Temporarily restore cooked mode, e.g. while an editor runs."""
        was_started = self._original_termios is not None
        self.stop()
        try:
            yield
        finally:
            if was_started:
                self.start()

    # -- reading ------------------------------------------------------------

    def read_sequences(self) -> Iterator[str]:
        """Yield complete key sequences until end of input."""
        while True:
            raw = os.read(self._stdin_fd, _READ_SIZE)
            if not raw:
                yield from self._stdin_buffer.process(self._decoder.decode(b"", final=True))
                yield from self._stdin_buffer.flush()
                return

            # Multi-byte characters may straddle two reads.
            yield from self._stdin_buffer.process(self._decoder.decode(raw))

            while self._stdin_buffer.pending and not self._readable(ESCAPE_TIMEOUT):
                yield from self._stdin_buffer.flush()

    def _readable(self, timeout: float) -> bool:
        ready, _, _ = select.select([self._stdin_fd], [], [], timeout)
        return bool(ready)

    # -- writing ------------------------------------------------------------

    def write(self, data: str) -> None:
        """Write directly to stdout, bypassing buffering."""
        try:
            sys.stdout.write(data)
            sys.stdout.flush()
        except OSError:
            logger.debug("Write to stdout failed", exc_info=True)
