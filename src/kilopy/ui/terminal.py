"""
Terminal module: raw mode, timed byte reads and single-write output.
"""

import errno
import logging
import os
import re
import sys
import termios
from typing import Final, List, Optional, Tuple

logger = logging.getLogger(__name__)

CLEAR_SCREEN: Final[bytes] = b'\x1b[2J\x1b[H'
CURSOR_REPORT_PATTERN: Final[re.Pattern] = re.compile(rb'^\x1b\[(\d+);(\d+)$')


class TerminalError(Exception):
    """A terminal operation failed and the editor cannot continue."""


class Terminal:
    """Owns the controlling terminal while the editor runs."""

    def __init__(self, fd_in: Optional[int] = None, fd_out: Optional[int] = None,
                 read_timeout: int = 1) -> None:
        self.fd_in = sys.stdin.fileno() if fd_in is None else fd_in
        self.fd_out = sys.stdout.fileno() if fd_out is None else fd_out
        self.read_timeout = read_timeout
        self._orig_attrs: Optional[List] = None

    def __enter__(self) -> 'Terminal':
        self.enable_raw_mode()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disable_raw_mode()

    def enable_raw_mode(self) -> None:
        """Switch the input side to byte-at-a-time reads with a short timeout."""

        try:
            self._orig_attrs = termios.tcgetattr(self.fd_in)
        except termios.error as e:
            raise TerminalError(f"tcgetattr: {e}") from e

        raw = termios.tcgetattr(self.fd_in)
        raw[0] &= ~(termios.IXON | termios.ICRNL | termios.BRKINT | termios.INPCK | termios.ISTRIP)
        raw[1] &= ~termios.OPOST
        raw[2] |= termios.CS8
        raw[3] &= ~(termios.ECHO | termios.ICANON | termios.ISIG | termios.IEXTEN)
        raw[6][termios.VMIN] = 0
        raw[6][termios.VTIME] = self.read_timeout

        try:
            termios.tcsetattr(self.fd_in, termios.TCSAFLUSH, raw)
        except termios.error as e:
            raise TerminalError(f"tcsetattr: {e}") from e

        logger.debug("Raw mode enabled (VTIME=%d)", self.read_timeout)

    def disable_raw_mode(self) -> None:
        """Restore the attributes saved by enable_raw_mode."""

        if self._orig_attrs is None:
            return

        try:
            termios.tcsetattr(self.fd_in, termios.TCSAFLUSH, self._orig_attrs)
        except termios.error as e:
            raise TerminalError(f"tcsetattr: {e}") from e
        finally:
            self._orig_attrs = None

        logger.debug("Raw mode disabled")

    def read(self) -> bytes:
        """
        Read at most one byte.

        An empty result means the read timed out with no input, which is not
        an error.
        """

        try:
            return os.read(self.fd_in, 1)
        except OSError as e:
            if e.errno in (errno.EAGAIN, errno.EINTR):
                return b''
            raise TerminalError(f"read: {e.strerror}") from e

    def write(self, data: bytes) -> None:
        """Write a whole frame to the terminal."""

        view = memoryview(data)
        try:
            while view:
                written = os.write(self.fd_out, view)
                view = view[written:]
        except OSError as e:
            raise TerminalError(f"write: {e.strerror}") from e

    def clear(self) -> None:
        self.write(CLEAR_SCREEN)

    def get_cursor_position(self) -> Tuple[int, int]:
        """Ask the terminal where the cursor is via a device status report."""

        self.write(b'\x1b[6n')

        response = bytearray()
        while len(response) < 31:
            c = self.read()
            if not c or c == b'R':
                break
            response += c

        match = CURSOR_REPORT_PATTERN.match(bytes(response))
        if not match:
            raise TerminalError("getCursorPosition: unexpected response")

        return int(match.group(1)), int(match.group(2))

    def get_window_size(self) -> Tuple[int, int]:
        """
        Return the terminal size as (rows, cols).

        Falls back to moving the cursor to the far bottom-right corner and
        querying its position when the size ioctl is unavailable.
        """

        try:
            size = os.get_terminal_size(self.fd_out)
            if size.columns > 0:
                return size.lines, size.columns
        except OSError:
            pass

        logger.debug("Window size ioctl unavailable, querying cursor position")
        self.write(b'\x1b[999C\x1b[999B')
        return self.get_cursor_position()
