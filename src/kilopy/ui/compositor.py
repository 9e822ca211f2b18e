"""
Compositor module: builds each screen frame and writes it in one go.
"""

import time
from typing import TYPE_CHECKING, Final, Optional

from .. import __version__
from ..core.state import EditorState
from ..core.syntax import Highlight, syntax_to_color

if TYPE_CHECKING:
    from .terminal import Terminal

WELCOME_MESSAGE: Final[str] = f"Kilopy editor -- version {__version__}"

HIDE_CURSOR: Final[bytes] = b'\x1b[?25l'
SHOW_CURSOR: Final[bytes] = b'\x1b[?25h'
CURSOR_HOME: Final[bytes] = b'\x1b[H'
ERASE_LINE: Final[bytes] = b'\x1b[K'
DEFAULT_FOREGROUND: Final[bytes] = b'\x1b[39m'
INVERT: Final[bytes] = b'\x1b[7m'
RESET_ATTRS: Final[bytes] = b'\x1b[m'
NEWLINE: Final[bytes] = b'\r\n'


def encode_text(text: str) -> bytes:
    """Encode text for the terminal, passing undecodable filename bytes through."""

    return text.encode('utf-8', 'surrogateescape')


class Compositor:
    """Turns editor state into escape-coded frames."""

    STATUS_MESSAGE_DURATION = 5
    FILENAME_WIDTH = 20

    def __init__(self, terminal: Optional['Terminal'] = None,
                 message_timeout: int = STATUS_MESSAGE_DURATION) -> None:
        self.terminal = terminal
        self.message_timeout = message_timeout

    def scroll(self, state: EditorState) -> None:
        """Compute rx and move the scroll offsets so the cursor is on screen."""

        state.rx = 0
        row = state.current_row()
        if row is not None:
            state.rx = row.cx_to_rx(state.cx, state.buffer.tab_stop)

        if state.cy < state.rowoff:
            state.rowoff = state.cy
        if state.cy >= state.rowoff + state.screenrows:
            state.rowoff = state.cy - state.screenrows + 1
        if state.rx < state.coloff:
            state.coloff = state.rx
        if state.rx >= state.coloff + state.screencols:
            state.coloff = state.rx - state.screencols + 1

    def draw_rows(self, state: EditorState, ab: bytearray) -> None:
        buf = state.buffer

        for y in range(state.screenrows):
            filerow = y + state.rowoff

            if filerow >= buf.numrows:
                if buf.numrows == 0 and y == state.screenrows // 3:
                    welcome = WELCOME_MESSAGE.encode()[:state.screencols]
                    padding = (state.screencols - len(welcome)) // 2
                    if padding:
                        ab += b'~'
                        padding -= 1
                    ab += b' ' * padding
                    ab += welcome
                else:
                    ab += b'~'
            else:
                self._draw_row(state, filerow, ab)

            ab += ERASE_LINE
            ab += NEWLINE

    def _draw_row(self, state: EditorState, filerow: int, ab: bytearray) -> None:
        row = state.buffer.rows[filerow]
        start = state.coloff
        end = start + state.screencols
        render = row.render[start:end]
        hl = row.hl[start:end]

        current_color = -1
        for c, h in zip(render, hl):
            if h == Highlight.NORMAL:
                if current_color != -1:
                    ab += DEFAULT_FOREGROUND
                    current_color = -1
            else:
                color = syntax_to_color(h)
                if color != current_color:
                    current_color = color
                    ab += b'\x1b[%dm' % color
            ab.append(c)

        ab += DEFAULT_FOREGROUND

    def draw_status_bar(self, state: EditorState, ab: bytearray) -> None:
        buf = state.buffer
        cols = state.screencols
        ab += INVERT

        name = buf.filename[:self.FILENAME_WIDTH] if buf.filename else "[No Name]"
        modified = "(modified)" if buf.dirty else ""
        status = encode_text(f"{name} - {buf.numrows} lines {modified}")[:cols]
        filetype = buf.syntax.name if buf.syntax else "no ft"
        rstatus = f"{filetype} | {state.cy + 1}/{buf.numrows}".encode()

        ab += status
        length = len(status)
        while length < cols:
            if cols - length == len(rstatus):
                ab += rstatus
                break
            ab += b' '
            length += 1

        ab += RESET_ATTRS
        ab += NEWLINE

    def draw_message_bar(self, state: EditorState, ab: bytearray, now: float) -> None:
        ab += ERASE_LINE
        message = encode_text(state.status_message)[:state.screencols]
        if message and now - state.status_message_time < self.message_timeout:
            ab += message

    def compose(self, state: EditorState, now: Optional[float] = None) -> bytes:
        """
        Build a complete frame for the current state.

        Args:
            state: The editor state to draw
            now: Current time used to expire the status message

        Returns:
            The escape-coded frame
        """

        if now is None:
            now = time.time()

        self.scroll(state)

        ab = bytearray()
        ab += HIDE_CURSOR
        ab += CURSOR_HOME

        self.draw_rows(state, ab)
        self.draw_status_bar(state, ab)
        self.draw_message_bar(state, ab, now)

        ab += b'\x1b[%d;%dH' % (state.cy - state.rowoff + 1, state.rx - state.coloff + 1)
        ab += SHOW_CURSOR

        return bytes(ab)

    def refresh(self, state: EditorState) -> None:
        """Draw the screen with a single terminal write."""

        if self.terminal is None:
            return

        self.terminal.write(self.compose(state))
