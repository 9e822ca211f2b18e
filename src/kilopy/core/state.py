"""
Editor state: the buffer together with cursor, viewport and status line.
"""

import time
from typing import Optional

from .buffer import Buffer
from .row import Row


class EditorState:
    """Single mutable state object shared by the input handler and compositor."""

    def __init__(self, buffer: Optional[Buffer] = None,
                 screenrows: int = 22, screencols: int = 80) -> None:
        self.buffer = buffer if buffer is not None else Buffer()
        self.cx = 0
        self.cy = 0
        self.rx = 0
        self.rowoff = 0
        self.coloff = 0
        self.screenrows = screenrows
        self.screencols = screencols
        self.status_message = ""
        self.status_message_time = 0.0

    def set_window_size(self, rows: int, cols: int) -> None:
        """Reserve the bottom two terminal lines for the status and message bars."""

        self.screenrows = max(1, rows - 2)
        self.screencols = max(1, cols)

    def set_status_message(self, message: str) -> None:
        self.status_message = message
        self.status_message_time = time.time()

    def current_row(self) -> Optional[Row]:
        """Return the row under the cursor, or None past end of buffer."""

        if self.cy >= self.buffer.numrows:
            return None

        return self.buffer.rows[self.cy]

    def clamp_cx(self) -> None:
        row = self.current_row()
        rowlen = len(row.chars) if row else 0
        if self.cx > rowlen:
            self.cx = rowlen

    def insert_char(self, ch: int) -> None:
        """Insert a byte at the cursor and advance past it."""

        self.buffer.insert_char(self.cy, self.cx, ch)
        self.cx += 1

    def insert_newline(self) -> None:
        """Break the current line at the cursor."""

        if self.cx == 0:
            self.buffer.insert_row(self.cy, b'')
        else:
            self.buffer.split_row(self.cy, self.cx)

        self.cy += 1
        self.cx = 0

    def delete_char(self) -> None:
        """
        Delete the character before the cursor.

        At column 0 the current line is joined onto the previous one and the
        cursor lands at the join point.
        """

        if self.cy == self.buffer.numrows:
            return

        if self.cx == 0 and self.cy == 0:
            return

        if self.cx > 0:
            self.buffer.delete_char(self.cy, self.cx - 1)
            self.cx -= 1
            return

        chars = self.buffer.rows[self.cy].chars
        self.cx = len(self.buffer.rows[self.cy - 1].chars)
        self.buffer.append_text(self.cy - 1, chars)
        self.buffer.delete_row(self.cy)
        self.cy -= 1
