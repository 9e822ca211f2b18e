"""
Buffer module holding the rows of a document and its file I/O.
"""

import errno
import logging
import os
from typing import List, Optional

from .row import TAB_STOP, Row
from .syntax import LanguageProfile, select_profile

logger = logging.getLogger(__name__)


class Buffer:
    """
    Ordered rows of a document.

    Row indices are only valid until the next structural edit; callers
    re-resolve rows by index instead of holding on to Row objects.
    """

    def __init__(self, tab_stop: int = TAB_STOP, syntax_fallback: bool = True) -> None:
        self.rows: List[Row] = []
        self.dirty = 0
        self.filename: Optional[str] = None
        self.syntax: Optional[LanguageProfile] = None
        self.tab_stop = tab_stop
        self.syntax_fallback = syntax_fallback

    @property
    def numrows(self) -> int:
        return len(self.rows)

    def _update_row(self, row: Row) -> None:
        row.update(self.syntax, self.tab_stop)

    def select_syntax(self) -> None:
        """Pick the language profile for the current filename and re-highlight every row."""

        self.syntax = select_profile(self.filename, self.syntax_fallback)
        for row in self.rows:
            self._update_row(row)

    def insert_row(self, at: int, text: bytes) -> None:
        """Insert a new row before index at (at == numrows appends)."""

        if not 0 <= at <= self.numrows:
            return

        row = Row(bytes(text))
        self._update_row(row)
        self.rows.insert(at, row)
        self.dirty += 1

    def delete_row(self, at: int) -> None:
        """Remove the row at index at."""

        if not 0 <= at < self.numrows:
            return

        del self.rows[at]
        self.dirty += 1

    def insert_char(self, at: int, col: int, ch: int) -> None:
        """Insert byte ch into row at before column col, appending a row when at == numrows."""

        if at == self.numrows:
            self.insert_row(self.numrows, b'')

        if not 0 <= at < self.numrows:
            return

        row = self.rows[at]
        if not 0 <= col <= len(row.chars):
            col = len(row.chars)

        row.chars = row.chars[:col] + bytes((ch,)) + row.chars[col:]
        self._update_row(row)
        self.dirty += 1

    def delete_char(self, at: int, col: int) -> None:
        """Delete the byte at column col of row at."""

        if not 0 <= at < self.numrows:
            return

        row = self.rows[at]
        if not 0 <= col < len(row.chars):
            return

        row.chars = row.chars[:col] + row.chars[col + 1:]
        self._update_row(row)
        self.dirty += 1

    def append_text(self, at: int, text: bytes) -> None:
        """Append text to the end of row at."""

        if not 0 <= at < self.numrows:
            return

        row = self.rows[at]
        row.chars += bytes(text)
        self._update_row(row)
        self.dirty += 1

    def split_row(self, at: int, col: int) -> None:
        """Move everything from column col of row at onto a new row below it."""

        if not 0 <= at < self.numrows:
            return

        chars = self.rows[at].chars
        col = max(0, min(col, len(chars)))

        self.insert_row(at + 1, chars[col:])
        row = self.rows[at]
        row.chars = chars[:col]
        self._update_row(row)

    def to_text(self) -> bytes:
        """Serialize the rows, each followed by a newline."""

        return b''.join(row.chars + b'\n' for row in self.rows)

    def load(self, filename: str) -> None:
        """
        Replace the buffer contents with the lines of a file.

        Trailing carriage returns and newlines are stripped from every line.

        Raises:
            OSError: If the file cannot be opened or read
        """

        self.filename = filename
        self.syntax = select_profile(filename, self.syntax_fallback)

        with open(filename, 'rb') as f:
            rows = []
            for line in f:
                row = Row(line.rstrip(b'\r\n'))
                self._update_row(row)
                rows.append(row)

        self.rows = rows
        self.dirty = 0
        logger.info("Opened %s (%d lines)", filename, self.numrows)

    def save(self, filename: Optional[str] = None) -> int:
        """
        Write the buffer to disk.

        The file is opened or created, truncated to the new length and then
        written in full. A failure part way through leaves the file in an
        unspecified state; the caller is expected to report it and let the
        user retry.

        Args:
            filename: Optional filename to save to. If None, uses current filename.

        Returns:
            int: Number of bytes written

        Raises:
            OSError: If any step of the write fails
        """

        if filename is not None:
            self.filename = filename

        if not self.filename:
            raise OSError(errno.ENOENT, "No filename specified")

        data = self.to_text()
        fd = os.open(self.filename, os.O_RDWR | os.O_CREAT, 0o644)
        try:
            os.ftruncate(fd, len(data))
            written = os.write(fd, data)
            if written != len(data):
                raise OSError(errno.EIO, os.strerror(errno.EIO))
        finally:
            os.close(fd)

        self.dirty = 0
        logger.info("Saved %s (%d bytes)", self.filename, len(data))
        return len(data)
