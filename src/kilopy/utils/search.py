"""
Incremental search for the editor.
"""

import logging
from typing import List, Optional

from ..core.state import EditorState
from ..core.syntax import Highlight
from ..ui.keys import ARROW_DOWN, ARROW_LEFT, ARROW_RIGHT, ARROW_UP, ENTER, ESC
from ..ui.prompt import PromptCallback

logger = logging.getLogger(__name__)


class SearchController(PromptCallback):
    """
    Finds the query as it is typed and highlights the current match.

    Arrow Right/Down jump to the next match and Arrow Left/Up to the previous
    one, wrapping around the ends of the buffer. The match overlay is undone
    before every new attempt and when the prompt closes, so a row's highlight
    is never left in the overlaid state.
    """

    def __init__(self, state: EditorState) -> None:
        self.state = state
        self.last_match = -1
        self.direction = 1
        self.saved_hl_line: Optional[int] = None
        self.saved_hl: Optional[List[Highlight]] = None

    def restore_highlight(self) -> None:
        """Put back the highlight the last match overlaid."""

        if self.saved_hl is None:
            return

        rows = self.state.buffer.rows
        if self.saved_hl_line is not None and self.saved_hl_line < len(rows):
            rows[self.saved_hl_line].hl = self.saved_hl

        self.saved_hl = None
        self.saved_hl_line = None

    def on_keystroke(self, query: str, key: int) -> None:
        self.restore_highlight()

        if key in (ENTER, ESC):
            self.last_match = -1
            self.direction = 1
            return

        if key in (ARROW_RIGHT, ARROW_DOWN):
            self.direction = 1
        elif key in (ARROW_LEFT, ARROW_UP):
            self.direction = -1
        else:
            self.last_match = -1
            self.direction = 1

        self.find(query)

    def find(self, query: str) -> bool:
        """
        Move the cursor to the next row containing query.

        Args:
            query: Literal, case-sensitive text to look for

        Returns:
            bool: True if a match was found
        """

        if not query:
            return False

        if self.last_match == -1:
            self.direction = 1

        needle = query.encode('utf-8')
        buf = self.state.buffer
        numrows = buf.numrows
        current = self.last_match

        for _ in range(numrows):
            current += self.direction
            if current == -1:
                current = numrows - 1
            elif current == numrows:
                current = 0

            row = buf.rows[current]
            pos = row.render.find(needle)
            if pos == -1:
                continue

            self.last_match = current
            self.state.cy = current
            self.state.cx = row.rx_to_cx(pos, buf.tab_stop)
            self.state.rowoff = numrows

            self.saved_hl_line = current
            self.saved_hl = list(row.hl)
            row.hl[pos:pos + len(needle)] = [Highlight.MATCH] * len(needle)
            return True

        logger.debug("No match for %r", query)
        return False
