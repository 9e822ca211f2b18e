"""
Input handler module for processing keyboard events.
"""

import logging
from typing import Callable, Dict, Final, Optional

from ..core.state import EditorState
from ..utils.search import SearchController
from .compositor import Compositor
from .keys import (
    ARROW_DOWN, ARROW_LEFT, ARROW_RIGHT, ARROW_UP, BACKSPACE, DEL_KEY, END_KEY,
    ENTER, ESC, HOME_KEY, PAGE_DOWN, PAGE_UP, TAB, KeyDecoder, ctrl_key,
)
from .prompt import Prompt, PromptCallback

logger = logging.getLogger(__name__)

QUIT_TIMES: Final[int] = 3

HELP_STATUS_MESSAGE: Final[str] = "HELP: Ctrl-S = save | Ctrl-Q = quit | Ctrl-F = find"
UNSAVED_CHANGES_STATUS_MESSAGE: Final[str] = "WARNING! File has unsaved changes. Press Ctrl-Q {} more times to quit."
SEARCH_PROMPT: Final[str] = "Search: {} (Use ESC/Arrows/Enter)"
SAVE_AS_PROMPT: Final[str] = "Save as: {} (ESC to cancel)"


class InputHandler:
    """Handles keyboard input and executes corresponding actions."""

    def __init__(self, state: EditorState, decoder: KeyDecoder, compositor: Compositor,
                 quit_times: int = QUIT_TIMES) -> None:
        self.state = state
        self.decoder = decoder
        self.compositor = compositor
        self.quit_times_setting = quit_times
        self.quit_times = quit_times
        self.command_handlers: Dict[int, Callable[[], None]] = self._setup_handlers()

    def _setup_handlers(self) -> Dict[int, Callable[[], None]]:
        """Set up the keyboard command handlers."""

        return {
            ARROW_LEFT: self._move_left,
            ARROW_RIGHT: self._move_right,
            ARROW_UP: self._move_up,
            ARROW_DOWN: self._move_down,
            HOME_KEY: self._move_line_start,
            END_KEY: self._move_line_end,
            PAGE_UP: self._page_up,
            PAGE_DOWN: self._page_down,

            DEL_KEY: self._delete_char,
            BACKSPACE: self._backspace,
            ENTER: self._handle_enter,

            ctrl_key('s'): self._save,  # Ctrl + S (save key)
            ctrl_key('f'): self._start_search,  # Ctrl + F (find key)
            ctrl_key('l'): self._ignore,  # Ctrl + L (refresh key)
            ESC: self._ignore,
        }

    def read_key(self) -> int:
        """Poll the decoder until a key arrives."""

        while True:
            key = self.decoder.read_key()
            if key is not None:
                return key

    def handle_input(self, key: int) -> bool:
        """Handle a single keyboard input. Returns False if should quit."""

        if key == ctrl_key('q'):
            return self._quit()

        handler = self.command_handlers.get(key)
        if handler is not None:
            handler()
        elif key == TAB or (32 <= key < 256 and key != 127):
            self.state.insert_char(key)

        self.quit_times = self.quit_times_setting
        return True

    def prompt(self, template: str, callback: Optional[PromptCallback] = None) -> Optional[str]:
        """
        Read a line of input in the message bar.

        Args:
            template: Message text with a {} placeholder for the query
            callback: Receives every keystroke, e.g. for incremental search

        Returns:
            The entered text, or None if the prompt was cancelled
        """

        prompt = Prompt(template, callback)
        while True:
            self.state.set_status_message(prompt.message)
            self.compositor.refresh(self.state)

            result = prompt.feed(self.read_key())
            if result is None:
                continue

            self.state.set_status_message("")
            return prompt.query if result else None

    def _ignore(self) -> None:
        pass

    def _quit(self) -> bool:
        """Count down consecutive quit presses while the buffer has unsaved changes."""

        self.quit_times -= 1
        if self.state.buffer.dirty and self.quit_times > 0:
            self.state.set_status_message(UNSAVED_CHANGES_STATUS_MESSAGE.format(self.quit_times))
            return True

        logger.info("Quit requested")
        return False

    def _move_left(self) -> None:
        """Move cursor left, wrapping to the end of the previous line."""

        state = self.state
        if state.cx != 0:
            state.cx -= 1
        elif state.cy > 0:
            state.cy -= 1
            state.cx = len(state.buffer.rows[state.cy].chars)

        state.clamp_cx()

    def _move_right(self) -> None:
        """Move cursor right, wrapping to the start of the next line."""

        state = self.state
        row = state.current_row()
        if row is not None:
            if state.cx < len(row.chars):
                state.cx += 1
            else:
                state.cy += 1
                state.cx = 0

        state.clamp_cx()

    def _move_up(self) -> None:
        """Move cursor up one line."""

        if self.state.cy != 0:
            self.state.cy -= 1

        self.state.clamp_cx()

    def _move_down(self) -> None:
        """Move cursor down one line, at most to the line past the end."""

        if self.state.cy < self.state.buffer.numrows:
            self.state.cy += 1

        self.state.clamp_cx()

    def _move_line_start(self) -> None:
        self.state.cx = 0

    def _move_line_end(self) -> None:
        row = self.state.current_row()
        if row is not None:
            self.state.cx = len(row.chars)

    def _page_up(self) -> None:
        """Move cursor up one page."""

        self.state.cy = self.state.rowoff
        for _ in range(self.state.screenrows):
            self._move_up()

    def _page_down(self) -> None:
        """Move cursor down one page."""

        state = self.state
        state.cy = min(state.rowoff + state.screenrows - 1, state.buffer.numrows)
        for _ in range(state.screenrows):
            self._move_down()

    def _delete_char(self) -> None:
        """Delete character at cursor."""

        self._move_right()
        self.state.delete_char()

    def _backspace(self) -> None:
        """Delete character before cursor."""

        self.state.delete_char()

    def _handle_enter(self) -> None:
        self.state.insert_newline()

    def _save(self) -> None:
        """Save the buffer, asking for a filename if it has none."""

        buf = self.state.buffer
        if not buf.filename:
            filename = self.prompt(SAVE_AS_PROMPT)
            if filename is None:
                self.state.set_status_message("Save aborted")
                return

            buf.filename = filename
            buf.select_syntax()

        try:
            written = buf.save()
        except OSError as e:
            logger.error("Save of %s failed: %s", buf.filename, e)
            self.state.set_status_message(f"Can't save! I/O error: {e.strerror or e}")
            return

        self.state.set_status_message(f"{written} bytes written to disk")

    def _start_search(self) -> None:
        """Run an incremental search, restoring the view if it is cancelled."""

        state = self.state
        if state.buffer.numrows == 0:
            state.set_status_message("Nothing to search")
            return

        saved_cx, saved_cy = state.cx, state.cy
        saved_coloff, saved_rowoff = state.coloff, state.rowoff

        query = self.prompt(SEARCH_PROMPT, SearchController(state))
        if query is not None:
            return

        state.cx, state.cy = saved_cx, saved_cy
        state.coloff, state.rowoff = saved_coloff, saved_rowoff
