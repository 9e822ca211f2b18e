"""
Single-line prompt shown in the message bar.
"""

from typing import Optional

from .keys import BACKSPACE, DEL_KEY, ENTER, ESC


class PromptCallback:
    """Receives every keystroke typed into a prompt. The default does nothing."""

    def on_keystroke(self, query: str, key: int) -> None:
        pass


class Prompt:
    """
    Accumulates a line of input one key at a time.

    The template is formatted with the current query to produce the message
    bar text, e.g. "Search: {} (ESC to cancel)".
    """

    def __init__(self, template: str, callback: Optional[PromptCallback] = None) -> None:
        self.template = template
        self.callback = callback if callback is not None else PromptCallback()
        self.query = ""

    @property
    def message(self) -> str:
        return self.template.format(self.query)

    def feed(self, key: int) -> Optional[bool]:
        """
        Apply one key to the prompt.

        Returns:
            None while input continues, True when the query is accepted,
            False when the prompt is cancelled
        """

        if key in (BACKSPACE, DEL_KEY):
            self.query = self.query[:-1]
        elif key == ESC:
            self.callback.on_keystroke(self.query, key)
            return False
        elif key == ENTER:
            if self.query:
                self.callback.on_keystroke(self.query, key)
                return True
        elif 32 <= key < 127:
            self.query += chr(key)

        self.callback.on_keystroke(self.query, key)
        return None
