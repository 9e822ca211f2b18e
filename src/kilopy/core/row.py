"""
Row module: one line of text with its rendered form and highlight data.
"""

from dataclasses import dataclass, field
from typing import Final, List, Optional

from .syntax import Highlight, LanguageProfile, highlight_row

TAB_STOP: Final[int] = 8
TAB: Final[int] = ord('\t')


def render_tabs(chars: bytes, tab_stop: int = TAB_STOP) -> bytes:
    """Expand each tab to spaces up to the next multiple of tab_stop."""

    out = bytearray()
    for c in chars:
        if c == TAB:
            out.append(0x20)
            while len(out) % tab_stop != 0:
                out.append(0x20)
            continue

        out.append(c)

    return bytes(out)


@dataclass
class Row:
    """A line of the document plus its derived render and highlight arrays."""

    chars: bytes = b''
    render: bytes = b''
    hl: List[Highlight] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.chars)

    def update(self, profile: Optional[LanguageProfile] = None, tab_stop: int = TAB_STOP) -> None:
        """Recompute render and hl from chars."""

        self.render = render_tabs(self.chars, tab_stop)
        self.hl = highlight_row(self.render, profile)

    def cx_to_rx(self, cx: int, tab_stop: int = TAB_STOP) -> int:
        """Translate an index into chars to the on-screen column."""

        rx = 0
        for c in self.chars[:cx]:
            if c == TAB:
                rx += (tab_stop - 1) - (rx % tab_stop)
            rx += 1

        return rx

    def rx_to_cx(self, rx: int, tab_stop: int = TAB_STOP) -> int:
        """
        Translate an on-screen column back to an index into chars.

        Returns the first cx whose rendered span covers rx, so a column inside
        a tab's expansion maps to the tab itself.
        """

        cur_rx = 0
        for cx, c in enumerate(self.chars):
            if c == TAB:
                cur_rx += (tab_stop - 1) - (cur_rx % tab_stop)
            cur_rx += 1

            if cur_rx > rx:
                return cx

        return len(self.chars)
