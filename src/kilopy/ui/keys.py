"""
Key decoding: turns raw terminal bytes into logical key codes.

Logical keys reuse the curses key constants, which all lie above the byte
range, so a decoded key is either a byte value (0-255) or one of the KEY_*
values below.
"""

import curses
import enum
from typing import Callable, Dict, Final, Optional

ESC: Final[int] = 0x1b
ENTER: Final[int] = ord('\r')
TAB: Final[int] = ord('\t')
DEL: Final[int] = 127

ARROW_LEFT: Final[int] = curses.KEY_LEFT
ARROW_RIGHT: Final[int] = curses.KEY_RIGHT
ARROW_UP: Final[int] = curses.KEY_UP
ARROW_DOWN: Final[int] = curses.KEY_DOWN
HOME_KEY: Final[int] = curses.KEY_HOME
END_KEY: Final[int] = curses.KEY_END
PAGE_UP: Final[int] = curses.KEY_PPAGE
PAGE_DOWN: Final[int] = curses.KEY_NPAGE
DEL_KEY: Final[int] = curses.KEY_DC
BACKSPACE: Final[int] = curses.KEY_BACKSPACE


def ctrl_key(k: str) -> int:
    """Return the byte produced by holding Ctrl with key k."""

    return ord(k) & 0x1f


# ESC [ <letter>
CSI_LETTER_KEYS: Final[Dict[int, int]] = {
    ord('A'): ARROW_UP,
    ord('B'): ARROW_DOWN,
    ord('C'): ARROW_RIGHT,
    ord('D'): ARROW_LEFT,
    ord('H'): HOME_KEY,
    ord('F'): END_KEY,
}

# ESC [ <digit> ~
CSI_TILDE_KEYS: Final[Dict[int, int]] = {
    ord('1'): HOME_KEY,
    ord('3'): DEL_KEY,
    ord('4'): END_KEY,
    ord('5'): PAGE_UP,
    ord('6'): PAGE_DOWN,
    ord('7'): HOME_KEY,
    ord('8'): END_KEY,
}

# ESC O <letter>
SS3_KEYS: Final[Dict[int, int]] = {
    ord('H'): HOME_KEY,
    ord('F'): END_KEY,
}

BACKSPACE_BYTES: Final[tuple] = (ctrl_key('h'), DEL)


class DecoderState(enum.Enum):
    GROUND = enum.auto()
    ESC_SEEN = enum.auto()
    BRACKET_SEEN = enum.auto()
    DIGIT_SEEN = enum.auto()


class KeyDecoder:
    """
    Decodes one logical key per call from a timed byte reader.

    The reader returns at most one byte, or b'' when its timeout expires with
    nothing to read. A timeout in the middle of an escape sequence yields a
    literal ESC, so a lone Escape press never stalls the editor.
    """

    def __init__(self, read: Callable[[], bytes]) -> None:
        self._read = read
        self.state = DecoderState.GROUND

    def _next_byte(self) -> Optional[int]:
        data = self._read()
        if not data:
            return None

        return data[0]

    def read_key(self) -> Optional[int]:
        """Return the next key, or None if no byte arrived before the timeout."""

        self.state = DecoderState.GROUND
        c = self._next_byte()
        if c is None:
            return None

        if c == ESC:
            self.state = DecoderState.ESC_SEEN
            try:
                return self._decode_escape()
            finally:
                self.state = DecoderState.GROUND

        if c in BACKSPACE_BYTES:
            return BACKSPACE

        return c

    def _decode_escape(self) -> int:
        """Advance through the escape states until a key is known."""

        c: Optional[int] = None
        while True:
            if self.state is DecoderState.ESC_SEEN:
                introducer = self._next_byte()
                if introducer is None:
                    return ESC

                c = self._next_byte()
                if c is None:
                    return ESC

                if introducer == ord('O'):
                    return SS3_KEYS.get(c, ESC)
                if introducer != ord('['):
                    return ESC

                self.state = DecoderState.BRACKET_SEEN

            elif self.state is DecoderState.BRACKET_SEEN:
                if not 0x30 <= c <= 0x39:
                    return CSI_LETTER_KEYS.get(c, ESC)

                self.state = DecoderState.DIGIT_SEEN

            elif self.state is DecoderState.DIGIT_SEEN:
                if self._next_byte() != ord('~'):
                    return ESC

                return CSI_TILDE_KEYS.get(c, ESC)

            else:
                return ESC
