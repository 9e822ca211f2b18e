"""
Syntax highlighting module: language profiles and the per-row classifier.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Dict, Final, List, Optional, Tuple

from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)


class Highlight(enum.IntEnum):
    """Classification of a single rendered character."""

    NORMAL = 0
    STRING = 1
    NUMBER = 2
    MATCH = 3


class HighlightFlags(enum.Flag):
    """Highlight categories a language profile turns on."""

    NONE = 0
    NUMBERS = enum.auto()
    STRINGS = enum.auto()


@dataclass(frozen=True)
class LanguageProfile:
    """A named rule set selected by filename."""

    name: str
    filematch: Tuple[str, ...]
    flags: HighlightFlags

    @property
    def highlight_numbers(self) -> bool:
        return bool(self.flags & HighlightFlags.NUMBERS)

    @property
    def highlight_strings(self) -> bool:
        return bool(self.flags & HighlightFlags.STRINGS)


HLDB: Final[Tuple[LanguageProfile, ...]] = (
    LanguageProfile('c', ('.c', '.h', '.cpp'),
                    HighlightFlags.NUMBERS | HighlightFlags.STRINGS),
    LanguageProfile('python', ('.py',),
                    HighlightFlags.NUMBERS | HighlightFlags.STRINGS),
    LanguageProfile('javascript', ('.js', '.mjs'),
                    HighlightFlags.NUMBERS | HighlightFlags.STRINGS),
    LanguageProfile('shell', ('.sh', '.bash', 'bashrc'), HighlightFlags.STRINGS),
)

SYNTAX_COLORS: Final[Dict[Highlight, int]] = {
    Highlight.NUMBER: 31,   # Red
    Highlight.MATCH: 34,    # Blue
    Highlight.STRING: 35,   # Magenta
}
DEFAULT_COLOR: Final[int] = 37

SEPARATORS: Final[bytes] = b',.()+-/*=~%<>[];'
WHITESPACE: Final[bytes] = b' \t\n\v\f\r'
QUOTES: Final[bytes] = b'"\''
BACKSLASH: Final[int] = ord('\\')
DOT: Final[int] = ord('.')

# Lexers that only know plain text get no profile.
PLAIN_TEXT_ALIASES: Final[Tuple[str, ...]] = ('text',)


def is_separator(c: int) -> bool:
    """Check whether a byte ends a token for number highlighting."""

    return c == 0 or c in WHITESPACE or c in SEPARATORS


def syntax_to_color(hl: Highlight) -> int:
    """Map a highlight class to its ANSI foreground color code."""

    return SYNTAX_COLORS.get(hl, DEFAULT_COLOR)


def _match_table(filename: str) -> Optional[LanguageProfile]:
    dot = filename.rfind('.')
    ext = filename[dot:] if dot != -1 else None

    for profile in HLDB:
        for pattern in profile.filematch:
            is_ext = pattern.startswith('.')
            if is_ext and ext is not None and ext == pattern:
                return profile
            if not is_ext and pattern in filename:
                return profile

    return None


def _match_lexer(filename: str) -> Optional[LanguageProfile]:
    try:
        lexer = get_lexer_for_filename(filename)
    except ClassNotFound:
        return None

    aliases = tuple(lexer.aliases)
    if not aliases or aliases[0] in PLAIN_TEXT_ALIASES:
        return None

    return LanguageProfile(aliases[0], (), HighlightFlags.NUMBERS | HighlightFlags.STRINGS)


def select_profile(filename: Optional[str], fallback: bool = True) -> Optional[LanguageProfile]:
    """
    Select the language profile for a filename.

    Patterns starting with '.' are compared against the text from the last
    '.' of the filename; other patterns match as substrings. When no table
    entry matches and fallback is enabled, Pygments' filename lookup supplies
    a generic profile that highlights numbers and strings.

    Args:
        filename: The name of the file, or None for an unnamed buffer
        fallback: Whether to consult Pygments when the table has no match

    Returns:
        The selected profile or None if no highlighting applies
    """

    if not filename:
        return None

    profile = _match_table(filename)
    if profile is None and fallback:
        profile = _match_lexer(filename)

    logger.debug("Syntax for %s: %s", filename, profile.name if profile else None)
    return profile


def highlight_row(render: bytes, profile: Optional[LanguageProfile]) -> List[Highlight]:
    """
    Classify every character of a rendered row.

    Scan state never crosses a row boundary: an unterminated string ends
    with the row.

    Args:
        render: The tab-expanded row text
        profile: The active language profile, if any

    Returns:
        A list of Highlight values, one per rendered byte
    """

    hl = [Highlight.NORMAL] * len(render)
    if profile is None:
        return hl

    prev_sep = True
    in_string = 0
    i = 0
    size = len(render)

    while i < size:
        c = render[i]
        prev_hl = hl[i - 1] if i > 0 else Highlight.NORMAL

        if profile.highlight_strings:
            if in_string:
                hl[i] = Highlight.STRING
                if c == BACKSLASH and i + 1 < size:
                    hl[i + 1] = Highlight.STRING
                    i += 2
                    continue

                if c == in_string:
                    in_string = 0
                i += 1
                prev_sep = True
                continue

            if c in QUOTES:
                in_string = c
                hl[i] = Highlight.STRING
                i += 1
                continue

        if profile.highlight_numbers:
            is_digit = 0x30 <= c <= 0x39
            if (is_digit and (prev_sep or prev_hl == Highlight.NUMBER)) or \
                    (c == DOT and prev_hl == Highlight.NUMBER):
                hl[i] = Highlight.NUMBER
                i += 1
                prev_sep = False
                continue

        prev_sep = is_separator(c)
        i += 1

    return hl
