"""Shared fixtures: a scripted terminal and editor wiring."""

from typing import List

import pytest

from kilopy.core.buffer import Buffer
from kilopy.core.state import EditorState
from kilopy.ui.compositor import Compositor
from kilopy.ui.input_handler import InputHandler
from kilopy.ui.keys import KeyDecoder


class FakeTerminal:
    """Feeds scripted bytes one at a time and records every write."""

    def __init__(self, data: bytes = b"") -> None:
        self.pending = bytearray(data)
        self.writes: List[bytes] = []

    def feed(self, data: bytes) -> None:
        self.pending += data

    def read(self) -> bytes:
        if not self.pending:
            return b""
        c = bytes(self.pending[:1])
        del self.pending[:1]
        return c

    def write(self, data: bytes) -> None:
        self.writes.append(bytes(data))


def _make_buffer(*lines: bytes, filename=None) -> Buffer:
    buf = Buffer()
    buf.filename = filename
    buf.select_syntax()
    for line in lines:
        buf.insert_row(buf.numrows, line)
    buf.dirty = 0
    return buf


@pytest.fixture
def make_buffer():
    """Build a clean buffer from byte lines."""

    return _make_buffer


@pytest.fixture
def terminal():
    return FakeTerminal()


@pytest.fixture
def editor(terminal):
    """An InputHandler wired to a fake terminal and an empty buffer."""

    state = EditorState(Buffer(), screenrows=10, screencols=40)
    return InputHandler(state, KeyDecoder(terminal.read), Compositor(terminal), quit_times=3)
