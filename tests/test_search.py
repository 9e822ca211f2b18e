"""Tests for SearchController."""

from kilopy.core.state import EditorState
from kilopy.core.syntax import Highlight
from kilopy.ui.keys import ARROW_DOWN, ARROW_LEFT, ARROW_RIGHT, ENTER, ESC
from kilopy.utils.search import SearchController


def type_query(search: SearchController, query: str) -> None:
    for i, ch in enumerate(query):
        search.on_keystroke(query[:i + 1], ord(ch))


class TestFind:

    def test_finds_first_match_from_top(self, make_buffer):
        state = EditorState(make_buffer(b"alpha", b"beta", b"gamma"))
        search = SearchController(state)

        assert search.find("ta")
        assert (state.cy, state.cx) == (1, 2)
        assert search.last_match == 1

    def test_scrolls_match_into_view(self, make_buffer):
        state = EditorState(make_buffer(b"a", b"b", b"c"))
        SearchController(state).find("c")
        assert state.rowoff == 3

    def test_no_match(self, make_buffer):
        state = EditorState(make_buffer(b"abc"))
        search = SearchController(state)
        assert not search.find("zzz")
        assert (state.cy, state.cx) == (0, 0)
        assert search.saved_hl is None

    def test_empty_query_never_matches(self, make_buffer):
        state = EditorState(make_buffer(b"abc"))
        assert not SearchController(state).find("")

    def test_case_sensitive(self, make_buffer):
        state = EditorState(make_buffer(b"Foo"))
        assert not SearchController(state).find("foo")

    def test_wraps_forward(self, make_buffer):
        state = EditorState(make_buffer(b"foo", b"bar", b"foo"))
        search = SearchController(state)
        search.last_match = 2

        assert search.find("foo")
        assert state.cy == 0

    def test_wraps_backward(self, make_buffer):
        state = EditorState(make_buffer(b"foo", b"bar", b"foo"))
        search = SearchController(state)
        search.last_match = 0
        search.direction = -1

        assert search.find("foo")
        assert state.cy == 2

    def test_match_column_maps_back_through_tabs(self, make_buffer):
        state = EditorState(make_buffer(b"\tneedle"))
        SearchController(state).find("needle")
        assert state.cx == 1

    def test_match_is_highlighted(self, make_buffer):
        state = EditorState(make_buffer(b"xx abc xx"))
        search = SearchController(state)
        search.find("abc")

        hl = state.buffer.rows[0].hl
        assert hl[3:6] == [Highlight.MATCH] * 3
        assert hl[2] == Highlight.NORMAL
        assert hl[6] == Highlight.NORMAL


class TestKeystrokes:

    def test_typing_searches_incrementally(self, make_buffer):
        state = EditorState(make_buffer(b"one", b"two", b"three"))
        search = SearchController(state)

        type_query(search, "th")

        assert state.cy == 2
        assert search.last_match == 2

    def test_next_and_previous(self, make_buffer):
        state = EditorState(make_buffer(b"foo 1", b"bar", b"foo 2", b"foo 3"))
        search = SearchController(state)
        type_query(search, "foo")
        assert state.cy == 0

        search.on_keystroke("foo", ARROW_RIGHT)
        assert state.cy == 2
        search.on_keystroke("foo", ARROW_DOWN)
        assert state.cy == 3
        search.on_keystroke("foo", ARROW_DOWN)
        assert state.cy == 0
        search.on_keystroke("foo", ARROW_LEFT)
        assert state.cy == 3

    def test_advancing_restores_previous_row(self, make_buffer):
        state = EditorState(make_buffer(b'x = "foo"', b"foo", filename="a.c"))
        original = list(state.buffer.rows[0].hl)
        search = SearchController(state)

        type_query(search, "foo")
        assert Highlight.MATCH in state.buffer.rows[0].hl

        search.on_keystroke("foo", ARROW_RIGHT)
        assert state.buffer.rows[0].hl == original
        assert Highlight.MATCH in state.buffer.rows[1].hl

    def test_exit_restores_highlight_and_resets(self, make_buffer):
        state = EditorState(make_buffer(b"foo", b"foo"))
        search = SearchController(state)
        type_query(search, "foo")
        search.on_keystroke("foo", ARROW_DOWN)

        search.on_keystroke("foo", ESC)

        assert all(Highlight.MATCH not in row.hl for row in state.buffer.rows)
        assert search.last_match == -1
        assert search.direction == 1

    def test_enter_keeps_cursor_on_match(self, make_buffer):
        state = EditorState(make_buffer(b"a", b"foo"))
        search = SearchController(state)
        type_query(search, "foo")

        search.on_keystroke("foo", ENTER)

        assert state.cy == 1
        assert Highlight.MATCH not in state.buffer.rows[1].hl

    def test_editing_query_restarts_from_top(self, make_buffer):
        state = EditorState(make_buffer(b"ab", b"ab", b"abc"))
        search = SearchController(state)
        type_query(search, "ab")
        search.on_keystroke("ab", ARROW_DOWN)
        assert state.cy == 1

        search.on_keystroke("abc", ord("c"))
        assert state.cy == 2
