"""Tests for the message-bar Prompt."""

from kilopy.ui.keys import ARROW_UP, BACKSPACE, DEL_KEY, ENTER, ESC, ctrl_key
from kilopy.ui.prompt import Prompt, PromptCallback


class RecordingCallback(PromptCallback):

    def __init__(self):
        self.calls = []

    def on_keystroke(self, query, key):
        self.calls.append((query, key))


def feed_all(prompt: Prompt, data: bytes):
    result = None
    for key in data:
        result = prompt.feed(key)
        if result is not None:
            break
    return result


class TestPrompt:

    def test_accepts_on_enter(self):
        prompt = Prompt("Save as: {}")
        assert feed_all(prompt, b"out.txt\r") is True
        assert prompt.query == "out.txt"

    def test_message_uses_template(self):
        prompt = Prompt("Save as: {} (ESC to cancel)")
        feed_all(prompt, b"ab")
        assert prompt.message == "Save as: ab (ESC to cancel)"

    def test_escape_cancels(self):
        prompt = Prompt("{}")
        feed_all(prompt, b"abc")
        assert prompt.feed(ESC) is False

    def test_enter_on_empty_query_is_ignored(self):
        prompt = Prompt("{}")
        assert prompt.feed(ENTER) is None
        assert prompt.query == ""

    def test_backspace_and_delete_remove_last_char(self):
        prompt = Prompt("{}")
        feed_all(prompt, b"abcd")
        prompt.feed(BACKSPACE)
        prompt.feed(DEL_KEY)
        assert prompt.query == "ab"

    def test_backspace_on_empty_query(self):
        prompt = Prompt("{}")
        assert prompt.feed(BACKSPACE) is None
        assert prompt.query == ""

    def test_control_and_special_keys_not_appended(self):
        prompt = Prompt("{}")
        prompt.feed(ctrl_key("a"))
        prompt.feed(ARROW_UP)
        prompt.feed(0xC3)
        assert prompt.query == ""


class TestPromptCallback:

    def test_called_after_every_key(self):
        callback = RecordingCallback()
        prompt = Prompt("{}", callback)
        feed_all(prompt, b"ab")
        prompt.feed(ARROW_UP)
        assert callback.calls == [("a", ord("a")), ("ab", ord("b")), ("ab", ARROW_UP)]

    def test_called_on_accept_and_cancel(self):
        callback = RecordingCallback()
        prompt = Prompt("{}", callback)
        feed_all(prompt, b"x\r")
        assert callback.calls[-1] == ("x", ENTER)

        prompt = Prompt("{}", callback)
        prompt.feed(ESC)
        assert callback.calls[-1] == ("", ESC)
