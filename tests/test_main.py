"""Tests for the command line entry point."""

import pytest

from kilopy import __version__
from kilopy.__main__ import main, open_buffer, parse_args
from kilopy.core.state import EditorState


class TestParseArgs:

    def test_file_and_options(self):
        args = parse_args(["--config", "c.toml", "--log-file", "k.log", "notes.c"])
        assert args.file == "notes.c"
        assert args.config == "c.toml"
        assert args.log_file == "k.log"

    def test_no_file(self):
        assert parse_args([]).file is None

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            parse_args(["--version"])
        assert exc.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestOpenBuffer:

    def test_existing_file(self, tmp_path):
        path = tmp_path / "a.py"
        path.write_bytes(b"x = 1\ny = 2\n")
        state = EditorState()

        open_buffer(state, str(path))

        assert [r.chars for r in state.buffer.rows] == [b"x = 1", b"y = 2"]
        assert state.buffer.syntax.name == "python"
        assert state.buffer.dirty == 0

    def test_missing_file_starts_new_buffer(self, tmp_path):
        path = tmp_path / "new.c"
        state = EditorState()

        open_buffer(state, str(path))

        assert state.buffer.numrows == 0
        assert state.buffer.filename == str(path)
        assert state.buffer.syntax.name == "c"
        assert state.status_message == f"New file: {path}"

    def test_unreadable_path_is_reported(self, tmp_path):
        state = EditorState()

        open_buffer(state, str(tmp_path))

        assert state.buffer.numrows == 0
        assert state.buffer.filename == str(tmp_path)
        assert state.status_message.startswith("Can't open! I/O error: ")


class TestMain:

    def test_invalid_config_exits_with_usage_error(self, tmp_path, capsys):
        path = tmp_path / "bad.toml"
        path.write_text("[editor]\nquit_times = 0\n")

        assert main(["--config", str(path)]) == 2
        assert "quit_times" in capsys.readouterr().err

    def test_misshapen_config_exits_with_usage_error(self, tmp_path, capsys):
        path = tmp_path / "shape.toml"
        path.write_text("editor = 1\n")

        assert main(["--config", str(path)]) == 2
        assert "[editor] must be a table" in capsys.readouterr().err
