"""
Entry point for kilopy.
"""

import argparse
import dataclasses
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import ConfigError, EditorConfig, load_config
from .core.buffer import Buffer
from .core.state import EditorState
from .logging_config import setup_logging
from .ui.compositor import Compositor
from .ui.input_handler import HELP_STATUS_MESSAGE, InputHandler
from .ui.keys import KeyDecoder
from .ui.terminal import CLEAR_SCREEN, Terminal, TerminalError

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""

    parser = argparse.ArgumentParser(
        prog="kilopy",
        description="kilopy - a small terminal text editor"
    )
    parser.add_argument(
        "file",
        nargs="?",
        type=str,
        help="File to open"
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to a TOML config file"
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Write debug logging to this file"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    return parser.parse_args(argv)


def open_buffer(state: EditorState, filename: str) -> None:
    """
    Load a file into the editor.

    A missing file starts an empty buffer bound to that name. Any other
    error is reported in the status line and the editor starts empty, keeping
    the name so a later save can retry.
    """

    buf = state.buffer
    try:
        buf.load(filename)
    except FileNotFoundError:
        buf.filename = filename
        buf.select_syntax()
        state.set_status_message(f"New file: {filename}")
        logger.info("Starting new file %s", filename)
    except OSError as e:
        buf.rows = []
        buf.dirty = 0
        state.set_status_message(f"Can't open! I/O error: {e.strerror or e}")
        logger.error("Open of %s failed: %s", filename, e)


def run(terminal: Terminal, config: EditorConfig, filename: Optional[str]) -> None:
    """Main editor loop: draw a frame, then handle one key."""

    state = EditorState(Buffer(config.tab_stop, config.syntax_fallback))
    state.set_window_size(*terminal.get_window_size())

    compositor = Compositor(terminal, config.message_timeout)
    input_handler = InputHandler(state, KeyDecoder(terminal.read), compositor, config.quit_times)

    state.set_status_message(HELP_STATUS_MESSAGE)
    if filename:
        open_buffer(state, filename)

    while True:
        compositor.refresh(state)
        if not input_handler.handle_input(input_handler.read_key()):
            break


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the application."""

    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"kilopy: {e}", file=sys.stderr)
        return 2

    if args.log_file:
        config = dataclasses.replace(config, log_file=args.log_file)
    setup_logging(config)

    terminal = Terminal(read_timeout=config.read_timeout)
    try:
        with terminal:
            run(terminal, config, args.file)
            terminal.clear()
    except TerminalError as e:
        logger.exception("Fatal terminal error")
        sys.stdout.buffer.write(CLEAR_SCREEN)
        sys.stdout.flush()
        print(f"kilopy: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
