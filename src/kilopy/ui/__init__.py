"""
UI package for the terminal interface.

This package implements the raw-mode Terminal, the KeyDecoder for terminal
input sequences, the Compositor that draws each frame and the Prompt used
for line input. The InputHandler that maps keys to editor actions lives in
ui.input_handler.
"""

from .terminal import Terminal, TerminalError
from .keys import KeyDecoder
from .compositor import Compositor
from .prompt import Prompt, PromptCallback

__all__ = [
    'Terminal',
    'TerminalError',
    'KeyDecoder',
    'Compositor',
    'Prompt',
    'PromptCallback',
]
