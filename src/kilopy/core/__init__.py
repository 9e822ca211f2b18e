"""
Core package for the editor's document model.

This package implements the Row type with tab expansion and column mapping,
the Buffer class holding the ordered rows of a document, the syntax
highlighter with its language profiles, and the EditorState object that ties
the buffer to the cursor and viewport.
"""

from .row import Row
from .syntax import Highlight, LanguageProfile
from .buffer import Buffer
from .state import EditorState

__all__ = ['Highlight', 'LanguageProfile', 'Row', 'Buffer', 'EditorState']
