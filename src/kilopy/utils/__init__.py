"""
Utility package for editor support functions.
"""

from .search import SearchController

__all__ = ['SearchController']
