"""Utility functions for Chaptercutter."""

from chaptercutter.utils.filenames import chapter_filename, sanitize_filename

__all__ = [
    "chapter_filename",
    "sanitize_filename",
]
