"""Book processing: chapter boundaries and splitting."""

from chaptercutter.books.boundaries import FALLBACK_TITLE, Chapter, calculate_chapters
from chaptercutter.books.splitter import ChapterOutcome, ChapterSplitter, SplitReport

__all__ = [
    "FALLBACK_TITLE",
    "Chapter",
    "ChapterOutcome",
    "ChapterSplitter",
    "SplitReport",
    "calculate_chapters",
]
