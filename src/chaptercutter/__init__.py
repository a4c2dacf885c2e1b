"""Chaptercutter: split PDF books into one file per chapter.

Chapters are found by walking the PDF outline (bookmarks), resolving each
bookmark's destination to a page, and turning the sorted start pages into
non-overlapping page ranges.

Simple API (recommended for most users):
    >>> from chaptercutter import split_book
    >>> report = split_book("book.pdf")
    >>> len(report.saved)
    12

Advanced usage (for more control):
    >>> from chaptercutter import PdfSource, analyze_outline, calculate_chapters
    >>>
    >>> source = PdfSource.load("book.pdf")
    >>> scan = analyze_outline(source, source.catalog(), source.page_refs())
    >>> chapters = calculate_chapters(scan.entries, source.page_count)
"""

__version__ = "0.1.0"

# Convenience API
from chaptercutter.api import BookPlan, plan_chapters, split_book, write_chapters

# Chapters
from chaptercutter.books import (
    Chapter,
    ChapterOutcome,
    ChapterSplitter,
    SplitReport,
    calculate_chapters,
)

# Configuration
from chaptercutter.config.settings import Settings, get_settings, load_settings

# Value model
from chaptercutter.core.objects import MemoryStore, ObjectRef, ObjectStore
from chaptercutter.core.text import decode_pdf_string

# Exceptions
from chaptercutter.exceptions import (
    ChapterSaveError,
    ChaptercutterError,
    ConfigError,
    DocumentError,
    DocumentLoadError,
    ObjectNotFoundError,
)

# Outline resolution
from chaptercutter.outline import (
    DestinationResolver,
    NamedDestinationTable,
    OutlineEntry,
    OutlineScan,
    OutlineWalker,
    PageIndex,
    analyze_outline,
    build_named_destinations,
)

# PDF store
from chaptercutter.pdf import PdfSource

# Filenames
from chaptercutter.utils import chapter_filename, sanitize_filename

__all__ = [
    # Version
    "__version__",
    # Exceptions
    "ChaptercutterError",
    "DocumentError",
    "DocumentLoadError",
    "ObjectNotFoundError",
    "ChapterSaveError",
    "ConfigError",
    # Value model
    "ObjectRef",
    "ObjectStore",
    "MemoryStore",
    "decode_pdf_string",
    # Outline
    "PageIndex",
    "NamedDestinationTable",
    "build_named_destinations",
    "DestinationResolver",
    "OutlineWalker",
    "OutlineEntry",
    "OutlineScan",
    "analyze_outline",
    # Chapters
    "Chapter",
    "calculate_chapters",
    "ChapterSplitter",
    "ChapterOutcome",
    "SplitReport",
    # PDF store
    "PdfSource",
    # Filenames
    "sanitize_filename",
    "chapter_filename",
    # Configuration
    "Settings",
    "get_settings",
    "load_settings",
    # Convenience API
    "BookPlan",
    "plan_chapters",
    "split_book",
    "write_chapters",
]
