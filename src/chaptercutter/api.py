"""Convenience API for Chaptercutter.

This module provides simple, high-level functions for common tasks:

    >>> from chaptercutter import plan_chapters, split_book
    >>> plan = plan_chapters("book.pdf")
    >>> for chapter in plan.chapters:
    ...     print(chapter.start_page, chapter.end_page, chapter.title)
    >>> report = split_book("book.pdf")

For more control, use the underlying classes directly.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from chaptercutter.books.boundaries import Chapter, calculate_chapters
from chaptercutter.books.splitter import ChapterOutcome, ChapterSplitter, SplitReport
from chaptercutter.config.settings import Settings, get_settings
from chaptercutter.outline.scan import OutlineScan, analyze_outline
from chaptercutter.pdf.document import PdfSource

PathLike = Union[Path, str]


@dataclass
class BookPlan:
    """A loaded PDF together with its chapter layout."""

    path: Path
    source: PdfSource
    scan: OutlineScan
    chapters: list[Chapter]

    @property
    def total_pages(self) -> int:
        return self.source.page_count


def plan_chapters(pdf_path: PathLike, settings: Settings | None = None) -> BookPlan:
    """Load a PDF and compute its chapters from the outline.

    Args:
        pdf_path: Path to the PDF file.
        settings: Settings to use (default: ``get_settings()``).

    Returns:
        BookPlan with the scan diagnostics and the chapter list.

    Raises:
        DocumentLoadError: If the PDF cannot be loaded.

    Example:
        >>> plan = plan_chapters("book.pdf")
        >>> len(plan.chapters)
        12
    """
    settings = settings or get_settings()
    path = Path(pdf_path)
    source = PdfSource.load(path)
    scan = analyze_outline(
        source,
        source.catalog(),
        source.page_refs(),
        max_depth=settings.outline.max_depth,
        max_nodes=settings.outline.max_nodes,
    )
    chapters = calculate_chapters(
        scan.entries,
        source.page_count,
        fallback_title=settings.outline.fallback_title,
    )
    return BookPlan(path=path, source=source, scan=scan, chapters=chapters)


def make_splitter(settings: Settings | None = None) -> ChapterSplitter:
    """Create a ChapterSplitter configured from settings."""
    settings = settings or get_settings()
    return ChapterSplitter(
        max_workers=settings.split.max_workers,
        compact=settings.split.compact,
        extension=settings.output.extension,
        title_max_chars=settings.output.title_max_chars,
        placeholder=settings.output.placeholder,
    )


def write_chapters(
    plan: BookPlan,
    output_dir: PathLike | None = None,
    settings: Settings | None = None,
    on_complete: Callable[[ChapterOutcome, int], None] | None = None,
) -> SplitReport:
    """Write the chapters of an already planned book.

    Args:
        plan: Result of ``plan_chapters``.
        output_dir: Target directory (default: settings, else beside the source).
        settings: Settings to use (default: ``get_settings()``).
        on_complete: Progress callback, see ``ChapterSplitter.split``.
    """
    settings = settings or get_settings()
    target = Path(output_dir or settings.output.directory or plan.path.parent)
    return make_splitter(settings).split(
        plan.source,
        plan.chapters,
        target,
        plan.path.stem,
        on_complete=on_complete,
    )


def split_book(
    pdf_path: PathLike,
    output_dir: PathLike | None = None,
    settings: Settings | None = None,
) -> SplitReport:
    """Split a PDF into one file per chapter.

    Args:
        pdf_path: Path to the PDF file.
        output_dir: Target directory (default: beside the source).
        settings: Settings to use (default: ``get_settings()``).

    Returns:
        SplitReport listing saved and failed chapters.

    Raises:
        DocumentLoadError: If the PDF cannot be loaded. Nothing is written.
    """
    plan = plan_chapters(pdf_path, settings=settings)
    return write_chapters(plan, output_dir=output_dir, settings=settings)
