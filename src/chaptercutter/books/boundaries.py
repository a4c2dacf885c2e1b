"""Chapter boundary calculation from resolved bookmark pages."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

FALLBACK_TITLE = "FullDocument"


class ChapterStart(Protocol):
    page: int
    title: str


@dataclass(frozen=True)
class Chapter:
    """A chapter of the source document."""

    title: str
    start_page: int  # 1-indexed
    end_page: int  # 1-indexed, inclusive

    @property
    def page_count(self) -> int:
        """Number of pages in this chapter."""
        return self.end_page - self.start_page + 1

    def __repr__(self) -> str:
        return f"Chapter('{self.title}', pages {self.start_page}-{self.end_page})"


def calculate_chapters(
    starts: Iterable[ChapterStart | tuple[int, str]],
    total_pages: int,
    fallback_title: str = FALLBACK_TITLE,
) -> list[Chapter]:
    """Turn raw ``(page, title)`` chapter starts into page ranges.

    Starts are sorted by page (stable), later starts on an already-used
    page are dropped, and each chapter runs up to the page before the next
    start. The last chapter ends on the last page. With no starts at all
    the whole document becomes a single chapter.

    Args:
        starts: Outline entries or ``(page, title)`` tuples in any order.
        total_pages: Page count of the source document.
        fallback_title: Title used when ``starts`` is empty.

    Returns:
        Chapters ordered by start page with non-overlapping ranges.
    """
    raw = [_as_pair(start) for start in starts]
    if not raw:
        logger.warning("No usable bookmarks; treating document as one chapter")
        raw = [(1, fallback_title)]

    ordered = sorted(raw, key=lambda pair: pair[0])

    unique: list[tuple[int, str]] = []
    for page, title in ordered:
        if unique and unique[-1][0] == page:
            logger.debug(f"Dropping '{title}': page {page} already starts '{unique[-1][1]}'")
            continue
        unique.append((page, title))

    chapters = []
    for i, (start_page, title) in enumerate(unique):
        if i + 1 < len(unique):
            next_start = unique[i + 1][0]
            end_page = next_start - 1 if next_start - 1 >= start_page else start_page
        else:
            end_page = total_pages
        end_page = min(end_page, total_pages)
        chapters.append(Chapter(title=title, start_page=start_page, end_page=end_page))

    return [c for c in chapters if c.start_page <= c.end_page]


def _as_pair(start: ChapterStart | tuple[int, str]) -> tuple[int, str]:
    if isinstance(start, tuple):
        return start[0], start[1]
    return start.page, start.title
