"""Chapter splitting: writes one PDF per chapter.

Each chapter is produced from its own clone of the source document, so
chapters are written in parallel without sharing any mutable state. A
chapter that fails to save is reported and does not affect the others.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from chaptercutter.books.boundaries import Chapter
from chaptercutter.utils.filenames import (
    DEFAULT_MAX_CHARS,
    DEFAULT_PLACEHOLDER,
    chapter_filename,
)

logger = logging.getLogger(__name__)


class WritableCopy(Protocol):
    """A private, writable copy of the source document."""

    def delete_pages(self, pages: Iterable[int]) -> None: ...

    def compact(self) -> None: ...

    def save(self, path: Path) -> None: ...


class SplittableDocument(Protocol):
    """A read-only source that can hand out writable copies."""

    @property
    def page_count(self) -> int: ...

    def clone(self) -> WritableCopy: ...


@dataclass
class ChapterOutcome:
    """Result of writing one chapter."""

    index: int  # 1-based chapter ordinal
    chapter: Chapter
    path: Path
    error: str | None = None
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SplitReport:
    """Result of splitting a document into chapters."""

    output_dir: Path
    outcomes: list[ChapterOutcome] = field(default_factory=list)

    @property
    def saved(self) -> list[ChapterOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[ChapterOutcome]:
        return [o for o in self.outcomes if not o.ok]


class ChapterSplitter:
    """Write each chapter of a document to its own PDF."""

    def __init__(
        self,
        max_workers: int | None = None,
        compact: bool = True,
        extension: str = "pdf",
        title_max_chars: int | None = DEFAULT_MAX_CHARS,
        placeholder: str = DEFAULT_PLACEHOLDER,
    ):
        """Initialize the splitter.

        Args:
            max_workers: Thread pool size (None = executor default).
            compact: Drop unreachable objects before saving.
            extension: Output file extension.
            title_max_chars: Characters of the title kept in filenames.
            placeholder: Replacement for unsafe filename characters.
        """
        self.max_workers = max_workers
        self.compact = compact
        self.extension = extension
        self.title_max_chars = title_max_chars
        self.placeholder = placeholder

    def output_path(self, output_dir: Path, stem: str, index: int, chapter: Chapter) -> Path:
        """Path of the file for the ``index``-th (1-based) chapter."""
        name = chapter_filename(
            stem,
            index,
            chapter.title,
            extension=self.extension,
            max_chars=self.title_max_chars,
            placeholder=self.placeholder,
        )
        return Path(output_dir) / name

    def extract_chapter(
        self,
        source: SplittableDocument,
        chapter: Chapter,
        output_path: Path,
    ) -> Path:
        """Write the pages of one chapter to a new PDF.

        Args:
            source: Source document (never modified).
            chapter: Chapter defining the page range.
            output_path: Path for the output PDF.

        Returns:
            Path to the created PDF.
        """
        copy = source.clone()
        outside = [
            page
            for page in range(1, source.page_count + 1)
            if page < chapter.start_page or page > chapter.end_page
        ]
        copy.delete_pages(outside)
        if self.compact:
            copy.compact()
        copy.save(output_path)
        return output_path

    def split(
        self,
        source: SplittableDocument,
        chapters: list[Chapter],
        output_dir: Path,
        stem: str,
        on_complete: Callable[[ChapterOutcome, int], None] | None = None,
    ) -> SplitReport:
        """Write every chapter in parallel.

        Args:
            source: Source document.
            chapters: Chapters to write, in order.
            output_dir: Directory for the chapter files.
            stem: Source file stem used as filename prefix.
            on_complete: Called with each outcome and the chapter total as
                chapters finish (in completion order).

        Returns:
            SplitReport with outcomes ordered by chapter index.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        report = SplitReport(output_dir=output_dir)
        total = len(chapters)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                executor.submit(
                    self._run_one,
                    source,
                    index,
                    chapter,
                    self.output_path(output_dir, stem, index, chapter),
                )
                for index, chapter in enumerate(chapters, 1)
            ]

            for future in as_completed(futures):
                outcome = future.result()
                report.outcomes.append(outcome)
                if on_complete:
                    on_complete(outcome, total)

        report.outcomes.sort(key=lambda o: o.index)
        return report

    def _run_one(
        self,
        source: SplittableDocument,
        index: int,
        chapter: Chapter,
        path: Path,
    ) -> ChapterOutcome:
        start = time.perf_counter()
        try:
            self.extract_chapter(source, chapter, path)
        except Exception as e:
            # One chapter failing must not stop the others.
            logger.warning(f"Chapter {index} ({chapter.title!r}) failed: {e}")
            return ChapterOutcome(
                index=index,
                chapter=chapter,
                path=path,
                error=_describe(e),
                elapsed=time.perf_counter() - start,
            )
        elapsed = time.perf_counter() - start
        logger.debug(f"Saved {path} ({chapter.page_count} pages) in {elapsed:.2f}s")
        return ChapterOutcome(index=index, chapter=chapter, path=path, elapsed=elapsed)


def _describe(error: Exception) -> str:
    details = getattr(error, "details", None)
    message = str(error) or type(error).__name__
    return f"{message}: {details}" if details else message
