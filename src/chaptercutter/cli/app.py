"""Main Typer application for Chaptercutter CLI."""

import logging
import time
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from chaptercutter import __version__
from chaptercutter.books.splitter import ChapterOutcome, SplitReport
from chaptercutter.cli.utils import OnceFilter, handle_errors

# Apply the filter to pypdf logger to avoid warning spam
logging.getLogger("pypdf").addFilter(OnceFilter())

# Default console for output
console = Console(stderr=True)

app = typer.Typer(
    name="chaptercutter",
    help="Split a PDF into one file per chapter using its bookmarks.",
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        console.print(f"chaptercutter version {__version__}")
        raise typer.Exit()


@app.command(no_args_is_help=True)
@handle_errors
def split(
    input_path: Annotated[
        Path,
        typer.Argument(help="Path of the PDF file to split"),
    ],
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Split a PDF into chapters (one file per bookmark).

    Chapter files are written next to the input as
    <stem>_chapter_<n>_<title>.pdf.

    Example:

        chaptercutter textbook.pdf
    """
    from chaptercutter.api import plan_chapters, write_chapters
    from chaptercutter.config.settings import get_settings

    if not input_path.exists():
        console.print(f"[red]File not found:[/red] {input_path}")
        raise typer.Exit(1)

    settings = get_settings()

    console.print(f"Loading PDF: {escape(str(input_path))}")
    start = time.perf_counter()
    plan = plan_chapters(input_path, settings=settings)
    console.print(
        f"PDF loaded in {time.perf_counter() - start:.2f}s "
        f"({plan.total_pages} pages). Analyzing structure..."
    )

    scan = plan.scan
    console.print(f"Loaded {len(scan.named_destinations)} named destinations.")
    if not scan.has_outline:
        console.print("PDF has no Outlines dictionary.")
    for skipped in scan.skipped:
        console.print(f"[dim]{escape(str(skipped))}[/dim]")
    if scan.skipped:
        console.print(f"[yellow]{len(scan.skipped)} bookmark(s) skipped[/yellow]")
    if not scan.entries:
        console.print("[yellow]Warning:[/yellow] no usable bookmarks found; keeping the whole document.")

    _print_chapters(plan.chapters)
    console.print(f"Found {len(plan.chapters)} chapters. Starting parallel processing...")

    report = write_chapters(plan, settings=settings, on_complete=_print_outcome)
    _print_summary(report)


def _print_chapters(chapters) -> None:
    table = Table(title="Chapters", show_lines=False)
    table.add_column("#", justify="right")
    table.add_column("Pages", justify="right")
    table.add_column("Title")
    for i, chapter in enumerate(chapters, 1):
        table.add_row(str(i), f"{chapter.start_page}-{chapter.end_page}", escape(chapter.title))
    console.print(table)


def _print_outcome(outcome: ChapterOutcome, total: int) -> None:
    chapter = outcome.chapter
    position = f"[{outcome.index}/{total} p.{chapter.start_page}-p.{chapter.end_page}]"
    if outcome.ok:
        console.print(
            f"[green]Saved:[/green] {escape(position)} \"{escape(outcome.path.name)}\" "
            f"({outcome.elapsed:.2f}s)"
        )
    else:
        console.print(
            f"[red]Error saving[/red] {escape(outcome.path.name)}: {escape(outcome.error or '')}"
        )


def _print_summary(report: SplitReport) -> None:
    if report.failed:
        console.print(
            f"[yellow]Done with errors:[/yellow] {len(report.saved)} saved, "
            f"{len(report.failed)} failed in {escape(str(report.output_dir))}"
        )
    else:
        console.print(
            f"[bold green]All done![/bold green] {len(report.saved)} chapter(s) saved "
            f"in {escape(str(report.output_dir))}"
        )


if __name__ == "__main__":
    app()
