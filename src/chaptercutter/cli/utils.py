"""Shared utilities for the CLI."""

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

import typer
from rich.console import Console

from chaptercutter.exceptions import ChaptercutterError

# Type variable for decorators
F = TypeVar("F", bound=Callable[..., Any])

# Default console for error output (stderr)
_error_console = Console(stderr=True)


class OnceFilter(logging.Filter):
    """Logging filter that only shows each unique message once."""

    def __init__(self):
        super().__init__()
        self.seen: set[str] = set()

    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        if msg in self.seen:
            return False
        self.seen.add(msg)
        return True


def handle_errors(func: F) -> F:
    """Decorator for consistent CLI error handling.

    Catches common exceptions and displays user-friendly error messages
    instead of raw Python tracebacks.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except ChaptercutterError as e:
            _error_console.print(f"[red]Error:[/red] {e.message}")
            if e.details:
                _error_console.print(f"[dim]{e.details}[/dim]")
            if e.hint:
                _error_console.print(f"[dim]Hint: {e.hint}[/dim]")
            raise typer.Exit(e.exit_code)
        except KeyboardInterrupt:
            _error_console.print("\n[yellow]Interrupted[/yellow]")
            raise typer.Exit(130)
        except typer.Exit:
            # Re-raise typer exits (already handled)
            raise
        except typer.BadParameter:
            raise
        except Exception as e:
            _error_console.print(f"[red]Unexpected error:[/red] {type(e).__name__}: {e}")
            raise typer.Exit(1)

    return wrapper  # type: ignore[return-value]
