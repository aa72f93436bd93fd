"""Terminal output and logging setup."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

console = Console()
err_console = Console(stderr=True)


def setup_logging(verbosity: int = 0, quiet: bool = False) -> None:
    """Configure the root logger with a Rich handler on stderr.

    verbosity == 0 -> WARNING
    verbosity == 1 -> INFO
    verbosity >= 2 -> DEBUG
    """
    if quiet:
        level = logging.ERROR
    elif verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    handler = RichHandler(console=err_console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)

    console.quiet = quiet


def print_success(message: str) -> None:
    console.print(f"[bold green]✓[/bold green] {escape(message)}")


def print_info(message: str) -> None:
    console.print(f"[bold blue]ℹ[/bold blue] {escape(message)}")


def print_warning(message: str) -> None:
    console.print(f"[bold yellow]⚠[/bold yellow] {escape(message)}")


def print_error(message: str) -> None:
    err_console.print(f"[bold red]✗ Error:[/bold red] {escape(message)}")


def print_heading(title: str) -> None:
    console.print(f"\n[bold underline]{escape(title)}[/bold underline]")


def print_steps(title: str, steps: list[str]) -> None:
    """Print a numbered list of follow-up steps."""
    print_heading(title)
    for number, step in enumerate(steps, start=1):
        console.print(f"  {number}. {escape(step)}")
