"""Interactive user input.

Workflows ask questions through a ``UserInput`` value. In a terminal that is
``TerminalInput`` (rich prompts); otherwise ``NonInteractiveInput`` raises
``NonInteractiveInputRequired`` instead of blocking on a closed stdin.
"""

import sys
from typing import Optional, Protocol, Sequence

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, IntPrompt, Prompt

from gwf.console import console as default_console
from gwf.errors import NonInteractiveInputRequired


class UserInput(Protocol):
    """Capability for asking the user questions."""

    interactive: bool

    def select(self, prompt: str, choices: Sequence[str], default: int = 0) -> int:
        """Return the index of the chosen item."""
        ...

    def confirm(self, prompt: str, default: bool = False) -> bool: ...

    def text(self, prompt: str, default: Optional[str] = None, allow_empty: bool = False) -> str: ...


class TerminalInput:
    """Prompts rendered with rich on the attached terminal."""

    interactive = True

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or default_console

    def select(self, prompt: str, choices: Sequence[str], default: int = 0) -> int:
        self.console.print(f"[bold]{escape(prompt)}[/bold]")
        for number, choice in enumerate(choices, start=1):
            self.console.print(f"  [cyan]{number}[/cyan]. {escape(choice)}")
        answer = IntPrompt.ask(
            "Choice",
            choices=[str(number) for number in range(1, len(choices) + 1)],
            default=default + 1,
            show_choices=False,
            console=self.console,
        )
        return answer - 1

    def confirm(self, prompt: str, default: bool = False) -> bool:
        return Confirm.ask(prompt, default=default, console=self.console)

    def text(self, prompt: str, default: Optional[str] = None, allow_empty: bool = False) -> str:
        if default is not None:
            return Prompt.ask(prompt, default=default, console=self.console).strip()
        if allow_empty:
            return Prompt.ask(prompt, default="", show_default=False, console=self.console).strip()
        while True:
            answer = Prompt.ask(prompt, console=self.console).strip()
            if answer:
                return answer
            self.console.print("[red]A value is required[/red]")


class NonInteractiveInput:
    """Fails fast on every question."""

    interactive = False

    def select(self, prompt: str, choices: Sequence[str], default: int = 0) -> int:
        raise NonInteractiveInputRequired(prompt)

    def confirm(self, prompt: str, default: bool = False) -> bool:
        raise NonInteractiveInputRequired(prompt)

    def text(self, prompt: str, default: Optional[str] = None, allow_empty: bool = False) -> str:
        raise NonInteractiveInputRequired(prompt)


def default_input() -> UserInput:
    """Pick the prompt implementation for the current stdin."""
    if sys.stdin is not None and sys.stdin.isatty():
        return TerminalInput()
    return NonInteractiveInput()
