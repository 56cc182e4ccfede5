"""Interactive prompts, kept behind a small interface so they can be scripted."""

from typing import Optional, Protocol

from rich.console import Console


class Prompter(Protocol):
    """Source of answers to interactive questions."""

    def ask(self, message: str) -> str:
        ...

    def confirm(self, message: str) -> bool:
        ...


class ConsolePrompter:
    """Prompter reading answers from the terminal."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def ask(self, message: str) -> str:
        try:
            return self.console.input(message)
        except EOFError:
            return ""

    def confirm(self, message: str) -> bool:
        response = self.ask(f"{message} (y/n) ")
        return response.strip().lower() in ("y", "yes")
