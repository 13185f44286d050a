"""Interactive prompts (questionary) and console output (rich)."""

from typing import Any, Callable, List, Sequence

import questionary
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from jiraflow import __version__
from jiraflow.errors import ValidationError

Validator = Callable[[str], str]


def required(message: str) -> Validator:
    """Validator rejecting empty input with message."""

    def _validate(value: str) -> str:
        if not value or not str(value).strip():
            raise ValidationError(message)
        return str(value).strip()

    return _validate


def _questionary_validator(validator: Validator | None) -> Callable[[str], bool | str]:
    def _check(value: str) -> bool | str:
        if validator is None:
            return True
        try:
            validator(value)
        except ValidationError as e:
            return str(e)
        return True

    return _check


class Prompt:
    """Asks questions on the terminal and renders results."""

    def __init__(self, console: Console | None = None, err_console: Console | None = None) -> None:
        self._console = console or Console()
        self._err_console = err_console or Console(stderr=True)

    def confirm(self, question: str, default: bool = False) -> bool:
        """Yes/no question; a cancelled prompt counts as no."""
        return bool(questionary.confirm(question, default=default).ask())

    def choice(self, question: str, options: List[str]) -> str | None:
        """Pick exactly one option; None when there is nothing to pick or the
        prompt was cancelled."""
        if not options:
            self.warning(f"{question}: nothing to choose from.")
            return None
        return questionary.select(question, choices=list(options)).ask()

    def ask(
        self,
        question: str,
        default: str | None = None,
        hidden: bool = False,
        validator: Validator | None = None,
    ) -> str:
        """Free-text input; the validator's return value is the answer."""
        check = _questionary_validator(validator)
        if hidden:
            answer = questionary.password(question, validate=check).ask()
        else:
            answer = questionary.text(question, default=default or "", validate=check).ask()
        if answer is None:
            raise ValidationError(f"No answer given to: {question}")
        return validator(answer) if validator else answer

    def banner(self) -> None:
        """Header line printed before issue commands."""
        self._console.rule(f"[bold]jiraflow[/bold] {__version__}")

    def table(self, headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> None:
        table = Table(show_header=True, header_style="bold", box=box.SIMPLE)
        for header in headers:
            table.add_column(header, overflow="fold")
        for row in rows:
            table.add_row(*("" if cell is None else escape(str(cell)) for cell in row))
        self._console.print(table)

    def success(self, message: str) -> None:
        self._console.print("[green]" + escape("[OK]") + "[/green] " + escape(message))

    def warning(self, message: str) -> None:
        self._console.print("[yellow]" + escape("[WARNING]") + "[/yellow] " + escape(message))

    def error(self, message: str) -> None:
        self._err_console.print("[red]" + escape("[ERROR]") + "[/red] " + escape(message))
