"""
Prompter - the "ask the user" capability used by workflows and the shell.

Workflows only depend on the abstract ``Prompter``; ``RichPrompter`` renders
menus with rich; every prompt is an ``await`` point.
"""

import asyncio
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Union

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table

Validator = Callable[[str], Union[bool, str]]


@dataclass
class Choice:
    """One menu entry."""
    name: str
    value: Any
    checked: bool = False
    disabled: bool = False


class Prompter(ABC):
    """Abstract terminal interaction."""

    @abstractmethod
    async def select(self, message: str, choices: Sequence[Choice]) -> Any:
        """Single choice; returns the chosen ``Choice.value``."""

    @abstractmethod
    async def checkbox(self, message: str, choices: Sequence[Choice]) -> List[Any]:
        """Multiple choice; returns chosen values in menu order."""

    @abstractmethod
    async def text(self, message: str, validate: Optional[Validator] = None) -> str:
        """Free text input; ``validate`` returns True or an error message."""

    @abstractmethod
    async def pause(self, message: str = "Press Enter to continue...") -> None:
        """Wait for acknowledgement."""


class RichPrompter(Prompter):
    """Prompter backed by rich console prompts."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    async def _run(self, func: Callable, *args: Any) -> Any:
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def settle(result: Any, error: Optional[BaseException]) -> None:
            if future.cancelled():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(result)

        def worker() -> None:
            try:
                result = func(*args)
            except Exception as e:
                loop.call_soon_threadsafe(settle, None, e)
            else:
                loop.call_soon_threadsafe(settle, result, None)

        # daemon thread: Ctrl-C exits without waiting for a pending read
        threading.Thread(target=worker, daemon=True).start()
        return await future

    async def select(self, message: str, choices: Sequence[Choice]) -> Any:
        return await self._run(self._select_sync, message, list(choices))

    async def checkbox(self, message: str, choices: Sequence[Choice]) -> List[Any]:
        return await self._run(self._checkbox_sync, message, list(choices))

    async def text(self, message: str, validate: Optional[Validator] = None) -> str:
        return await self._run(self._text_sync, message, validate)

    async def pause(self, message: str = "Press Enter to continue...") -> None:
        await self._run(self.console.input, message)

    def _select_sync(self, message: str, choices: List[Choice]) -> Any:
        self.console.print(f"\n[bold]{message}[/bold]")
        enabled = []
        for number, choice in enumerate(choices, start=1):
            if choice.disabled:
                self.console.print(f"  [dim]{number}. {escape(choice.name)}[/dim]")
            else:
                self.console.print(f"  [cyan]{number}.[/cyan] {escape(choice.name)}")
                enabled.append(str(number))
        answer = Prompt.ask("Choose", choices=enabled, show_choices=False, console=self.console)
        return choices[int(answer) - 1].value

    def _checkbox_sync(self, message: str, choices: List[Choice]) -> List[Any]:
        checked = [choice.checked for choice in choices]
        while True:
            table = Table(title=message, show_header=False, box=None)
            for number, choice in enumerate(choices, start=1):
                mark = "[green]\\[x][/green]" if checked[number - 1] else "[ ]"
                table.add_row(f"{number}.", mark, escape(choice.name))
            self.console.print(table)

            answer = Prompt.ask(
                "Toggle numbers (e.g. 1 3), [bold]a[/bold]=all, [bold]n[/bold]=none, Enter to confirm",
                default="",
                show_default=False,
                console=self.console,
            ).strip().lower()
            if not answer:
                return [choice.value for choice, on in zip(choices, checked) if on]
            if answer == "a":
                checked = [True] * len(choices)
                continue
            if answer == "n":
                checked = [False] * len(choices)
                continue
            for token in answer.replace(",", " ").split():
                if token.isdigit() and 1 <= int(token) <= len(choices):
                    checked[int(token) - 1] = not checked[int(token) - 1]
                else:
                    self.console.print(f"[red]Ignoring '{token}'[/red]")

    def _text_sync(self, message: str, validate: Optional[Validator]) -> str:
        while True:
            answer = Prompt.ask(message, console=self.console)
            verdict = validate(answer) if validate else True
            if verdict is True:
                return answer
            self.console.print(f"[red]{verdict}[/red]")
