"""Console output abstraction.

Commands print through `ConsoleProtocol` so they can be exercised in tests
with `MockConsole` instead of a real terminal. Tables and live views are
rendered by `mr.cli.render`, which talks to Rich directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()
    HEADER = auto()

    def __str__(self) -> str:
        return self.name.lower()


class ConsoleProtocol(Protocol):
    """Styled line output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print a message with optional styling.

        Args:
            message: The text to print (Rich markup is allowed)
            style: The style to apply
        """
        ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def header(self, message: str) -> None: ...

    def newline(self) -> None: ...


class RichConsole:
    """Production console backed by Rich."""

    def __init__(self) -> None:
        from rich.console import Console

        self._console = Console()
        self._style_map = {
            Style.DEFAULT: "",
            Style.SUCCESS: "green",
            Style.ERROR: "red bold",
            Style.WARNING: "yellow",
            Style.INFO: "cyan",
            Style.DIM: "grey50",
            Style.HEADER: "blue bold",
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        rich_style = self._style_map.get(style, "")
        if rich_style:
            self._console.print(message, style=rich_style)
        else:
            self._console.print(message)

    def success(self, message: str) -> None:
        self._console.print(f"[green]OK[/green] {message}")

    def error(self, message: str) -> None:
        self._console.print(f"[red bold]Error:[/red bold] {message}")

    def warning(self, message: str) -> None:
        self._console.print(f"[yellow]warning:[/yellow] {message}")

    def info(self, message: str) -> None:
        self._console.print(f"[cyan]info:[/cyan] {message}")

    def header(self, message: str) -> None:
        self._console.print(f"[blue bold]{message}[/blue bold]")

    def newline(self) -> None:
        self._console.print()


@dataclass
class OutputRecord:
    """A single line captured by MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console that captures output for tests."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"OK {message}", Style.SUCCESS))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"Error: {message}", Style.ERROR))

    def warning(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"warning: {message}", Style.WARNING))

    def info(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"info: {message}", Style.INFO))

    def header(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.HEADER))

    def newline(self) -> None:
        self.outputs.append(OutputRecord("", Style.DEFAULT))

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        """All captured output as one newline-separated string."""
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        return [o for o in self.outputs if substring in o.message]
