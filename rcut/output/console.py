"""Console output abstraction.

Services report progress through ``ConsoleProtocol`` so they never depend
on rich directly. ``RichConsole`` is used by the CLI, ``MockConsole``
captures output in tests.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
    "OutputRecord",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()  # echoed commands, hints
    BOLD = auto()
    HEADER = auto()

    def __str__(self) -> str:
        return self.name.lower()


class ConsoleProtocol(Protocol):
    """Protocol for console output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print a message with optional styling."""
        ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def header(self, message: str) -> None:
        """Print a section header (one per release step)."""
        ...

    def command(self, argv: list[str]) -> None:
        """Echo an external command before it runs."""
        ...

    def panel(self, title: str, body: str) -> None:
        """Print a block of preformatted text, e.g. the vote email."""
        ...

    def newline(self) -> None: ...


class RichConsole:
    """Console implementation using Rich library."""

    def __init__(self, *, stderr: bool = False) -> None:
        # Import Rich lazily to avoid import-time dependency
        from rich.console import Console

        self._console = Console(stderr=stderr, highlight=False)
        self._style_map = {
            Style.DEFAULT: "",
            Style.SUCCESS: "green",
            Style.ERROR: "red bold",
            Style.WARNING: "yellow",
            Style.INFO: "cyan",
            Style.DIM: "dim",
            Style.BOLD: "bold",
            Style.HEADER: "blue bold",
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        rich_style = self._style_map.get(style, "")
        if rich_style:
            self._console.print(message, style=rich_style, markup=False)
        else:
            self._console.print(message, markup=False)

    def success(self, message: str) -> None:
        self._console.print(f"[green]OK[/green] {_escape(message)}")

    def error(self, message: str) -> None:
        self._console.print(f"[red bold]error:[/red bold] {_escape(message)}")

    def warning(self, message: str) -> None:
        self._console.print(f"[yellow]warning:[/yellow] {_escape(message)}")

    def info(self, message: str) -> None:
        self._console.print(f"[cyan]info:[/cyan] {_escape(message)}")

    def header(self, message: str) -> None:
        self._console.print(f"\n[blue bold]{_escape(message)}[/blue bold]")

    def command(self, argv: list[str]) -> None:
        self._console.print(f"$ {_join(argv)}", style="dim", markup=False)

    def panel(self, title: str, body: str) -> None:
        from rich.panel import Panel
        from rich.text import Text

        self._console.print(Panel(Text(body), title=title, title_align="left", expand=False))

    def newline(self) -> None:
        self._console.print()


def _escape(message: str) -> str:
    from rich.markup import escape

    return escape(message)


def _join(argv: list[str]) -> str:
    return shlex.join(argv)


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    """Factory for empty outputs list (helps type inference)."""
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"OK {message}", Style.SUCCESS))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"error: {message}", Style.ERROR))

    def warning(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"warning: {message}", Style.WARNING))

    def info(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"info: {message}", Style.INFO))

    def header(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.HEADER))

    def command(self, argv: list[str]) -> None:
        self.outputs.append(OutputRecord(f"$ {_join(argv)}", Style.DIM))

    def panel(self, title: str, body: str) -> None:
        self.outputs.append(OutputRecord(f"{title}\n{body}", Style.DEFAULT))

    def newline(self) -> None:
        self.outputs.append(OutputRecord("", Style.DEFAULT))

    # Test helper methods

    def clear(self) -> None:
        self.outputs.clear()

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        """All output as a single newline-separated string."""
        return "\n".join(self.messages)

    @property
    def commands(self) -> list[str]:
        """Echoed commands, without the ``$ `` prompt."""
        return [o.message[2:] for o in self.outputs if o.message.startswith("$ ")]

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def has_warning(self) -> bool:
        return any(o.style == Style.WARNING for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """Find all outputs containing a substring."""
        return [o for o in self.outputs if substring in o.message]
