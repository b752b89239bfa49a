"""Rich console progress sink."""

from __future__ import annotations

from rich.console import Console


class ConsoleSink:
    """Prints progress messages to a Rich console."""

    def __init__(self, console: Console | None = None, style: str = "dim") -> None:
        self._console = console or Console(stderr=True)
        self._style = style

    @property
    def sink_name(self) -> str:
        return "console"

    def notify(self, message: str) -> None:
        self._console.print(f"[{self._style}]{message}[/{self._style}]", highlight=False)
