"""Shared CLI plumbing: invocation state, logging setup and error reporting."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from entwine.bridge.fetch import Fetcher, HttpFetcher
from entwine.config import EntwineConfig
from entwine.core.errors import EntwineError, NotFoundError
from entwine.core.orchestrator import Orchestrator
from entwine.core.settings import SettingsStore
from entwine.routing.dispatcher import ProgressDispatcher
from entwine.routing.sinks import ConsoleSink, LogSink

console = Console()


class CliState:
    """Per-invocation options shared by every command (stored on ``ctx.obj``)."""

    def __init__(self, game_path: Path | None = None, settings: EntwineConfig | None = None) -> None:
        self.explicit_game_path = game_path
        self.settings = settings or EntwineConfig()
        self.store = SettingsStore(self.settings.settings_path)

    def game_path(self) -> Path:
        """Resolve the game directory.

        Order: ``--game-path``, ``ENTWINE_GAME_PATH``, then the saved setting.
        """
        if self.explicit_game_path is not None:
            return self.explicit_game_path
        if self.settings.game_path is not None:
            return self.settings.game_path
        saved = self.store.load().game_path
        if saved:
            return Path(saved)
        raise NotFoundError(
            "Game path is not set. Pass --game-path or run 'entwine settings set --game-path'."
        )


def get_state(ctx: typer.Context) -> CliState:
    if not isinstance(ctx.obj, CliState):
        ctx.obj = CliState()
    return ctx.obj


def make_fetcher(settings: EntwineConfig) -> Fetcher:
    return HttpFetcher(settings.http_timeout_seconds)


def build_orchestrator(state: CliState) -> Orchestrator:
    """Create an Orchestrator that reports progress to the console and the log."""
    progress = ProgressDispatcher([ConsoleSink(), LogSink(logging.DEBUG)])
    return Orchestrator(
        state.game_path(),
        fetcher=make_fetcher(state.settings),
        progress=progress,
        config=state.settings,
    )


def configure_logging(level: str) -> None:
    """Route log records through Rich on stderr."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)],
        force=True,
    )


@contextmanager
def reporting_errors() -> Iterator[None]:
    """Print an :class:`EntwineError` in red and exit with status 1."""
    try:
        yield
    except EntwineError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


def yes_no(flag: bool) -> str:
    return "[green]Yes[/green]" if flag else "[red]No[/red]"
