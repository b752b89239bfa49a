"""``entwine settings``: show and change saved settings."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from entwine.cli.common import console, get_state, reporting_errors
from entwine.core.launcher import validate_game_path
from entwine.models.settings import LaunchMethod

settings_app = typer.Typer(help="Show and change saved settings.", no_args_is_help=True)


@settings_app.command(name="show")
def show_cmd(ctx: typer.Context) -> None:
    """Print the saved settings."""
    state = get_state(ctx)
    with reporting_errors():
        current = state.store.load()

    table = Table(show_header=False)
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    table.add_row("Launch method", current.launch_method.value)
    table.add_row("Game path", current.game_path or "[dim]not set[/dim]")
    table.add_row("File", str(state.store.path))
    console.print(table)


@settings_app.command(name="set")
def set_cmd(
    ctx: typer.Context,
    launch_method: LaunchMethod = typer.Option(None, "--launch-method", help="steam or executable."),
    game_path: Path = typer.Option(None, "--game-path", help="SpiderHeck installation directory."),
) -> None:
    """Change one or more saved settings."""
    state = get_state(ctx)
    changes: dict[str, object] = {}
    with reporting_errors():
        if launch_method is not None:
            changes["launch_method"] = launch_method
        if game_path is not None:
            changes["game_path"] = str(validate_game_path(game_path))
        if not changes:
            console.print("[dim]Nothing to change.[/dim]")
            return
        state.store.update(**changes)
    console.print("[green]Settings saved.[/green]")
