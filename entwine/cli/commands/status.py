"""``entwine status`` and ``entwine launch``."""

from __future__ import annotations

import typer
from rich.panel import Panel
from rich.table import Table

from entwine.cli.common import build_orchestrator, console, get_state, reporting_errors, yes_no
from entwine.core.launcher import launch_game
from entwine.models.settings import LaunchMethod


def status_cmd(ctx: typer.Context) -> None:
    """Show the game directory, installed loaders and the bootstrap state."""
    state = get_state(ctx)
    with reporting_errors():
        orchestrator = build_orchestrator(state)
        status = orchestrator.status()

    table = Table(show_header=False, expand=True)
    table.add_column("Field", style="bold", min_width=18)
    table.add_column("Value")
    table.add_row("Game path", status.game_path or "[dim]not set[/dim]")
    table.add_row("Mods path", status.mods_path or "[dim]-[/dim]")
    table.add_row("Silk", yes_no(status.silk_installed))
    table.add_row("Silk version", status.installed_version or "[dim]unknown[/dim]")
    table.add_row("BepInEx", yes_no(status.bepinex_installed))
    table.add_row("Bootstrap", status.bootstrap_state.value)

    console.print(Panel(table, title="[bold]Entwine[/bold]", border_style="cyan", padding=(1, 2)))


def launch_cmd(
    ctx: typer.Context,
    method: LaunchMethod = typer.Option(
        None,
        "--method",
        "-m",
        help="Launch through Steam or the game executable. Defaults to the saved setting.",
    ),
) -> None:
    """Start SpiderHeck."""
    state = get_state(ctx)
    with reporting_errors():
        chosen = method or state.store.load().launch_method
        game_path = state.game_path() if chosen is LaunchMethod.EXECUTABLE else None
        launch_game(game_path, chosen, settings=state.settings)
    console.print(f"[green]Launching SpiderHeck via {chosen.value}.[/green]")
