"""``entwine configs``: view and edit per-mod YAML configs."""

from __future__ import annotations

import typer
import yaml
from rich.syntax import Syntax
from rich.table import Table

from entwine.cli.common import console, get_state, reporting_errors
from entwine.core.mod_configs import (
    list_mod_configs,
    load_mod_config,
    reset_mod_config,
    set_mod_config_value,
)

configs_app = typer.Typer(help="View and edit mod configs.", no_args_is_help=True)


@configs_app.command(name="list")
def list_cmd(ctx: typer.Context) -> None:
    """List mods that have a config file."""
    state = get_state(ctx)
    with reporting_errors():
        configs = list_mod_configs(state.game_path())

    if not configs:
        console.print("[dim]No mod configs found.[/dim]")
        return

    table = Table(title="Mod Configs")
    table.add_column("Mod", style="cyan")
    table.add_column("Keys", justify="right")
    for entry in configs:
        table.add_row(entry.mod_name, str(len(entry.config)))
    console.print(table)


@configs_app.command(name="show")
def show_cmd(
    ctx: typer.Context,
    mod_id: str = typer.Argument(..., help="Mod id (config file name without .yaml)."),
) -> None:
    """Print a mod's config."""
    state = get_state(ctx)
    with reporting_errors():
        config = load_mod_config(state.game_path(), mod_id)
    text = yaml.safe_dump(config, sort_keys=False, allow_unicode=True) or "{}\n"
    console.print(Syntax(text, "yaml", theme="ansi_dark", background_color="default"))


@configs_app.command(name="set")
def set_cmd(
    ctx: typer.Context,
    mod_id: str = typer.Argument(..., help="Mod id (config file name without .yaml)."),
    key: str = typer.Argument(..., help="Dotted key path, e.g. graphics.scale."),
    value: str = typer.Argument(..., help="New value, parsed as YAML (true, 3, 1.5, text)."),
) -> None:
    """Set one value in a mod's config."""
    state = get_state(ctx)
    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError:
        parsed = value
    with reporting_errors():
        set_mod_config_value(state.game_path(), mod_id, key, parsed)
    console.print(f"[green]Set[/green] {mod_id}.{key} = {parsed!r}")


@configs_app.command(name="reset")
def reset_cmd(
    ctx: typer.Context,
    mod_id: str = typer.Argument(..., help="Mod id (config file name without .yaml)."),
) -> None:
    """Delete a mod's config so the mod regenerates its defaults."""
    state = get_state(ctx)
    with reporting_errors():
        reset_mod_config(state.game_path(), mod_id)
    console.print(f"[green]Reset[/green] config for {mod_id}")
