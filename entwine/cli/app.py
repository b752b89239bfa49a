"""Main Typer application: imports and registers all CLI commands.

Entry point: ``entwine`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

from pathlib import Path

import typer

from entwine.cli.commands.configs import configs_app
from entwine.cli.commands.loader import loader_app
from entwine.cli.commands.mods import mods_app
from entwine.cli.commands.settings_cmd import settings_app
from entwine.cli.commands.silk import silk_app
from entwine.cli.commands.status import launch_cmd, status_cmd
from entwine.cli.common import CliState, configure_logging
from entwine.config import EntwineConfig

app = typer.Typer(
    name="entwine",
    help="Entwine: mod manager for SpiderHeck (Silk and BepInEx).",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    game_path: Path = typer.Option(
        None,
        "--game-path",
        "-g",
        help="SpiderHeck installation directory. Defaults to the saved setting.",
    ),
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING). Defaults to ENTWINE_LOG_LEVEL.",
    ),
) -> None:
    """Entwine: mod manager for SpiderHeck."""
    settings = EntwineConfig()
    configure_logging(log_level or settings.log_level)
    ctx.obj = CliState(game_path=game_path, settings=settings)


# Register subcommands
app.command(name="status", help="Show installed loaders and the bootstrap state.")(status_cmd)
app.command(name="launch", help="Start the game.")(launch_cmd)
app.add_typer(loader_app, name="loader")
app.add_typer(silk_app, name="silk")
app.add_typer(mods_app, name="mods")
app.add_typer(configs_app, name="configs")
app.add_typer(settings_app, name="settings")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
