"""``entwine silk``: Silk version management."""

from __future__ import annotations

import typer
from rich.table import Table

from entwine.cli.common import build_orchestrator, console, get_state, reporting_errors

silk_app = typer.Typer(help="Check for and switch Silk versions.", no_args_is_help=True)


@silk_app.command(name="check-update")
def check_update_cmd(ctx: typer.Context) -> None:
    """Compare the installed Silk version with the latest release."""
    state = get_state(ctx)
    with reporting_errors():
        orchestrator = build_orchestrator(state)
        update = orchestrator.check_for_update()
        installed = orchestrator.installed_version()

    if update is None:
        console.print(f"[green]Silk {installed} is up to date.[/green]")
        return
    console.print(
        f"[yellow]Update available:[/yellow] {installed} -> [bold]{update.version}[/bold]\n"
        f"[dim]{update.download_url}[/dim]"
    )


@silk_app.command(name="install-version")
def install_version_cmd(
    ctx: typer.Context,
    version: str = typer.Argument(..., help="Silk version, e.g. 0.6.0."),
) -> None:
    """Install a specific Silk version over the current one."""
    state = get_state(ctx)
    with reporting_errors(), build_orchestrator(state) as orchestrator:
        orchestrator.submit(orchestrator.install_version, version).result()
    console.print(f"[green]Silk {version} installed.[/green]")


@silk_app.command(name="versions")
def versions_cmd(ctx: typer.Context) -> None:
    """List the known Silk releases."""
    state = get_state(ctx)
    with reporting_errors():
        orchestrator = build_orchestrator(state)
        installed = orchestrator.installed_version()
        versions = orchestrator.list_available_versions()

    table = Table(title="Silk Versions")
    table.add_column("Version", style="cyan")
    table.add_column("Installed", justify="center")
    for version in versions:
        table.add_row(version, "[green]*[/green]" if version == installed else "")
    console.print(table)
