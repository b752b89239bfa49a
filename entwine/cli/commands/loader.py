"""``entwine loader``: install or remove Silk and BepInEx."""

from __future__ import annotations

import typer

from entwine.cli.common import build_orchestrator, console, get_state, reporting_errors
from entwine.models.loaders import LoaderKind, get_loader_spec

loader_app = typer.Typer(help="Install or remove mod loaders.", no_args_is_help=True)


@loader_app.command(name="install")
def install_cmd(
    ctx: typer.Context,
    kind: LoaderKind = typer.Argument(..., help="Loader to install."),
    version: str = typer.Option(
        None, "--version", "-v", help="Silk version to install. Defaults to the latest release."
    ),
) -> None:
    """Download a loader and wire it into the bootstrap configuration."""
    state = get_state(ctx)
    with reporting_errors(), build_orchestrator(state) as orchestrator:
        bootstrap = orchestrator.submit(orchestrator.install_loader, kind, version).result()
    console.print(
        f"[green]{get_loader_spec(kind).display_name} installed.[/green] "
        f"Bootstrap: [bold]{bootstrap.value}[/bold]"
    )


@loader_app.command(name="uninstall")
def uninstall_cmd(
    ctx: typer.Context,
    kind: LoaderKind = typer.Argument(..., help="Loader to remove."),
) -> None:
    """Remove a loader, keeping the shared shim while the other loader needs it."""
    state = get_state(ctx)
    with reporting_errors(), build_orchestrator(state) as orchestrator:
        bootstrap = orchestrator.submit(orchestrator.uninstall_loader, kind).result()
    console.print(
        f"[green]{get_loader_spec(kind).display_name} uninstalled.[/green] "
        f"Bootstrap: [bold]{bootstrap.value}[/bold]"
    )
