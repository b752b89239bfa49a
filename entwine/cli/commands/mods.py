"""``entwine mods``: browse, install and manage mods."""

from __future__ import annotations

import typer
from rich.table import Table

from entwine.bridge.catalog import ModCatalog
from entwine.cli.common import build_orchestrator, console, get_state, reporting_errors, yes_no

mods_app = typer.Typer(help="Browse, install and manage mods.", no_args_is_help=True)


@mods_app.command(name="list")
def list_cmd(ctx: typer.Context) -> None:
    """List installed mods, enabled or not."""
    state = get_state(ctx)
    with reporting_errors():
        mods = build_orchestrator(state).reconciler.list_installed()

    if not mods:
        console.print("[dim]No mods installed.[/dim]")
        return

    table = Table(title="Installed Mods")
    table.add_column("File", style="cyan")
    table.add_column("Name")
    table.add_column("Version", style="green")
    table.add_column("Author")
    table.add_column("Enabled", justify="center")
    for mod in sorted(mods, key=lambda m: m.file_name.lower()):
        table.add_row(mod.file_name, mod.name, mod.version, mod.author, yes_no(mod.enabled))
    console.print(table)


@mods_app.command(name="browse")
def browse_cmd(ctx: typer.Context) -> None:
    """List the mods available from the online catalog."""
    state = get_state(ctx)
    with reporting_errors():
        orchestrator = build_orchestrator(state)
        catalog = ModCatalog(orchestrator.fetcher, state.settings.mods_api_url, state.settings.mods_base_url)
        mods = catalog.fetch_mods()

    if not mods:
        console.print("[dim]The catalog is empty.[/dim]")
        return

    table = Table(title="Mod Catalog")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Version", style="green")
    table.add_column("Author")
    table.add_column("Downloads", justify="right")
    for mod in mods:
        table.add_row(mod.id, mod.name, mod.version, mod.author, f"{mod.downloads:,}")
    console.print(table)


@mods_app.command(name="install")
def install_cmd(
    ctx: typer.Context,
    mod_id: str = typer.Argument(..., help="Catalog id of the mod."),
) -> None:
    """Download a mod from the catalog and install it."""
    state = get_state(ctx)
    with reporting_errors():
        orchestrator = build_orchestrator(state)
        catalog = ModCatalog(orchestrator.fetcher, state.settings.mods_api_url, state.settings.mods_base_url)
        descriptor = catalog.find(mod_id)
        orchestrator.progress.notify(f"Downloading {descriptor.name}...")
        data = catalog.download(descriptor)
        target = orchestrator.reconciler.install(descriptor, data)
    console.print(f"[green]Installed {descriptor.name} {descriptor.version}[/green] -> {target.name}")


@mods_app.command(name="enable")
def enable_cmd(
    ctx: typer.Context,
    file_name: str = typer.Argument(..., help="On-disk name shown by 'mods list'."),
) -> None:
    """Enable a disabled mod."""
    state = get_state(ctx)
    with reporting_errors():
        new_name = build_orchestrator(state).reconciler.toggle(file_name, True)
    console.print(f"[green]Enabled[/green] {new_name}")


@mods_app.command(name="disable")
def disable_cmd(
    ctx: typer.Context,
    file_name: str = typer.Argument(..., help="On-disk name shown by 'mods list'."),
) -> None:
    """Disable a mod without removing it."""
    state = get_state(ctx)
    with reporting_errors():
        new_name = build_orchestrator(state).reconciler.toggle(file_name, False)
    console.print(f"[yellow]Disabled[/yellow] {new_name}")


@mods_app.command(name="uninstall")
def uninstall_cmd(
    ctx: typer.Context,
    file_name: str = typer.Argument(..., help="On-disk name shown by 'mods list'."),
) -> None:
    """Delete an installed mod. Its metadata is kept for a later reinstall."""
    state = get_state(ctx)
    with reporting_errors():
        build_orchestrator(state).reconciler.uninstall(file_name)
    console.print(f"[green]Uninstalled[/green] {file_name}")


@mods_app.command(name="forget")
def forget_cmd(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Registry key (file name without extension)."),
) -> None:
    """Drop a mod's metadata record."""
    state = get_state(ctx)
    with reporting_errors():
        registry = build_orchestrator(state).reconciler.registry
        registry.load()
        removed = registry.forget(key)
    if removed:
        console.print(f"[green]Forgot[/green] {key}")
    else:
        console.print(f"[dim]No record for {key}.[/dim]")


@mods_app.command(name="compat")
def compat_cmd(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Registry key (file name without extension)."),
) -> None:
    """Check a mod's declared version window against the installed Silk."""
    state = get_state(ctx)
    with reporting_errors():
        orchestrator = build_orchestrator(state)
        compatible = orchestrator.check_mod_compatibility(key)
        installed = orchestrator.installed_version()
    if compatible:
        console.print(f"[green]{key} is compatible with Silk {installed}.[/green]")
    else:
        console.print(f"[red]{key} is not compatible with Silk {installed}.[/red]")
        raise typer.Exit(code=1)
