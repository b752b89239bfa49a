"""Entwine CLI: Typer-based command-line interface.

Provides the ``entwine`` command with subcommands for installing and
removing loaders, switching Silk versions, managing mods and their
configs, and launching the game.

All output uses Rich for formatted terminal display.
"""
