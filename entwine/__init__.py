"""Entwine: mod manager for SpiderHeck.

Installs and removes the Silk and BepInEx mod loaders side by side,
merges their shared bootstrap configuration, tracks the installed Silk
version, and manages mods in ``Silk/Mods`` with a metadata registry.
"""

__version__ = "0.1.0"
__description__ = "Mod manager for SpiderHeck: Silk and BepInEx loaders, mods and configs"

from entwine.core.orchestrator import Orchestrator
from entwine.cli.app import app as cli

__all__ = ["Orchestrator", "cli", "__version__"]
