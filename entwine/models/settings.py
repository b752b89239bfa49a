"""Application settings and status models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from entwine.models.loaders import BootstrapState


class LaunchMethod(str, Enum):
    """How the game is started."""

    STEAM = "steam"
    EXECUTABLE = "executable"


class AppSettings(BaseModel):
    """User settings persisted between sessions."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    launch_method: LaunchMethod = LaunchMethod.STEAM
    game_path: str | None = None


class AppStatus(BaseModel):
    """Snapshot of what is installed under a game directory."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    game_path: str | None = None
    mods_path: str | None = None
    silk_installed: bool = False
    bepinex_installed: bool = False
    installed_version: str | None = None
    bootstrap_state: BootstrapState = BootstrapState.ABSENT
