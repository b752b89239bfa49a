"""Loader identities and the on-disk layout they share."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

# Files shared by both loaders, relative to the installation root.
SHIM_FILE = "winhttp.dll"
BOOTSTRAP_FILE = "doorstop_config.ini"

# Silk-owned locations, relative to the installation root.
VERSION_MARKER = "Silk/version.txt"
MODS_SUBDIR = "Silk/Mods"
MOD_CONFIGS_SUBDIR = "Silk/Config/Mods"


class LoaderKind(str, Enum):
    """The two injection frameworks Entwine knows how to manage."""

    SILK = "silk"
    BEPINEX = "bepinex"

    @property
    def other(self) -> LoaderKind:
        return LoaderKind.BEPINEX if self is LoaderKind.SILK else LoaderKind.SILK


class BootstrapState(str, Enum):
    """What the shared bootstrap configuration currently targets."""

    ABSENT = "absent"
    SILK_ONLY = "silk_only"
    BEPINEX_ONLY = "bepinex_only"
    BOTH = "both"
    FOREIGN = "foreign"


class LoaderSpec(BaseModel):
    """Static facts about one loader.

    ``archive_prefixes`` lists the archive entry prefixes that belong to the
    loader; everything else in a downloaded release is skipped on extraction.
    ``target_assembly`` is the path token written into the bootstrap
    configuration and used to recognise the loader in existing files.
    """

    model_config = ConfigDict(frozen=True)

    kind: LoaderKind
    display_name: str
    payload_dir: str
    target_assembly: str
    archive_prefixes: tuple[str, ...]
    requires_shim: bool = False


LOADER_SPECS: dict[LoaderKind, LoaderSpec] = {
    LoaderKind.SILK: LoaderSpec(
        kind=LoaderKind.SILK,
        display_name="Silk",
        payload_dir="Silk",
        target_assembly="Silk\\Silk.dll",
        archive_prefixes=("Silk/", SHIM_FILE),
    ),
    LoaderKind.BEPINEX: LoaderSpec(
        kind=LoaderKind.BEPINEX,
        display_name="BepInEx",
        payload_dir="BepInEx",
        target_assembly="BepInEx\\core\\BepInEx.Preloader.dll",
        archive_prefixes=("BepInEx/",),
        requires_shim=True,
    ),
}


def get_loader_spec(kind: LoaderKind) -> LoaderSpec:
    """Return the :class:`LoaderSpec` for *kind*."""
    return LOADER_SPECS[LoaderKind(kind)]
