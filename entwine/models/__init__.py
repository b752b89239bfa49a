"""Entwine data models: all Pydantic v2, all frozen (immutable)."""

from entwine.models.loaders import (
    BOOTSTRAP_FILE,
    LOADER_SPECS,
    MOD_CONFIGS_SUBDIR,
    MODS_SUBDIR,
    SHIM_FILE,
    VERSION_MARKER,
    BootstrapState,
    LoaderKind,
    LoaderSpec,
    get_loader_spec,
)
from entwine.models.mods import (
    InstalledModView,
    ModConfigFile,
    ModDescriptor,
    ModRecord,
    ModVersionInfo,
    registry_key,
)
from entwine.models.settings import AppSettings, AppStatus, LaunchMethod
from entwine.models.versioning import SilkVersion

__all__ = [
    # loaders
    "BOOTSTRAP_FILE",
    "LOADER_SPECS",
    "MOD_CONFIGS_SUBDIR",
    "MODS_SUBDIR",
    "SHIM_FILE",
    "VERSION_MARKER",
    "BootstrapState",
    "LoaderKind",
    "LoaderSpec",
    "get_loader_spec",
    # mods
    "InstalledModView",
    "ModConfigFile",
    "ModDescriptor",
    "ModRecord",
    "ModVersionInfo",
    "registry_key",
    # settings
    "AppSettings",
    "AppStatus",
    "LaunchMethod",
    # versioning
    "SilkVersion",
]
