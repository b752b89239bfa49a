"""Mod metadata models: registry records, derived views, catalog entries.

Persisted and remote payloads use camelCase keys; Python code uses
snake_case attribute names.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

UNKNOWN = "Unknown"

ARCHIVE_SUFFIXES = (".zip", ".silkmod")
LIBRARY_SUFFIX = ".dll"
DISABLED_SUFFIX = ".disabled"

# Keys written by older releases, which only knew about Silk.
_LEGACY_KEYS = {
    "silkVersion": "loaderVersion",
    "minSilkVersion": "minLoaderVersion",
    "maxSilkVersion": "maxLoaderVersion",
}


def _camel_config(**extra: Any) -> ConfigDict:
    return ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        **extra,
    )


class _CompatibilityWindow(BaseModel):
    """Mixin for models carrying optional loader version bounds."""

    loader_version: str | None = None
    min_loader_version: str | None = None
    max_loader_version: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _upgrade_legacy_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        upgraded = dict(data)
        for legacy, current in _LEGACY_KEYS.items():
            if legacy in upgraded:
                value = upgraded.pop(legacy)
                upgraded.setdefault(current, value)
        return upgraded


class ModRecord(_CompatibilityWindow):
    """Registry entry for one mod, keyed by its stripped base name."""

    model_config = _camel_config(frozen=True)

    id: str
    name: str
    version: str = UNKNOWN
    author: str = UNKNOWN
    description: str = ""
    icon_path: str = ""
    file_name: str = ""
    enabled: bool = True


class InstalledModView(BaseModel):
    """One installed artifact joined with its registry record.

    ``file_name`` is the on-disk entry name, suffix included, so it can be
    passed straight back to toggle or uninstall.
    """

    model_config = _camel_config(frozen=True)

    id: str
    name: str
    file_name: str
    enabled: bool
    version: str = UNKNOWN
    author: str = UNKNOWN
    description: str = ""
    icon_path: str = ""
    is_directory: bool = False
    registered: bool = False


class ModDescriptor(_CompatibilityWindow):
    """A mod as advertised by the remote catalog."""

    model_config = _camel_config(frozen=True)

    id: str
    name: str
    version: str
    file_name: str
    description: str = ""
    author: str = ""
    file_path: str = ""
    file_size: int = 0
    icon_path: str = ""
    upload_date: str = ""
    downloads: int = 0
    last_downloaded: str | None = None

    @property
    def is_archive(self) -> bool:
        return self.file_name.lower().endswith(ARCHIVE_SUFFIXES)


class ModConfigFile(BaseModel):
    """A mod's YAML config as stored under ``Silk/Config/Mods``."""

    model_config = _camel_config(frozen=True)

    mod_id: str
    mod_name: str
    config: dict[str, Any] = {}


class ModVersionInfo(BaseModel):
    """A mod's declared compatibility window against the loader."""

    model_config = _camel_config(frozen=True)

    mod_id: str
    version: str = UNKNOWN
    loader_version: str = UNKNOWN
    min_loader_version: str | None = None
    max_loader_version: str | None = None


def strip_suffix(name: str, suffix: str) -> str:
    """Remove one trailing *suffix* (case-insensitive) from *name*."""
    if name.lower().endswith(suffix) and len(name) > len(suffix):
        return name[: -len(suffix)]
    return name


def registry_key(file_name: str) -> str:
    """Return the registry key for an artifact or download file name.

    Strips a trailing ``.disabled`` marker, then a library or archive
    extension: ``Foo.dll.disabled`` and ``Foo.zip`` both map to ``Foo``.
    """
    base = strip_suffix(file_name, DISABLED_SUFFIX)
    for suffix in (LIBRARY_SUFFIX, *ARCHIVE_SUFFIXES):
        stripped = strip_suffix(base, suffix)
        if stripped != base:
            return stripped
    return base
