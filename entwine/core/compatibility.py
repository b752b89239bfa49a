"""Loader/mod compatibility gating.

A mod declares an inclusive window of loader versions it works with.  The
window is read from the locally persisted registry, so checks work offline.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from entwine.core.errors import NotFoundError
from entwine.core.semver import parse_version
from entwine.models.mods import UNKNOWN, ModVersionInfo

if TYPE_CHECKING:
    from entwine.core.registry import ModRegistry


def is_compatible(installed_version: str, info: ModVersionInfo) -> bool:
    """Return whether a loader at *installed_version* satisfies *info*.

    Absent bounds impose no constraint on their side.

    Raises
    ------
    InvalidVersionError
        If *installed_version* or a declared bound does not parse.

    Examples
    --------
    >>> is_compatible("1.0.0", ModVersionInfo(mod_id="m", min_loader_version="0.5.0"))
    True
    >>> is_compatible("2.0.0", ModVersionInfo(mod_id="m", max_loader_version="1.5.0"))
    False
    """
    installed = parse_version(installed_version)
    lower = parse_version(info.min_loader_version) if info.min_loader_version is not None else None
    upper = parse_version(info.max_loader_version) if info.max_loader_version is not None else None

    if lower is not None and installed < lower:
        return False
    if upper is not None and installed > upper:
        return False
    return True


def get_mod_version_info(mod_key: str, registry: ModRegistry) -> ModVersionInfo:
    """Build a :class:`ModVersionInfo` from the registry record for *mod_key*.

    Raises
    ------
    NotFoundError
        If the registry has no record under *mod_key*.
    """
    record = registry.get(mod_key)
    if record is None:
        raise NotFoundError(f"Mod {mod_key} not found in metadata")
    return ModVersionInfo(
        mod_id=record.id,
        version=record.version,
        loader_version=record.loader_version or UNKNOWN,
        min_loader_version=record.min_loader_version,
        max_loader_version=record.max_loader_version,
    )
