"""Mod reconciler: joins the mods directory with the registry.

The filesystem decides which mods exist and whether they are enabled:

* ``Foo.dll``          : enabled single-file mod
* ``Foo.dll.disabled`` : disabled single-file mod
* ``Foo/``             : enabled directory mod
* ``Foo.disabled/``    : disabled directory mod

Files and directories share one suffix convention, so :meth:`toggle` can
re-enable a disabled directory the same way it re-enables a file.  Names
beginning with ``.`` (the registry file, staging directories, editor
droppings) are never treated as mods.
"""

from __future__ import annotations

import logging
from pathlib import Path

from entwine.bridge.archive import unpack
from entwine.core.errors import EntwineIOError, NotFoundError
from entwine.core.fsutil import remove_path, write_atomic
from entwine.core.registry import ModRegistry
from entwine.models.mods import (
    DISABLED_SUFFIX,
    LIBRARY_SUFFIX,
    UNKNOWN,
    InstalledModView,
    ModDescriptor,
    ModRecord,
    registry_key,
    strip_suffix,
)

logger = logging.getLogger(__name__)

LOCAL_DESCRIPTION = "Locally installed mod"


def _is_plain_name(name: str) -> bool:
    return bool(name) and not name.startswith(".") and "/" not in name and "\\" not in name


def _classify(path: Path) -> tuple[bool, bool] | None:
    """Return ``(is_directory, enabled)`` for a mod entry, or ``None`` to ignore it."""
    name = path.name.lower()
    if path.is_dir():
        return True, not name.endswith(DISABLED_SUFFIX)
    if name.endswith(LIBRARY_SUFFIX):
        return False, True
    if name.endswith(LIBRARY_SUFFIX + DISABLED_SUFFIX):
        return False, False
    return None


class ModReconciler:
    """Lifecycle operations on one mods directory.

    Parameters
    ----------
    mods_dir:
        The directory the loader scans for mods (``<game>/Silk/Mods``).
    registry:
        Optional pre-built registry; one is created for *mods_dir* if omitted.
    """

    def __init__(self, mods_dir: Path, registry: ModRegistry | None = None) -> None:
        self._mods_dir = Path(mods_dir)
        self.registry = registry or ModRegistry(self._mods_dir)

    @property
    def mods_dir(self) -> Path:
        return self._mods_dir

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_installed(self) -> list[InstalledModView]:
        """Scan the mods directory and join each mod with its registry record.

        The registry is re-read first so edits made by another process are
        picked up.  The result is in directory order; callers sort as needed.
        """
        if not self._mods_dir.is_dir():
            return []
        self.registry.load()

        try:
            entries = list(self._mods_dir.iterdir())
        except OSError as exc:
            raise EntwineIOError(f"Failed to read mods directory: {exc}") from exc

        views: list[InstalledModView] = []
        for path in entries:
            if path.name.startswith("."):
                continue
            shape = _classify(path)
            if shape is None:
                continue
            is_directory, enabled = shape
            views.append(self._view(path.name, is_directory=is_directory, enabled=enabled))
        return views

    def _view(self, file_name: str, *, is_directory: bool, enabled: bool) -> InstalledModView:
        key = registry_key(file_name)
        record = self.registry.get(key)
        if record is None and is_directory:
            match = self.registry.find_by_name(key)
            record = match[1] if match else None

        if record is None:
            return InstalledModView(
                id=key,
                name=key,
                file_name=file_name,
                enabled=enabled,
                version=UNKNOWN,
                author=UNKNOWN,
                description=LOCAL_DESCRIPTION,
                is_directory=is_directory,
            )
        return InstalledModView(
            id=record.id,
            name=record.name,
            file_name=file_name,
            enabled=enabled,
            version=record.version,
            author=record.author,
            description=record.description,
            icon_path=record.icon_path,
            is_directory=is_directory,
            registered=True,
        )

    # ------------------------------------------------------------------
    # Install / uninstall
    # ------------------------------------------------------------------

    def install(self, descriptor: ModDescriptor, data: bytes) -> Path:
        """Install a downloaded mod and record its metadata.

        Archives are extracted into a directory named after the mod's display
        name, merging into it if it already exists.  Anything else is written
        as a single file named ``descriptor.file_name``.

        Returns
        -------
        Path
            The installed file or directory.

        Raises
        ------
        EntwineIOError
            On filesystem failure.
        ArchiveError
            If an archive payload cannot be read.
        """
        try:
            self._mods_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise EntwineIOError(f"Failed to create mods directory: {exc}") from exc

        for name in (descriptor.file_name, descriptor.name):
            if not _is_plain_name(name):
                raise EntwineIOError(f"Refusing to install mod with unsafe name {name!r}")

        if descriptor.is_archive:
            target = self._mods_dir / descriptor.name
            count = unpack(data, target)
            logger.info("Extracted %d file(s) for %s into %s.", count, descriptor.name, target)
        else:
            target = self._mods_dir / descriptor.file_name
            write_atomic(target, data)
            logger.info("Wrote %s (%d bytes).", target, len(data))

        key = registry_key(descriptor.file_name)
        self.registry.upsert(
            key,
            ModRecord(
                id=descriptor.id,
                name=descriptor.name,
                version=descriptor.version,
                author=descriptor.author,
                description=descriptor.description,
                icon_path=descriptor.icon_path,
                file_name=descriptor.file_name,
                enabled=True,
                loader_version=descriptor.loader_version,
                min_loader_version=descriptor.min_loader_version,
                max_loader_version=descriptor.max_loader_version,
            ),
        )
        return target

    def uninstall(self, file_name: str) -> None:
        """Delete an installed mod file or directory.

        The registry record is kept so metadata survives a reinstall.

        Raises
        ------
        NotFoundError
            If *file_name* does not exist in the mods directory.
        """
        path = self._entry(file_name)
        remove_path(path)
        logger.info("Uninstalled %s.", file_name)

    # ------------------------------------------------------------------
    # Toggle
    # ------------------------------------------------------------------

    def toggle(self, file_name: str, enable: bool) -> str:
        """Enable or disable a mod by renaming it.

        Enabling strips a trailing ``.disabled``; disabling appends one.
        Renaming to the current name is a no-op.

        Returns
        -------
        str
            The mod's on-disk name after the operation.

        Raises
        ------
        NotFoundError
            If *file_name* does not exist.
        EntwineIOError
            If the new name is already taken or the rename fails.
        """
        current = self._entry(file_name)
        if enable:
            new_name = strip_suffix(file_name, DISABLED_SUFFIX)
        elif file_name.lower().endswith(DISABLED_SUFFIX):
            new_name = file_name
        else:
            new_name = f"{file_name}{DISABLED_SUFFIX}"

        if new_name == file_name:
            logger.debug("%s is already %s.", file_name, "enabled" if enable else "disabled")
            return file_name

        target = self._mods_dir / new_name
        if target.exists():
            raise EntwineIOError(
                f"Cannot {'enable' if enable else 'disable'} {file_name}: {new_name} already exists"
            )
        try:
            current.rename(target)
        except OSError as exc:
            raise EntwineIOError(f"Failed to toggle mod: {exc}") from exc
        logger.info("%s %s -> %s.", "Enabled" if enable else "Disabled", file_name, new_name)
        return new_name

    def _entry(self, file_name: str) -> Path:
        if not file_name or Path(file_name).name != file_name or file_name in (".", ".."):
            raise NotFoundError(f"Mod file not found: {file_name!r}")
        path = self._mods_dir / file_name
        if not path.exists():
            raise NotFoundError(f"Mod file not found: {file_name}")
        return path
