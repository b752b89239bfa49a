"""Mod registry: persisted descriptive metadata for installed mods.

The registry is a JSON object stored inside each mods directory at
``.entwine_metadata.json``, mapping a mod's stripped base name (see
:func:`entwine.models.mods.registry_key`) to its :class:`ModRecord`.

It is a cache over the filesystem: the mods directory decides which mods
exist and whether they are enabled, the registry only supplies names,
versions, authors and compatibility bounds.  A corrupt or missing file
therefore degrades to an empty registry instead of failing the caller.
Records are never dropped because a file disappeared; only :meth:`forget`
removes them.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from entwine.core.fsutil import write_atomic
from entwine.models.mods import ModRecord

logger = logging.getLogger(__name__)

METADATA_FILE = ".entwine_metadata.json"


class ModRegistry:
    """Lookup and upsert of :class:`ModRecord` entries for one mods directory.

    Parameters
    ----------
    mods_dir:
        The mods directory.  The metadata file lives inside it and is
        created on the first :meth:`persist`.

    Examples
    --------
    >>> from pathlib import Path
    >>> registry = ModRegistry(Path("/tmp/entwine-mods"))
    >>> registry.get("missing") is None
    True
    """

    def __init__(self, mods_dir: Path) -> None:
        self._mods_dir = Path(mods_dir)
        self._records: dict[str, ModRecord] = {}
        self.load()

    @property
    def path(self) -> Path:
        return self._mods_dir / METADATA_FILE

    # -- Lookup -------------------------------------------------------------

    def get(self, key: str) -> ModRecord | None:
        """Return the record stored under *key*, or ``None``."""
        return self._records.get(key)

    def find_by_name(self, name: str) -> tuple[str, ModRecord] | None:
        """Return ``(key, record)`` for the first record whose display name is *name*."""
        for key, record in sorted(self._records.items()):
            if record.name == name:
                return key, record
        return None

    def records(self) -> dict[str, ModRecord]:
        """Return a copy of the full key -> record mapping."""
        return dict(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __len__(self) -> int:
        return len(self._records)

    # -- Mutation -----------------------------------------------------------

    def upsert(self, key: str, record: ModRecord) -> None:
        """Insert or replace the record under *key* and persist."""
        replaced = key in self._records
        self._records[key] = record
        self.persist()
        logger.info(
            "%s registry record %s (%s v%s).",
            "Updated" if replaced else "Added",
            key,
            record.name,
            record.version,
        )

    def forget(self, key: str) -> bool:
        """Remove the record under *key*.

        Returns
        -------
        bool
            ``True`` if a record was removed, ``False`` if none existed.
        """
        if key not in self._records:
            logger.warning("Cannot forget '%s': not found in registry.", key)
            return False
        del self._records[key]
        self.persist()
        logger.info("Forgot registry record '%s'.", key)
        return True

    # -- Persistence --------------------------------------------------------

    def persist(self) -> None:
        """Write the registry to its JSON file.

        Raises
        ------
        EntwineIOError
            If the file cannot be written.
        """
        data = {
            key: record.model_dump(mode="json", by_alias=True, exclude_none=True)
            for key, record in self._records.items()
        }
        write_atomic(self.path, json.dumps(data, indent=2, sort_keys=True) + "\n")
        logger.debug("Persisted mod registry to %s.", self.path)

    def load(self) -> None:
        """Load the registry from disk, replacing in-memory records.

        Unreadable or malformed files (and individual malformed entries) are
        logged and skipped.
        """
        self._records = {}
        if not self.path.exists():
            logger.debug("No registry file at %s: starting empty.", self.path)
            return
        try:
            raw: Any = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable mod registry %s: %s", self.path, exc)
            return
        if not isinstance(raw, dict):
            logger.warning("Ignoring mod registry %s: top level is not an object.", self.path)
            return
        for key, entry in raw.items():
            try:
                self._records[key] = ModRecord.model_validate(entry)
            except ValidationError as exc:
                logger.warning("Skipping malformed registry entry %r: %s", key, exc)
        logger.debug("Loaded %d record(s) from %s.", len(self._records), self.path)
