"""Small key/value persistence for marker files such as ``Silk/version.txt``.

The orchestrator takes a :class:`MarkerStore` as a dependency instead of
touching marker files directly, so version bookkeeping can be exercised
without a real installation root.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from entwine.core.errors import EntwineIOError
from entwine.core.fsutil import write_atomic


@runtime_checkable
class MarkerStore(Protocol):
    """Read and write short text values by relative key."""

    def read(self, key: str) -> str | None:
        """Return the stored value with surrounding whitespace trimmed, or ``None``."""
        ...

    def write(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""
        ...


class FileMarkerStore:
    """Marker values stored as plain-text files under a root directory."""

    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    def read(self, key: str) -> str | None:
        path = self._root / key
        if not path.is_file():
            return None
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise EntwineIOError(f"Failed to read {path}: {exc}") from exc

    def write(self, key: str, value: str) -> None:
        write_atomic(self._root / key, value)


class MemoryMarkerStore:
    """In-memory marker store."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        value = self._values.get(key)
        return None if value is None else value.strip()

    def write(self, key: str, value: str) -> None:
        self._values[key] = value
