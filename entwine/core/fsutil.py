"""Small filesystem helpers shared by the core modules."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from entwine.core.errors import EntwineIOError

logger = logging.getLogger(__name__)


def write_atomic(path: Path, data: bytes | str, *, encoding: str = "utf-8") -> None:
    """Write *data* to *path* through a sibling temp file and ``os.replace``.

    Readers never observe a half-written file.  Parent directories are
    created as needed.

    Raises
    ------
    EntwineIOError
        If any step fails.  The temp file is removed on a best-effort basis.
    """
    payload = data.encode(encoding) if isinstance(data, str) else data
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as exc:
        raise EntwineIOError(f"Failed to write {path}: {exc}") from exc

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
        os.replace(tmp_path, path)
    except OSError as exc:
        discard(tmp_path)
        raise EntwineIOError(f"Failed to write {path}: {exc}") from exc


def remove_path(path: Path) -> None:
    """Remove a file or a whole directory tree.

    Raises
    ------
    EntwineIOError
        If the removal fails.
    """
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as exc:
        raise EntwineIOError(f"Failed to remove {path}: {exc}") from exc


def discard(path: Path) -> None:
    """Best-effort removal for temp files and staging directories."""
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists():
            path.unlink()
    except OSError as exc:
        logger.warning("Could not clean up %s: %s", path, exc)
