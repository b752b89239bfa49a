"""Archive unpacking with staged extraction.

Archives are first extracted into a hidden staging directory inside the
destination.  Only after every selected entry has been read and written
successfully are the staged files moved into place with ``os.replace``.
A truncated or corrupt download therefore never touches live files.  The
final move is file-by-file, so an I/O failure during it can still leave a
subset of files updated; that case is reported, not masked.
"""

from __future__ import annotations

import io
import logging
import os
import shutil
import tempfile
import zipfile
import zlib
from pathlib import Path, PurePosixPath

from entwine.core.errors import ArchiveError, EntwineIOError
from entwine.core.fsutil import discard

logger = logging.getLogger(__name__)

STAGING_PREFIX = ".entwine-staging-"


def _entry_path(name: str) -> PurePosixPath | None:
    """Return a safe relative path for an archive entry, or ``None`` to skip it."""
    normalized = name.replace("\\", "/")
    path = PurePosixPath(normalized)
    if path.is_absolute() or ".." in path.parts or ":" in normalized:
        return None
    parts = [part for part in path.parts if part not in ("", ".")]
    if not parts:
        return None
    return PurePosixPath(*parts)


def _selected(name: str, prefixes: tuple[str, ...]) -> bool:
    if not prefixes:
        return True
    return name.replace("\\", "/").startswith(prefixes)


def _stage(archive: zipfile.ZipFile, staging: Path, prefixes: tuple[str, ...]) -> int:
    extracted = 0
    for info in archive.infolist():
        if not _selected(info.filename, prefixes):
            continue
        rel = _entry_path(info.filename)
        if rel is None:
            logger.warning("Skipping unsafe archive entry %r.", info.filename)
            continue
        target = staging.joinpath(*rel.parts)
        if info.is_dir():
            target.mkdir(parents=True, exist_ok=True)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        with archive.open(info) as source, target.open("wb") as sink:
            shutil.copyfileobj(source, sink)
        extracted += 1
    return extracted


def _merge(staging: Path, dest_root: Path) -> None:
    for source in sorted(staging.rglob("*")):
        target = dest_root / source.relative_to(staging)
        if source.is_dir():
            target.mkdir(parents=True, exist_ok=True)
        else:
            target.parent.mkdir(parents=True, exist_ok=True)
            os.replace(source, target)


def _drop_if_created(dest_root: Path, created: bool) -> None:
    if created and dest_root.is_dir() and not any(dest_root.iterdir()):
        discard(dest_root)


def unpack(
    data: bytes,
    dest_root: Path,
    required_prefix: str | tuple[str, ...] = "",
) -> int:
    """Extract a zip archive into *dest_root*.

    Parameters
    ----------
    data:
        The raw archive bytes.
    dest_root:
        Destination directory; created if missing.  Existing files with the
        same relative path are overwritten, other files are left alone.
        A directory created here is removed again if extraction fails.
    required_prefix:
        Only entries whose path starts with this prefix (or one of these
        prefixes) are extracted.  Empty means every entry.

    Returns
    -------
    int
        The number of files extracted.

    Raises
    ------
    ArchiveError
        If the archive cannot be read.
    EntwineIOError
        If writing into *dest_root* fails.
    """
    prefixes = (required_prefix,) if isinstance(required_prefix, str) else tuple(required_prefix)
    prefixes = tuple(p.replace("\\", "/") for p in prefixes if p)
    dest_root = Path(dest_root)

    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as exc:
        raise ArchiveError(f"Failed to read zip archive: {exc}") from exc

    created = not dest_root.exists()
    try:
        dest_root.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=dest_root))
    except OSError as exc:
        archive.close()
        raise EntwineIOError(f"Failed to prepare {dest_root}: {exc}") from exc

    try:
        try:
            with archive:
                count = _stage(archive, staging, prefixes)
            _merge(staging, dest_root)
        finally:
            discard(staging)
    except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError) as exc:
        _drop_if_created(dest_root, created)
        raise ArchiveError(f"Failed to extract archive entry: {exc}") from exc
    except OSError as exc:
        _drop_if_created(dest_root, created)
        raise EntwineIOError(f"Failed to extract into {dest_root}: {exc}") from exc

    logger.debug("Extracted %d file(s) into %s.", count, dest_root)
    return count
