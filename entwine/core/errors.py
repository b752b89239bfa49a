"""Error kinds raised by the Entwine core.

Every error carries a human-readable cause string.  Low-level causes
(``OSError``, ``httpx.HTTPError``, ``zipfile.BadZipFile``) are chained with
``raise ... from exc`` so the original traceback is preserved for logging.
"""

from __future__ import annotations


class EntwineError(RuntimeError):
    """Base class for every failure an Entwine operation can report."""


class InvalidVersionError(EntwineError, ValueError):
    """Raised when a version string is not a bare ``MAJOR.MINOR.PATCH`` triple."""


class PrerequisiteMissingError(EntwineError):
    """Raised when a loader is installed without its required co-dependency."""


class NotFoundError(EntwineError, LookupError):
    """Raised when the target of an operation does not exist."""


class EntwineIOError(EntwineError):
    """Raised when a filesystem operation fails."""


class NetworkError(EntwineError):
    """Raised by the fetch collaborator when a download fails."""


class ArchiveError(EntwineError):
    """Raised when a downloaded archive cannot be read or extracted."""


class ConfigFormatError(EntwineError):
    """Raised when a per-mod YAML config cannot be parsed or updated."""


class SettingsError(EntwineError):
    """Raised when the application settings file cannot be read or written."""
