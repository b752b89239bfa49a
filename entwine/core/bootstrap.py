"""Shared bootstrap configuration merger.

Both loaders are started by the same shim (``winhttp.dll``), which reads a
single line-oriented INI file, ``doorstop_config.ini``, at the installation
root.  Only one assembly can be the shim's ``target_assembly``; when both
loaders are installed BepInEx is the target (it must initialise its own
pipeline first) and Silk is referenced from a secondary marker section::

    [General]
    enabled = true
    target_assembly = BepInEx\\core\\BepInEx.Preloader.dll

    [Entwine.Secondary]
    secondary_loader_enabled = true
    secondary_target_assembly = Silk\\Silk.dll

The file is hand-editable, so decisions are driven by loader path tokens,
never by a full parse.  Lines Entwine does not own are preserved verbatim,
and a file that references neither loader is never modified.

State machine (keyed on :class:`BootstrapState`)::

    ABSENT        --ensure(L)-->          L_ONLY  (or BOTH if the other payload exists)
    SILK_ONLY     --ensure(bepinex)-->    BOTH    (BepInEx promoted to target)
    BEPINEX_ONLY  --ensure(silk)-->       BOTH    (Silk added as secondary)
    BOTH          --release(bepinex)-->   SILK_ONLY
    BOTH          --release(silk)-->      BEPINEX_ONLY
    L_ONLY        --release(L)-->         ABSENT  (file deleted)
    FOREIGN       --anything-->           FOREIGN (untouched)
"""

from __future__ import annotations

import logging
from pathlib import Path

from entwine.core.errors import EntwineIOError, PrerequisiteMissingError
from entwine.core.fsutil import remove_path, write_atomic
from entwine.models.loaders import (
    BOOTSTRAP_FILE,
    LOADER_SPECS,
    SHIM_FILE,
    BootstrapState,
    LoaderKind,
    get_loader_spec,
)

logger = logging.getLogger(__name__)

GENERAL_SECTION = "[General]"
SECONDARY_SECTION = "[Entwine.Secondary]"
TARGET_KEY = "target_assembly"
SECONDARY_ENABLED_KEY = "secondary_loader_enabled"
SECONDARY_TARGET_KEY = "secondary_target_assembly"
HEADER_COMMENT = "# Generated by Entwine. Lines outside the loader entries are preserved."

# Undecodable bytes survive a read/rewrite cycle unchanged.
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def _normalize(text: str) -> str:
    return text.replace("/", "\\").lower()


def _token(loader: LoaderKind) -> str:
    return _normalize(get_loader_spec(loader).target_assembly)


def _split_entry(line: str) -> tuple[str, str] | None:
    """Return ``(key, value)`` for a ``key = value`` line, else ``None``."""
    stripped = line.strip()
    if not stripped or stripped[0] in "#;[" or "=" not in stripped:
        return None
    key, _, value = stripped.partition("=")
    return key.strip().lower(), value.strip()


def _is_section(line: str) -> bool:
    stripped = line.strip()
    return stripped.startswith("[") and stripped.endswith("]")


class BootstrapConfig:
    """Line-preserving view of the bootstrap configuration text.

    Only the ``target_assembly`` entry and the secondary marker section are
    ever rewritten; every other line is carried through untouched.
    """

    def __init__(self, text: str) -> None:
        self._newline = "\r\n" if "\r\n" in text else "\n"
        self._lines: list[str] = text.splitlines()

    @classmethod
    def fresh(
        cls,
        target: LoaderKind,
        secondary: LoaderKind | None = None,
    ) -> BootstrapConfig:
        """Build a new configuration targeting *target*."""
        doc = cls(
            "\n".join([
                HEADER_COMMENT,
                GENERAL_SECTION,
                "enabled = true",
                f"{TARGET_KEY} = {get_loader_spec(target).target_assembly}",
            ])
        )
        if secondary is not None:
            doc.set_secondary(secondary)
        return doc

    # -- Queries ------------------------------------------------------------

    def references(self, loader: LoaderKind) -> bool:
        """Whether *loader*'s path token appears anywhere in the file."""
        token = _token(loader)
        return any(token in _normalize(line) for line in self._lines)

    @property
    def target(self) -> LoaderKind | None:
        """The loader named by ``target_assembly``, if recognised."""
        index = self._find_key(TARGET_KEY)
        if index is None:
            return None
        return self._loader_for(self._lines[index])

    @property
    def secondary(self) -> LoaderKind | None:
        """The loader referenced from the secondary marker section, if any."""
        bounds = self._secondary_bounds()
        if bounds is None:
            return None
        start, end = bounds
        for line in self._lines[start:end]:
            entry = _split_entry(line)
            if entry is not None and entry[0] == SECONDARY_TARGET_KEY:
                return self._loader_for(line)
        return None

    @property
    def state(self) -> BootstrapState:
        target, secondary = self.target, self.secondary
        if target is None:
            return BootstrapState.FOREIGN
        if secondary is not None and secondary is not target:
            return BootstrapState.BOTH
        if target is LoaderKind.SILK:
            return BootstrapState.SILK_ONLY
        return BootstrapState.BEPINEX_ONLY

    # -- Mutations ----------------------------------------------------------

    def set_target(self, loader: LoaderKind) -> None:
        """Point ``target_assembly`` at *loader*, adding the entry if missing."""
        entry = f"{TARGET_KEY} = {get_loader_spec(loader).target_assembly}"
        index = self._find_key(TARGET_KEY)
        if index is not None:
            self._lines[index] = entry
            return
        for i, line in enumerate(self._lines):
            if line.strip().lower() == GENERAL_SECTION.lower():
                self._lines.insert(i + 1, entry)
                return
        self._lines[0:0] = [GENERAL_SECTION, entry]

    def set_secondary(self, loader: LoaderKind) -> None:
        """Reference *loader* from the secondary marker section."""
        self.clear_secondary()
        while self._lines and not self._lines[-1].strip():
            self._lines.pop()
        self._lines.extend([
            "",
            SECONDARY_SECTION,
            f"{SECONDARY_ENABLED_KEY} = true",
            f"{SECONDARY_TARGET_KEY} = {get_loader_spec(loader).target_assembly}",
        ])

    def clear_secondary(self) -> None:
        """Remove the secondary marker section, if present."""
        bounds = self._secondary_bounds()
        if bounds is None:
            return
        start, end = bounds
        del self._lines[start:end]
        while start > 0 and not self._lines[start - 1].strip():
            del self._lines[start - 1]
            start -= 1
        if start < len(self._lines):
            self._lines.insert(start, "")

    def render(self) -> str:
        return self._newline.join(self._lines) + self._newline

    # -- Internals ----------------------------------------------------------

    def _find_key(self, key: str) -> int | None:
        bounds = self._secondary_bounds()
        for i, line in enumerate(self._lines):
            if bounds is not None and bounds[0] <= i < bounds[1]:
                continue
            entry = _split_entry(line)
            if entry is not None and entry[0] == key:
                return i
        return None

    def _secondary_bounds(self) -> tuple[int, int] | None:
        start = None
        for i, line in enumerate(self._lines):
            if start is None:
                if line.strip().lower() == SECONDARY_SECTION.lower():
                    start = i
            elif _is_section(line):
                return start, i
        if start is None:
            return None
        return start, len(self._lines)

    @staticmethod
    def _loader_for(line: str) -> LoaderKind | None:
        normalized = _normalize(line)
        for kind in LOADER_SPECS:
            if _token(kind) in normalized:
                return kind
        return None


# ---------------------------------------------------------------------------
# File-level operations
# ---------------------------------------------------------------------------


def bootstrap_path(root: Path) -> Path:
    return Path(root) / BOOTSTRAP_FILE


def is_payload_present(root: Path, loader: LoaderKind) -> bool:
    """Whether *loader*'s payload directory exists under *root*."""
    return (Path(root) / get_loader_spec(loader).payload_dir).is_dir()


def read_bootstrap(root: Path) -> BootstrapConfig | None:
    """Load the bootstrap configuration, or ``None`` if there is none."""
    path = bootstrap_path(root)
    if not path.exists():
        return None
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise EntwineIOError(f"Failed to read {path}: {exc}") from exc
    return BootstrapConfig(raw.decode(_ENCODING, errors=_ERRORS))


def _write(root: Path, doc: BootstrapConfig) -> None:
    write_atomic(bootstrap_path(root), doc.render().encode(_ENCODING, errors=_ERRORS))


def detect_state(root: Path) -> BootstrapState:
    """Return the :class:`BootstrapState` of the file under *root*."""
    doc = read_bootstrap(root)
    return BootstrapState.ABSENT if doc is None else doc.state


def ensure_loader_configured(loader: LoaderKind, root: Path) -> BootstrapState:
    """Make the bootstrap configuration start *loader*.

    A file that already configures *loader* as target or secondary is left
    byte-for-byte unchanged.  Mentions elsewhere, such as in comments, do
    not count.

    Raises
    ------
    PrerequisiteMissingError
        If *loader* needs the shim and ``winhttp.dll`` is not at *root*.
    EntwineIOError
        If the file cannot be read or written.
    """
    loader = LoaderKind(loader)
    root = Path(root)
    doc = read_bootstrap(root)

    if doc is not None and (doc.target is loader or doc.secondary is loader):
        logger.debug("Bootstrap config already configures %s; leaving it as is.", loader.value)
        return doc.state

    spec = get_loader_spec(loader)
    if spec.requires_shim and not (root / SHIM_FILE).is_file():
        raise PrerequisiteMissingError(
            f"{spec.display_name} requires {SHIM_FILE} from Silk at {root}. "
            "Install Silk first."
        )

    if doc is None:
        if is_payload_present(root, loader.other):
            doc = BootstrapConfig.fresh(LoaderKind.BEPINEX, secondary=LoaderKind.SILK)
        else:
            doc = BootstrapConfig.fresh(loader)
        _write(root, doc)
        logger.info("Created %s (%s).", BOOTSTRAP_FILE, doc.state.value)
        return doc.state

    if doc.target is None:
        logger.warning(
            "%s at %s does not reference a known loader; not modifying it.",
            BOOTSTRAP_FILE,
            root,
        )
        return BootstrapState.FOREIGN

    if loader is LoaderKind.BEPINEX:
        doc.set_target(LoaderKind.BEPINEX)
        doc.set_secondary(LoaderKind.SILK)
    else:
        doc.set_secondary(LoaderKind.SILK)
    _write(root, doc)
    logger.info("Merged %s into %s (%s).", loader.value, BOOTSTRAP_FILE, doc.state.value)
    return doc.state


def release_loader_configuration(loader: LoaderKind, root: Path) -> BootstrapState:
    """Drop *loader* from the bootstrap configuration after an uninstall.

    Files that do not reference *loader* are never touched.

    Raises
    ------
    EntwineIOError
        If the file cannot be read, written or removed.
    """
    loader = LoaderKind(loader)
    root = Path(root)
    doc = read_bootstrap(root)
    if doc is None:
        return BootstrapState.ABSENT
    if not doc.references(loader):
        logger.debug("Bootstrap config does not reference %s; untouched.", loader.value)
        return doc.state

    if doc.target is loader:
        other = loader.other
        if is_payload_present(root, other):
            doc.set_target(other)
            doc.clear_secondary()
            _write(root, doc)
            logger.info("Retargeted %s to %s.", BOOTSTRAP_FILE, other.value)
            return doc.state
        remove_path(bootstrap_path(root))
        logger.info("Removed %s; no loader remains.", BOOTSTRAP_FILE)
        return BootstrapState.ABSENT

    if doc.secondary is loader:
        doc.clear_secondary()
        _write(root, doc)
        logger.info("Removed %s secondary marker from %s.", loader.value, BOOTSTRAP_FILE)
        return doc.state

    logger.debug("%s is mentioned but not configured in %s; untouched.", loader.value, BOOTSTRAP_FILE)
    return doc.state
