"""Loader orchestrator: the central coordinator for an installation root.

The Orchestrator wires together the fetch and unpack collaborators, the
bootstrap configuration merger, the version marker store and the mod
reconciler.  It decides what to download, sequences loader installs and
uninstalls against the shared bootstrap file, and reports progress through
a best-effort dispatcher.

Operations are meant to run one at a time.  :meth:`Orchestrator.submit`
runs them on a single background worker, which keeps long downloads off
the caller's thread and serialises operations issued through the same
Orchestrator.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, TypeVar

from entwine.bridge.archive import unpack
from entwine.bridge.fetch import Fetcher, HttpFetcher
from entwine.config import EntwineConfig
from entwine.core.bootstrap import (
    detect_state,
    ensure_loader_configured,
    is_payload_present,
    release_loader_configuration,
)
from entwine.core.compatibility import get_mod_version_info, is_compatible
from entwine.core.errors import (
    EntwineIOError,
    InvalidVersionError,
    NetworkError,
    NotFoundError,
    PrerequisiteMissingError,
)
from entwine.core.fsutil import remove_path
from entwine.core.markers import FileMarkerStore, MarkerStore
from entwine.core.reconciler import ModReconciler
from entwine.core.semver import is_newer, parse_version
from entwine.models.loaders import (
    MODS_SUBDIR,
    SHIM_FILE,
    VERSION_MARKER,
    BootstrapState,
    LoaderKind,
    get_loader_spec,
)
from entwine.models.settings import AppStatus
from entwine.models.versioning import SilkVersion
from entwine.routing.dispatcher import ProgressDispatcher

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Orchestrator:
    """Install, update and remove loaders under one game directory.

    Parameters
    ----------
    game_path:
        The game's installation root.
    fetcher:
        Download collaborator.  Defaults to an :class:`HttpFetcher`.
    markers:
        Marker store for the installed Silk version.  Defaults to files
        under *game_path*.
    progress:
        Progress dispatcher.  Defaults to one with no sinks.
    config:
        Remote locations and fallbacks.  Defaults to a fresh
        :class:`EntwineConfig`.
    """

    def __init__(
        self,
        game_path: Path,
        *,
        fetcher: Fetcher | None = None,
        markers: MarkerStore | None = None,
        progress: ProgressDispatcher | None = None,
        config: EntwineConfig | None = None,
    ) -> None:
        self.config = config or EntwineConfig()
        self.game_path = Path(game_path)
        self.fetcher = fetcher or HttpFetcher(self.config.http_timeout_seconds)
        self.markers = markers or FileMarkerStore(self.game_path)
        self.progress = progress or ProgressDispatcher()
        self._reconciler: ModReconciler | None = None
        self._executor: ThreadPoolExecutor | None = None
        self._executor_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Layout and status
    # ------------------------------------------------------------------

    @property
    def mods_path(self) -> Path:
        return self.game_path / MODS_SUBDIR

    @property
    def reconciler(self) -> ModReconciler:
        """The :class:`ModReconciler` for this game's mods directory."""
        if self._reconciler is None:
            self._reconciler = ModReconciler(self.mods_path)
        return self._reconciler

    def is_loader_installed(self, kind: LoaderKind) -> bool:
        """Whether *kind* looks installed.

        Silk counts as installed if either its directory or the shim is
        present; BepInEx needs both its directory and the shim.
        """
        kind = LoaderKind(kind)
        shim = (self.game_path / SHIM_FILE).exists()
        payload = is_payload_present(self.game_path, kind)
        if kind is LoaderKind.SILK:
            return payload or shim
        return payload and shim

    def installed_version(self) -> str | None:
        """Return the installed Silk version from the version marker, if any."""
        return self.markers.read(VERSION_MARKER)

    def status(self) -> AppStatus:
        """Summarise what is installed under the game directory."""
        if not self.game_path.is_dir():
            return AppStatus(game_path=str(self.game_path))
        return AppStatus(
            game_path=str(self.game_path),
            mods_path=str(self.mods_path),
            silk_installed=self.is_loader_installed(LoaderKind.SILK),
            bepinex_installed=self.is_loader_installed(LoaderKind.BEPINEX),
            installed_version=self.installed_version(),
            bootstrap_state=detect_state(self.game_path),
        )

    # ------------------------------------------------------------------
    # Versions
    # ------------------------------------------------------------------

    def latest_version(self) -> str:
        """Fetch the latest published Silk version.

        Raises
        ------
        NetworkError
            If the version file cannot be downloaded.
        InvalidVersionError
            If the published version does not parse.
        """
        version = self.fetcher.fetch_text(self.config.silk_version_url).strip()
        parse_version(version)
        return version

    def list_available_versions(self) -> list[str]:
        """Return the known Silk releases that can be swapped to."""
        return list(self.config.known_silk_versions)

    def check_for_update(self) -> SilkVersion | None:
        """Return the latest release if it is strictly newer than the installed one.

        Raises
        ------
        NotFoundError
            If no installed version marker exists.
        InvalidVersionError
            If either version does not parse.
        NetworkError
            If the latest version cannot be fetched.
        """
        current = self.installed_version()
        if not current:
            raise NotFoundError("Silk version file not found")
        latest = self.latest_version()
        if is_newer(latest, current):
            logger.info("Silk update available: %s -> %s", current, latest)
            return SilkVersion(version=latest, download_url=self.config.silk_download_url(latest))
        logger.info("Silk %s is up to date (latest %s).", current, latest)
        return None

    def resolve_install_version(self) -> str:
        """Pick the version for a fresh install, falling back when discovery fails."""
        try:
            return self.latest_version()
        except (NetworkError, InvalidVersionError) as exc:
            fallback = self.config.fallback_silk_version
            logger.warning("Could not discover latest Silk version (%s); using %s.", exc, fallback)
            return fallback

    # ------------------------------------------------------------------
    # Loader lifecycle
    # ------------------------------------------------------------------

    def install_version(self, version: str) -> BootstrapState:
        """Download and install a specific Silk *version*.

        Reinstalling the installed version overwrites its files and the
        version marker; an existing bootstrap configuration is preserved.
        """
        parse_version(version)
        self._require_game_dir()
        spec = get_loader_spec(LoaderKind.SILK)

        self.progress.notify(f"Downloading Silk v{version}...")
        data = self.fetcher.fetch(self.config.silk_download_url(version))

        self.progress.notify("Extracting Silk...")
        unpack(data, self.game_path, spec.archive_prefixes)
        self.markers.write(VERSION_MARKER, version)
        try:
            self.mods_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise EntwineIOError(f"Failed to create Mods directory: {exc}") from exc

        state = ensure_loader_configured(LoaderKind.SILK, self.game_path)
        self.progress.notify(f"Silk v{version} installed successfully!")
        return state

    def install_loader(self, kind: LoaderKind, version: str | None = None) -> BootstrapState:
        """Install a loader and wire it into the bootstrap configuration.

        Payload files are extracted before the configuration is touched, so
        prerequisite checks see the real state of the directory.

        Raises
        ------
        PrerequisiteMissingError
            If BepInEx is requested before Silk's shim is present.
        """
        kind = LoaderKind(kind)
        if kind is LoaderKind.SILK:
            return self.install_version(version or self.resolve_install_version())

        self._require_game_dir()
        spec = get_loader_spec(kind)
        if spec.requires_shim and not (self.game_path / SHIM_FILE).is_file():
            raise PrerequisiteMissingError(
                f"{spec.display_name} requires {SHIM_FILE} from Silk. Install Silk first."
            )

        self.progress.notify(f"Downloading {spec.display_name}...")
        data = self.fetcher.fetch(self.config.bepinex_download_url)

        self.progress.notify(f"Extracting {spec.display_name}...")
        unpack(data, self.game_path, spec.archive_prefixes)

        state = ensure_loader_configured(kind, self.game_path)
        self.progress.notify(f"{spec.display_name} installed successfully!")
        return state

    def uninstall_loader(self, kind: LoaderKind) -> BootstrapState:
        """Remove a loader's payload and release its bootstrap configuration.

        The shared shim is only removed when the other loader's payload is
        gone as well.

        Raises
        ------
        NotFoundError
            If neither the payload directory nor the shim exists.
        """
        kind = LoaderKind(kind)
        self._require_game_dir()
        spec = get_loader_spec(kind)
        payload = self.game_path / spec.payload_dir
        shim = self.game_path / SHIM_FILE

        if not payload.exists() and not shim.exists():
            raise NotFoundError(f"{spec.display_name} is not installed")

        self.progress.notify(f"Uninstalling {spec.display_name}...")
        if payload.exists():
            remove_path(payload)
        if shim.exists() and not is_payload_present(self.game_path, kind.other):
            remove_path(shim)

        state = release_loader_configuration(kind, self.game_path)
        self.progress.notify(f"{spec.display_name} uninstalled successfully!")
        return state

    # ------------------------------------------------------------------
    # Mods
    # ------------------------------------------------------------------

    def check_mod_compatibility(self, mod_key: str) -> bool:
        """Check a registered mod against the installed Silk version.

        Raises
        ------
        NotFoundError
            If Silk's version marker or the mod's registry record is missing.
        """
        installed = self.installed_version()
        if not installed:
            raise NotFoundError("Silk version file not found")
        self.reconciler.registry.load()
        info = get_mod_version_info(mod_key, self.reconciler.registry)
        return is_compatible(installed, info)

    # ------------------------------------------------------------------
    # Background execution
    # ------------------------------------------------------------------

    def submit(self, fn: Callable[..., T], /, *args: Any, **kwargs: Any) -> Future[T]:
        """Run ``fn(*args, **kwargs)`` on the background worker.

        Example: ``orchestrator.submit(orchestrator.install_loader, LoaderKind.SILK)``.
        Errors are delivered through the returned future.
        """
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="entwine-op")
            return self._executor.submit(fn, *args, **kwargs)

    def close(self) -> None:
        """Wait for queued operations and stop the background worker."""
        with self._executor_lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    def __enter__(self) -> Orchestrator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_game_dir(self) -> None:
        if not self.game_path.is_dir():
            raise NotFoundError(f"Game path does not exist: {self.game_path}")
