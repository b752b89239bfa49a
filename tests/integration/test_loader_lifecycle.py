"""End-to-end integration tests: both loaders and mods sharing one game directory.

These tests exercise the Orchestrator, the bootstrap merger, the archive
unpacker, the marker store, ModCatalog and ModReconciler working together
against a temp game directory.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from entwine.bridge.catalog import ModCatalog
from entwine.core.bootstrap import BootstrapConfig, bootstrap_path, detect_state
from entwine.core.errors import PrerequisiteMissingError
from entwine.core.orchestrator import Orchestrator
from entwine.models.loaders import BootstrapState, LoaderKind


def _bootstrap(game_root: Path) -> BootstrapConfig:
    return BootstrapConfig(bootstrap_path(game_root).read_text(encoding="utf-8"))


class TestLoaderLifecycle:
    """Silk and BepInEx installed, stacked and removed in sequence."""

    def test_full_sequence(self, orchestrator: Orchestrator, game_root: Path, fetcher):
        # BepInEx without Silk's shim is refused up front.
        with pytest.raises(PrerequisiteMissingError):
            orchestrator.install_loader(LoaderKind.BEPINEX)
        assert fetcher.requests == []

        # Silk alone.
        assert orchestrator.install_loader(LoaderKind.SILK) is BootstrapState.SILK_ONLY
        silk_only_text = bootstrap_path(game_root).read_text(encoding="utf-8")
        assert _bootstrap(game_root).target is LoaderKind.SILK

        # BepInEx on top: BepInEx becomes the target, Silk the secondary.
        assert orchestrator.install_loader(LoaderKind.BEPINEX) is BootstrapState.BOTH
        doc = _bootstrap(game_root)
        assert doc.target is LoaderKind.BEPINEX
        assert doc.secondary is LoaderKind.SILK

        # Removing BepInEx restores the Silk-only file and keeps the shim.
        assert orchestrator.uninstall_loader(LoaderKind.BEPINEX) is BootstrapState.SILK_ONLY
        assert bootstrap_path(game_root).read_text(encoding="utf-8") == silk_only_text
        assert (game_root / "winhttp.dll").read_text() == "shim"
        assert orchestrator.installed_version() == "0.6.1"

        # Removing Silk leaves a clean directory.
        assert orchestrator.uninstall_loader(LoaderKind.SILK) is BootstrapState.ABSENT
        assert sorted(p.name for p in game_root.iterdir()) == ["SpiderHeckApp.exe"]

    def test_silk_reinstall_while_both_present(self, orchestrator: Orchestrator, game_root: Path):
        orchestrator.install_loader(LoaderKind.SILK, "0.6.0")
        orchestrator.install_loader(LoaderKind.BEPINEX)
        before = bootstrap_path(game_root).read_bytes()

        assert orchestrator.install_version("0.6.1") is BootstrapState.BOTH
        assert bootstrap_path(game_root).read_bytes() == before
        assert orchestrator.installed_version() == "0.6.1"

    def test_user_lines_survive_the_whole_cycle(self, orchestrator: Orchestrator, game_root: Path):
        orchestrator.install_loader(LoaderKind.SILK)
        path = bootstrap_path(game_root)
        path.write_text(
            path.read_text(encoding="utf-8") + "\n[UnityMono]\ndebug_enabled = true\n",
            encoding="utf-8",
        )

        orchestrator.install_loader(LoaderKind.BEPINEX)
        orchestrator.uninstall_loader(LoaderKind.BEPINEX)

        text = path.read_text(encoding="utf-8")
        assert "[UnityMono]" in text
        assert "debug_enabled = true" in text
        assert detect_state(game_root) is BootstrapState.SILK_ONLY

    def test_background_worker_runs_the_sequence(self, orchestrator: Orchestrator):
        futures = [
            orchestrator.submit(orchestrator.install_loader, LoaderKind.SILK),
            orchestrator.submit(orchestrator.install_loader, LoaderKind.BEPINEX),
        ]
        assert [f.result(timeout=30) for f in futures] == [BootstrapState.SILK_ONLY, BootstrapState.BOTH]


class TestModsOnInstalledSilk:
    """Catalog download, install and compatibility against the installed Silk."""

    @pytest.fixture
    def catalog(self, fetcher, make_zip, test_config) -> ModCatalog:
        fetcher.responses[test_config.mods_api_url] = json.dumps([
            {"id": "web", "name": "Web Shooter", "version": "1.0.0", "fileName": "WebShooter.dll",
             "filePath": "/files/WebShooter.dll", "minSilkVersion": "0.6.1"},
            {"id": "hats", "name": "Hats", "version": "2.0.0", "fileName": "Hats.zip",
             "filePath": "/files/Hats.zip", "maxSilkVersion": "0.6.0"},
        ])
        fetcher.responses["https://mods.test/files/WebShooter.dll"] = b"MZ web"
        fetcher.responses["https://mods.test/files/Hats.zip"] = make_zip({
            "Hats.dll": "hats",
            "assets/hat.png": "png",
        })
        return ModCatalog(fetcher, test_config.mods_api_url, test_config.mods_base_url)

    def test_install_list_and_check(self, orchestrator: Orchestrator, catalog: ModCatalog, game_root: Path):
        orchestrator.install_loader(LoaderKind.SILK, "0.6.1")
        for mod_id in ("web", "hats"):
            descriptor = catalog.find(mod_id)
            orchestrator.reconciler.install(descriptor, catalog.download(descriptor))

        views = {v.file_name: v for v in orchestrator.reconciler.list_installed()}
        assert views["WebShooter.dll"].name == "Web Shooter"
        assert views["Hats"].is_directory is True
        assert views["Hats"].version == "2.0.0"
        assert (game_root / "Silk" / "Mods" / "Hats" / "assets" / "hat.png").exists()

        assert orchestrator.check_mod_compatibility("WebShooter") is True
        assert orchestrator.check_mod_compatibility("Hats") is False

    def test_mods_survive_silk_version_switch(self, orchestrator: Orchestrator, catalog: ModCatalog):
        orchestrator.install_loader(LoaderKind.SILK, "0.6.1")
        descriptor = catalog.find("web")
        orchestrator.reconciler.install(descriptor, catalog.download(descriptor))

        orchestrator.install_version("0.6.0")

        assert [v.file_name for v in orchestrator.reconciler.list_installed()] == ["WebShooter.dll"]
        assert orchestrator.check_mod_compatibility("WebShooter") is False
