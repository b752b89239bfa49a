"""Shared test fixtures for Entwine."""

from __future__ import annotations

import io
import zipfile
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from entwine.config import EntwineConfig
from entwine.core.errors import NetworkError
from entwine.core.markers import MemoryMarkerStore
from entwine.core.orchestrator import Orchestrator
from entwine.routing.dispatcher import ProgressDispatcher
from entwine.routing.sinks import BufferSink

SILK_VERSION_URL = "https://releases.test/silk/version"
SILK_RELEASE_TEMPLATE = "https://releases.test/silk/Silk-v{version}.zip"
BEPINEX_URL = "https://releases.test/bepinex/BepInEx_win_x64.zip"
MODS_API_URL = "https://mods.test/api/mods"
MODS_BASE_URL = "https://mods.test"


def build_zip(entries: dict[str, bytes | str]) -> bytes:
    """Return the bytes of a zip archive holding *entries* (name -> content)."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, content in entries.items():
            archive.writestr(name, content)
    return buffer.getvalue()


class FakeFetcher:
    """In-memory fetcher: serves registered payloads and records every request."""

    def __init__(self, responses: dict[str, bytes | str | Exception] | None = None) -> None:
        self.responses: dict[str, bytes | str | Exception] = dict(responses or {})
        self.requests: list[str] = []

    def fetch(self, url: str) -> bytes:
        self.requests.append(url)
        if url not in self.responses:
            raise NetworkError(f"Failed to download {url}: HTTP 404")
        payload = self.responses[url]
        if isinstance(payload, Exception):
            raise payload
        return payload.encode("utf-8") if isinstance(payload, str) else payload

    def fetch_text(self, url: str) -> str:
        return self.fetch(url).decode("utf-8")


@pytest.fixture
def make_zip() -> Callable[[dict[str, bytes | str]], bytes]:
    """Factory fixture: build an in-memory zip archive."""
    return build_zip


@pytest.fixture
def make_fetcher() -> Callable[..., FakeFetcher]:
    """Factory fixture: build a FakeFetcher from a url -> payload mapping."""
    return FakeFetcher


@pytest.fixture
def game_root(tmp_path: Path) -> Path:
    """Provide an empty game installation directory."""
    root = tmp_path / "SpiderHeck"
    root.mkdir()
    (root / "SpiderHeckApp.exe").write_bytes(b"MZ")
    return root


@pytest.fixture
def test_config(tmp_path: Path) -> EntwineConfig:
    """Provide a config pointing every remote location at test URLs."""
    return EntwineConfig(
        silk_version_url=SILK_VERSION_URL,
        silk_release_url_template=SILK_RELEASE_TEMPLATE,
        bepinex_download_url=BEPINEX_URL,
        mods_api_url=MODS_API_URL,
        mods_base_url=MODS_BASE_URL,
        settings_path=tmp_path / "config" / "settings.json",
    )


@pytest.fixture
def silk_zip() -> Callable[[str], bytes]:
    """Factory fixture: a Silk release archive for *version*."""

    def _factory(version: str = "0.6.1") -> bytes:
        return build_zip({
            "Silk/Silk.dll": f"silk {version}",
            "Silk/Library/Silk.Api.dll": "api",
            "winhttp.dll": "shim",
            "doorstop_config.ini": "[General]\ntarget_assembly = Silk\\Silk.dll\n",
            "README.md": "release notes",
        })

    return _factory


@pytest.fixture
def bepinex_zip() -> bytes:
    """A BepInEx release archive, including the files Entwine must skip."""
    return build_zip({
        "BepInEx/core/BepInEx.Preloader.dll": "preloader",
        "BepInEx/core/BepInEx.dll": "bepinex",
        "BepInEx/config/BepInEx.cfg": "[Logging]\n",
        "winhttp.dll": "bepinex shim",
        "doorstop_config.ini": "[UnityDoorstop]\ntargetAssembly=BepInEx\\core\\BepInEx.Preloader.dll\n",
        "changelog.txt": "notes",
    })


@pytest.fixture
def fetcher(silk_zip: Callable[[str], bytes], bepinex_zip: bytes) -> FakeFetcher:
    """A fetcher serving Silk 0.6.0 and 0.6.1, BepInEx, and latest = 0.6.1."""
    return FakeFetcher({
        SILK_VERSION_URL: "0.6.1\n",
        SILK_RELEASE_TEMPLATE.format(version="0.6.1"): silk_zip("0.6.1"),
        SILK_RELEASE_TEMPLATE.format(version="0.6.0"): silk_zip("0.6.0"),
        BEPINEX_URL: bepinex_zip,
    })


@pytest.fixture
def buffer_sink() -> BufferSink:
    """Provide a BufferSink collecting progress messages."""
    return BufferSink()


@pytest.fixture
def orchestrator(
    game_root: Path,
    fetcher: FakeFetcher,
    buffer_sink: BufferSink,
    test_config: EntwineConfig,
) -> Iterator[Orchestrator]:
    """Provide an Orchestrator wired to the fake fetcher and a buffer sink."""
    orch = Orchestrator(
        game_root,
        fetcher=fetcher,
        progress=ProgressDispatcher([buffer_sink]),
        config=test_config,
    )
    yield orch
    orch.close()


@pytest.fixture
def memory_markers() -> MemoryMarkerStore:
    """Provide an empty in-memory marker store."""
    return MemoryMarkerStore()
