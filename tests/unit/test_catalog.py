"""Tests for the remote mod catalog client."""

from __future__ import annotations

import json
from collections.abc import Callable

import pytest

from entwine.bridge.catalog import ModCatalog
from entwine.core.errors import NetworkError, NotFoundError

MODS_API_URL = "https://mods.test/api/mods"
MODS_BASE_URL = "https://mods.test"

CATALOG = [
    {
        "id": "cool-mod",
        "name": "Cool Mod",
        "description": "Makes things cool",
        "version": "1.2.0",
        "author": "spider",
        "fileName": "CoolMod.dll",
        "filePath": "/uploads/CoolMod.dll",
        "fileSize": 2048,
        "iconPath": "/icons/cool.png",
        "uploadDate": "2025-01-01T00:00:00Z",
        "downloads": 1234,
        "lastDownloaded": None,
        "minSilkVersion": "0.5.0",
    },
    {
        "id": "pack",
        "name": "Pack",
        "version": "0.1.0",
        "fileName": "Pack.zip",
        "filePath": "https://cdn.test/Pack.zip",
        "iconPath": "https://cdn.test/pack.png",
        "extraField": "ignored",
    },
    {"name": "missing id and version"},
]


@pytest.fixture
def make_catalog(make_fetcher) -> Callable[[dict], ModCatalog]:
    """Factory fixture: a catalog served by an in-memory fetcher."""

    def _factory(responses: dict[str, bytes | str | Exception]) -> ModCatalog:
        return ModCatalog(make_fetcher(responses), MODS_API_URL, MODS_BASE_URL + "/")

    return _factory


class TestModCatalog:
    def test_fetch_mods_validates_and_resolves_icons(self, make_catalog):
        mods = make_catalog({MODS_API_URL: json.dumps(CATALOG)}).fetch_mods()
        assert [m.id for m in mods] == ["cool-mod", "pack"]
        assert mods[0].icon_path == f"{MODS_BASE_URL}/icons/cool.png"
        assert mods[0].file_size == 2048
        assert mods[0].min_loader_version == "0.5.0"
        assert mods[1].icon_path == "https://cdn.test/pack.png"
        assert mods[1].is_archive is True

    def test_find(self, make_catalog):
        catalog = make_catalog({MODS_API_URL: json.dumps(CATALOG)})
        assert catalog.find("pack").name == "Pack"

    def test_find_missing(self, make_catalog):
        catalog = make_catalog({MODS_API_URL: json.dumps(CATALOG)})
        with pytest.raises(NotFoundError):
            catalog.find("ghost")

    def test_download_resolves_relative_path(self, make_catalog):
        catalog = make_catalog({
            MODS_API_URL: json.dumps(CATALOG),
            f"{MODS_BASE_URL}/uploads/CoolMod.dll": b"dll bytes",
        })
        assert catalog.download(catalog.find("cool-mod")) == b"dll bytes"

    def test_download_absolute_path(self, make_catalog):
        catalog = make_catalog({MODS_API_URL: json.dumps(CATALOG), "https://cdn.test/Pack.zip": b"zip"})
        assert catalog.download(catalog.find("pack")) == b"zip"

    def test_invalid_json(self, make_catalog):
        with pytest.raises(NetworkError, match="Failed to parse mods"):
            make_catalog({MODS_API_URL: "<html>oops</html>"}).fetch_mods()

    def test_non_array_payload(self, make_catalog):
        with pytest.raises(NetworkError):
            make_catalog({MODS_API_URL: json.dumps({"mods": []})}).fetch_mods()

    def test_network_failure_propagates(self, make_catalog):
        with pytest.raises(NetworkError):
            make_catalog({}).fetch_mods()
