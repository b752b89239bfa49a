"""Tests for the Pydantic models and the naming helpers beside them."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from entwine.models import (
    LOADER_SPECS,
    AppSettings,
    AppStatus,
    BootstrapState,
    InstalledModView,
    LaunchMethod,
    LoaderKind,
    ModConfigFile,
    ModDescriptor,
    ModRecord,
    SilkVersion,
    get_loader_spec,
    registry_key,
)
from entwine.models.mods import strip_suffix


class TestLoaders:
    def test_other(self):
        assert LoaderKind.SILK.other is LoaderKind.BEPINEX
        assert LoaderKind.BEPINEX.other is LoaderKind.SILK

    def test_specs(self):
        assert set(LOADER_SPECS) == {LoaderKind.SILK, LoaderKind.BEPINEX}
        assert get_loader_spec("bepinex").requires_shim is True
        assert get_loader_spec(LoaderKind.SILK).requires_shim is False

    def test_only_silk_ships_the_shim(self):
        assert "winhttp.dll" in get_loader_spec(LoaderKind.SILK).archive_prefixes
        assert "winhttp.dll" not in get_loader_spec(LoaderKind.BEPINEX).archive_prefixes

    def test_specs_are_frozen(self):
        with pytest.raises(ValidationError):
            get_loader_spec(LoaderKind.SILK).display_name = "Other"


class TestModRecord:
    def test_camel_case_round_trip(self):
        record = ModRecord.model_validate(
            {"id": "x", "name": "X", "fileName": "X.dll", "iconPath": "/i.png", "minLoaderVersion": "0.5.0"}
        )
        assert record.file_name == "X.dll"
        dumped = record.model_dump(by_alias=True, exclude_none=True)
        assert dumped["minLoaderVersion"] == "0.5.0"
        assert dumped["fileName"] == "X.dll"

    def test_legacy_silk_keys_are_upgraded(self):
        record = ModRecord.model_validate(
            {"id": "x", "name": "X", "silkVersion": "0.5.0", "maxSilkVersion": "0.6.1"}
        )
        assert record.loader_version == "0.5.0"
        assert record.max_loader_version == "0.6.1"

    def test_current_key_wins_over_legacy(self):
        record = ModRecord.model_validate(
            {"id": "x", "name": "X", "minSilkVersion": "0.1.0", "minLoaderVersion": "0.2.0"}
        )
        assert record.min_loader_version == "0.2.0"

    def test_defaults(self):
        record = ModRecord(id="x", name="X")
        assert record.version == "Unknown"
        assert record.enabled is True


class TestDescriptors:
    @pytest.mark.parametrize(
        ("file_name", "expected"),
        [("A.zip", True), ("A.SILKMOD", True), ("A.dll", False), ("zip", False)],
    )
    def test_is_archive(self, file_name: str, expected: bool):
        descriptor = ModDescriptor(id="a", name="A", version="1.0.0", file_name=file_name)
        assert descriptor.is_archive is expected

    def test_descriptor_requires_version(self):
        with pytest.raises(ValidationError):
            ModDescriptor.model_validate({"id": "a", "name": "A", "fileName": "A.dll"})

    def test_view_and_config_dump_camel_case(self):
        view = InstalledModView(id="a", name="A", file_name="A.dll", enabled=True)
        assert "fileName" in view.model_dump(by_alias=True)
        config = ModConfigFile(mod_id="A", mod_name="A")
        assert config.model_dump(by_alias=True) == {"modId": "A", "modName": "A", "config": {}}


class TestNaming:
    @pytest.mark.parametrize(
        ("file_name", "key"),
        [
            ("Foo.dll", "Foo"),
            ("Foo.dll.disabled", "Foo"),
            ("Foo.zip", "Foo"),
            ("Foo.silkmod", "Foo"),
            ("Foo.DLL", "Foo"),
            ("Foo", "Foo"),
            ("Foo.disabled", "Foo"),
            ("Foo.txt", "Foo.txt"),
        ],
    )
    def test_registry_key(self, file_name: str, key: str):
        assert registry_key(file_name) == key

    def test_strip_suffix_keeps_bare_suffix(self):
        assert strip_suffix(".dll", ".dll") == ".dll"


class TestSettingsModels:
    def test_app_settings_aliases(self):
        settings = AppSettings.model_validate({"launchMethod": "executable", "gamePath": "/g"})
        assert settings.launch_method is LaunchMethod.EXECUTABLE
        assert settings.game_path == "/g"

    def test_status_defaults(self):
        status = AppStatus()
        assert status.bootstrap_state is BootstrapState.ABSENT
        assert status.silk_installed is False

    def test_silk_version_dump(self):
        dumped = SilkVersion(version="0.6.1", download_url="https://x").model_dump(by_alias=True)
        assert dumped == {"version": "0.6.1", "downloadUrl": "https://x"}
