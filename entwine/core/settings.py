"""Persisted user settings.

Settings live in ``settings.json`` under the platform config directory
(``platformdirs.user_config_dir("entwine")``) unless ``ENTWINE_SETTINGS_PATH``
points elsewhere.  A missing file yields defaults; a corrupt file is an
error rather than a silent reset.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir
from pydantic import ValidationError

from entwine.core.errors import EntwineIOError, SettingsError
from entwine.core.fsutil import write_atomic
from entwine.models.settings import AppSettings

logger = logging.getLogger(__name__)

APP_NAME = "entwine"
SETTINGS_FILE = "settings.json"


def default_settings_path() -> Path:
    return Path(user_config_dir(APP_NAME, appauthor=False)) / SETTINGS_FILE


class SettingsStore:
    """Loads and saves :class:`AppSettings` as camelCase JSON."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = Path(path) if path is not None else default_settings_path()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> AppSettings:
        """Return the stored settings, or defaults if none were saved.

        Raises
        ------
        SettingsError
            If the file exists but cannot be read or parsed.
        """
        if not self._path.exists():
            return AppSettings()
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise SettingsError(f"Failed to read settings file: {exc}") from exc
        except ValueError as exc:
            raise SettingsError(f"Failed to parse settings JSON: {exc}") from exc
        try:
            return AppSettings.model_validate(raw)
        except ValidationError as exc:
            raise SettingsError(f"Invalid settings in {self._path}: {exc}") from exc

    def save(self, settings: AppSettings) -> None:
        """Write *settings*, creating the config directory if needed."""
        payload = json.dumps(settings.model_dump(mode="json", by_alias=True), indent=2)
        try:
            write_atomic(self._path, payload)
        except EntwineIOError as exc:
            raise SettingsError(f"Failed to write settings file: {exc}") from exc
        logger.debug("Saved settings to %s", self._path)

    def update(self, **changes: object) -> AppSettings:
        """Apply *changes* to the stored settings and save the result."""
        current = self.load()
        try:
            updated = AppSettings.model_validate({**current.model_dump(), **changes})
        except ValidationError as exc:
            raise SettingsError(f"Invalid settings: {exc}") from exc
        self.save(updated)
        return updated
