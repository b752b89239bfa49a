"""Runtime configuration: env-driven.

Reads from a .env file and ENTWINE_* environment variables.  Remote
locations are configurable so tests and mirrors can point elsewhere.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class EntwineConfig(BaseSettings):
    """Entwine configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export ENTWINE_GAME_PATH="$HOME/.steam/steam/steamapps/common/SpiderHeck"
        export ENTWINE_LOG_LEVEL=DEBUG

    Or via .env file::

        ENTWINE_HTTP_TIMEOUT_SECONDS=120
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="ENTWINE_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"

    # Local paths
    game_path: Path | None = None
    settings_path: Path | None = None  # defaults to the platform config dir

    # Silk releases
    silk_version_url: str = (
        "https://raw.githubusercontent.com/SilkModding/Silk/master/version"
    )
    silk_release_url_template: str = (
        "https://github.com/SilkModding/Silk/releases/download/v{version}/Silk-v{version}.zip"
    )
    fallback_silk_version: str = "0.6.1"
    known_silk_versions: list[str] = ["0.6.1", "0.6.0", "0.5.0"]

    # BepInEx release
    bepinex_version: str = "5.4.23.4"
    bepinex_download_url: str = (
        "https://github.com/BepInEx/BepInEx/releases/download/"
        "v5.4.23.4/BepInEx_win_x64_5.4.23.4.zip"
    )

    # Mod catalog
    mods_api_url: str = "https://silk.abstractmelon.net/api/mods"
    mods_base_url: str = "https://silk.abstractmelon.net"

    # Network
    http_timeout_seconds: float = 60.0

    # Game launch
    steam_app_id: int = 1329500
    game_executable: str = "SpiderHeckApp.exe"

    def silk_download_url(self, version: str) -> str:
        """Return the release archive URL for a Silk *version*."""
        return self.silk_release_url_template.format(version=version)
