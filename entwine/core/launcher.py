"""Game path validation and launch."""

from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path

from entwine.config import EntwineConfig
from entwine.core.errors import EntwineIOError, NotFoundError
from entwine.models.settings import LaunchMethod

logger = logging.getLogger(__name__)

GAME_EXECUTABLES = ("SpiderHeckApp.exe", "SpiderHeck.exe", "SpiderHeck.x86_64", "SpiderHeck")


def validate_game_path(path: Path | str) -> Path:
    """Check that *path* looks like a SpiderHeck installation.

    Raises
    ------
    NotFoundError
        If the path does not exist or holds no SpiderHeck executable.
    """
    game_path = Path(path)
    if not game_path.exists():
        raise NotFoundError(f"Path does not exist: {game_path}")
    if not any((game_path / name).exists() for name in GAME_EXECUTABLES):
        raise NotFoundError(f"This doesn't appear to be a SpiderHeck installation: {game_path}")
    return game_path


# ---------------------------------------------------------------------------
# Launch
# ---------------------------------------------------------------------------


def _opener_command(target: str, platform: str) -> list[str]:
    if platform.startswith("win"):
        return ["cmd", "/C", "start", "", target]
    if platform == "darwin":
        return ["open", target]
    return ["xdg-open", target]


def launch_game(
    game_path: Path | str | None,
    method: LaunchMethod = LaunchMethod.STEAM,
    *,
    settings: EntwineConfig | None = None,
    platform: str | None = None,
) -> list[str]:
    """Start the game and return the command that was spawned.

    Steam launches go through the platform URL opener.  Executable launches
    run the game binary with the game directory as working directory.

    Raises
    ------
    NotFoundError
        If an executable launch is requested and the binary is missing.
    EntwineIOError
        If the process cannot be spawned.
    """
    settings = settings or EntwineConfig()
    platform = platform or sys.platform
    method = LaunchMethod(method)

    cwd: Path | None = None
    if method is LaunchMethod.STEAM:
        command = _opener_command(f"steam://rungameid/{settings.steam_app_id}", platform)
    else:
        if game_path is None:
            raise NotFoundError("Game path is not set")
        cwd = Path(game_path)
        exe_path = cwd / settings.game_executable
        if not exe_path.exists():
            raise NotFoundError(f"Game executable not found at: {exe_path}")
        command = ["open", str(exe_path)] if platform == "darwin" else [str(exe_path)]

    logger.info("Launching game: %s", " ".join(command))
    try:
        subprocess.Popen(command, cwd=cwd)  # noqa: S603
    except OSError as exc:
        raise EntwineIOError(f"Failed to launch game: {exc}") from exc
    return command
