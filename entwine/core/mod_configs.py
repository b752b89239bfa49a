"""Per-mod YAML configs under ``Silk/Config/Mods``.

Silk writes one ``<mod_id>.yaml`` per mod on first load.  These helpers
read and edit those files in place; resetting deletes the file so the mod
regenerates its defaults on the next game start.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from entwine.core.errors import ConfigFormatError, EntwineIOError, NotFoundError
from entwine.core.fsutil import remove_path, write_atomic
from entwine.models.loaders import MOD_CONFIGS_SUBDIR
from entwine.models.mods import ModConfigFile

logger = logging.getLogger(__name__)

CONFIG_SUFFIX = ".yaml"


def mod_configs_path(game_path: Path) -> Path:
    return Path(game_path) / MOD_CONFIGS_SUBDIR


def _config_file(game_path: Path, mod_id: str) -> Path:
    if not mod_id or mod_id.startswith(".") or "/" in mod_id or "\\" in mod_id:
        raise NotFoundError(f"Config file not found for mod: {mod_id}")
    path = mod_configs_path(game_path) / f"{mod_id}{CONFIG_SUFFIX}"
    if not path.is_file():
        raise NotFoundError(f"Config file not found for mod: {mod_id}")
    return path


def _read_mapping(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise EntwineIOError(f"Failed to read config file: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigFormatError(f"Failed to parse YAML in {path.name}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFormatError(f"Config file root must be a mapping: {path.name}")
    return data


def list_mod_configs(game_path: Path) -> list[ModConfigFile]:
    """Return every readable mod config, sorted by mod name.

    Files that fail to load are skipped with a warning.
    """
    directory = mod_configs_path(game_path)
    if not directory.is_dir():
        return []

    configs: list[ModConfigFile] = []
    for path in sorted(directory.iterdir()):
        if not path.is_file() or path.suffix != CONFIG_SUFFIX:
            continue
        mod_id = path.stem
        try:
            config = _read_mapping(path)
        except (ConfigFormatError, EntwineIOError) as exc:
            logger.warning("Failed to load config for %s: %s", mod_id, exc)
            continue
        configs.append(ModConfigFile(mod_id=mod_id, mod_name=mod_id, config=config))

    configs.sort(key=lambda c: c.mod_name)
    return configs


def load_mod_config(game_path: Path, mod_id: str) -> dict[str, Any]:
    """Load one mod's config as a plain mapping.

    Raises
    ------
    NotFoundError
        If the mod has no config file.
    ConfigFormatError
        If the file is not a YAML mapping.
    """
    return _read_mapping(_config_file(game_path, mod_id))


def _set_nested(target: dict[str, Any], keys: list[str], value: Any) -> None:
    head, *rest = keys
    if not rest:
        target[head] = value
        return
    child = target.setdefault(head, {})
    if not isinstance(child, dict):
        raise ConfigFormatError(f"Cannot navigate through non-mapping key: {head}")
    _set_nested(child, rest, value)


def set_mod_config_value(game_path: Path, mod_id: str, key: str, value: Any) -> dict[str, Any]:
    """Set *key* (dotted path, e.g. ``"graphics.scale"``) to *value*.

    Intermediate mappings are created as needed.  Returns the updated
    config.

    Raises
    ------
    NotFoundError
        If the mod has no config file.
    ConfigFormatError
        If the key path is empty or crosses a non-mapping value.
    """
    path = _config_file(game_path, mod_id)
    keys = key.split(".")
    if not key or any(not part for part in keys):
        raise ConfigFormatError(f"Invalid key path: {key!r}")

    config = _read_mapping(path)
    _set_nested(config, keys, value)
    write_atomic(path, yaml.safe_dump(config, sort_keys=False, allow_unicode=True))
    logger.info("Set %s.%s = %r", mod_id, key, value)
    return config


def reset_mod_config(game_path: Path, mod_id: str) -> None:
    """Delete a mod's config so it is regenerated with defaults.

    Raises
    ------
    NotFoundError
        If the mod has no config file.
    """
    path = _config_file(game_path, mod_id)
    remove_path(path)
    logger.info("Reset config for %s", mod_id)
