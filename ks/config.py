"""Configuration constants and the JSON config file."""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from ks.errors import StorageError

# --- Configuration Constants ---
CONFIG_FILE = Path("~/.config/ks/config.json").expanduser()
DEFAULT_NOTES_DIR = Path("~/.local/share/ks").expanduser()
LOG_FILE = Path("~/.local/state/ks/ks.log").expanduser()
NOTES_DIR_ENV = "KS_NOTES_DIR"

# Seconds a notification banner stays on screen.
NOTIFICATION_TTL = 3.0

DEFAULT_CONFIG: Dict[str, Any] = {
    "theme": "Purple (Default)",
    "notes_dir": None,
    "show_preview": True,
    "sort": "name",
}


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from JSON file.

    Args:
        path: Config file to read, defaults to CONFIG_FILE

    Returns:
        Configuration merged over DEFAULT_CONFIG. Defaults are returned if the
        file doesn't exist or is invalid.
    """
    path = path or CONFIG_FILE
    config = dict(DEFAULT_CONFIG)
    if not path.exists():
        return config
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable config {}: {}", path, e)
        return config
    if not isinstance(data, dict):
        logger.warning("Ignoring config {}: expected a JSON object", path)
        return config
    config.update({k: v for k, v in data.items() if k in DEFAULT_CONFIG})
    config["show_preview"] = _as_bool(config["show_preview"])
    return config


def _as_bool(value: Any) -> bool:
    # Strings such as "false", "no" or "0" count as False
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false", "no", "off")
    return bool(value)


def save_config(config: Dict[str, Any], path: Optional[Path] = None) -> None:
    """
    Save configuration to JSON file.

    Args:
        config: Configuration dictionary to save
        path: Config file to write, defaults to CONFIG_FILE
    """
    path = path or CONFIG_FILE
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=4)
    except OSError as e:
        logger.error("Error saving config {}: {}", path, e)


def resolve_notes_directory(
    override: Optional[Path] = None, config: Optional[Dict[str, Any]] = None
) -> Path:
    """
    Find the notes directory and create it if needed.

    Precedence: explicit override, $KS_NOTES_DIR, the config file's
    ``notes_dir``, then ~/.local/share/ks.

    Raises:
        StorageError: if the directory cannot be created
    """
    config = config if config is not None else DEFAULT_CONFIG
    candidate = override or os.environ.get(NOTES_DIR_ENV) or config.get("notes_dir")
    notes_dir = Path(candidate).expanduser() if candidate else DEFAULT_NOTES_DIR
    try:
        notes_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError(f"Cannot create notes directory {notes_dir}: {e}") from e
    return notes_dir
