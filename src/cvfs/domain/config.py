from __future__ import annotations

"""
Configuration Domain Management.

Persistent application preferences stored as JSON in the user data
directory. Stored values are merged over the defaults so that keys added in
newer versions are always present.
"""

import json
import logging
import os
from typing import Any, Dict

from cvfs.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE_NAME = "config.json"
CURRENT_CONFIG_VERSION = "1.0.0"
DEFAULT_PROMPT = "CVFS> "


def get_config_path() -> str:
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


def get_default_config() -> Dict[str, Any]:
    """
    Default session settings.

    Returns:
        Dict[str, Any]: Fresh dictionary; callers may mutate it.
    """
    return {
        # Shell
        "prompt": DEFAULT_PROMPT,
        "locale": "en",
        "strict_scripts": False,

        # Disk bootstrap (None: start without a disk)
        "default_capacity": None,

        # Diagnostics
        "log_level": "WARNING",
        "log_to_file": False,
        "log_file": "",
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """
    Read the stored configuration, falling back to defaults.

    A missing, unreadable or non-object file yields the defaults; unknown keys
    in the file are ignored.
    """
    config = get_default_config()
    path = get_config_path()

    if not os.path.exists(path):
        logger.debug("Config file not found. Using defaults.")
        return config

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Using defaults.")
        return config

    for key in config:
        if key in data:
            config[key] = data[key]
    return config


def save_config(config: Dict[str, Any]) -> bool:
    """
    Persist the configuration, stamping the schema version.

    Args:
        config: Settings to store. Only known keys are written.

    Returns:
        bool: True if the file was written.
    """
    path = get_config_path()
    defaults = get_default_config()
    payload = {k: config.get(k, v) for k, v in defaults.items()}
    payload["version"] = CURRENT_CONFIG_VERSION
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {path}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
        return False
    return True
