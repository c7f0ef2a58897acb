from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of the engine settings (base path, structure
description, default permissions, logging) as JSON in the user data
directory, with default fallback.
"""

import json
import logging
import os
from typing import Any, Dict

from fsreconcile.domain.constants import (
    CURRENT_CONFIG_VERSION,
    DEFAULT_DIRECTORY_PERMISSION,
    DEFAULT_FILE_PERMISSION,
)
from fsreconcile.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"


def get_config_path() -> str:
    """Absolute path of the persisted configuration file."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Target
        "base_path": os.getcwd(),
        "structure_file": "",

        # Permissions applied to nodes that declare none
        "file_permission": DEFAULT_FILE_PERMISSION,
        "directory_permission": DEFAULT_DIRECTORY_PERMISSION,

        # Diagnostics
        "log_level": "INFO",
        "log_file": "",
    }


# -----------------------------------------------------------------------------
# Persistence
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """
    Load the persisted configuration merged over the defaults.

    A missing or corrupt file yields the defaults.

    Returns:
        Dict[str, Any]: Configuration dictionary.
    """
    defaults = get_default_config()
    path = get_config_path()

    if not os.path.exists(path):
        logger.debug(f"No configuration file at {path}. Using defaults.")
        return defaults

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Configuration file {path} could not be read: {e}. Using defaults.")
        return defaults

    if not isinstance(data, dict):
        logger.warning(f"Configuration file {path} is not a JSON object. Using defaults.")
        return defaults

    stored = data.get("settings", data)
    merged = dict(defaults)
    merged.update({k: v for k, v in stored.items() if k in defaults})
    return merged


def save_config(config: Dict[str, Any]) -> bool:
    """
    Persist the configuration to the user data directory.

    Args:
        config: Configuration dictionary (unknown keys are dropped).

    Returns:
        bool: True if the file was written.
    """
    path = get_config_path()
    defaults = get_default_config()
    payload = {
        "version": CURRENT_CONFIG_VERSION,
        "settings": {k: config.get(k, v) for k, v in defaults.items()},
    }
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
        return True
    except OSError as e:
        logger.error(f"Failed to save configuration to {path}: {e}")
        return False
