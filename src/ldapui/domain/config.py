from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of connection settings and diagnostics
preferences as JSON in the per-user data directory. Missing keys are
filled from defaults so older files keep loading.
"""

import json
import logging
import os
from typing import Any, Dict

from ldapui.domain.constants import CURRENT_CONFIG_VERSION
from ldapui.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE_NAME = "config.json"
PASSWORD_ENV_VAR = "LDAPUI_PASSWORD"
DEFAULT_BASE_URL = "http://localhost:5000/"


def get_config_path() -> str:
    """Absolute path of the persistent configuration file."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Directory service
        "base_url": DEFAULT_BASE_URL,
        "username": "",
        "timeout": 10,
        "verify_tls": True,

        # Diagnostics
        "log_level": "INFO",
        "log_file": "",
    }


def get_password() -> str:
    """Read the bind password from the environment; it is never persisted."""
    return os.environ.get(PASSWORD_ENV_VAR, "")

# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """
    Load configuration from disk, merged over the defaults.

    Returns:
        Dict[str, Any]: The loaded configuration or defaults on failure.
    """
    config = get_default_config()
    path = get_config_path()

    if not os.path.exists(path):
        logger.debug("Config file not found. Returning defaults.")
        return config

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return config

    data.pop("version", None)
    # The password must never come from disk
    data.pop("password", None)
    config.update(data)
    return config


def save_config(config: Dict[str, Any]) -> None:
    """
    Persist configuration to disk.

    Args:
        config: The configuration dictionary to save.
    """
    path = get_config_path()
    state = {k: v for k, v in config.items() if k != "password"}
    state["version"] = CURRENT_CONFIG_VERSION
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {path}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
