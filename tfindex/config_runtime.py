"""Runtime configuration for tfindex - centralized configuration management."""

import copy
import json
import os
from pathlib import Path
from typing import Any

from tfindex.utils.constants import (
    CONFIG_FILE_NAME,
    DATASOURCES_SUBDIR,
    DEFAULT_SUMMARY_FILE,
    EPHEMERAL_SUBDIR,
    RESOURCES_SUBDIR,
    RESOURCE_RETURN_TYPES,
    TFINDEX_DIR,
)
from tfindex.utils.logging import logger

DEFAULTS = {
    "output": {
        "summary_file": DEFAULT_SUMMARY_FILE,
        "resources_dir": RESOURCES_SUBDIR,
        "datasources_dir": DATASOURCES_SUBDIR,
        "ephemeral_dir": EPHEMERAL_SUBDIR,
        "indent": 2,
    },
    "scan": {
        # 0 means one worker per CPU
        "workers": 0,
        "include_tests": False,
    },
    "resolver": {
        "resource_types": list(RESOURCE_RETURN_TYPES),
    },
}


def _coerce(raw: str, default: Any) -> Any:
    """Convert an environment string to the type of its default."""
    if isinstance(default, bool):
        lowered = raw.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
        raise ValueError(f"not a boolean: {raw!r}")
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    if isinstance(default, list):
        return [v.strip() for v in raw.split(",") if v.strip()]
    return raw


def load_runtime_config(root: str = ".") -> dict[str, Any]:
    """
    Load runtime configuration from .tfindex/config.json and environment variables.

    Config priority (highest to lowest):
    1. Environment variables (TFINDEX_<SECTION>_<KEY>)
    2. .tfindex/config.json under root
    3. Built-in defaults

    Args:
        root: Root directory to look for config file

    Returns:
        Configuration dictionary with merged values
    """
    cfg = copy.deepcopy(DEFAULTS)

    path = Path(root) / TFINDEX_DIR / CONFIG_FILE_NAME
    try:
        if path.exists():
            with open(path, encoding="utf-8") as f:
                user = json.load(f)

            if isinstance(user, dict):
                for section in cfg:
                    if section in user and isinstance(user[section], dict):
                        for key, value in user[section].items():
                            if key in cfg[section] and isinstance(value, type(cfg[section][key])):
                                cfg[section][key] = value
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load config file from {path}: {e}")
        logger.info("Continuing with default configuration")

    for section in cfg:
        for key in cfg[section]:
            env_var = f"TFINDEX_{section.upper()}_{key.upper()}"
            if env_var in os.environ:
                value = os.environ[env_var]
                try:
                    cfg[section][key] = _coerce(value, cfg[section][key])
                except (ValueError, AttributeError) as e:
                    logger.warning(f"Invalid value for environment variable {env_var}: '{value}' - {e}")
                    logger.info(f"Using default value: {cfg[section][key]}")

    return cfg
