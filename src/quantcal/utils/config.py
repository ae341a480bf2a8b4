import yaml
import logging
from pathlib import Path
from typing import Any, Dict, Union

logger = logging.getLogger(__name__)


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a YAML settings file.

    An empty file yields an empty dictionary. A file whose top level is not
    a mapping is rejected, since every settings section is looked up by name.

    Args:
        path: YAML file

    Returns:
        Nested dictionary of settings

    Raises:
        FileNotFoundError: If the file does not exist
        yaml.YAMLError: If the file is not valid YAML
        ValueError: If the top level is not a mapping
    """
    try:
        with open(path, "r") as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        logger.error(f"Settings file not found: {path}")
        raise
    except yaml.YAMLError as e:
        logger.error(f"Malformed settings file {path}: {e}")
        raise

    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ValueError(f"{path}: expected a mapping at the top level, got {type(config).__name__}")

    logger.debug(f"Read settings from {path}: sections {sorted(config)}")
    return config


def merge_configs(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Overlay ``override_config`` on ``base_config``.

    Nested sections are merged key by key; any other value in the override
    replaces the base value. Neither input is modified.
    """
    merged = dict(base_config)

    for key, value in override_config.items():
        base_value = merged.get(key)
        if isinstance(base_value, dict) and isinstance(value, dict):
            merged[key] = merge_configs(base_value, value)
        else:
            merged[key] = value

    return merged


def get_nested_value(config: Dict[str, Any], key: str, default: Any = None) -> Any:
    """Look up a dotted key such as ``'calibration.method'``, or return ``default``."""
    current = config

    try:
        for part in key.split('.'):
            current = current[part]
    except (KeyError, TypeError):
        return default
    return current
