"""
Configuration Module

Loads the generator configuration YAML and merges it over the defaults.
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .constants import DEFAULT_CONFIG
from .errors import ConfigError


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base"""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def validate_config(config: Dict[str, Any]) -> None:
    """Check value types the generator depends on.

    Raises:
        ConfigError: On the first invalid value
    """
    for section in ('chart', 'valueProcessor', 'externalFiles'):
        if not isinstance(config.get(section), dict):
            raise ConfigError(f"{section} must be a mapping, got {type(config.get(section)).__name__}")

    chart_name = config['chart'].get('name')
    if not isinstance(chart_name, str) or not chart_name:
        raise ConfigError("chart.name must be a non-empty string")

    threshold = config['valueProcessor'].get('sizeThreshold')
    if isinstance(threshold, bool) or not isinstance(threshold, int) or threshold < 1:
        raise ConfigError(f"valueProcessor.sizeThreshold must be a positive integer, got {threshold!r}")

    pretty_print = config['valueProcessor'].get('prettyPrint')
    if not isinstance(pretty_print, bool):
        raise ConfigError(f"valueProcessor.prettyPrint must be true or false, got {pretty_print!r}")

    directory = config['externalFiles'].get('directory')
    if not isinstance(directory, str) or not directory.strip('/'):
        raise ConfigError("externalFiles.directory must be a non-empty relative path")


def load_config(config_file: Optional[Path] = None, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Load configuration.

    Args:
        config_file: Optional YAML file; defaults are used when omitted
        overrides: Values applied last (e.g. from command-line flags)

    Returns:
        Complete, validated configuration dict

    Raises:
        ConfigError: If the file is unreadable, not a mapping, or has invalid values
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_file is not None:
        try:
            with open(config_file) as f:
                loaded = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read config file {config_file}: {e}") from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"Config file {config_file} must contain a mapping")
        config = merge_config(config, loaded)

    if overrides:
        config = merge_config(config, overrides)

    validate_config(config)
    return config
