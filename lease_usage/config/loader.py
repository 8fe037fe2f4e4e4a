"""
Configuration management and loading.

Handles storage settings from a YAML file and environment variables.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

import yaml

DEFAULT_TABLE_NAME = "Usage"

# Environment variables override values read from the config file
ENV_OVERRIDES = {
    "table_name": "USAGE_TABLE_NAME",
    "region": "AWS_REGION",
    "endpoint_url": "USAGE_DYNAMODB_ENDPOINT",
    "index_name": "USAGE_INDEX_NAME",
}


@dataclass(frozen=True)
class StorageConfig:
    """Where usage records live."""
    table_name: str = DEFAULT_TABLE_NAME
    region: Optional[str] = None
    endpoint_url: Optional[str] = None
    index_name: Optional[str] = None

    def __post_init__(self):
        """Validate the table name is usable."""
        if not isinstance(self.table_name, str) or not self.table_name.strip():
            raise ValueError("table_name must be a non-empty string")


def load_storage_config(path: Optional[str] = None) -> StorageConfig:
    """Load and validate storage configuration.

    Values come from the YAML file at ``path`` (if given) and are then
    overridden by any set environment variable listed in ENV_OVERRIDES.

    Args:
        path: Optional path to YAML configuration file

    Returns:
        Validated StorageConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    values: Dict[str, Optional[str]] = {}
    if path is not None:
        values.update(_read_config_file(path))

    for key, env_var in ENV_OVERRIDES.items():
        env_value = os.getenv(env_var)
        if env_value:
            values[key] = env_value

    return StorageConfig(**values)


def _read_config_file(path: str) -> Dict[str, Optional[str]]:
    """Read the storage section values from a YAML file.

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Storage config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if not raw_config:
        raise ValueError("Configuration file is empty")
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a dictionary")

    unknown_keys = set(raw_config.keys()) - set(ENV_OVERRIDES)
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    if 'table_name' not in raw_config:
        raise ValueError("Missing required 'table_name'")

    values: Dict[str, Optional[str]] = {}
    for key, value in raw_config.items():
        if value is not None and not isinstance(value, str):
            raise ValueError(f"'{key}' must be a string")
        values[key] = value
    return values
