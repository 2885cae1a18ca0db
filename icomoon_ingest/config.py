"""Configuration loading for icomoon-ingest.

Settings come from a YAML file::

    max_upload_size: 5242880
    default_prefix: icon-
    default_grid: 1024
    reject_scripts: true
    store_dir: ~/.local/share/icomoon-ingest
    log_level: INFO

The file is taken from the explicit path, else ``$ICOMOON_INGEST_CONFIG``.
Missing keys keep their defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from icomoon_ingest.exceptions import ConfigError

CONFIG_ENV_VAR = "ICOMOON_INGEST_CONFIG"
MAX_UPLOAD_SIZE = 5 * 1024 * 1024
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    max_upload_size: int = MAX_UPLOAD_SIZE
    default_prefix: str = "icon-"
    default_grid: int = 1024
    reject_scripts: bool = True
    store_dir: Path | None = None
    log_level: str = "WARNING"

    @classmethod
    def load(cls, path: str | Path | None = None) -> Config:
        """Load configuration from YAML, falling back to defaults."""
        if path is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            if not env_path:
                return cls()
            path = env_path

        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")

        try:
            data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path}: top level must be a mapping")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

        config = cls()
        if "max_upload_size" in data:
            config.max_upload_size = _positive_int(data, "max_upload_size")
        if "default_grid" in data:
            config.default_grid = _positive_int(data, "default_grid")
        if "default_prefix" in data:
            value = data["default_prefix"]
            if not isinstance(value, str):
                raise ConfigError("default_prefix: must be a string")
            config.default_prefix = value
        if "reject_scripts" in data:
            value = data["reject_scripts"]
            if not isinstance(value, bool):
                raise ConfigError("reject_scripts: must be true or false")
            config.reject_scripts = value
        if data.get("store_dir") is not None:
            config.store_dir = Path(str(data["store_dir"])).expanduser()
        if "log_level" in data:
            level = str(data["log_level"]).upper()
            if level not in LOG_LEVELS:
                raise ConfigError(
                    f"log_level: expected one of {', '.join(LOG_LEVELS)}, got {level}"
                )
            config.log_level = level
        return config


def _positive_int(data: dict[str, Any], key: str) -> int:
    value = data[key]
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"{key}: must be a positive integer")
    return value
