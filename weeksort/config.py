"""
Configuration management for weeksort.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .constants import get_logger
from .errors import ConfigurationError

KNOWN_KEYS = ("timezone", "max_concurrency", "dry_run", "prune_empty_dirs", "verbose")


class Config:
    """Optional YAML file supplying defaults for command-line options.

    weeksort only reads configuration; nothing is written back.
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path).expanduser() if config_path else None
        self.data = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if self.config_path is None:
            return {}

        if not self.config_path.is_file():
            raise ConfigurationError(f"Config file does not exist: {self.config_path}")

        try:
            with open(self.config_path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Could not load config {self.config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config must be a mapping: {self.config_path}")

        for key in data:
            if key not in KNOWN_KEYS:
                get_logger().warning(f"Ignoring unknown config key: {key}")
        return data

    def get_timezone(self) -> Optional[str]:
        """Get the bucketing timezone name (None means system local)."""
        timezone = self.data.get('timezone')
        return str(timezone) if timezone is not None else None

    def get_max_concurrency(self) -> Optional[int]:
        """Get the cap on concurrent filesystem calls (None means unbounded)."""
        value = self.data.get('max_concurrency')
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigurationError(f"max_concurrency must be a positive integer: {value!r}")
        return value

    def get_dry_run(self) -> bool:
        return bool(self.data.get('dry_run', False))

    def get_prune_empty_dirs(self) -> bool:
        return bool(self.data.get('prune_empty_dirs', False))

    def get_verbose(self) -> bool:
        return bool(self.data.get('verbose', False))
