"""Configuration loader for nhr.

Holds the defaults every request starts from. Values can be overridden with a
dictionary (mostly in tests) or with a YAML file the caller names explicitly.
No file is searched for and no environment variable is read.
"""

import copy
from pathlib import Path
from typing import Any, cast

import yaml

from nhr.exceptions import ConfigurationError

DEFAULTS: dict[str, Any] = {
    "request": {
        "timeout": 3,
        "headers": {"Content-Type": "application/json"},
    },
    "response": {
        "ok_status": 200,
    },
}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into base one section deep; values inside a section are replaced whole."""
    merged = copy.deepcopy(base)
    for section, values in override.items():
        if isinstance(values, dict) and isinstance(merged.get(section), dict):
            merged[section].update(copy.deepcopy(values))
        else:
            merged[section] = copy.deepcopy(values)
    return merged


class Config:
    """Configuration manager providing request and response defaults."""

    def __init__(self, config_dict: dict[str, Any] | None = None, config_file: Path | None = None):
        """
        Initialize the configuration manager.

        Args:
            config_dict: Optional dictionary of config values merged over the defaults.
            config_file: Optional YAML file merged over the defaults.
                        Ignored when config_dict is given.
        """
        self._config_dict = config_dict
        self._config_file = Path(config_file) if config_file is not None else None
        self._configs: dict[str, Any] = {}
        self._load()

    def _load(self):
        if self._config_dict is not None:
            self._configs = _merge(DEFAULTS, self._config_dict)
        elif self._config_file is not None:
            self._configs = _merge(DEFAULTS, self._read_file(self._config_file))
        else:
            self._configs = copy.deepcopy(DEFAULTS)

    @staticmethod
    def _read_file(config_path: Path) -> dict[str, Any]:
        if not config_path.exists():
            raise ConfigurationError(f"config file not found at {config_path}")

        with open(config_path, encoding="utf-8") as f:
            loaded_config = yaml.safe_load(f)

        # An empty file is treated as "no overrides"
        if loaded_config is None:
            return {}
        if not isinstance(loaded_config, dict):
            raise ConfigurationError(
                f"{config_path.name} must contain a dictionary, "
                f"got {type(loaded_config).__name__}"
            )
        return loaded_config

    def get(self, path: str, default: Any = None) -> Any:
        """Get a configuration value using dot notation.

        Args:
            path: Dot-separated path to the config value (e.g., "request.timeout")
            default: Default value to return if path is not found

        Returns:
            The configuration value or default if not found

        Example:
            >>> config.get("request.timeout")
            3
            >>> config.get("request.headers")
            {'Content-Type': 'application/json'}
        """
        parts = path.split(".")
        value = self._configs

        for part in parts:
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default

        return value

    @property
    def request(self) -> dict[str, Any]:
        """Get request defaults."""
        return cast(dict[str, Any], self._configs.get("request", {}))

    @property
    def response(self) -> dict[str, Any]:
        """Get response defaults."""
        return cast(dict[str, Any], self._configs.get("response", {}))

    def reload(self):
        """Reload the configuration from its source."""
        self._configs.clear()
        self._load()


# Create a singleton instance
config = Config()
