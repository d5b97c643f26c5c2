"""User configuration management."""

import logging
from pathlib import Path
from typing import Any

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for older Python

logger = logging.getLogger(__name__)

ID3V2_VERSIONS = (3, 4)


class ConfigError(Exception):
    """A configuration value is out of range."""


class Config:
    """User configuration manager."""

    def __init__(self, config_file: Path | None = None):
        """Initialize config with defaults, overlaid with the user's file if present."""
        self.config_dir = Path.home() / ".config" / "mp3edit"
        self.config_file = config_file or self.config_dir / "config.toml"
        self._config = self._load_config()

    def _load_config(self) -> dict[str, Any]:
        """Load config from file or return defaults."""
        defaults = {
            "files": {
                "pattern": "*.mp3",
            },
            "tags": {
                "id3v2_version": 4,
            },
            "output": {
                "quiet": False,
            },
        }

        if not self.config_file.exists():
            return defaults

        try:
            with open(self.config_file, "rb") as f:
                user_config = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Ignoring config file %s: %s", self.config_file, e)
            return defaults

        # Merge user config with defaults
        return self._merge_configs(defaults, user_config)

    def _merge_configs(self, defaults: dict, user: dict) -> dict:
        """Recursively merge user config into defaults."""
        result = defaults.copy()
        for key, value in user.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value
        return result

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get a config value."""
        return self._config.get(section, {}).get(key, default)

    @property
    def pattern(self) -> str:
        return str(self.get("files", "pattern", "*.mp3"))

    @property
    def id3v2_version(self) -> int:
        version = self.get("tags", "id3v2_version", 4)
        if version not in ID3V2_VERSIONS:
            raise ConfigError(f"tags.id3v2_version must be 3 or 4, not {version!r}")
        return version

    @property
    def quiet(self) -> bool:
        return bool(self.get("output", "quiet", False))


# Global config instance
_config = None


def get_config() -> Config:
    """Get the global config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Forget the global config so the next get_config() reloads it."""
    global _config
    _config = None
