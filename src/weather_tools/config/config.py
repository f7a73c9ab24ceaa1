"""
Configuration management for weather-tools.

Provides a configuration file at ~/.weather_tools/config.json for the
upstream endpoints, HTTP transport settings and date handling.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)


# Default values - single source of truth
DEFAULTS = {
    "geocoding_url": "https://geocoding-api.open-meteo.com/v1/search",
    "forecast_url": "https://api.open-meteo.com/v1/forecast",
    "archive_url": "https://archive-api.open-meteo.com/v1/archive",
    "timeout": 10.0,
    "proxy": None,
    "verify_ssl": True,
    "user_agent": "weather-tools/0.1.0",
    "reference_timezone": "UTC",
    "log_level": "INFO",
}


class Config(BaseModel):
    """Configuration settings for weather-tools.

    All settings are optional. Use DEFAULTS for default values.
    """

    model_config = {"extra": "ignore"}  # Ignore unknown fields like _comment

    # Upstream endpoints
    geocoding_url: Optional[str] = Field(
        default=None,
        description="Geocoding search endpoint"
    )
    forecast_url: Optional[str] = Field(
        default=None,
        description="Forecast endpoint (current conditions and daily forecast)"
    )
    archive_url: Optional[str] = Field(
        default=None,
        description="Historical archive endpoint"
    )

    # HTTP transport
    timeout: Optional[float] = Field(
        default=None,
        description="Request timeout in seconds"
    )
    proxy: Optional[str] = Field(
        default=None,
        description="Proxy URL for outbound requests (e.g. http://host:1080)"
    )
    verify_ssl: Optional[bool] = Field(
        default=None,
        description="Verify TLS certificates"
    )
    user_agent: Optional[str] = Field(
        default=None,
        description="User-Agent header sent upstream"
    )

    # Date handling
    reference_timezone: Optional[str] = Field(
        default=None,
        description="Zone used to decide past/today/future: an IANA name, "
                    "'UTC', or 'location' for the resolved place's zone"
    )

    # Logging
    log_level: Optional[str] = Field(
        default=None,
        description="Log level for the command-line tools"
    )

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value with fallback to DEFAULTS, then to provided default."""
        value = getattr(self, key, None)
        if value is not None:
            return value
        # Fall back to DEFAULTS, then to provided default
        value = DEFAULTS.get(key)
        return default if value is None else value


class ConfigManager:
    """Manages loading and saving configuration."""

    CONFIG_DIR = Path.home() / ".weather_tools"
    CONFIG_FILE = CONFIG_DIR / "config.json"

    def __init__(self):
        self._config: Optional[Config] = None

    def _ensure_dir(self) -> None:
        """Ensure config directory exists."""
        self.CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    @property
    def config(self) -> Config:
        """Get the current config, loading if necessary."""
        if self._config is None:
            self._config = self.load()
        return self._config

    def load(self, create_if_missing: bool = True) -> Config:
        """Load configuration from file.

        Args:
            create_if_missing: If True, create default config file if it doesn't exist.

        Returns:
            Config object with loaded settings, or defaults if file doesn't exist.
        """
        if not self.CONFIG_FILE.exists():
            if create_if_missing:
                self._create_default_config()
            return Config()

        try:
            data = json.loads(self.CONFIG_FILE.read_text())
        except json.JSONDecodeError as e:
            logger.warning(f"Invalid config file {self.CONFIG_FILE} ({e}), using defaults")
            return Config()
        if not isinstance(data, dict):
            logger.warning(f"Invalid config file {self.CONFIG_FILE} (not an object), using defaults")
            return Config()

        try:
            return Config.model_validate(data)
        except ValidationError as e:
            # Keep the valid settings, drop the offending keys
            bad = {err["loc"][0] for err in e.errors() if err["loc"]}
            logger.warning(f"Ignoring invalid settings {sorted(bad)} in {self.CONFIG_FILE}")
            return Config.model_validate({k: v for k, v in data.items() if k not in bad})

    def _create_default_config(self) -> None:
        """Create default config file with actual default values."""
        self._ensure_dir()

        default_config = {"_comment": "weather-tools configuration file", **DEFAULTS}
        self.CONFIG_FILE.write_text(json.dumps(default_config, indent=2) + "\n")

    def _read_existing(self) -> dict[str, Any]:
        """Read the raw config file, or an empty dict if missing/invalid."""
        if not self.CONFIG_FILE.exists():
            return {}
        try:
            return json.loads(self.CONFIG_FILE.read_text())
        except json.JSONDecodeError:
            return {}

    def save(self, config: Optional[Config] = None) -> Path:
        """Save configuration to file, preserving existing structure.

        Args:
            config: Config to save. If None, saves current config.

        Returns:
            Path to saved config file.
        """
        self._ensure_dir()
        if config is not None:
            self._config = config

        if self._config is None:
            self._config = Config()

        # Read existing file to preserve comments and structure
        existing_data = self._read_existing()

        # Update only non-None config values, preserving everything else
        for key, value in self._config.model_dump().items():
            if value is not None:
                existing_data[key] = value

        self.CONFIG_FILE.write_text(json.dumps(existing_data, indent=2) + "\n")
        return self.CONFIG_FILE

    def set(self, key: str, value: Any) -> None:
        """Set a config value and save.

        Args:
            key: Config key to set.
            value: Value to set.

        Raises:
            ValueError: If the key is unknown or the value is invalid for it
                (pydantic's ValidationError and InvalidTimezoneError are both
                ValueErrors). Nothing is written in that case.
        """
        # Always reload from file to get latest values
        self._config = self.load(create_if_missing=True)

        if key not in Config.model_fields:
            raise ValueError(f"Unknown config key: {key}")

        updated = Config.model_validate({**self._config.model_dump(), key: value})
        if key == "reference_timezone" and value is not None:
            from weather_tools.weather.resolver import reference_zone
            reference_zone(updated.reference_timezone)

        self._config = updated
        self.save()

    def unset(self, key: str) -> None:
        """Remove a config value (reset to default).

        Args:
            key: Config key to unset.
        """
        self._config = self.load(create_if_missing=True)

        if key not in Config.model_fields:
            raise ValueError(f"Unknown config key: {key}")

        self._config = self._config.model_copy(update={key: None})

        existing_data = self._read_existing()
        if key in existing_data:
            existing_data[key] = None

        self._ensure_dir()
        self.CONFIG_FILE.write_text(json.dumps(existing_data, indent=2) + "\n")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value with fallback.

        Args:
            key: Config key to get.
            default: Default value if not set.

        Returns:
            Config value or default.
        """
        return self.config.get(key, default)

    def list_settings(self) -> dict[str, Any]:
        """List user-customized settings (values that differ from defaults).

        Returns:
            Dict of settings that differ from DEFAULTS.
        """
        result = {}
        for k, v in self.config.model_dump().items():
            if v is None:
                continue
            if k not in DEFAULTS or v != DEFAULTS[k]:
                result[k] = v
        return result

    def reset(self) -> None:
        """Reset configuration to defaults."""
        self._config = Config()
        if self.CONFIG_FILE.exists():
            self.CONFIG_FILE.unlink()


# Singleton instance
_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get the singleton ConfigManager instance."""
    global _manager
    if _manager is None:
        _manager = ConfigManager()
    return _manager


def get_config() -> Config:
    """Get the current configuration."""
    return get_config_manager().config
