"""
Configuration management utilities.

This module provides centralized configuration loading and validation.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ..exceptions import ConfigurationError
from ..models.settings import Settings
from .constants import DEFAULT_CONFIG_PATH


class ConfigManager:
    """
    Manages configuration loading and access.

    This class provides a centralized way to load and access configuration
    from TOML files with proper error handling and validation.
    """

    def __init__(self, config_path: Optional[str] = None) -> None:
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to configuration file. If None, uses default path.
        """
        self.config_path = Path(config_path).expanduser() if config_path else Path(DEFAULT_CONFIG_PATH).expanduser()
        self._config: Optional[Dict[str, Any]] = None

    def exists(self) -> bool:
        """Whether the configuration file is present."""
        return self.config_path.exists()

    def load(self) -> Dict[str, Any]:
        """
        Load configuration from file.

        Returns:
            Dictionary containing configuration data

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        if self._config is not None:
            return self._config

        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, "rb") as f:
                self._config = tomllib.load(f)
            logging.debug("Loaded configuration from %s", self.config_path)
            return self._config
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in configuration file {self.config_path}: {e}") from e
        except Exception as e:
            raise ValueError(f"Failed to load configuration from {self.config_path}: {e}") from e

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by key.

        Supports nested keys using dot notation (e.g., "webhdfs.base_url").

        Args:
            key: Configuration key (supports dot notation for nested keys)
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        if self._config is None:
            self.load()

        value: Any = self._config
        for k in key.split("."):
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value if value is not None else default

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get an entire configuration section.

        Args:
            section: Section name (e.g., "webhdfs")

        Returns:
            Dictionary containing section data, or empty dict if section not found
        """
        if self._config is None:
            self.load()

        if self._config is None:
            return {}

        return self._config.get(section, {})

    def settings(self) -> Settings:
        """
        Load and validate the configuration into a Settings model.

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        try:
            raw = self.load()
        except (FileNotFoundError, ValueError) as e:
            raise ConfigurationError(str(e)) from e

        try:
            return Settings.model_validate(raw)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {self.config_path}: {e}") from e

    def reload(self) -> None:
        """Force reload configuration from file."""
        self._config = None
        self.load()


def load_settings(config_path: Optional[str] = None, *, required: bool = True) -> Settings:
    """
    Load settings from a configuration file.

    Args:
        config_path: Explicit path; the default path is used when None
        required: When False, a missing default file yields default settings

    Returns:
        Validated Settings

    Raises:
        ConfigurationError: If the configuration is missing (and required) or invalid
    """
    manager = ConfigManager(config_path)
    if not config_path and not required and not manager.exists():
        logging.debug("No configuration file at %s, using defaults", manager.config_path)
        return Settings()
    return manager.settings()


__all__ = ["ConfigManager", "load_settings"]
