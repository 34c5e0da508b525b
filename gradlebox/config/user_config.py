"""
User configuration management for Gradlebox.

This module handles user-specific configuration settings with multiple sources:
1. Environment variables (highest precedence)
2. Command-line provided config file
3. Config file in current directory
4. User's XDG config directory
5. Default values (lowest precedence)
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from gradlebox.config.models import UserConfigData
from gradlebox.core.errors import ConfigError


logger = logging.getLogger(__name__)

# Environment variable prefixes
ENV_PREFIX = "GRADLEBOX_"


class UserConfig:
    """Manages user-specific configuration for Gradlebox."""

    def __init__(self, cli_config_path: str | Path | None = None) -> None:
        """
        Initialize the user configuration handler.

        Args:
            cli_config_path: Optional config file path provided via CLI

        Raises:
            ConfigError: If the CLI config path is missing or a config file is invalid
        """
        self._config_sources: dict[str, str] = {}
        self._config_path: Path | None = None
        self._cli_config_path = (
            Path(cli_config_path).expanduser().resolve() if cli_config_path else None
        )
        self._config_paths = self._generate_config_paths()
        self._load_config()

    def _generate_config_paths(self) -> list[Path]:
        """Generate a list of config paths to search in order of precedence."""
        config_paths = []

        if self._cli_config_path:
            config_paths.append(self._cli_config_path)

        config_paths.extend([Path.cwd() / "gradlebox.yaml", Path.cwd() / ".gradlebox.yml"])

        xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
        config_dir = (
            Path(xdg_config_home) / "gradlebox"
            if xdg_config_home
            else Path.home() / ".config" / "gradlebox"
        )
        config_paths.extend([config_dir / "config.yaml", config_dir / "config.yml"])

        return config_paths

    def _read_config_file(self, path: Path) -> dict[str, Any]:
        try:
            with path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read config file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        return data

    def _load_config(self) -> None:
        """Load configuration from the first config file found and the environment."""
        if self._cli_config_path and not self._cli_config_path.exists():
            raise ConfigError(f"Config file not found: {self._cli_config_path}")

        logger.debug("Config search paths: %s", [str(p) for p in self._config_paths])

        config_data: dict[str, Any] = {}
        for path in self._config_paths:
            if path.is_file():
                config_data = self._read_config_file(path)
                self._config_path = path
                logger.debug("Loaded user configuration from %s", path)
                for key in config_data:
                    self._config_sources[key] = f"file:{path.name}"
                break
        else:
            logger.debug("No user configuration file found, using defaults")

        try:
            self._config = UserConfigData(**config_data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

        for env_name in os.environ:
            if env_name.startswith(ENV_PREFIX):
                key = env_name[len(ENV_PREFIX) :].lower()
                if key in UserConfigData.model_fields:
                    self._config_sources[key] = "environment"

    @property
    def data(self) -> UserConfigData:
        """Validated configuration values."""
        return self._config

    @property
    def config_path(self) -> Path | None:
        """Path of the config file that was loaded, if any."""
        return self._config_path

    def get_source(self, key: str) -> str:
        """
        Get the source of a configuration value.

        Returns:
            The source of the configuration value (environment, file:name, default)
        """
        return self._config_sources.get(key, "default")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by key."""
        if key not in UserConfigData.model_fields:
            return default
        return getattr(self._config, key)

    def get_log_level_int(self) -> int:
        """Get the log level as an integer value for use with logging module."""
        level_map = {
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR,
            "CRITICAL": logging.CRITICAL,
        }
        return level_map.get(self._config.log_level, logging.WARNING)


def create_user_config(cli_config_path: str | Path | None = None) -> UserConfig:
    """
    Create a UserConfig instance.

    Args:
        cli_config_path: Optional config file path provided via CLI

    Returns:
        Configured UserConfig instance
    """
    return UserConfig(cli_config_path=cli_config_path)
