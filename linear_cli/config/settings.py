"""
Configuration system using Pydantic for type-safe settings management.

Settings come from (highest priority first) explicit keyword arguments,
``LINEAR_*`` environment variables, an optional YAML file and the defaults
declared below. The API key is not a setting: it is resolved
through :mod:`linear_cli.credentials`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from platformdirs import user_cache_dir, user_config_dir
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from linear_cli.exceptions import ConfigurationError

APP_NAME = "linear"

LINEAR_API_ENDPOINT = "https://api.linear.app/graphql"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def default_config_path() -> Path:
    """Location of the optional YAML config file."""
    return Path(user_config_dir(APP_NAME, appauthor=False)) / "config.yaml"


def _default_cache_dir() -> Path:
    return Path(user_cache_dir(APP_NAME, appauthor=False))


class LinearSettings(BaseSettings):
    """Runtime settings for the linear CLI.

    Example:
        >>> settings = LinearSettings.from_yaml("~/.config/linear/config.yaml")
        >>> settings.cache_ttl_seconds
        300
    """

    model_config = SettingsConfigDict(
        env_prefix="LINEAR_",
        case_sensitive=False,
        extra="ignore",
    )

    api_url: str = Field(default=LINEAR_API_ENDPOINT, description="GraphQL endpoint")
    request_timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    cache_dir: Path = Field(default_factory=_default_cache_dir, description="Directory for cached API data")
    cache_ttl_seconds: int = Field(default=300, ge=0, description="Default cache entry lifetime")
    log_level: LogLevel = Field(default="WARNING", description="Minimum structlog level")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @classmethod
    def from_yaml(cls, config_path: str | Path, **overrides: object) -> LinearSettings:
        """Load settings from a YAML file.

        Environment variables still override values from the file.

        Args:
            config_path: Path to YAML configuration file
            **overrides: Values that take precedence over everything else

        Raises:
            ConfigurationError: If the file is unreadable or invalid
        """
        config_file = Path(config_path).expanduser()
        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            yaml_content = config_file.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file: {config_path}") from e

        try:
            config_dict = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if config_dict is None:
            config_dict = {}
        if not isinstance(config_dict, dict):
            raise ConfigurationError("Configuration must be a YAML object, not a list or scalar")

        return cls._build(file_values=config_dict, overrides=overrides)

    @classmethod
    def load(cls, config_path: str | Path | None = None, **overrides: object) -> LinearSettings:
        """Load settings, reading the YAML file when one exists.

        An explicit ``config_path`` must exist; the default location is
        optional.
        """
        if config_path is not None:
            return cls.from_yaml(config_path, **overrides)

        default_path = default_config_path()
        if default_path.exists():
            return cls.from_yaml(default_path, **overrides)
        return cls._build(file_values={}, overrides=overrides)

    @classmethod
    def _build(cls, file_values: dict[str, object], overrides: dict[str, object]) -> LinearSettings:
        try:
            # Environment wins over the file: let pydantic-settings read env
            # first, then layer file values under it.
            from_env = cls()
            env_set = {name for name in cls.model_fields if name in from_env.model_fields_set}
            merged = {k: v for k, v in file_values.items() if k not in env_set}
            merged.update({k: v for k, v in overrides.items() if v is not None})
            return cls(**merged) if merged else from_env
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
