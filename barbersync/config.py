"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from pathlib import Path
from typing import Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import DEFAULT_TIMEZONE


class ApiConfig(BaseModel):
    """Connection settings for the booking API."""
    base_url: str
    tenant: str  # Tenant slug, sent as ?tenant=SLUG
    access_token: Optional[str] = None
    timeout_seconds: float = 30
    cache_ttl_seconds: float = 300
    cache_max_entries: int = 128

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        """Ensure the API URL is absolute."""
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got {value!r}")
        return value.rstrip("/")

    @field_validator("tenant")
    @classmethod
    def validate_tenant(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("tenant must not be empty")
        return value.strip()

    @field_validator("timeout_seconds", "cache_ttl_seconds")
    @classmethod
    def validate_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeouts and TTLs must be greater than zero")
        return value

    @field_validator("cache_max_entries")
    @classmethod
    def validate_max_entries(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("cache_max_entries must be greater than zero")
        return value


class ServerConfig(BaseModel):
    """Settings for the HTTP server started by ``barbersync serve``."""
    host: str = "127.0.0.1"
    port: int = 8000

    @field_validator("port")
    @classmethod
    def validate_port(cls, value: int) -> int:
        if not 0 < value < 65536:
            raise ValueError(f"port must be between 1 and 65535, got {value}")
        return value


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = DEFAULT_TIMEZONE
    log_level: str = "INFO"
    api: Optional[ApiConfig] = None
    fixture_path: Optional[Path] = None
    server: ServerConfig = Field(default_factory=ServerConfig)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA zone."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value!r}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @model_validator(mode="after")
    def validate_data_source(self) -> "AppConfig":
        """Require at least one place to read schedules from."""
        if self.api is None and self.fixture_path is None:
            raise ValueError("Configure either an 'api' section or a 'fixture_path'.")
        return self

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Relative ``fixture_path`` values are resolved against the directory
        of the config file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)
        if config.fixture_path is not None and not config.fixture_path.is_absolute():
            config.fixture_path = (config_path.parent / config.fixture_path).resolve()
        return config


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of barbersync/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
