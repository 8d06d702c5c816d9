"""Configuration management using pydantic-settings.

This module provides configuration loading with the following precedence:
1. CLI arguments (highest priority)
2. Environment variables (TASKBOARD_* prefix)
3. Global config file (~/.config/taskboard/config.toml)
4. Built-in defaults (lowest priority)
"""

import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Development-only signing key; `serve` warns when it is still in use
DEFAULT_JWT_SECRET = "change-me-taskboard-development-signing-key"


def get_config_path() -> Path:
    """Get the global config file path (XDG compliant).

    Returns:
        Path to config file:
        - Linux/macOS: ~/.config/taskboard/config.toml
        - Windows: %APPDATA%/taskboard/config.toml
    """
    if os.name == "nt":  # Windows
        base = Path(os.environ.get("APPDATA", Path.home()))
    else:  # Linux/macOS
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / "taskboard" / "config.toml"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Environment variables use TASKBOARD_ prefix:
    - TASKBOARD_DATABASE_PATH
    - TASKBOARD_JWT_SECRET_KEY
    - TASKBOARD_LOG_LEVEL
    etc.
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    database_path: str = Field(default="~/.local/share/taskboard/taskboard.db", description="SQLite database file path")

    # HTTP server
    http_host: str = Field(default="127.0.0.1", description="HTTP server bind address")
    http_port: int = Field(default=8080, description="HTTP server port")

    # Security
    jwt_secret_key: SecretStr = Field(default=SecretStr(DEFAULT_JWT_SECRET), description="HS256 signing key")
    jwt_expiration_minutes: int = Field(default=60 * 24, ge=1, description="Token lifetime in minutes")
    bcrypt_rounds: int = Field(default=12, ge=4, le=31, description="bcrypt cost factor")

    # Paging
    page_default_size: int = Field(default=5, ge=1, description="Default page size for list endpoints")
    page_max_size: int = Field(default=100, ge=1, le=2**31 - 1, description="Maximum page size for list endpoints")

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "console"] = Field(
        default="json",
        description="Log output format",
    )
    log_file: str | None = Field(default=None, description="Log file path (optional)")

    # Metrics
    metrics_enabled: bool = Field(default=True, description="Expose Prometheus metrics at /metrics")

    @property
    def resolved_database_path(self) -> Path:
        """Database path with ``~`` expanded."""
        return Path(self.database_path).expanduser()

    @property
    def uses_default_secret(self) -> bool:
        return self.jwt_secret_key.get_secret_value() == DEFAULT_JWT_SECRET


def load_toml_config(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        path: Path to config file (uses default if None)

    Returns:
        Configuration dictionary (empty if file doesn't exist)
    """
    config_path = path or get_config_path()
    if config_path.exists():
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    return {}


# (section, key) in config.toml -> Settings field
TOML_FIELDS: dict[tuple[str, str], str] = {
    ("database", "path"): "database_path",
    ("server", "host"): "http_host",
    ("server", "port"): "http_port",
    ("security", "jwt_secret_key"): "jwt_secret_key",
    ("security", "jwt_expiration_minutes"): "jwt_expiration_minutes",
    ("security", "bcrypt_rounds"): "bcrypt_rounds",
    ("paging", "default_size"): "page_default_size",
    ("paging", "max_size"): "page_max_size",
    ("logging", "level"): "log_level",
    ("logging", "format"): "log_format",
    ("logging", "file"): "log_file",
    ("metrics", "enabled"): "metrics_enabled",
}


def flatten_toml_config(toml_config: dict[str, Any]) -> dict[str, Any]:
    """Flatten nested TOML config to flat dictionary for Settings.

    Unknown sections and keys are ignored.

    Args:
        toml_config: Nested TOML configuration

    Returns:
        Flattened configuration dictionary
    """
    overrides: dict[str, Any] = {}
    for (section, key), field_name in TOML_FIELDS.items():
        values = toml_config.get(section, {})
        if key in values:
            overrides[field_name] = values[key]
    return overrides


def load_settings_with_toml(config_path: Path | None = None, **cli_overrides: Any) -> Settings:
    """Load settings with TOML config as base, env vars and CLI as override.

    pydantic-settings gives init kwargs priority over the environment, so
    TOML values that also appear in the environment are dropped here to
    keep env > TOML.

    Args:
        config_path: Optional path to TOML config file
        **cli_overrides: Values from CLI options (None values are ignored)

    Returns:
        Settings instance with merged configuration
    """
    overrides = flatten_toml_config(load_toml_config(config_path))
    env_keys = {key.lower() for key in os.environ}
    overrides = {
        key: value for key, value in overrides.items()
        if f"taskboard_{key}" not in env_keys
    }
    overrides.update({key: value for key, value in cli_overrides.items() if value is not None})
    return Settings(**overrides)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings instance (cached)
    """
    return Settings()
