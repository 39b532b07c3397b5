"""Configuration module for the EDF catalog.

Load and validate TOML configuration with Pydantic models and environment
overrides. Every key has a default, so an empty (or absent) file is valid.

Example config.toml:
--------------------
    [source]
    app_dir = "~/edf-catalog"
    directory = "data/edf"
    max_workers = 4

    [cors]
    allowed_origins = ["http://localhost:5173"]
    allowed_methods = ["GET", "POST"]
    allow_credentials = false

    [logging]
    level = "INFO"
    structured = false

Environment overrides use the ``EDF_CATALOG_`` prefix with ``__`` between
nested keys, e.g. ``EDF_CATALOG_SOURCE__DIRECTORY=/mnt/edf``.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

try:
    import tomllib  # Python >= 3.11
except ImportError:
    import tomli as tomllib  # Python < 3.11

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigError

__all__ = [
    "Settings",
    "SourceConfig",
    "CorsConfig",
    "LoggingConfig",
    "load_settings",
    "ENV_PREFIX",
]

ENV_PREFIX = "EDF_CATALOG_"

# Keys whose environment value is a comma separated list
_LIST_KEYS = {"allowed_origins", "allowed_methods"}


# ============================================================================
# Configuration Models
# ============================================================================


class SourceConfig(BaseModel):
    """Location of the EDF files."""

    model_config = {"extra": "forbid"}

    app_dir: Path = Field(default=Path("."), description="Application root directory")
    directory: Path = Field(default=Path("data/edf"), description="EDF directory, relative to app_dir or absolute")
    max_workers: int = Field(default=1, ge=1, description="Files decoded in parallel during a scan")

    @field_validator("app_dir", "directory", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Any:
        """Reject blank paths, expand environment variables and user home."""
        if isinstance(v, str):
            if not v.strip():
                raise ValueError("directory must be configured")
            return Path(os.path.expandvars(os.path.expanduser(v.strip())))
        return v

    @property
    def source_path(self) -> Path:
        """Absolute, normalized path of the EDF directory."""
        return Path(os.path.normpath((self.app_dir / self.directory).absolute()))


class CorsConfig(BaseModel):
    """Cross-origin settings for the HTTP API."""

    model_config = {"extra": "forbid"}

    allowed_origins: list[str] = Field(default_factory=list)
    allowed_methods: list[str] = Field(default_factory=lambda: ["GET", "POST"])
    allow_credentials: bool = Field(default=False)

    @field_validator("allowed_methods")
    @classmethod
    def validate_methods(cls, v: list[str]) -> list[str]:
        """Require at least one allowed method."""
        if not v:
            raise ValueError("allowed_methods must list at least one HTTP method")
        return [method.upper() for method in v]


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = {"extra": "forbid"}

    level: str = Field(default="INFO")
    structured: bool = Field(default=False)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got '{v}'")
        return v_upper


class Settings(BaseModel):
    """Complete EDF catalog settings."""

    source: SourceConfig = Field(default_factory=SourceConfig)
    cors: CorsConfig = Field(default_factory=CorsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"extra": "forbid"}  # Reject unknown keys


# ============================================================================
# Loading Functions
# ============================================================================


def load_settings(
    toml_path: Path | str | None = None,
    env_prefix: str = ENV_PREFIX,
) -> Settings:
    """Load and validate settings from TOML and environment.

    Args:
        toml_path: Path to TOML configuration file (optional)
        env_prefix: Environment variable prefix (default: EDF_CATALOG_)

    Returns:
        Validated Settings object

    Raises:
        FileNotFoundError: If toml_path specified but doesn't exist
        ConfigError: If configuration is invalid
    """
    config_dict: dict[str, Any] = {}

    if toml_path is not None:
        toml_path = Path(toml_path)
        if not toml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {toml_path}")

        with open(toml_path, "rb") as f:
            try:
                config_dict = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(f"Invalid TOML in {toml_path}: {e}") from e

    config_dict = _apply_env_overrides(config_dict, env_prefix)

    try:
        return Settings(**config_dict)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def _apply_env_overrides(config: dict[str, Any], prefix: str) -> dict[str, Any]:
    """Apply environment variable overrides to config dict.

    Supports nested keys with double underscore notation:
    EDF_CATALOG_SOURCE__DIRECTORY=/mnt/edf
    EDF_CATALOG_LOGGING__LEVEL=DEBUG

    List values are given comma separated:
    EDF_CATALOG_CORS__ALLOWED_ORIGINS=http://a.example,http://b.example
    """
    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        config_key = key[len(prefix) :].lower()
        parts = config_key.split("__")

        current = config
        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]

        final_key = parts[-1]
        if isinstance(current.get(final_key), list) or final_key in _LIST_KEYS:
            current[final_key] = [item.strip() for item in value.split(",") if item.strip()]
        else:
            current[final_key] = _parse_env_value(value)

    return config


def _parse_env_value(value: str) -> Any:
    """Parse environment variable value to appropriate type.

    Returns:
        Parsed value (bool, int, float, or str)
    """
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False

    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        pass

    return value
