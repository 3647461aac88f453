"""Configuration management using pydantic-settings.

This module provides configuration loading with the following precedence:
1. CLI options (highest priority)
2. Environment variables (TASKDESK_* prefix)
3. Global config file (~/.config/taskdesk/config.toml)
4. Built-in defaults (lowest priority)
"""

import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE_URL = "http://localhost:5000/api"


def get_config_path() -> Path:
    """Get the global config file path (XDG compliant).

    Returns:
        Path to config file:
        - Linux/macOS: ~/.config/taskdesk/config.toml
        - Windows: %APPDATA%/taskdesk/config.toml
    """
    if os.name == "nt":  # Windows
        base = Path(os.environ.get("APPDATA", Path.home()))
    else:  # Linux/macOS
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / "taskdesk" / "config.toml"


def get_default_session_path() -> Path:
    """Get the default session file path (XDG state directory)."""
    if os.name == "nt":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home()))
    else:
        base = Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state"))
    return base / "taskdesk" / "session.json"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Environment variables use TASKDESK_ prefix:
    - TASKDESK_API_BASE_URL
    - TASKDESK_SESSION_PATH
    - TASKDESK_LOG_LEVEL
    etc.
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKDESK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote task API
    api_base_url: str = Field(default=DEFAULT_API_BASE_URL, description="Base URL of the task API")
    request_timeout_seconds: float = Field(default=10.0, gt=0, description="Per-request timeout in seconds")

    # Session persistence
    session_path: str = Field(
        default_factory=lambda: str(get_default_session_path()),
        description="File holding the persisted bearer token",
    )

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Logging level",
    )
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )
    log_file: str | None = Field(default=None, description="Log file path (optional)")


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


def flatten_toml_config(toml_config: dict[str, Any]) -> dict[str, Any]:
    """Flatten nested TOML config to flat dictionary for Settings.

    Args:
        toml_config: Nested TOML configuration

    Returns:
        Flattened configuration dictionary
    """
    overrides: dict[str, Any] = {}

    if "api" in toml_config:
        if "base_url" in toml_config["api"]:
            overrides["api_base_url"] = toml_config["api"]["base_url"]
        if "timeout_seconds" in toml_config["api"]:
            overrides["request_timeout_seconds"] = toml_config["api"]["timeout_seconds"]

    if "session" in toml_config and "path" in toml_config["session"]:
        overrides["session_path"] = toml_config["session"]["path"]

    if "logging" in toml_config:
        for key in ["level", "format", "file"]:
            if key in toml_config["logging"]:
                overrides[f"log_{key}"] = toml_config["logging"][key]

    return overrides


def get_default_config() -> dict[str, Any]:
    """Get default configuration for init-config.

    Returns:
        Default configuration dictionary
    """
    return {
        "api": {
            "base_url": DEFAULT_API_BASE_URL,
            "timeout_seconds": 10.0,
        },
        "session": {
            "path": str(get_default_session_path()),
        },
        "logging": {
            "level": "WARNING",
            "format": "console",
        },
    }


def load_settings_with_toml(config_path: Path | None = None, **cli_overrides: Any) -> Settings:
    """Load settings with TOML config as base, env vars as override.

    Environment variables win over the TOML file, and explicit CLI overrides
    (those not None) win over both.

    Args:
        config_path: Optional path to TOML config file
        **cli_overrides: Settings fields given on the command line

    Returns:
        Settings instance with merged configuration
    """
    overrides = flatten_toml_config(load_toml_config(config_path))

    # Drop TOML values that the environment already sets
    env_set = {key[len("TASKDESK_"):].lower() for key in os.environ if key.upper().startswith("TASKDESK_")}
    overrides = {k: v for k, v in overrides.items() if k not in env_set}

    overrides.update({k: v for k, v in cli_overrides.items() if v is not None})
    return Settings(**overrides)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance (environment and defaults only).

    Returns:
        Settings instance (cached)
    """
    return Settings()
