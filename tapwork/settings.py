"""
Tapwork Settings - Configuration management using Pydantic Settings.

Loads configuration from environment variables and .env files.
"""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_cache_dir() -> Path:
    """Download cache location, honoring XDG_CACHE_HOME when set."""
    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache) / "tapwork"
    return Path.home() / ".cache" / "tapwork"


class TapworkSettings(BaseSettings):
    """
    Tapwork configuration settings.

    Settings are loaded from:
    1. Environment variables (highest priority)
    2. .env file in current directory
    3. Default values (lowest priority)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="TW_",  # All Tapwork env vars must start with TW_
    )

    # Install locations
    bin_dir: Path = Field(
        default_factory=lambda: Path.home() / ".local" / "bin",
        description="Directory installed binaries are placed in (env: TW_BIN_DIR)",
    )

    cache_dir: Path = Field(
        default_factory=_default_cache_dir,
        description="Directory downloaded artifacts are cached in (env: TW_CACHE_DIR)",
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR) (env: TW_LOG_LEVEL)",
    )

    # Timeouts
    selftest_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Seconds allowed for the post-install self-test (env: TW_SELFTEST_TIMEOUT)",
    )

    download_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Seconds allowed for HTTP operations (env: TW_DOWNLOAD_TIMEOUT)",
    )


# Global settings instance
_settings: TapworkSettings | None = None


def get_settings() -> TapworkSettings:
    """
    Get the global settings instance.

    Creates the settings instance on first call, then returns cached instance.

    Returns:
        TapworkSettings instance
    """
    global _settings
    if _settings is None:
        _settings = TapworkSettings()
    return _settings


def reload_settings() -> TapworkSettings:
    """
    Reload settings from environment/files.

    Useful for testing or when .env file changes.

    Returns:
        Fresh TapworkSettings instance
    """
    global _settings
    _settings = TapworkSettings()
    return _settings
