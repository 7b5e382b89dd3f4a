"""
Configuration management for the Docsy patient client.

This module provides centralized configuration using Pydantic Settings
for environment-based configuration management.
"""

from typing import Optional

import os
from pathlib import Path

from pydantic import Field, validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_PAGE_SIZE


class ApiSettings(BaseSettings):
    """Backend REST API settings."""

    model_config = SettingsConfigDict(env_prefix="API_")

    base_url: str = Field(
        default="https://docsyerp.in", description="Docsy ERP server base URL"
    )
    timeout_seconds: float = Field(
        default=30.0, description="Total timeout for a single HTTP request"
    )
    page_size: int = Field(
        default=DEFAULT_PAGE_SIZE, description="Items requested per list page"
    )

    @validator("base_url")
    def validate_base_url(cls, v: str) -> str:
        """Validate base URL scheme and strip the trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("API base URL must start with 'http://' or 'https://'")
        return v.rstrip("/")

    @validator("timeout_seconds")
    def validate_timeout(cls, v: float) -> float:
        """Validate request timeout."""
        if v <= 0 or v > 300:
            raise ValueError("Request timeout must be between 0 and 300 seconds")
        return v

    @validator("page_size")
    def validate_page_size(cls, v: int) -> int:
        """Validate list page size."""
        if not 1 <= v <= 100:
            raise ValueError("Page size must be between 1 and 100")
        return v


class StorageSettings(BaseSettings):
    """Local persisted state settings."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    backend: str = Field(default="file", description="Storage backend (memory or file)")
    path: str = Field(
        default="~/.docsypatient/state.json", description="State file for the file backend"
    )
    key_prefix: str = Field(default="docclinic_", description="Prefix for persisted keys")

    @validator("backend")
    def validate_backend(cls, v: str) -> str:
        """Validate storage backend."""
        valid_backends = ["memory", "file"]
        if v.lower() not in valid_backends:
            raise ValueError(f"Storage backend must be one of: {valid_backends}")
        return v.lower()

    @property
    def resolved_path(self) -> Path:
        return Path(self.path).expanduser()


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(default="json", description="Log format (json or text)")
    file_path: Optional[str] = Field(default=None, description="Log file path")

    @validator("level")
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @validator("format")
    def validate_format(cls, v: str) -> str:
        if v.lower() not in ["json", "text"]:
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()


class ProfileSettings(BaseSettings):
    """Patient profile selection settings."""

    model_config = SettingsConfigDict(env_prefix="PROFILE_")

    strict_membership: bool = Field(
        default=False,
        description="Reject active profiles that are not in the stored profile set",
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    app_name: str = Field(default="Docsy-Patient", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    app_env: str = Field(default="development", description="Application environment")
    debug: bool = Field(default=False, description="Debug mode")

    # Sub-settings
    api: ApiSettings = Field(default_factory=ApiSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    profile: ProfileSettings = Field(default_factory=ProfileSettings)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

        # Override sub-settings with environment variables
        if "api" not in kwargs:
            self.api = ApiSettings()
        if "storage" not in kwargs:
            self.storage = StorageSettings()
        if "logging" not in kwargs:
            self.logging = LoggingSettings()
        if "profile" not in kwargs:
            self.profile = ProfileSettings()

    @validator("app_env")
    def validate_app_env(cls, v: str) -> str:
        """Validate application environment."""
        valid_envs = ["development", "staging", "production", "testing"]
        if v.lower() not in valid_envs:
            raise ValueError(f"App environment must be one of: {valid_envs}")
        return v.lower()

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.app_env == "testing"


# Global settings instance (loaded after attempting to read .env)
_settings: Optional[Settings] = None


def _load_env_file_if_available() -> None:
    """Best-effort load of .env by searching current and parent directories.

    This helps when the CLI is started outside the project folder and
    pydantic's env_file doesn't get resolved as expected.
    """
    from dotenv import load_dotenv

    cwd = Path(os.getcwd()).resolve()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / ".env"
        if candidate.exists():
            # Do not override already-set environment variables
            load_dotenv(dotenv_path=str(candidate), override=False)
            break


def get_settings() -> Settings:
    """Get application settings instance (lazy-init with .env discovery)."""
    global _settings
    if _settings is None:
        _load_env_file_if_available()
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
