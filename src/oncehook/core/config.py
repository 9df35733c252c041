"""Configuration management for oncehook.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is read once, when the
default context is first created.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated on load.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ONCEHOOK_",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "testing"] = "development"

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Wrapper Naming
    name_prefix: str = Field(
        default="once",
        description="Namespace tag prepended to every generated wrapper id",
    )

    # Module Loading
    watch_imports: bool = Field(
        default=True,
        description="Install an import watcher so Python imports satisfy after-load callbacks",
    )

    @field_validator("name_prefix")
    @classmethod
    def validate_name_prefix(cls, v: str) -> str:
        """Reject prefixes that would clash with the id separators."""
        v = v.strip()
        if not v:
            raise ValueError("name_prefix must not be empty")
        if ":" in v or "#" in v:
            raise ValueError("name_prefix must not contain ':' or '#'")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()
