"""Configuration management for kvgraph.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded once by the
application entry point and is immutable during runtime.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KVGRAPH_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "kvgraph"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"

    # Store Settings
    redis_url: str = "redis://localhost:6379/0"
    namespace: str = Field(
        default="kvgraph",
        description="Leading segment of every key written by the model layer",
    )

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        """Reject namespaces that would break the colon-separated key layout."""
        v = v.strip()
        if not v:
            raise ValueError("namespace cannot be empty")
        if ":" in v:
            raise ValueError("namespace cannot contain ':'")
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
        Settings: Cached application settings instance.
    """
    return Settings()
