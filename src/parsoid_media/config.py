# ABOUTME: Application configuration using Pydantic Settings for environment variables
# ABOUTME: Provides type-safe access to logging config and MediaWiki client settings

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="PARSOID_MEDIA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown environment variables
    )

    # MediaWiki Client Configuration
    user_agent: str = Field(
        default="parsoid-media/0.1 (https://www.mediawiki.org/wiki/Parsoid)",
        description="User-Agent header sent to MediaWiki APIs",
    )
    request_timeout: float = Field(default=15.0, description="HTTP request timeout in seconds")
    max_retries: int = Field(default=3, ge=1, description="Attempts per MediaWiki API call before giving up")
    siteinfo_ttl_seconds: float = Field(
        default=3600.0, ge=0.0, description="How long cached site info stays valid per domain"
    )
    thumbnail_width: int = Field(default=320, gt=0, description="Base width for gallery thumbnails")

    # Logging Configuration
    log_mode: Literal["interactive", "production"] = Field(default="interactive", description="Logging output mode")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging verbosity level"
    )

    log_file: Path | None = Field(default=None, description="Custom log file path (overrides default)")


# Global config instance - lazy loaded when first accessed
_config_instance: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance.

    Creates the config on first access, subsequent calls return the same instance.

    Returns:
        Config: The application configuration instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance


def reload_config() -> Config:
    """Reload configuration from environment variables.

    Useful for testing or when environment variables change at runtime.

    Returns:
        Config: A fresh configuration instance
    """
    global _config_instance
    _config_instance = Config()
    return _config_instance
