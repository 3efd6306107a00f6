"""Environment-based configuration using pydantic-settings.

Provides the default retry policy and logging setup, overridable through
environment variables or a .env file.

Example:
    >>> from retrycase.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.retry.min_timeout
    1000.0

    # Or with environment variables:
    # RETRYCASE_RETRY_RETRIES=3
    # RETRYCASE_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

import math
from functools import lru_cache
from typing import Literal

from pydantic import Field, NonNegativeFloat, NonNegativeInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrySettings(BaseSettings):
    """Default retry policy. Times are in milliseconds."""

    model_config = SettingsConfigDict(
        env_prefix="RETRYCASE_RETRY_",
        extra="ignore",
    )

    retries: NonNegativeInt = Field(default=10, description="Number of precomputed delays")
    factor: NonNegativeFloat = Field(default=2.0, description="Exponential growth base")
    min_timeout: NonNegativeFloat = Field(default=1000.0, description="Lower delay bound in ms")
    max_timeout: NonNegativeFloat = Field(default=math.inf, description="Upper delay bound in ms")
    randomize: bool = False

    def policy_defaults(self) -> dict[str, object]:
        """Defaults merged under caller-supplied retry options."""
        return self.model_dump()


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RETRYCASE_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["json", "text"] = "text"


class RetrycaseSettings(BaseSettings):
    """Root settings for retrycase.

    Example environment variables:
        RETRYCASE_RETRY_RETRIES=5
        RETRYCASE_RETRY_MIN_TIMEOUT=250
        RETRYCASE_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="RETRYCASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    retry: RetrySettings = Field(default_factory=RetrySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> RetrycaseSettings:
    """Get the global settings instance (cached)."""
    return RetrycaseSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
