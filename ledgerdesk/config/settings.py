"""
Configuration Management for ledgerdesk

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what knobs exist and ensures all
configuration is validated at startup.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BulkSettings(BaseSettings):
    """Bulk operation limits."""

    model_config = SettingsConfigDict(
        env_prefix="BULK_",
        extra="ignore"
    )

    max_operations: int = Field(
        default=20,
        ge=1,
        le=1000,
        description="Maximum number of operations in a single bulk request"
    )


class AppSettings(BaseSettings):
    """
    Process-wide settings: environment name and logging.

    Read from plain environment variables (no prefix) and .env.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Deployment name (development, production, ...)"
    )
    debug_mode: bool = Field(
        default=False,
        description="Force DEBUG logging"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level for the structured logger"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (False = human-readable console output)"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept standard logging level names."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return v.upper()

    @property
    def effective_log_level(self) -> str:
        """Debug mode always logs at DEBUG."""
        return "DEBUG" if self.debug_mode else self.log_level


class Settings(BaseSettings):
    """
    Entry point for all settings groups.

    Each group is built on access, so one bad group does not hide the others.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Built per access; see validate_all_settings()

    @property
    def bulk(self) -> BulkSettings:
        return BulkSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    The container is cached; tests call get_settings.cache_clear()
    after changing the environment.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Try to load every settings group.

    Returns a dict of {setting_name: is_valid}.
    Failed groups also get a "<name>_error" entry with the message.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.bulk
        results["bulk"] = True
    except Exception as e:
        results["bulk"] = False
        results["bulk_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
