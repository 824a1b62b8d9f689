"""
Configuration Management for Ledger History

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
History engines read their limits from here when built with
HistoryEngine.from_settings(), so every editing scope in the app behaves
the same unless a caller deliberately overrides it.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class HistorySettings(BaseSettings):
    """Undo/redo history configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_HISTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    max_history_size: int = Field(
        default=100,
        ge=0,
        le=10000,
        description="Maximum undoable edits kept per engine (0 = unbounded)"
    )
    audit_enabled: bool = Field(
        default=True,
        description="Record engine transitions in the audit trail"
    )
    audit_retention: int = Field(
        default=1000,
        ge=1,
        description="Maximum audit events kept by the in-memory audit storage"
    )

    @property
    def history_limit(self) -> Optional[int]:
        """max_history_size as the engine expects it (None = unbounded)."""
        return self.max_history_size or None


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local structured logs"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def history(self) -> HistorySettings:
        return HistorySettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with a
    "<setting_name>_error" entry describing each failure.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.history
        results["history"] = True
    except Exception as e:
        results["history"] = False
        results["history_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
