"""Configuration package."""

from ledger_history.config.settings import (
    AppSettings,
    HistorySettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "HistorySettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
