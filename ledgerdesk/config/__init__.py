"""Configuration package."""

from ledgerdesk.config.settings import (
    AppSettings,
    BulkSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "BulkSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
