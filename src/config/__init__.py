"""Configuration package."""

from src.config.settings import (
    AppSettings,
    GeminiSettings,
    Settings,
    StoreSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "GeminiSettings",
    "Settings",
    "StoreSettings",
    "get_settings",
    "validate_all_settings",
]
