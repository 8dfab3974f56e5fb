"""Configuration package."""

from finance_app.config.settings import (
    DEFAULT_FROM_ADDRESS,
    AppSettings,
    ResendSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "DEFAULT_FROM_ADDRESS",
    "AppSettings",
    "ResendSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
