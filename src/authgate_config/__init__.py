"""Shared application configuration package."""

from .settings import (
    ConfigurationError,
    Settings,
    clear_settings_cache,
    get_config_dir,
    get_settings,
)

__all__ = [
    "ConfigurationError",
    "Settings",
    "clear_settings_cache",
    "get_config_dir",
    "get_settings",
]
