"""Configuration exports."""

from .settings import (
    ApiSettings,
    AppSettings,
    Environment,
    LoggingSettings,
    PagerSettings,
    SecuritySettings,
    TenancySettings,
    get_settings,
    load_settings,
)

__all__ = [
    "ApiSettings",
    "AppSettings",
    "Environment",
    "LoggingSettings",
    "PagerSettings",
    "SecuritySettings",
    "TenancySettings",
    "get_settings",
    "load_settings",
]
