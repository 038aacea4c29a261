"""
Configuration package for the TrekHub API.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    DatabaseSettings,
    SecuritySettings,
    TrekSettings,
    ClientSettings,
    settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "DatabaseSettings",
    "SecuritySettings",
    "TrekSettings",
    "ClientSettings",
    "settings",
    "get_settings",
    "reload_settings",
]
