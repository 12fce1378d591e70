"""
Settings package for mapgrid.

This package provides typed configuration management on top of Qt's
QSettings for cross-platform storage.

Usage:
    from mapgrid.settings import AppSettings

    settings = AppSettings()
    result = settings.validate()
"""

from .core import AppSettings
from .logging import LoggingSettings
from .overlay import OverlaySettings
from .types import ConfigError, ConfigVersion, ValidationResult

__all__ = [
    "AppSettings",
    "ConfigError",
    "ConfigVersion",
    "LoggingSettings",
    "OverlaySettings",
    "ValidationResult",
]
