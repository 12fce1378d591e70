"""
Configuration type definitions and exceptions for mapgrid.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, cast

from mapgrid.errors import MapgridError

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings


class ConfigVersion(Enum):
    """Configuration version stored with every profile."""
    V1_0 = "1.0"
    CURRENT = V1_0


class ConfigError(MapgridError):
    """Raised when configuration is invalid or cannot be accessed."""
    pass


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str]
    warnings: List[str]


class SettingsGroup:
    """Base for settings subsystems sharing one QSettings instance.

    QSettings returns strings for values read back from INI files, so every
    read goes through a typed helper with a default.
    """

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def _get_str(self, key: str, default: str = "") -> str:
        """Type-safe string retrieval from settings."""
        value = self.settings.value(key, default)
        return str(value) if value is not None else default

    def _get_bool(self, key: str, default: bool = False) -> bool:
        """Type-safe boolean retrieval from settings."""
        value = self.settings.value(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        return bool(value) if value is not None else default

    def _get_float(self, key: str, default: float = 0.0) -> float:
        """Type-safe float retrieval; non-finite values fall back to the default."""
        value = self.settings.value(key, default)
        try:
            if value is None:
                return default
            result = float(cast(str | float, value))
        except (ValueError, TypeError):
            return default
        return result if math.isfinite(result) else default

    def _set(self, key: str, value: object) -> None:
        self.settings.setValue(key, value)
        self.settings.sync()
