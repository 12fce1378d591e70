"""
Core settings management for mapgrid.
"""

import logging
from typing import Optional

from PySide6.QtCore import QSettings

from .logging import LoggingSettings
from .overlay import OverlaySettings
from .types import ConfigError, ConfigVersion, ValidationResult
from .ui import UISettings
from .validation import SettingsValidator

logger = logging.getLogger(__name__)

ORGANIZATION = "mapgrid"
APPLICATION = "mapgrid"


class AppSettings:
    """
    Configuration management using QSettings.

    Provides typed access to application settings with cross-platform
    storage. Each profile lives in its own group:
    mapgrid/mapgrid/<profile>/...
    """

    def __init__(self, profile: str = "default", qsettings: Optional[QSettings] = None):
        """Initialize settings for a profile.

        Args:
            profile: Settings profile name (default: "default")
            qsettings: Backing store; the native per-user store if omitted

        Raises:
            ConfigError: If the backing store cannot be read
        """
        self.settings = qsettings if qsettings is not None else QSettings(ORGANIZATION, APPLICATION)
        self.profile = profile

        status = self.settings.status()
        if status != QSettings.Status.NoError:
            raise ConfigError(f"Cannot access settings at {self.settings.fileName()}: {status.name}")

        self.settings.beginGroup(profile)

        self._overlay = OverlaySettings(self.settings)
        self._logging = LoggingSettings(self.settings)
        self._ui = UISettings(self.settings)
        self._validator = SettingsValidator(self)

        self._ensure_version()

        logger.debug(
            f"Settings initialized for profile '{profile}', stored at: {self.settings.fileName()}"
        )

    def _ensure_version(self) -> None:
        stored = self.settings.value("app/version")
        if stored is None:
            self.settings.setValue("app/version", ConfigVersion.CURRENT.value)
            self.settings.sync()
        elif str(stored) != ConfigVersion.CURRENT.value:
            logger.warning(
                f"Settings version {stored} differs from {ConfigVersion.CURRENT.value}, reading as is"
            )

    # === SUBSYSTEM ACCESS ===

    @property
    def overlay(self) -> OverlaySettings:
        """Access grid overlay settings subsystem."""
        return self._overlay

    @property
    def logging(self) -> LoggingSettings:
        """Access logging settings subsystem."""
        return self._logging

    @property
    def ui(self) -> UISettings:
        return self._ui

    @property
    def version(self) -> str:
        value = self.settings.value("app/version", ConfigVersion.CURRENT.value)
        return str(value)

    # === VALIDATION ===

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        return self._validator.validate()

    def reset_to_defaults(self) -> None:
        """Remove every stored value of this profile."""
        self.settings.remove("")
        self.settings.setValue("app/version", ConfigVersion.CURRENT.value)
        self.settings.sync()
        logger.info(f"Settings profile '{self.profile}' reset to defaults")
