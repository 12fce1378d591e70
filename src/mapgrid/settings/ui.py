"""
UI-related settings for mapgrid.
"""

from typing import Any

from PySide6.QtCore import QByteArray
from PySide6.QtWidgets import QMainWindow

from .types import SettingsGroup


class UISettings(SettingsGroup):
    """Persists main window geometry between runs."""

    def save_window_geometry(self, window: QMainWindow) -> None:
        self.settings.setValue("ui/window_geometry", window.saveGeometry())
        self.settings.setValue("ui/window_state", window.saveState())
        self.settings.sync()

    def restore_window_geometry(self, window: QMainWindow) -> bool:
        """Restore window geometry and state. Returns True if restored."""
        geometry = self._byte_array(self.settings.value("ui/window_geometry"))
        state = self._byte_array(self.settings.value("ui/window_state"))

        restored = False
        if geometry is not None:
            restored = window.restoreGeometry(geometry)
        if state is not None:
            window.restoreState(state)
        return restored

    @staticmethod
    def _byte_array(value: Any) -> "QByteArray | None":
        if isinstance(value, QByteArray):
            return value if not value.isEmpty() else None
        if isinstance(value, (bytes, bytearray)) and value:
            return QByteArray(bytes(value))
        return None
