"""
Grid overlay startup settings for mapgrid.

These values seed the live grid settings and the initial map view when
the application starts. Changes made through the controls at runtime are
not written back.
"""

import logging
import math

from mapgrid.core.selection import PointerButton
from mapgrid.core.types import MAX_OPACITY, MIN_OPACITY, MIN_SPACING_M, GeoPoint, GridSettings
from mapgrid.map.mercator import MAX_LATITUDE, MAX_ZOOM, MIN_ZOOM

from .types import SettingsGroup

logger = logging.getLogger(__name__)

MAX_OFFSET_CM = 5000.0

DEFAULT_SPACING_M = 1.0
DEFAULT_OPACITY = 0.4
DEFAULT_CENTER = GeoPoint(127.0, 37.5)
DEFAULT_ZOOM = 16.0


class OverlaySettings(SettingsGroup):
    """Manages grid overlay defaults and the initial map view."""

    # === GRID ===

    @property
    def spacing_m(self) -> float:
        """Get initial grid spacing in meters."""
        return max(MIN_SPACING_M, self._get_float("overlay/spacing_m", DEFAULT_SPACING_M))

    @spacing_m.setter
    def spacing_m(self, value: float) -> None:
        if not math.isfinite(value) or value < MIN_SPACING_M:
            logger.warning(f"Invalid grid spacing: {value}, keeping current: {self.spacing_m}")
            return
        self._set("overlay/spacing_m", float(value))

    @property
    def opacity(self) -> float:
        """Get initial grid opacity (0.1-0.9)."""
        value = self._get_float("overlay/opacity", DEFAULT_OPACITY)
        return max(MIN_OPACITY, min(MAX_OPACITY, value))

    @opacity.setter
    def opacity(self, value: float) -> None:
        if not math.isfinite(value):
            logger.warning(f"Invalid grid opacity: {value}, keeping current: {self.opacity}")
            return
        self._set("overlay/opacity", max(MIN_OPACITY, min(MAX_OPACITY, float(value))))

    @property
    def offset_x_cm(self) -> float:
        return self._clamp_offset(self._get_float("overlay/offset_x_cm", 0.0))

    @offset_x_cm.setter
    def offset_x_cm(self, value: float) -> None:
        self._set("overlay/offset_x_cm", self._clamp_offset(value))

    @property
    def offset_y_cm(self) -> float:
        return self._clamp_offset(self._get_float("overlay/offset_y_cm", 0.0))

    @offset_y_cm.setter
    def offset_y_cm(self, value: float) -> None:
        self._set("overlay/offset_y_cm", self._clamp_offset(value))

    @staticmethod
    def _clamp_offset(value: float) -> float:
        if not math.isfinite(value):
            return 0.0
        return max(-MAX_OFFSET_CM, min(MAX_OFFSET_CM, float(value)))

    @property
    def enabled(self) -> bool:
        """Check if the grid starts enabled."""
        return self._get_bool("overlay/enabled", False)

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._set("overlay/enabled", bool(value))

    @property
    def selection_button(self) -> PointerButton:
        """Get the pointer button that drives selection."""
        value = self._get_str("overlay/selection_button", PointerButton.RIGHT.value)
        try:
            return PointerButton(value.lower())
        except ValueError:
            logger.warning(f"Unknown selection button '{value}', using right")
            return PointerButton.RIGHT

    @selection_button.setter
    def selection_button(self, value: str) -> None:
        try:
            button = PointerButton(str(value).lower())
        except ValueError:
            logger.warning(
                f"Invalid selection button: {value}, keeping current: {self.selection_button.value}"
            )
            return
        self._set("overlay/selection_button", button.value)

    # === INITIAL VIEW ===

    @property
    def center(self) -> GeoPoint:
        """Get initial map center."""
        lng = self._get_float("map/center_lng", DEFAULT_CENTER.lng)
        lat = self._get_float("map/center_lat", DEFAULT_CENTER.lat)
        if not -180.0 <= lng <= 180.0:
            lng = DEFAULT_CENTER.lng
        return GeoPoint(lng, max(-MAX_LATITUDE, min(MAX_LATITUDE, lat)))

    @center.setter
    def center(self, value: GeoPoint) -> None:
        self.settings.setValue("map/center_lng", float(value.lng))
        self._set("map/center_lat", float(value.lat))

    @property
    def zoom(self) -> float:
        """Get initial map zoom level."""
        return max(MIN_ZOOM, min(MAX_ZOOM, self._get_float("map/zoom", DEFAULT_ZOOM)))

    @zoom.setter
    def zoom(self, value: float) -> None:
        if not math.isfinite(value):
            logger.warning(f"Invalid zoom: {value}, keeping current: {self.zoom}")
            return
        self._set("map/zoom", max(MIN_ZOOM, min(MAX_ZOOM, float(value))))

    def build_grid_settings(self) -> GridSettings:
        """Create live grid settings seeded from the stored defaults."""
        return GridSettings(
            enabled=self.enabled,
            spacing_m=self.spacing_m,
            offset_x_cm=self.offset_x_cm,
            offset_y_cm=self.offset_y_cm,
            opacity=self.opacity,
            anchor=self.center,
        )
