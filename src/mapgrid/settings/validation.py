"""
Settings validation for mapgrid.
"""

import logging
import math
from typing import TYPE_CHECKING, List

from mapgrid.core.selection import PointerButton
from mapgrid.core.types import MAX_OPACITY, MIN_OPACITY, MIN_SPACING_M

from .overlay import MAX_OFFSET_CM
from .types import ValidationResult

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)

# Spacing above this renders as one or two cells on any sensible zoom
LARGE_SPACING_M = 10000.0


class SettingsValidator:
    """Validates stored configuration values.

    Values out of range are reported even though the typed accessors clamp
    them on read, so a hand-edited profile does not silently change meaning.
    """

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def _raw_float(self, key: str) -> "float | None":
        value = self.settings.settings.value(key)
        if value is None:
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return float("nan")

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        errors: List[str] = []
        warnings: List[str] = []

        spacing = self._raw_float("overlay/spacing_m")
        if spacing is not None:
            if math.isnan(spacing):
                errors.append("Grid spacing is not a number")
            elif spacing < MIN_SPACING_M:
                errors.append(f"Grid spacing {spacing} is below {MIN_SPACING_M} m")
            elif spacing > LARGE_SPACING_M:
                warnings.append(f"Grid spacing {spacing} m is unusually large")

        opacity = self._raw_float("overlay/opacity")
        if opacity is not None and not (MIN_OPACITY <= opacity <= MAX_OPACITY):
            warnings.append(f"Grid opacity {opacity} outside {MIN_OPACITY}-{MAX_OPACITY}, will be clamped")

        for axis in ("x", "y"):
            offset = self._raw_float(f"overlay/offset_{axis}_cm")
            if offset is not None and not (-MAX_OFFSET_CM <= offset <= MAX_OFFSET_CM):
                warnings.append(f"Grid offset {axis} {offset} cm outside ±{MAX_OFFSET_CM:.0f}, will be clamped")

        button = self.settings.settings.value("overlay/selection_button")
        if button is not None and str(button).lower() not in {b.value for b in PointerButton}:
            errors.append(f"Unknown selection button: {button}")

        lat = self._raw_float("map/center_lat")
        if lat is not None and not (-90.0 <= lat <= 90.0):
            errors.append(f"Map center latitude {lat} out of range")

        if errors:
            logger.warning(f"Configuration has {len(errors)} error(s): {'; '.join(errors)}")

        return ValidationResult(is_valid=len(errors) == 0, errors=errors, warnings=warnings)
