"""Data model shared by the grid overlay components.

Settings are owned by the controls collaborator, the runtime by the overlay
geometry update and the selection state by the selection engine. Every
component receives these objects by reference and reads them at the point
of use.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

# Density limits for render mode selection
MIN_CELL_PX = 4
MAX_CELLS = 40000
MAX_LINES = 500
LARGE_CELL_PX = 100

MIN_SPACING_M = 0.1
MIN_OPACITY = 0.1
MAX_OPACITY = 0.9

# RGBA with 0-255 channels and a 0.0-1.0 alpha
RGBA = tuple[int, int, int, float]


@dataclass(frozen=True)
class GeoPoint:
    """Geographic coordinate in degrees."""

    lng: float
    lat: float


@dataclass(frozen=True)
class PixelPoint:
    """Point in container (CSS pixel) space."""

    x: float
    y: float

    def offset(self, dx: float, dy: float) -> "PixelPoint":
        return PixelPoint(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in container pixel space."""

    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def center(self) -> PixelPoint:
        return PixelPoint(self.x + self.w / 2, self.y + self.h / 2)


@dataclass(frozen=True)
class Size:
    width: float
    height: float


class RenderMode(str, Enum):
    """Grid painting strategy."""

    CELLS = "cells"
    LINES = "lines"


class SelectionPhase(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    COMMITTED = "committed"


@dataclass
class GridSettings:
    """User-facing grid configuration.

    Mutated in place by the controls; the overlay core only reads it.

    Attributes:
        enabled: Whether the grid is shown and selection is possible
        spacing_m: Grid spacing in meters
        offset_x_cm: Horizontal grid offset from the anchor in centimeters
        offset_y_cm: Vertical grid offset from the anchor in centimeters
        opacity: Overall grid opacity (clamped to 0.1-0.9 when used)
        anchor: Geographic point the grid is aligned to
    """

    enabled: bool = False
    spacing_m: float = 1.0
    offset_x_cm: float = 0.0
    offset_y_cm: float = 0.0
    opacity: float = 0.4
    anchor: GeoPoint = field(default_factory=lambda: GeoPoint(127.0, 37.5))

    @property
    def effective_spacing_m(self) -> float:
        """Spacing clamped to the smallest supported value."""
        spacing = self.spacing_m if math.isfinite(self.spacing_m) else 1.0
        return max(MIN_SPACING_M, spacing)

    @property
    def effective_opacity(self) -> float:
        if not math.isfinite(self.opacity):
            return MIN_OPACITY
        return max(MIN_OPACITY, min(MAX_OPACITY, self.opacity))

    @property
    def offset_x_m(self) -> float:
        return self.offset_x_cm / 100 if math.isfinite(self.offset_x_cm) else 0.0

    @property
    def offset_y_m(self) -> float:
        return self.offset_y_cm / 100 if math.isfinite(self.offset_y_cm) else 0.0


@dataclass
class GridRuntime:
    """Per-frame geometry derived from the map view and settings.

    Rewritten as a whole on every geometry update, so readers never see a
    mix of values from two different view states.
    """

    mpp_x: float = 1.0
    mpp_y: float = 1.0
    spacing_px_x: float = 10.0
    spacing_px_y: float = 10.0
    offset_px_x: float = 0.0
    offset_px_y: float = 0.0
    phase_x: float = 0.0
    phase_y: float = 0.0
    parity_x: int = 0
    parity_y: int = 0
    dpr: float = 1.0
    canvas_size: Size = field(default_factory=lambda: Size(0, 0))
    mode: RenderMode = RenderMode.CELLS


@dataclass(frozen=True)
class WorldRect:
    """Selection extent in meters relative to the grid origin (anchor + offset)."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return max(0.0, self.max_x - self.min_x)

    @property
    def height(self) -> float:
        return max(0.0, self.max_y - self.min_y)


@dataclass
class SelectionState:
    """Grid-snapped rectangle selection.

    ``active`` marks an in-progress drag and ``exists`` a committed
    selection; both false means idle.
    """

    active: bool = False
    exists: bool = False
    start_px: Optional[PixelPoint] = None
    current_px: Optional[PixelPoint] = None
    rect_px: Optional[Rect] = None
    world: Optional[WorldRect] = None
    width_m: float = 0.0
    height_m: float = 0.0

    @property
    def phase(self) -> SelectionPhase:
        if self.active:
            return SelectionPhase.DRAGGING
        if self.exists:
            return SelectionPhase.COMMITTED
        return SelectionPhase.IDLE

    @property
    def visible(self) -> bool:
        return (self.active or self.exists) and self.rect_px is not None

    def reset(self) -> None:
        """Discard everything and return to idle."""
        self.active = False
        self.exists = False
        self.start_px = None
        self.current_px = None
        self.rect_px = None
        self.world = None
        self.width_m = 0.0
        self.height_m = 0.0
