"""Display-independent grid overlay core.

- coord_transform: meters-per-pixel sampling and pixel/meter conversion
- phase: grid phase and checkerboard parity
- render_mode: cells vs lines selection
- runtime: wholesale geometry recompute
- selection: grid-snapped selection state machine
- telemetry: read-only state snapshots
"""

from .types import (
    GeoPoint,
    PixelPoint,
    Rect,
    Size,
    RenderMode,
    SelectionPhase,
    GridSettings,
    GridRuntime,
    WorldRect,
    SelectionState,
)
from .coord_transform import CoordinateTransformer, haversine, meters_per_pixel, pixels_from_meters
from .phase import PhaseAligner, phase, parity
from .render_mode import decide_mode
from .runtime import recompute_runtime
from .selection import PointerButton, SelectionEngine, snap_world_rect

__all__ = [
    "GeoPoint",
    "PixelPoint",
    "Rect",
    "Size",
    "RenderMode",
    "SelectionPhase",
    "GridSettings",
    "GridRuntime",
    "WorldRect",
    "SelectionState",
    "CoordinateTransformer",
    "haversine",
    "meters_per_pixel",
    "pixels_from_meters",
    "PhaseAligner",
    "phase",
    "parity",
    "decide_mode",
    "recompute_runtime",
    "PointerButton",
    "SelectionEngine",
    "snap_world_rect",
]
