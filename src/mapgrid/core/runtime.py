"""Geometry update for the grid runtime state."""

import logging
from typing import TYPE_CHECKING

from .coord_transform import meters_per_pixel, pixels_from_meters
from .phase import PhaseAligner
from .render_mode import decide_mode
from .types import GridRuntime, GridSettings, PixelPoint

if TYPE_CHECKING:
    from mapgrid.map.capability import MapCapability

logger = logging.getLogger(__name__)

_aligner = PhaseAligner()


def recompute_runtime(
    runtime: GridRuntime, map_capability: "MapCapability", settings: GridSettings
) -> bool:
    """Recompute every derived field of ``runtime`` from the current view.

    Canvas size and device pixel ratio are taken as already set on the
    runtime. All values are computed first and assigned together.

    Args:
        runtime: Runtime state to overwrite
        map_capability: Live map for projection and distance sampling
        settings: Current grid settings

    Returns:
        True if the render mode changed
    """
    width = runtime.canvas_size.width
    height = runtime.canvas_size.height
    center = PixelPoint(width / 2, height / 2)

    mpp_x, mpp_y = meters_per_pixel(map_capability, center)

    spacing_m = settings.effective_spacing_m
    spacing_px_x = pixels_from_meters(spacing_m, mpp_x)
    spacing_px_y = pixels_from_meters(spacing_m, mpp_y)
    offset_px_x = pixels_from_meters(settings.offset_x_m, mpp_x)
    offset_px_y = pixels_from_meters(settings.offset_y_m, mpp_y)

    anchor_px = map_capability.project(settings.anchor)
    alignment = _aligner.align(
        (anchor_px.x, anchor_px.y),
        (offset_px_x, offset_px_y),
        (spacing_px_x, spacing_px_y),
    )
    mode = decide_mode(spacing_px_x, spacing_px_y, width, height)

    previous_mode = runtime.mode
    runtime.mpp_x = mpp_x
    runtime.mpp_y = mpp_y
    runtime.spacing_px_x = spacing_px_x
    runtime.spacing_px_y = spacing_px_y
    runtime.offset_px_x = offset_px_x
    runtime.offset_px_y = offset_px_y
    runtime.phase_x = alignment.x.phase
    runtime.phase_y = alignment.y.phase
    runtime.parity_x = alignment.x.parity
    runtime.parity_y = alignment.y.parity
    runtime.mode = mode

    if mode != previous_mode:
        logger.debug(
            f"Render mode {previous_mode.value} -> {mode.value} "
            f"(spacing {spacing_px_x:.2f}x{spacing_px_y:.2f}px, canvas {width:.0f}x{height:.0f})"
        )
        return True
    return False
