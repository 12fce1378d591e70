"""Grid rendering for the map overlay.

This module paints the checkerboard cells, the grid lines and the
selection rectangle onto a drawing surface. It only rasterizes the
geometry already held by the runtime state; nothing is recomputed here.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from mapgrid.core.types import RGBA, GridRuntime, GridSettings, RenderMode, SelectionState

from .surfaces import DrawingSurface

SELECTION_FILL: RGBA = (0, 150, 255, 0.15)
SELECTION_STROKE: RGBA = (0, 150, 255, 0.9)
SELECTION_STROKE_WIDTH = 2.0
GRID_LINE_WIDTH = 1.0

# Per-axis line count above which the line layer is painted as one wash
MAX_STROKE_COUNT = 10000


@dataclass(frozen=True)
class GridPalette:
    """Colors derived from the grid opacity."""

    light: RGBA
    dark: RGBA
    line: RGBA


def palette_for_opacity(opacity: float) -> GridPalette:
    """Build the grid palette for an opacity already clamped to 0.1-0.9."""
    return GridPalette(
        light=(255, 255, 255, 0.25 * opacity),
        dark=(0, 0, 0, 0.15 * opacity),
        line=(255, 255, 255, 0.30 * opacity),
    )


def line_positions(phase: float, spacing: float, extent: float) -> Optional[list[float]]:
    """Positions of the grid lines along one axis.

    Lines start at ``phase`` and continue one spacing past ``extent``.

    Returns:
        The positions, or None if there would be more than MAX_STROKE_COUNT
    """
    if not (spacing > 0 and math.isfinite(spacing)):
        return None
    count = math.floor((extent + spacing - phase) / spacing) + 1
    if count > MAX_STROKE_COUNT:
        return None
    return [phase + k * spacing for k in range(max(0, count))]


class GridRenderer:
    """Paints the grid and the selection onto a DrawingSurface."""

    def __init__(self, settings: GridSettings, runtime: GridRuntime, selection: SelectionState):
        """Initialize the grid renderer.

        Args:
            settings: Live grid settings
            runtime: Geometry computed by the last map update
            selection: Selection state to draw on top of the grid
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.settings = settings
        self.runtime = runtime
        self.selection = selection

    def render(self, surface: DrawingSurface) -> None:
        """Clear the surface and paint the full overlay."""
        size = self.runtime.canvas_size
        surface.clear_rect(0, 0, size.width, size.height)
        if not self.settings.enabled:
            return

        palette = palette_for_opacity(self.settings.effective_opacity)
        if self.runtime.mode == RenderMode.CELLS:
            self._draw_cells(surface, palette)
        self._draw_lines(surface, palette)
        self._draw_selection(surface)

    def _draw_cells(self, surface: DrawingSurface, palette: GridPalette) -> None:
        runtime = self.runtime
        sx, sy = runtime.spacing_px_x, runtime.spacing_px_y
        cols = math.ceil(runtime.canvas_size.width / sx) + 2
        rows = math.ceil(runtime.canvas_size.height / sy) + 2
        base_parity = runtime.parity_x + runtime.parity_y

        for r in range(-1, rows):
            y = runtime.phase_y + r * sy
            for c in range(-1, cols):
                x = runtime.phase_x + c * sx
                is_dark = (base_parity + c + r) % 2 == 0
                surface.fill_rect(x, y, sx, sy, palette.dark if is_dark else palette.light)

    def _draw_lines(self, surface: DrawingSurface, palette: GridPalette) -> None:
        runtime = self.runtime
        width = runtime.canvas_size.width
        height = runtime.canvas_size.height

        xs = line_positions(runtime.phase_x, runtime.spacing_px_x, width)
        ys = line_positions(runtime.phase_y, runtime.spacing_px_y, height)
        if xs is None or ys is None:
            # Lines would merge into a solid tint anyway
            surface.fill_rect(0, 0, width, height, palette.line)
            return

        for x in xs:
            surface.stroke_line(x, 0, x, height, palette.line, GRID_LINE_WIDTH)
        for y in ys:
            surface.stroke_line(0, y, width, y, palette.line, GRID_LINE_WIDTH)

    def _draw_selection(self, surface: DrawingSurface) -> None:
        selection = self.selection
        if not selection.visible:
            return
        rect = selection.rect_px
        surface.fill_rect(rect.x, rect.y, rect.w, rect.h, SELECTION_FILL)
        surface.stroke_rect(rect.x, rect.y, rect.w, rect.h, SELECTION_STROKE, SELECTION_STROKE_WIDTH)
