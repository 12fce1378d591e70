"""Render mode selection from grid density."""

import math

from .types import MAX_CELLS, MAX_LINES, MIN_CELL_PX, RenderMode


def grid_extent(spacing_px_x: float, spacing_px_y: float, width: float, height: float) -> tuple[int, int]:
    """Number of columns and rows needed to cover the canvas."""
    cols = math.ceil(width / spacing_px_x) if width > 0 else 0
    rows = math.ceil(height / spacing_px_y) if height > 0 else 0
    return cols, rows


def decide_mode(spacing_px_x: float, spacing_px_y: float, width: float, height: float) -> RenderMode:
    """Choose between filled cells and plain lines.

    Checks run in priority order: sub-pixel-ish cells, fill cost cap,
    stroke cost cap. Everything else, very large cells included, is drawn
    as cells.
    """
    if not (spacing_px_x >= MIN_CELL_PX and spacing_px_y >= MIN_CELL_PX):
        # also catches NaN spacing
        return RenderMode.LINES

    cols, rows = grid_extent(spacing_px_x, spacing_px_y, width, height)
    if cols * rows > MAX_CELLS:
        return RenderMode.LINES
    if cols + rows > MAX_LINES:
        return RenderMode.LINES
    return RenderMode.CELLS
