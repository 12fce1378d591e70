"""Map view package for the grid overlay.

This package provides the components that put the measurement grid on
screen:
- GridRenderer: Cell, line and selection painting onto a drawing surface
- GridOverlay: Geometry updates and coalesced paints for one map
- QImageCanvas / PillowCanvas: Backing rasters for Qt and headless use
- QtFrameScheduler / ManualFrameScheduler: Frame tokens for paint coalescing
- MapCanvasWidget: Interactive map surface hosting the overlay layer
- SelectionInputFilter: Routes canvas pointer events to the selection engine
"""

from .grid_renderer import GridRenderer, palette_for_opacity
from .grid_overlay import GridOverlay, OverlayHandles, attach_overlay
from .surfaces import DrawingSurface, PillowCanvas, PillowSurface, RecordingSurface
from .qt_surface import QImageCanvas, QPainterSurface
from .scheduler import FrameScheduler, ManualFrameScheduler, QtFrameScheduler
from .map_canvas import MapCanvasWidget
from .overlay_widget import GridOverlayWidget
from .selection_input import SelectionInputFilter
from .selection_label import SelectionLabel

__all__ = [
    "GridRenderer",
    "palette_for_opacity",
    "GridOverlay",
    "OverlayHandles",
    "attach_overlay",
    "DrawingSurface",
    "PillowCanvas",
    "PillowSurface",
    "RecordingSurface",
    "QImageCanvas",
    "QPainterSurface",
    "FrameScheduler",
    "ManualFrameScheduler",
    "QtFrameScheduler",
    "MapCanvasWidget",
    "GridOverlayWidget",
    "SelectionInputFilter",
    "SelectionLabel",
]
