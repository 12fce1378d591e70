"""
mapgrid: measurement grid overlay for interactive maps

Overlays a geographically anchored grid on a pannable, zoomable map and
reports the real-world size of grid-snapped rectangle selections.
"""

__version__ = "0.1.0"
__author__ = "mapgrid Contributors"

from .errors import InteractionGuardError, MapgridError, SurfaceUnavailableError

__all__ = [
    "__version__",
    "MapgridError",
    "SurfaceUnavailableError",
    "InteractionGuardError",
]
