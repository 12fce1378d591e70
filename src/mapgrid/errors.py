"""
Exception types for mapgrid.
"""


class MapgridError(Exception):
    """Base class for mapgrid errors."""
    pass


class SurfaceUnavailableError(MapgridError):
    """Raised when a 2D drawing context cannot be acquired for the overlay canvas."""
    pass


class InteractionGuardError(MapgridError):
    """Raised when map interactions are snapshotted twice without a restore."""
    pass
