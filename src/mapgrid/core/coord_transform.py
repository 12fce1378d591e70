"""Coordinate transformations between geography, screen pixels and meters.

Map projections distort ground distance differently depending on latitude
and zoom, so the meters-per-pixel rate is sampled locally from the live
projection on every geometry update instead of being treated as constant.
"""

import math
from typing import TYPE_CHECKING

from .types import GridRuntime, GridSettings, PixelPoint, Rect, WorldRect

if TYPE_CHECKING:
    from mapgrid.map.capability import MapCapability

EARTH_RADIUS_M = 6371000.0


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two lat/lon points."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def _usable_rate(value: float) -> float:
    return value if math.isfinite(value) and value > 0 else 1.0


def meters_per_pixel(map_capability: "MapCapability", pixel: PixelPoint) -> tuple[float, float]:
    """Sample the local ground distance covered by one screen pixel.

    Args:
        map_capability: Map providing ``unproject``
        pixel: Container pixel to sample at

    Returns:
        (mpp_x, mpp_y); a degenerate or broken sample yields 1.0
    """
    base = map_capability.unproject(pixel)
    right = map_capability.unproject(pixel.offset(1, 0))
    down = map_capability.unproject(pixel.offset(0, 1))

    mpp_x = haversine(base.lat, base.lng, right.lat, right.lng)
    mpp_y = haversine(base.lat, base.lng, down.lat, down.lng)
    return _usable_rate(mpp_x), _usable_rate(mpp_y)


def pixels_from_meters(meters: float, mpp: float) -> float:
    return meters / (mpp or 1)


class CoordinateTransformer:
    """Converts between container pixels and grid meters.

    Grid meters are measured from the grid origin, which is the projected
    anchor shifted by the configured offset. Screen X grows east and
    screen Y grows south, and meters follow the same orientation.
    """

    def __init__(
        self,
        anchor_px: PixelPoint,
        mpp_x: float,
        mpp_y: float,
        offset_x_m: float = 0.0,
        offset_y_m: float = 0.0,
    ):
        """Initialize the transformer.

        Args:
            anchor_px: Anchor position in container pixels
            mpp_x: Meters per pixel along screen X
            mpp_y: Meters per pixel along screen Y
            offset_x_m: Grid offset along X in meters
            offset_y_m: Grid offset along Y in meters
        """
        self.anchor_px = anchor_px
        self.mpp_x = mpp_x or 1
        self.mpp_y = mpp_y or 1
        self.offset_x_m = offset_x_m
        self.offset_y_m = offset_y_m

    @staticmethod
    def from_state(
        map_capability: "MapCapability", settings: GridSettings, runtime: GridRuntime
    ) -> "CoordinateTransformer":
        """Create a transformer from the current map view, settings and runtime.

        Settings are read at call time, so a spacing or offset change made
        mid-drag is picked up by the next conversion.
        """
        anchor_px = map_capability.project(settings.anchor)
        return CoordinateTransformer(
            anchor_px,
            runtime.mpp_x,
            runtime.mpp_y,
            settings.offset_x_m,
            settings.offset_y_m,
        )

    def pixel_to_meters(self, pixel: PixelPoint) -> tuple[float, float]:
        meters_x = (pixel.x - self.anchor_px.x) * self.mpp_x - self.offset_x_m
        meters_y = (pixel.y - self.anchor_px.y) * self.mpp_y - self.offset_y_m
        return meters_x, meters_y

    def meters_to_pixel(self, meters_x: float, meters_y: float) -> PixelPoint:
        return PixelPoint(
            self.anchor_px.x + (meters_x + self.offset_x_m) / self.mpp_x,
            self.anchor_px.y + (meters_y + self.offset_y_m) / self.mpp_y,
        )

    def world_rect_to_pixels(self, world: WorldRect) -> Rect:
        """Project a world rectangle back to a container pixel rectangle."""
        top_left = self.meters_to_pixel(world.min_x, world.min_y)
        return Rect(
            top_left.x,
            top_left.y,
            (world.max_x - world.min_x) / self.mpp_x,
            (world.max_y - world.min_y) / self.mpp_y,
        )
