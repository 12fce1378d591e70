"""Spherical Web Mercator viewport.

A map provider that keeps the view state (center, zoom, bearing, size)
and implements the map capability on top of the standard 256 px tile
pyramid. Tile loading is not part of this module; widgets draw whatever
background they like and use the viewport for projection.
"""

import logging
import math
from typing import Optional

from mapgrid.core.types import GeoPoint, PixelPoint, Rect

from .capability import InteractionHandle, MapCallback, MapEventHooks, Unsubscribe

TILE_SIZE = 256
MAX_LATITUDE = 85.0511287798
MIN_ZOOM = 0.0
MAX_ZOOM = 22.0


def _clamp_lat(lat: float) -> float:
    return max(-MAX_LATITUDE, min(MAX_LATITUDE, lat))


def world_size(zoom: float) -> float:
    """Width of the whole world in pixels at ``zoom``."""
    return TILE_SIZE * 2 ** zoom


def geo_to_world(geo: GeoPoint, zoom: float) -> tuple[float, float]:
    """Project a coordinate to absolute world pixels at ``zoom``."""
    size = world_size(zoom)
    x = (geo.lng + 180.0) / 360.0 * size
    sin_lat = math.sin(math.radians(_clamp_lat(geo.lat)))
    y = (0.5 - math.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)) * size
    return x, y


def world_to_geo(x: float, y: float, zoom: float) -> GeoPoint:
    size = world_size(zoom)
    lng = x / size * 360.0 - 180.0
    n = math.pi - 2 * math.pi * y / size
    lat = math.degrees(math.atan(math.sinh(n)))
    return GeoPoint(lng, _clamp_lat(lat))


class WebMercatorViewport:
    """Map capability backed by a Web Mercator view state.

    Pixel (0, 0) is the top-left corner of the container. The bearing
    rotates the map about the container center; a bearing of 0 keeps north
    up.
    """

    def __init__(
        self,
        width: float,
        height: float,
        center: Optional[GeoPoint] = None,
        zoom: float = 16.0,
        bearing: float = 0.0,
    ):
        """Initialize the viewport.

        Args:
            width: Container width in CSS pixels
            height: Container height in CSS pixels
            center: Initial map center
            zoom: Initial zoom level
            bearing: Initial bearing in degrees
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.width = float(width)
        self.height = float(height)
        self.center = center or GeoPoint(127.0, 37.5)
        self.zoom = max(MIN_ZOOM, min(MAX_ZOOM, zoom))
        self.bearing = bearing % 360

        self.drag_pan: Optional[InteractionHandle] = InteractionHandle("drag_pan")
        self.drag_rotate: Optional[InteractionHandle] = InteractionHandle("drag_rotate")
        self.scroll_zoom: Optional[InteractionHandle] = InteractionHandle("scroll_zoom")

        self._hooks = MapEventHooks(self)

    # === MAP CAPABILITY ===

    def _rotate_to_screen(self, dx: float, dy: float) -> tuple[float, float]:
        theta = math.radians(self.bearing)
        cos_t, sin_t = math.cos(theta), math.sin(theta)
        return dx * cos_t + dy * sin_t, -dx * sin_t + dy * cos_t

    def _rotate_to_world(self, sx: float, sy: float) -> tuple[float, float]:
        theta = math.radians(self.bearing)
        cos_t, sin_t = math.cos(theta), math.sin(theta)
        return sx * cos_t - sy * sin_t, sx * sin_t + sy * cos_t

    def project(self, geo: GeoPoint) -> PixelPoint:
        center_x, center_y = geo_to_world(self.center, self.zoom)
        geo_x, geo_y = geo_to_world(geo, self.zoom)
        sx, sy = self._rotate_to_screen(geo_x - center_x, geo_y - center_y)
        return PixelPoint(self.width / 2 + sx, self.height / 2 + sy)

    def unproject(self, pixel: PixelPoint) -> GeoPoint:
        center_x, center_y = geo_to_world(self.center, self.zoom)
        dx, dy = self._rotate_to_world(pixel.x - self.width / 2, pixel.y - self.height / 2)
        return world_to_geo(center_x + dx, center_y + dy, self.zoom)

    def get_center(self) -> GeoPoint:
        return self.center

    def get_container_bounds(self) -> Rect:
        return Rect(0.0, 0.0, self.width, self.height)

    def on_ready_once(self, callback: MapCallback) -> Unsubscribe:
        return self._hooks.on_ready_once(callback)

    def on_render(self, callback: MapCallback) -> Unsubscribe:
        return self._hooks.on_render(callback)

    def on_resize(self, callback: MapCallback) -> Unsubscribe:
        return self._hooks.on_resize(callback)

    # === VIEW MUTATION ===

    @property
    def is_ready(self) -> bool:
        return self._hooks.is_ready

    def mark_ready(self) -> None:
        """Signal that the map finished its first layout."""
        self._hooks.fire_ready()
        self._hooks.fire_render()

    def set_center(self, center: GeoPoint) -> None:
        self.center = GeoPoint(center.lng, _clamp_lat(center.lat))
        self._hooks.fire_render()

    def set_zoom(self, zoom: float) -> None:
        self.zoom = max(MIN_ZOOM, min(MAX_ZOOM, zoom))
        self._hooks.fire_render()

    def pan_by(self, dx: float, dy: float) -> None:
        """Move the map content by (dx, dy) screen pixels."""
        target = PixelPoint(self.width / 2 - dx, self.height / 2 - dy)
        self.center = self.unproject(target)
        self._hooks.fire_render()

    def zoom_around(self, pixel: PixelPoint, delta: float) -> None:
        """Change zoom by ``delta`` keeping the coordinate under ``pixel`` in place."""
        fixed = self.unproject(pixel)
        self.zoom = max(MIN_ZOOM, min(MAX_ZOOM, self.zoom + delta))

        fixed_x, fixed_y = geo_to_world(fixed, self.zoom)
        dx, dy = self._rotate_to_world(pixel.x - self.width / 2, pixel.y - self.height / 2)
        self.center = world_to_geo(fixed_x - dx, fixed_y - dy, self.zoom)
        self._hooks.fire_render()

    def rotate_by(self, degrees: float) -> None:
        self.bearing = (self.bearing + degrees) % 360
        self._hooks.fire_render()

    def resize(self, width: float, height: float) -> None:
        """Update the container size and notify resize listeners."""
        if width == self.width and height == self.height:
            return
        self.width = float(width)
        self.height = float(height)
        self.logger.debug(f"Viewport resized to {self.width:.0f}x{self.height:.0f}")
        self._hooks.fire_resize()
