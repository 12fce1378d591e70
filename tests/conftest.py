"""Shared fixtures for mapgrid tests."""

import math
import os

# Must be set before any QApplication is created
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from mapgrid.core.coord_transform import EARTH_RADIUS_M
from mapgrid.core.types import GeoPoint, GridRuntime, GridSettings, PixelPoint, Rect, Size
from mapgrid.map.capability import InteractionHandle, MapEventHooks


class FakeMap:
    """Equatorial plate carree map with a fixed ground resolution.

    One pixel covers ``mpp`` meters on both axes and the geographic origin
    (0, 0) projects to ``origin_px``.
    """

    def __init__(self, width: float = 800, height: float = 600, mpp: float = 1.0,
                 origin_px: PixelPoint = PixelPoint(0.0, 0.0)):
        self.width = width
        self.height = height
        self.origin_px = origin_px
        self.degrees_per_px = math.degrees(mpp / EARTH_RADIUS_M)
        self.drag_pan = InteractionHandle("drag_pan")
        self.drag_rotate = InteractionHandle("drag_rotate")
        self.scroll_zoom = InteractionHandle("scroll_zoom")
        self.hooks = MapEventHooks(self)

    def project(self, geo: GeoPoint) -> PixelPoint:
        return PixelPoint(
            self.origin_px.x + geo.lng / self.degrees_per_px,
            self.origin_px.y - geo.lat / self.degrees_per_px,
        )

    def unproject(self, pixel: PixelPoint) -> GeoPoint:
        return GeoPoint(
            (pixel.x - self.origin_px.x) * self.degrees_per_px,
            -(pixel.y - self.origin_px.y) * self.degrees_per_px,
        )

    def get_center(self) -> GeoPoint:
        return self.unproject(PixelPoint(self.width / 2, self.height / 2))

    def get_container_bounds(self) -> Rect:
        return Rect(0.0, 0.0, self.width, self.height)

    def on_ready_once(self, callback):
        return self.hooks.on_ready_once(callback)

    def on_render(self, callback):
        return self.hooks.on_render(callback)

    def on_resize(self, callback):
        return self.hooks.on_resize(callback)

    def pan_by(self, dx: float, dy: float) -> None:
        self.origin_px = self.origin_px.offset(dx, dy)
        self.hooks.fire_render()


@pytest.fixture
def fake_map() -> FakeMap:
    return FakeMap()


@pytest.fixture
def grid_settings() -> GridSettings:
    """Enabled 10 m grid anchored at the geographic origin."""
    return GridSettings(enabled=True, spacing_m=10.0, opacity=0.5, anchor=GeoPoint(0.0, 0.0))


@pytest.fixture
def unit_runtime() -> GridRuntime:
    """Runtime with 1 meter per pixel on an 800x600 canvas."""
    return GridRuntime(mpp_x=1.0, mpp_y=1.0, canvas_size=Size(800, 600))


@pytest.fixture(scope="session")
def qapp():
    """QApplication shared by all Qt tests."""
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app
