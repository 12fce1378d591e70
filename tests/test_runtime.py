"""Tests for the wholesale runtime geometry update."""

import pytest

from mapgrid.core.runtime import recompute_runtime
from mapgrid.core.types import GeoPoint, GridRuntime, PixelPoint, RenderMode, Size

from conftest import FakeMap


class TestRecomputeRuntime:
    def test_spacing_and_mode(self, fake_map, grid_settings) -> None:
        runtime = GridRuntime(canvas_size=Size(800, 600))
        recompute_runtime(runtime, fake_map, grid_settings)

        assert runtime.mpp_x == pytest.approx(1.0, rel=1e-6)
        assert runtime.spacing_px_x == pytest.approx(10.0, rel=1e-6)
        assert runtime.spacing_px_y == pytest.approx(10.0, rel=1e-6)
        assert runtime.mode == RenderMode.CELLS

    def test_phase_follows_anchor_and_offset(self, grid_settings) -> None:
        fake_map = FakeMap(origin_px=PixelPoint(-13.0, 27.0))
        grid_settings.offset_x_cm = 500.0
        runtime = GridRuntime(canvas_size=Size(800, 600))
        recompute_runtime(runtime, fake_map, grid_settings)

        # anchor x -13 + 5 offset = -8 -> phase 2, parity 1
        assert runtime.phase_x == pytest.approx(2.0, abs=1e-6)
        assert runtime.parity_x == 1
        assert runtime.phase_y == pytest.approx(7.0, abs=1e-6)
        assert runtime.parity_y == 0

    def test_reports_mode_change(self, fake_map, grid_settings) -> None:
        runtime = GridRuntime(canvas_size=Size(800, 600))
        assert recompute_runtime(runtime, fake_map, grid_settings) is False

        grid_settings.spacing_m = 1.0
        assert recompute_runtime(runtime, fake_map, grid_settings) is True
        assert runtime.mode == RenderMode.LINES

    def test_spacing_clamped_to_minimum(self, fake_map, grid_settings) -> None:
        grid_settings.spacing_m = 0.0
        runtime = GridRuntime(canvas_size=Size(800, 600))
        recompute_runtime(runtime, fake_map, grid_settings)
        assert runtime.spacing_px_x == pytest.approx(0.1, rel=1e-6)

    def test_anchor_far_from_view(self, fake_map, grid_settings) -> None:
        grid_settings.anchor = GeoPoint(0.5, -0.5)
        runtime = GridRuntime(canvas_size=Size(800, 600))
        recompute_runtime(runtime, fake_map, grid_settings)
        assert 0 <= runtime.phase_x < runtime.spacing_px_x
        assert 0 <= runtime.phase_y < runtime.spacing_px_y
