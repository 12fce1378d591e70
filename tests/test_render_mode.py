"""Tests for render mode selection."""

import pytest

from mapgrid.core.render_mode import decide_mode, grid_extent
from mapgrid.core.types import RenderMode


class TestDecideMode:
    def test_one_pixel_spacing_is_lines(self) -> None:
        assert decide_mode(1.0, 1.0, 800, 600) == RenderMode.LINES

    def test_ten_pixel_spacing_is_cells(self) -> None:
        assert grid_extent(10.0, 10.0, 800, 600) == (80, 60)
        assert decide_mode(10.0, 10.0, 800, 600) == RenderMode.CELLS

    @pytest.mark.parametrize("size", [(10, 10), (800, 600), (8000, 6000)])
    def test_small_spacing_on_either_axis_is_lines(self, size) -> None:
        assert decide_mode(3.99, 500.0, *size) == RenderMode.LINES
        assert decide_mode(500.0, 3.99, *size) == RenderMode.LINES

    def test_cell_count_cap(self) -> None:
        # 201 x 201 cells, 402 lines
        assert decide_mode(5.0, 5.0, 1005, 1005) == RenderMode.LINES

    def test_line_count_cap(self) -> None:
        # 4 x 500 = 2000 cells but 504 lines
        assert decide_mode(250.0, 4.0, 1000, 2000) == RenderMode.LINES

    def test_very_large_spacing_is_cells(self) -> None:
        assert decide_mode(5000.0, 5000.0, 800, 600) == RenderMode.CELLS

    def test_nan_spacing_is_lines(self) -> None:
        assert decide_mode(float("nan"), 10.0, 800, 600) == RenderMode.LINES
