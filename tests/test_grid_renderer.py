"""Tests for grid painting through the recording and Pillow surfaces."""

import pytest

from mapgrid.core.types import GridRuntime, GridSettings, Rect, RenderMode, SelectionState, Size, WorldRect
from mapgrid.gui.map_view.grid_renderer import (
    MAX_STROKE_COUNT,
    SELECTION_FILL,
    SELECTION_STROKE,
    GridRenderer,
    line_positions,
    palette_for_opacity,
)
from mapgrid.gui.map_view.surfaces import PillowCanvas, RecordingSurface


def make_runtime(spacing: float = 10.0, width: float = 100, height: float = 50,
                 mode: RenderMode = RenderMode.CELLS, **kwargs) -> GridRuntime:
    return GridRuntime(
        spacing_px_x=spacing,
        spacing_px_y=spacing,
        canvas_size=Size(width, height),
        mode=mode,
        **kwargs,
    )


class TestPalette:
    def test_low_opacity_alphas(self) -> None:
        palette = palette_for_opacity(0.1)
        assert palette.dark == (0, 0, 0, pytest.approx(0.015))
        assert palette.light == (255, 255, 255, pytest.approx(0.025))
        assert palette.line == (255, 255, 255, pytest.approx(0.03))

    def test_renderer_clamps_opacity(self) -> None:
        settings = GridSettings(enabled=True, opacity=0.0)
        surface = RecordingSurface()
        GridRenderer(settings, make_runtime(), SelectionState()).render(surface)

        alphas = sorted({command[5][3] for command in surface.of_kind("fill_rect")})
        assert alphas == [pytest.approx(0.015), pytest.approx(0.025)]


class TestLinePositions:
    def test_from_phase_past_far_edge(self) -> None:
        assert line_positions(3.0, 10.0, 30.0) == [3.0, 13.0, 23.0, 33.0]

    def test_too_many_lines(self) -> None:
        assert line_positions(0.0, 30.0 / (MAX_STROKE_COUNT + 5), 30.0) is None


class TestGridRenderer:
    def test_disabled_only_clears(self) -> None:
        surface = RecordingSurface()
        GridRenderer(GridSettings(enabled=False), make_runtime(), SelectionState()).render(surface)
        assert surface.commands == [("clear_rect", 0, 0, 100, 50)]

    def test_always_clears_first(self) -> None:
        surface = RecordingSurface()
        GridRenderer(GridSettings(enabled=True), make_runtime(), SelectionState()).render(surface)
        assert surface.commands[0] == ("clear_rect", 0, 0, 100, 50)

    def test_cells_cover_canvas_with_margin(self) -> None:
        surface = RecordingSurface()
        runtime = make_runtime(phase_x=4.0, phase_y=2.0)
        GridRenderer(GridSettings(enabled=True), runtime, SelectionState()).render(surface)

        fills = surface.of_kind("fill_rect")
        # columns -1..11, rows -1..6
        assert len(fills) == 13 * 8
        assert min(f[1] for f in fills) == pytest.approx(-6.0)
        assert min(f[2] for f in fills) == pytest.approx(-8.0)
        assert max(f[1] + f[3] for f in fills) >= 100
        assert max(f[2] + f[4] for f in fills) >= 50

    def test_checkerboard_follows_anchor_parity(self) -> None:
        settings = GridSettings(enabled=True, opacity=0.5)
        palette = palette_for_opacity(0.5)

        def first_cell_color(parity_x: int) -> tuple:
            surface = RecordingSurface()
            runtime = make_runtime(parity_x=parity_x)
            GridRenderer(settings, runtime, SelectionState()).render(surface)
            cell = next(f for f in surface.of_kind("fill_rect") if f[1] == 0 and f[2] == 0)
            return cell[5]

        # cell (0, 0) has c + r == 0
        assert first_cell_color(0) == palette.dark
        assert first_cell_color(1) == palette.light

    def test_neighbouring_cells_alternate(self) -> None:
        surface = RecordingSurface()
        GridRenderer(GridSettings(enabled=True), make_runtime(), SelectionState()).render(surface)
        colors = {(f[1], f[2]): f[5] for f in surface.of_kind("fill_rect")}
        assert colors[(0.0, 0.0)] != colors[(10.0, 0.0)]
        assert colors[(0.0, 0.0)] != colors[(0.0, 10.0)]
        assert colors[(0.0, 0.0)] == colors[(10.0, 10.0)]

    def test_lines_mode_has_no_cells(self) -> None:
        surface = RecordingSurface()
        runtime = make_runtime(spacing=2.0, mode=RenderMode.LINES)
        GridRenderer(GridSettings(enabled=True), runtime, SelectionState()).render(surface)

        assert surface.of_kind("fill_rect") == []
        lines = surface.of_kind("stroke_line")
        vertical = [line for line in lines if line[1] == line[3]]
        horizontal = [line for line in lines if line[2] == line[4]]
        assert len(vertical) == 52
        assert len(horizontal) == 27

    def test_dense_lines_collapse_to_wash(self) -> None:
        surface = RecordingSurface()
        runtime = make_runtime(spacing=0.001, mode=RenderMode.LINES)
        GridRenderer(GridSettings(enabled=True, opacity=0.5), runtime, SelectionState()).render(surface)

        assert surface.of_kind("stroke_line") == []
        assert surface.of_kind("fill_rect") == [("fill_rect", 0, 0, 100, 50, palette_for_opacity(0.5).line)]

    @pytest.mark.parametrize("active,exists", [(True, False), (False, True)])
    def test_selection_drawn_while_dragging_or_committed(self, active: bool, exists: bool) -> None:
        selection = SelectionState(
            active=active, exists=exists, rect_px=Rect(5, 5, 30, 20), world=WorldRect(0, 30, 0, 20),
        )
        surface = RecordingSurface()
        GridRenderer(GridSettings(enabled=True), make_runtime(), selection).render(surface)

        assert surface.commands[-2] == ("fill_rect", 5, 5, 30, 20, SELECTION_FILL)
        assert surface.commands[-1] == ("stroke_rect", 5, 5, 30, 20, SELECTION_STROKE, 2.0)

    def test_idle_selection_not_drawn(self) -> None:
        selection = SelectionState(rect_px=Rect(5, 5, 30, 20))
        surface = RecordingSurface()
        GridRenderer(GridSettings(enabled=True), make_runtime(), selection).render(surface)
        assert surface.of_kind("stroke_rect") == []


class TestPillowRendering:
    def test_cells_paint_pixels(self) -> None:
        canvas = PillowCanvas(100, 50)
        renderer = GridRenderer(GridSettings(enabled=True, opacity=0.9), make_runtime(), SelectionState())
        with canvas.open_surface() as surface:
            renderer.render(surface)

        # inside a cell, away from lines
        assert canvas.image.getpixel((5, 5))[3] > 0
        assert canvas.image.getpixel((15, 5)) != canvas.image.getpixel((5, 5))

    def test_disabled_leaves_canvas_transparent(self) -> None:
        canvas = PillowCanvas(100, 50)
        with canvas.open_surface() as surface:
            surface.fill_rect(0, 0, 100, 50, (255, 0, 0, 1.0))
            GridRenderer(GridSettings(enabled=False), make_runtime(), SelectionState()).render(surface)
        assert canvas.image.getbbox() is None

    def test_device_pixel_ratio_scales_backing(self) -> None:
        canvas = PillowCanvas(100, 50, dpr=2.0)
        assert canvas.image.size == (200, 100)
        with canvas.open_surface() as surface:
            surface.fill_rect(10, 10, 5, 5, (0, 150, 255, 1.0))
        assert canvas.image.getpixel((25, 25)) == (0, 150, 255, 255)
        assert canvas.image.getpixel((31, 31))[3] == 0

    def test_save_png(self, tmp_path) -> None:
        canvas = PillowCanvas(20, 10)
        path = canvas.save(tmp_path / "out" / "grid.png", background=(0, 0, 0, 1.0))
        assert path.exists()
