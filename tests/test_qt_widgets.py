"""Tests for the Qt side of the overlay: raster canvas, input filter and controls."""

import pytest
from PySide6.QtCore import QEvent, QPoint, QPointF, Qt
from PySide6.QtGui import QContextMenuEvent, QKeyEvent, QMouseEvent, QPainter
from PySide6.QtTest import QTest

from mapgrid.core.selection import PointerButton, SelectionEngine
from mapgrid.core.types import GeoPoint, GridRuntime, GridSettings, PixelPoint, Rect, SelectionState, WorldRect
from mapgrid.errors import SurfaceUnavailableError
from mapgrid.gui.controls import GridControlsPanel
from mapgrid.gui.map_view import (
    GridOverlay,
    ManualFrameScheduler,
    MapCanvasWidget,
    QImageCanvas,
    QPainterSurface,
    QtFrameScheduler,
    SelectionInputFilter,
)
from mapgrid.gui.map_view.selection_label import selection_label_text
from mapgrid.map.interaction_guard import MapInteractionGuard


def mouse_event(event_type, x: float, y: float, button=Qt.MouseButton.RightButton) -> QMouseEvent:
    position = QPointF(x, y)
    buttons = button if event_type != QEvent.Type.MouseButtonRelease else Qt.MouseButton.NoButton
    return QMouseEvent(event_type, position, position, button, buttons, Qt.KeyboardModifier.NoModifier)


class TestQImageCanvas:
    def test_overlay_paints_into_image(self, qapp, fake_map, grid_settings) -> None:
        scheduler = ManualFrameScheduler()
        canvas = QImageCanvas(1, 1)
        GridOverlay(canvas, fake_map, grid_settings, scheduler)

        assert scheduler.flush() == 1
        assert canvas.image.width() == 800
        assert canvas.image.height() == 600
        assert canvas.image.pixelColor(5, 5).alpha() > 0

    def test_dpr_scales_backing_image(self, qapp) -> None:
        canvas = QImageCanvas(100, 50, 2.0)
        assert (canvas.image.width(), canvas.image.height()) == (200, 100)
        assert canvas.image.devicePixelRatio() == 2.0

        canvas.resize(30, 20, 1.0)
        assert (canvas.image.width(), canvas.image.height()) == (30, 20)

    def test_inactive_painter_rejected(self, qapp) -> None:
        with pytest.raises(SurfaceUnavailableError):
            QPainterSurface(QPainter())

    def test_clear_rect_erases(self, qapp) -> None:
        canvas = QImageCanvas(10, 10)
        with canvas.open_surface() as surface:
            surface.fill_rect(0, 0, 10, 10, (255, 0, 0, 1.0))
            surface.clear_rect(0, 0, 5, 10)
        assert canvas.image.pixelColor(2, 2).alpha() == 0
        assert canvas.image.pixelColor(7, 2).red() == 255


class TestSelectionInputFilter:
    @pytest.fixture
    def engine(self, fake_map, grid_settings, unit_runtime) -> SelectionEngine:
        return SelectionEngine(
            fake_map, grid_settings, unit_runtime, SelectionState(), MapInteractionGuard(fake_map)
        )

    @pytest.fixture
    def input_filter(self, qapp, engine) -> SelectionInputFilter:
        return SelectionInputFilter(engine)

    def test_right_drag_selects(self, input_filter, engine) -> None:
        assert input_filter.eventFilter(None, mouse_event(QEvent.Type.MouseButtonPress, 5, 5))
        assert input_filter.eventFilter(None, mouse_event(QEvent.Type.MouseMove, 23, 47))
        assert input_filter.eventFilter(None, mouse_event(QEvent.Type.MouseButtonRelease, 23, 47))

        assert engine.state.exists
        assert engine.state.width_m == pytest.approx(30.0)
        assert engine.state.height_m == pytest.approx(50.0)

    def test_left_press_passes_through(self, input_filter, engine) -> None:
        event = mouse_event(QEvent.Type.MouseButtonPress, 5, 5, Qt.MouseButton.LeftButton)
        assert not input_filter.eventFilter(None, event)
        assert not engine.state.active

    def test_escape_cancels_selection(self, input_filter, engine) -> None:
        escape = QKeyEvent(QEvent.Type.KeyPress, Qt.Key.Key_Escape, Qt.KeyboardModifier.NoModifier)
        assert not input_filter.eventFilter(None, escape)

        input_filter.eventFilter(None, mouse_event(QEvent.Type.MouseButtonPress, 5, 5))
        assert input_filter.eventFilter(None, escape)
        assert not engine.state.active
        assert engine.guard.holding is False

    def test_context_menu_suppressed_while_enabled(self, input_filter, grid_settings) -> None:
        event = QContextMenuEvent(QContextMenuEvent.Reason.Mouse, QPoint(5, 5))
        assert input_filter.eventFilter(None, event)

        grid_settings.enabled = False
        assert not input_filter.eventFilter(None, event)


def _runtime(mpp: float = 1.0) -> GridRuntime:
    return GridRuntime(mpp_x=mpp, mpp_y=mpp)


class TestSelectionLabel:
    def test_committed_selection_uses_world_size(self) -> None:
        state = SelectionState(exists=True, rect_px=Rect(0, 0, 3, 5), world=WorldRect(0, 30, 0, 50),
                               width_m=30, height_m=50)
        assert selection_label_text(state, _runtime()) == "30.0m x 50.0m"

    def test_drag_without_world_uses_pixels(self) -> None:
        state = SelectionState(active=True, rect_px=Rect(0, 0, -4, 6))
        assert selection_label_text(state, _runtime(mpp=2.0)) == "8.0m x 12.0m"

    def test_hidden_selection(self) -> None:
        assert selection_label_text(SelectionState(), _runtime()) is None


class TestGridControlsPanel:
    @pytest.fixture
    def panel(self, qapp):
        settings = GridSettings(spacing_m=1.0, anchor=GeoPoint(0.0, 0.0))
        panel = GridControlsPanel(settings)
        panel.emitted = []
        panel.settingsChanged.connect(lambda: panel.emitted.append("settings"))
        panel.anchorRequested.connect(lambda: panel.emitted.append("anchor"))
        panel.clearRequested.connect(lambda: panel.emitted.append("clear"))
        return panel

    def test_reflects_settings(self, panel) -> None:
        assert not panel.enabled_check.isChecked()
        assert panel.spacing_spin.value() == 1.0
        assert panel.opacity_slider.value() == 40
        assert not panel.spacing_spin.isEnabled()

    def test_toggle_enables_grid(self, panel) -> None:
        panel.toggle_enabled()
        assert panel.settings.enabled
        assert panel.spacing_spin.isEnabled()
        assert panel.emitted == ["settings"]

    def test_edits_write_through(self, panel) -> None:
        panel.spacing_spin.setValue(2.5)
        panel.offset_x_spin.setValue(-30)
        panel.opacity_slider.setValue(70)

        assert panel.settings.spacing_m == 2.5
        assert panel.settings.offset_x_cm == -30
        assert panel.settings.opacity == pytest.approx(0.7)
        assert panel.opacity_label.text() == "0.70"
        assert panel.emitted == ["settings"] * 3

    def test_sync_does_not_emit(self, panel) -> None:
        panel.settings.spacing_m = 4.0
        panel.sync_from_settings()
        assert panel.spacing_spin.value() == 4.0
        assert panel.emitted == []

    def test_buttons_emit_requests(self, panel) -> None:
        panel.settings.enabled = True
        panel.sync_from_settings()
        panel.anchor_button.click()
        panel.clear_button.click()
        assert panel.emitted == ["anchor", "clear"]


class TestQtFrameScheduler:
    def test_frame_fires_once(self, qapp) -> None:
        scheduler = QtFrameScheduler(interval_ms=1)
        calls = []
        scheduler.request_frame(lambda: calls.append(1))
        assert scheduler.pending == 1

        QTest.qWait(50)
        assert calls == [1]
        assert scheduler.pending == 0

    def test_cancelled_frame_never_fires(self, qapp) -> None:
        scheduler = QtFrameScheduler(interval_ms=1)
        calls = []
        token = scheduler.request_frame(lambda: calls.append(1))
        scheduler.cancel_frame(token)

        QTest.qWait(50)
        assert calls == []
        assert scheduler.pending == 0


class TestMapCanvasWidget:
    def test_viewport_tracks_widget(self, qapp) -> None:
        widget = MapCanvasWidget(GeoPoint(127.0, 37.5), 16.0)
        ready = []
        widget.map.on_ready_once(lambda m: ready.append(m))
        widget.resize(640, 480)
        widget.show()
        qapp.processEvents()

        assert ready == [widget.map]
        assert widget.map.get_container_bounds() == Rect(0.0, 0.0, 640.0, 480.0)
        center = widget.map.project(GeoPoint(127.0, 37.5))
        assert center.x == pytest.approx(320.0)
        assert center.y == pytest.approx(240.0)
        widget.close()

    def test_overlay_layer_is_transparent_to_mouse(self, qapp) -> None:
        widget = MapCanvasWidget()
        assert widget.overlay_widget.testAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)


class TestMainWindow:
    @pytest.fixture
    def window(self, qapp, tmp_path):
        from PySide6.QtCore import QSettings

        from mapgrid.gui.main_window import MainWindow
        from mapgrid.settings import AppSettings

        settings = AppSettings("test", QSettings(str(tmp_path / "mapgrid.ini"), QSettings.Format.IniFormat))
        window = MainWindow(settings)
        yield window
        window.close()

    def test_overlay_attached_when_map_ready(self, qapp, window) -> None:
        window.show()
        qapp.processEvents()

        assert window.handles is not None
        assert window.grid_settings.anchor == window.map_canvas.map.get_center()

    def test_disabling_from_controls_cancels_selection(self, qapp, window) -> None:
        window.show()
        qapp.processEvents()
        window.controls.toggle_enabled()
        engine = window.handles.engine
        engine.pointer_down(PixelPoint(10, 10), PointerButton.RIGHT)
        assert engine.state.active

        window.controls.toggle_enabled()
        assert not engine.state.active
        assert window.map_canvas.viewport.drag_pan.is_enabled()

    def test_close_saves_geometry(self, qapp, window) -> None:
        window.show()
        qapp.processEvents()
        window.close()

        assert window.handles is None
        assert window.settings.settings.value("ui/window_geometry") is not None
