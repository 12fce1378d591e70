"""
Main application window for mapgrid.
"""

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QCloseEvent, QKeySequence
from PySide6.QtWidgets import QDockWidget, QFileDialog, QMainWindow, QMessageBox, QWidget

from mapgrid.core.types import GeoPoint
from mapgrid.map.capability import MapCapability
from mapgrid.settings import AppSettings

from .controls import GridControlsPanel
from .map_view import (
    GridOverlay,
    MapCanvasWidget,
    OverlayHandles,
    QtFrameScheduler,
    SelectionInputFilter,
    attach_overlay,
)
from .map_view.selection_label import selection_label_text


class MainWindow(QMainWindow):
    """Main application window: map canvas with the grid overlay and its controls."""

    def __init__(self, settings: AppSettings, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self.setObjectName("main_window")
        self.settings = settings
        overlay_config = settings.overlay
        self.grid_settings = overlay_config.build_grid_settings()
        self.selection_button = overlay_config.selection_button

        self.map_canvas = MapCanvasWidget(overlay_config.center, overlay_config.zoom, self)
        self.setCentralWidget(self.map_canvas)

        self.scheduler = QtFrameScheduler()
        self.handles: Optional[OverlayHandles] = None
        self._input_filter: Optional[SelectionInputFilter] = None

        self._setup_controls()
        self._setup_actions()
        self.status_bar = self.statusBar()

        self.map_canvas.map.on_ready_once(self._on_map_ready)

        if not self.settings.ui.restore_window_geometry(self):
            self.resize(1200, 800)
        self.setWindowTitle("mapgrid - Map Measurement Grid")

        self.logger.info("Main window initialized")

    @property
    def overlay(self) -> Optional[GridOverlay]:
        return self.handles.overlay if self.handles else None

    def _setup_controls(self) -> None:
        self.controls = GridControlsPanel(self.grid_settings, self.selection_button.value)
        self.controls_dock = QDockWidget("Grid", self)
        self.controls_dock.setObjectName("grid_controls_dock")
        self.controls_dock.setWidget(self.controls)
        self.controls_dock.setFeatures(QDockWidget.DockWidgetFeature.DockWidgetMovable)
        self.addDockWidget(Qt.DockWidgetArea.RightDockWidgetArea, self.controls_dock)

        self.controls.settingsChanged.connect(self.on_grid_settings_changed)
        self.controls.anchorRequested.connect(self.anchor_to_center)
        self.controls.clearRequested.connect(self.clear_selection)

    def _setup_actions(self) -> None:
        file_menu = self.menuBar().addMenu("&File")

        self.action_export = QAction("&Export overlay snapshot...", self)
        self.action_export.setShortcut(QKeySequence("Ctrl+E"))
        self.action_export.triggered.connect(self.export_snapshot)
        file_menu.addAction(self.action_export)

        file_menu.addSeparator()

        self.action_exit = QAction("E&xit", self)
        self.action_exit.setShortcut(QKeySequence.StandardKey.Quit)
        self.action_exit.triggered.connect(self.close)
        file_menu.addAction(self.action_exit)

    # === OVERLAY WIRING ===

    def _on_map_ready(self, map_capability: MapCapability) -> None:
        """Anchor the grid to the map center and attach the overlay."""
        self.grid_settings.anchor = map_capability.get_center()

        overlay_widget = self.map_canvas.overlay_widget
        self.handles = attach_overlay(
            map_capability,
            overlay_widget.canvas,
            self.grid_settings,
            self.scheduler,
            dpr_provider=overlay_widget.device_pixel_ratio,
            button=self.selection_button,
        )
        self.handles.overlay.add_paint_listener(self._on_overlay_painted)

        self._input_filter = SelectionInputFilter(self.handles.engine, self)
        self.map_canvas.installEventFilter(self._input_filter)

        self.logger.debug("Grid overlay attached to map")

    def _on_overlay_painted(self) -> None:
        if self.handles is None:
            return
        self.map_canvas.overlay_widget.update()
        self.map_canvas.selection_label.refresh(self.handles.selection, self.handles.runtime)

        text = selection_label_text(self.handles.selection, self.handles.runtime)
        if text is not None and self.handles.selection.exists:
            self.status_bar.showMessage(f"Selection: {text}", 5000)

    def on_grid_settings_changed(self) -> None:
        if self.handles is not None:
            self.handles.apply_settings()

    def anchor_to_center(self) -> None:
        center: GeoPoint = self.map_canvas.map.get_center()
        self.grid_settings.anchor = center
        self.logger.debug(f"Grid anchored to {center.lat:.6f}, {center.lng:.6f}")
        self.on_grid_settings_changed()

    def clear_selection(self) -> None:
        if self.handles is not None:
            self.handles.engine.clear()

    def export_snapshot(self) -> None:
        """Save the current overlay as a PNG chosen by the user."""
        if self.overlay is None:
            return
        file_name, _ = QFileDialog.getSaveFileName(
            self, "Export overlay snapshot", str(Path.cwd() / "mapgrid.png"), "PNG images (*.png)"
        )
        if not file_name:
            return
        try:
            path = self.overlay.render_snapshot(file_name)
        except OSError as e:
            self.logger.error(f"Failed to export snapshot to {file_name}: {e}")
            QMessageBox.critical(self, "Export failed", f"Could not write {file_name}:\n{e}")
            return
        self.status_bar.showMessage(f"Snapshot saved to {path}", 5000)

    def closeEvent(self, event: QCloseEvent) -> None:
        """Persist window geometry and detach the overlay."""
        self.settings.ui.save_window_geometry(self)
        if self.handles is not None:
            self.handles.detach()
            self.handles = None
        self.logger.info("Main window closed")
        super().closeEvent(event)
