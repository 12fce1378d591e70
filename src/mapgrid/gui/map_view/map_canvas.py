"""Map canvas widget.

This module provides the MapCanvasWidget that owns the Web Mercator
viewport, applies user gestures to it and hosts the grid overlay layer
and the selection label on top of it.
"""

import logging
from typing import Optional

from PySide6.QtCore import QPointF, Qt
from PySide6.QtGui import QColor, QPainter, QPaintEvent, QPen
from PySide6.QtWidgets import QLabel, QWidget

from mapgrid.core.types import GeoPoint
from mapgrid.map.capability import MapCapability
from mapgrid.map.mercator import WebMercatorViewport

from .events import MapCanvasEventHandlers
from .overlay_widget import GridOverlayWidget
from .selection_label import SelectionLabel

BACKGROUND_COLOR = QColor(46, 52, 64)
CROSSHAIR_COLOR = QColor(236, 239, 244, 120)
CROSSHAIR_SIZE = 8


class MapCanvasWidget(MapCanvasEventHandlers, QWidget):
    """Interactive map surface.

    Paints a plain background with a center crosshair (tiles are not
    loaded) and keeps the viewport in sync with the widget size.
    """

    def __init__(
        self,
        center: Optional[GeoPoint] = None,
        zoom: float = 16.0,
        parent: Optional[QWidget] = None,
    ):
        """Initialize the map canvas.

        Args:
            center: Initial map center
            zoom: Initial zoom level
            parent: Parent widget
        """
        super().__init__(parent)

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.viewport = WebMercatorViewport(max(1, self.width()), max(1, self.height()), center, zoom)

        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setMinimumSize(320, 240)

        # Gesture state
        self._drag_mode: Optional[str] = None
        self._drag_last = QPointF()

        # Overlay layers
        self.overlay_widget = GridOverlayWidget(self)
        self.overlay_widget.setGeometry(self.rect())
        self.selection_label = SelectionLabel(self)

        self.status_label = QLabel(self)
        self.status_label.setStyleSheet(
            "QLabel { background-color: rgba(0, 0, 0, 150); color: white; "
            "padding: 4px; border-radius: 3px; }"
        )
        self.status_label.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)

        self.viewport.on_render(self._on_view_changed)
        self._update_status()

    @property
    def map(self) -> MapCapability:
        return self.viewport

    def _on_view_changed(self, _map: MapCapability) -> None:
        self._update_status()
        self.update()

    def _update_status(self) -> None:
        center = self.viewport.get_center()
        self.status_label.setText(
            f"{center.lat:.5f}, {center.lng:.5f}  z{self.viewport.zoom:.2f}  {self.viewport.bearing:.0f}°"
        )
        self.status_label.adjustSize()
        margin = 10
        self.status_label.move(margin, self.height() - self.status_label.height() - margin)

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self.viewport.resize(self.width(), self.height())
        if not self.viewport.is_ready:
            self.logger.debug(f"Map canvas shown at {self.width()}x{self.height()}")
            self.viewport.mark_ready()

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        painter.fillRect(self.rect(), BACKGROUND_COLOR)

        cx = self.width() / 2
        cy = self.height() / 2
        painter.setPen(QPen(CROSSHAIR_COLOR, 1))
        painter.drawLine(QPointF(cx - CROSSHAIR_SIZE, cy), QPointF(cx + CROSSHAIR_SIZE, cy))
        painter.drawLine(QPointF(cx, cy - CROSSHAIR_SIZE), QPointF(cx, cy + CROSSHAIR_SIZE))
        painter.end()

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self._update_status()
