"""
Transparent widget that shows the grid overlay image above the map canvas.
"""

import logging
from typing import Optional

from PySide6.QtCore import QPointF, Qt
from PySide6.QtGui import QPainter, QPaintEvent
from PySide6.QtWidgets import QWidget

from .qt_surface import QImageCanvas


class GridOverlayWidget(QWidget):
    """Overlay layer stacked over the map canvas.

    The grid is rasterized into a QImageCanvas by the overlay; this widget
    only blits the finished image. Mouse events pass through to the map
    canvas, where the selection input filter picks them up.
    """

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
        self.setAttribute(Qt.WidgetAttribute.WA_NoSystemBackground)
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)

        self.canvas = QImageCanvas(max(1, self.width()), max(1, self.height()), self.device_pixel_ratio())

    def device_pixel_ratio(self) -> float:
        return self.devicePixelRatioF() or 1.0

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        painter.drawImage(QPointF(0, 0), self.canvas.image)
        painter.end()
