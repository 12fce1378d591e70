"""
QPainter-backed drawing surface and a QImage canvas for the grid overlay.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from PySide6.QtCore import QLineF, QRectF, Qt
from PySide6.QtGui import QColor, QImage, QPainter, QPen

from mapgrid.core.types import RGBA, Size
from mapgrid.errors import SurfaceUnavailableError

from .surfaces import backing_size


def to_qcolor(color: RGBA) -> QColor:
    r, g, b, a = color
    qcolor = QColor(int(r), int(g), int(b))
    qcolor.setAlphaF(max(0.0, min(1.0, a)))
    return qcolor


class QPainterSurface:
    """DrawingSurface on top of an active QPainter.

    The painter is expected to already carry any device pixel ratio
    scaling, so all commands are in CSS pixels.
    """

    def __init__(self, painter: QPainter):
        if not painter.isActive():
            raise SurfaceUnavailableError("QPainter is not active on any paint device")
        self.painter = painter
        self.painter.setRenderHint(QPainter.RenderHint.Antialiasing, False)

    def _pen(self, color: RGBA, width: float) -> QPen:
        pen = QPen(to_qcolor(color))
        pen.setWidthF(width)
        pen.setCapStyle(Qt.PenCapStyle.FlatCap)
        return pen

    def clear_rect(self, x: float, y: float, w: float, h: float) -> None:
        painter = self.painter
        mode = painter.compositionMode()
        painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_Clear)
        painter.fillRect(QRectF(x, y, w, h), Qt.GlobalColor.transparent)
        painter.setCompositionMode(mode)

    def fill_rect(self, x: float, y: float, w: float, h: float, color: RGBA) -> None:
        self.painter.fillRect(QRectF(x, y, w, h), to_qcolor(color))

    def stroke_rect(
        self, x: float, y: float, w: float, h: float, color: RGBA, width: float = 1.0
    ) -> None:
        painter = self.painter
        painter.setPen(self._pen(color, width))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawRect(QRectF(x, y, w, h))

    def stroke_line(
        self, x1: float, y1: float, x2: float, y2: float, color: RGBA, width: float = 1.0
    ) -> None:
        self.painter.setPen(self._pen(color, width))
        self.painter.drawLine(QLineF(x1, y1, x2, y2))


class QImageCanvas:
    """Canvas backed by a premultiplied ARGB QImage.

    The image is sized in device pixels and tagged with the device pixel
    ratio, so painters opened on it work in CSS pixels.
    """

    def __init__(self, width: float, height: float, dpr: float = 1.0):
        """Create the backing image and make sure it can be painted on.

        Raises:
            SurfaceUnavailableError: If no painter can be opened on the image
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._size = Size(width, height)
        self._dpr = dpr
        self.image = self._create_image()

        probe = QPainter()
        if not probe.begin(self.image):
            raise SurfaceUnavailableError("Unable to open a QPainter on the overlay image")
        probe.end()

    def _create_image(self) -> QImage:
        w, h = backing_size(self._size.width, self._size.height, self._dpr)
        image = QImage(w, h, QImage.Format.Format_ARGB32_Premultiplied)
        if image.isNull():
            raise SurfaceUnavailableError(f"Unable to allocate a {w}x{h} overlay image")
        image.setDevicePixelRatio(self._dpr)
        image.fill(Qt.GlobalColor.transparent)
        return image

    @property
    def size(self) -> Size:
        return self._size

    @property
    def dpr(self) -> float:
        return self._dpr

    def resize(self, width: float, height: float, dpr: float) -> None:
        self._size = Size(width, height)
        self._dpr = dpr
        self.image = self._create_image()
        self.logger.debug(f"Overlay image resized to {self.image.width()}x{self.image.height()} (dpr {dpr})")

    @contextmanager
    def open_surface(self) -> Iterator[QPainterSurface]:
        painter = QPainter()
        if not painter.begin(self.image):
            raise SurfaceUnavailableError("Unable to open a QPainter on the overlay image")
        try:
            yield QPainterSurface(painter)
        finally:
            painter.end()
