"""Event handlers for MapCanvasWidget.

This module provides the map gestures: left-drag panning, Ctrl+left-drag
rotation, wheel zoom around the cursor and resize propagation. Each
gesture is applied only while the matching interaction handle of the
viewport is enabled.
"""

from PySide6.QtCore import Qt
from PySide6.QtGui import QMouseEvent, QResizeEvent, QWheelEvent

from mapgrid.core.types import PixelPoint

# Zoom levels per wheel notch (120 units of angle delta)
WHEEL_ZOOM_STEP = 0.5
# Degrees of bearing per pixel of horizontal drag
ROTATE_DEGREES_PER_PX = 0.5


class MapCanvasEventHandlers:
    """Mixin class for MapCanvasWidget event handling.

    Handles:
    - Mouse panning (left button)
    - Rotation (Ctrl + left button)
    - Scroll zoom around the cursor
    - Window resize (viewport and overlay geometry)
    """

    def _interaction_enabled(self, name: str) -> bool:
        handle = getattr(self.viewport, name, None)  # type: ignore
        return handle is not None and handle.is_enabled()

    def resizeEvent(self, event: QResizeEvent) -> None:
        """Propagate the new size to the viewport and the overlay layer."""
        super().resizeEvent(event)  # type: ignore

        size = event.size()
        self.overlay_widget.setGeometry(self.rect())  # type: ignore
        self.viewport.resize(size.width(), size.height())  # type: ignore

    def mousePressEvent(self, event: QMouseEvent) -> None:
        """Start panning or rotating."""
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)  # type: ignore
            return

        rotating = bool(event.modifiers() & Qt.KeyboardModifier.ControlModifier)
        if rotating and self._interaction_enabled("drag_rotate"):
            self._drag_mode = "rotate"  # type: ignore
        elif not rotating and self._interaction_enabled("drag_pan"):
            self._drag_mode = "pan"  # type: ignore
        else:
            super().mousePressEvent(event)  # type: ignore
            return

        self._drag_last = event.position()  # type: ignore
        self.setCursor(Qt.CursorShape.ClosedHandCursor)  # type: ignore
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        """Apply the drag delta to the viewport."""
        if self._drag_mode is None:  # type: ignore
            super().mouseMoveEvent(event)  # type: ignore
            return

        position = event.position()
        delta_x = position.x() - self._drag_last.x()  # type: ignore
        delta_y = position.y() - self._drag_last.y()  # type: ignore
        self._drag_last = position  # type: ignore

        if self._drag_mode == "pan" and self._interaction_enabled("drag_pan"):  # type: ignore
            self.viewport.pan_by(delta_x, delta_y)  # type: ignore
        elif self._drag_mode == "rotate" and self._interaction_enabled("drag_rotate"):  # type: ignore
            self.viewport.rotate_by(delta_x * ROTATE_DEGREES_PER_PX)  # type: ignore
        self.update()  # type: ignore
        event.accept()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        """Finish panning or rotating."""
        if event.button() == Qt.MouseButton.LeftButton and self._drag_mode is not None:  # type: ignore
            self._drag_mode = None  # type: ignore
            self.setCursor(Qt.CursorShape.ArrowCursor)  # type: ignore
            event.accept()
        else:
            super().mouseReleaseEvent(event)  # type: ignore

    def wheelEvent(self, event: QWheelEvent) -> None:
        """Zoom around the cursor position."""
        if not self._interaction_enabled("scroll_zoom"):
            event.ignore()
            return

        notches = event.angleDelta().y() / 120
        if notches:
            position = event.position()
            self.viewport.zoom_around(PixelPoint(position.x(), position.y()), notches * WHEEL_ZOOM_STEP)  # type: ignore
            self.update()  # type: ignore
        event.accept()
