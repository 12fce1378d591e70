"""
Event filter that routes pointer and key events of the map canvas to the
selection engine.
"""

import logging
from typing import Any, Optional

from PySide6.QtCore import QEvent, QObject, Qt

from mapgrid.core.selection import PointerButton, SelectionEngine
from mapgrid.core.types import PixelPoint

QT_BUTTONS = {
    Qt.MouseButton.LeftButton: PointerButton.LEFT,
    Qt.MouseButton.MiddleButton: PointerButton.MIDDLE,
    Qt.MouseButton.RightButton: PointerButton.RIGHT,
}


def pointer_button(qt_button: Any) -> Optional[PointerButton]:
    return QT_BUTTONS.get(qt_button)


class SelectionInputFilter(QObject):
    """Feeds map canvas events into the selection engine.

    Events the engine consumes are not delivered to the canvas, so a
    selection drag never pans the map. Escape cancels the selection and
    the context menu is suppressed while the grid is enabled.
    """

    def __init__(self, engine: SelectionEngine, parent: Optional[QObject] = None) -> None:
        """Initialize the filter.

        Args:
            engine: Selection engine receiving the pointer events
            parent: Owning QObject
        """
        super().__init__(parent)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.engine = engine

    def eventFilter(self, watched: Any, event: Any) -> bool:
        """Filter map canvas events.

        Returns:
            True if the event was handled and should be consumed, False otherwise.
        """
        event_type = event.type()

        if event_type == QEvent.Type.MouseButtonPress:
            button = pointer_button(event.button())
            if button is None:
                return False
            return self.engine.pointer_down(self._pixel(event), button)

        if event_type == QEvent.Type.MouseMove:
            return self.engine.pointer_move(self._pixel(event))

        if event_type == QEvent.Type.MouseButtonRelease:
            button = pointer_button(event.button())
            if button is None:
                return False
            return self.engine.pointer_up(button)

        if event_type == QEvent.Type.KeyPress and event.key() == Qt.Key.Key_Escape:
            if self.engine.state.active or self.engine.state.exists:
                self.engine.cancel()
                return True
            return False

        if event_type == QEvent.Type.ContextMenu:
            return self.engine.settings.enabled

        return False

    @staticmethod
    def _pixel(event: Any) -> PixelPoint:
        position = event.position()
        return PixelPoint(position.x(), position.y())
