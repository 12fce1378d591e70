"""
Label showing the real-world size of the grid selection.
"""

from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLabel, QWidget

from mapgrid.core.types import GridRuntime, SelectionState


def selection_size(selection: SelectionState, runtime: GridRuntime) -> Optional[tuple[float, float]]:
    """Width and height in meters of a visible selection, or None.

    The snapped world extents are used when present; otherwise the pixel
    rectangle is converted with the current meters-per-pixel.
    """
    if not selection.visible:
        return None
    if selection.world is not None:
        return selection.width_m, selection.height_m
    rect = selection.rect_px
    return abs(rect.w) * runtime.mpp_x, abs(rect.h) * runtime.mpp_y


def selection_label_text(selection: SelectionState, runtime: GridRuntime) -> Optional[str]:
    size = selection_size(selection, runtime)
    if size is None:
        return None
    return f"{size[0]:.1f}m x {size[1]:.1f}m"


class SelectionLabel(QLabel):
    """Floating label centered on the selection rectangle."""

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setStyleSheet(
            "QLabel { background-color: rgba(0, 0, 0, 170); color: white; "
            "padding: 3px 6px; border-radius: 3px; font-weight: bold; }"
        )
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
        self.hide()

    def refresh(self, selection: SelectionState, runtime: GridRuntime) -> None:
        """Update text and position from the current selection."""
        text = selection_label_text(selection, runtime)
        if text is None:
            self.hide()
            return

        self.setText(text)
        self.adjustSize()
        center = selection.rect_px.center
        self.move(round(center.x - self.width() / 2), round(center.y - self.height() / 2))
        self.show()
        self.raise_()
