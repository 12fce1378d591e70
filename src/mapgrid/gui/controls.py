"""
Grid controls panel for mapgrid.

Edits the live grid settings: visibility, spacing, offsets and opacity,
plus buttons to re-anchor the grid and clear the selection.
"""

import logging
from typing import Optional

import qtawesome as qta  # type: ignore
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QIcon, QKeySequence, QPalette, QShortcut
from PySide6.QtWidgets import (
    QCheckBox,
    QDoubleSpinBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from mapgrid.core.types import MAX_OPACITY, MIN_OPACITY, MIN_SPACING_M, GridSettings
from mapgrid.settings.overlay import MAX_OFFSET_CM

MAX_SPACING_M = 100000.0


class GridControlsPanel(QWidget):
    """Panel editing GridSettings in place.

    Every edit writes straight into the settings object and then emits
    ``settingsChanged``; the panel never keeps its own copy.
    """

    settingsChanged = Signal()
    anchorRequested = Signal()
    clearRequested = Signal()

    ANCHOR_ICON = "mdi.crosshairs-gps"
    CLEAR_ICON = "mdi.selection-remove"
    GRID_ICON = "mdi.grid"

    def __init__(
        self,
        settings: GridSettings,
        selection_button: str = "right",
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.settings = settings
        self.selection_button = selection_button

        self._setup_ui()
        self._connect_signals()
        self.sync_from_settings()

        self.toggle_shortcut = QShortcut(QKeySequence("G"), self)
        self.toggle_shortcut.setContext(Qt.ShortcutContext.WindowShortcut)
        self.toggle_shortcut.activated.connect(self.toggle_enabled)

        self.logger.debug("GridControlsPanel initialized")

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)

        self.enabled_check = QCheckBox("Show grid (G)")
        self.enabled_check.setIcon(self._icon(self.GRID_ICON))
        layout.addWidget(self.enabled_check)

        form = QFormLayout()

        self.spacing_spin = QDoubleSpinBox()
        self.spacing_spin.setRange(MIN_SPACING_M, MAX_SPACING_M)
        self.spacing_spin.setSingleStep(0.1)
        self.spacing_spin.setDecimals(1)
        self.spacing_spin.setSuffix(" m")
        form.addRow("Spacing", self.spacing_spin)

        self.offset_x_spin = self._offset_spin()
        form.addRow("Offset X", self.offset_x_spin)
        self.offset_y_spin = self._offset_spin()
        form.addRow("Offset Y", self.offset_y_spin)

        opacity_row = QHBoxLayout()
        self.opacity_slider = QSlider(Qt.Orientation.Horizontal)
        self.opacity_slider.setRange(round(MIN_OPACITY * 100), round(MAX_OPACITY * 100))
        self.opacity_slider.setSingleStep(5)
        opacity_row.addWidget(self.opacity_slider)
        self.opacity_label = QLabel()
        self.opacity_label.setMinimumWidth(32)
        opacity_row.addWidget(self.opacity_label)
        form.addRow("Opacity", opacity_row)

        layout.addLayout(form)

        self.anchor_button = QPushButton("Anchor to center")
        self.anchor_button.setIcon(self._icon(self.ANCHOR_ICON))
        self.anchor_button.setToolTip("Align the grid to the current map center")
        layout.addWidget(self.anchor_button)

        self.clear_button = QPushButton("Clear selection")
        self.clear_button.setIcon(self._icon(self.CLEAR_ICON))
        layout.addWidget(self.clear_button)

        self.hint_label = QLabel(
            f"{self.selection_button.capitalize()}-drag on the map to select.\nEsc clears the selection."
        )
        self.hint_label.setWordWrap(True)
        layout.addWidget(self.hint_label)

        layout.addStretch()

    @staticmethod
    def _offset_spin() -> QDoubleSpinBox:
        spin = QDoubleSpinBox()
        spin.setRange(-MAX_OFFSET_CM, MAX_OFFSET_CM)
        spin.setSingleStep(1.0)
        spin.setDecimals(0)
        spin.setSuffix(" cm")
        return spin

    def _icon(self, name: str) -> QIcon:
        """Build an icon in the palette's text color; empty icon on failure."""
        try:
            color = self.palette().color(QPalette.ColorRole.WindowText)
            return QIcon(qta.icon(name, color=color))  # type: ignore[arg-type]
        except Exception as e:
            self.logger.warning(f"Failed to load icon {name}: {e}")
            return QIcon()

    def _connect_signals(self) -> None:
        self.enabled_check.toggled.connect(self.on_enabled_toggled)
        self.spacing_spin.valueChanged.connect(self.on_spacing_changed)
        self.offset_x_spin.valueChanged.connect(self.on_offset_x_changed)
        self.offset_y_spin.valueChanged.connect(self.on_offset_y_changed)
        self.opacity_slider.valueChanged.connect(self.on_opacity_changed)
        self.anchor_button.clicked.connect(lambda: self.anchorRequested.emit())
        self.clear_button.clicked.connect(lambda: self.clearRequested.emit())

    def sync_from_settings(self) -> None:
        """Show the current settings values without emitting change signals."""
        widgets = (
            self.enabled_check,
            self.spacing_spin,
            self.offset_x_spin,
            self.offset_y_spin,
            self.opacity_slider,
        )
        for widget in widgets:
            widget.blockSignals(True)
        try:
            self.enabled_check.setChecked(self.settings.enabled)
            self.spacing_spin.setValue(self.settings.effective_spacing_m)
            self.offset_x_spin.setValue(self.settings.offset_x_cm)
            self.offset_y_spin.setValue(self.settings.offset_y_cm)
            self.opacity_slider.setValue(round(self.settings.effective_opacity * 100))
        finally:
            for widget in widgets:
                widget.blockSignals(False)
        self._update_opacity_label()
        self._update_enabled_state()

    def _update_opacity_label(self) -> None:
        self.opacity_label.setText(f"{self.settings.effective_opacity:.2f}")

    def _update_enabled_state(self) -> None:
        enabled = self.settings.enabled
        for widget in (self.spacing_spin, self.offset_x_spin, self.offset_y_spin, self.opacity_slider):
            widget.setEnabled(enabled)
        self.clear_button.setEnabled(enabled)

    # === HANDLERS ===

    def toggle_enabled(self) -> None:
        self.enabled_check.setChecked(not self.enabled_check.isChecked())

    def on_enabled_toggled(self, checked: bool) -> None:
        self.settings.enabled = checked
        self._update_enabled_state()
        self.logger.debug(f"Grid {'enabled' if checked else 'disabled'}")
        self.settingsChanged.emit()

    def on_spacing_changed(self, value: float) -> None:
        self.settings.spacing_m = max(MIN_SPACING_M, value)
        self.settingsChanged.emit()

    def on_offset_x_changed(self, value: float) -> None:
        self.settings.offset_x_cm = value
        self.settingsChanged.emit()

    def on_offset_y_changed(self, value: float) -> None:
        self.settings.offset_y_cm = value
        self.settingsChanged.emit()

    def on_opacity_changed(self, value: int) -> None:
        self.settings.opacity = value / 100
        self._update_opacity_label()
        self.settingsChanged.emit()
