"""Grid-snapped rectangle selection.

The engine is a small state machine (idle, dragging, committed) driven by
pointer events in container pixel coordinates. While dragging, both drag
endpoints are converted to grid meters using the settings and runtime as
they are at that moment, snapped outward to the grid spacing and projected
back to a pixel rectangle for drawing.
"""

import logging
import math
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from . import telemetry
from .coord_transform import CoordinateTransformer
from .types import GridRuntime, GridSettings, PixelPoint, SelectionPhase, SelectionState, WorldRect

if TYPE_CHECKING:
    from mapgrid.map.capability import MapCapability
    from mapgrid.map.interaction_guard import MapInteractionGuard


class PointerButton(str, Enum):
    LEFT = "left"
    MIDDLE = "middle"
    RIGHT = "right"


def snap_span(a: float, b: float, spacing: float) -> tuple[float, float]:
    """Snap the span between two coordinates outward to multiples of ``spacing``."""
    low = min(math.floor(a / spacing) * spacing, math.floor(b / spacing) * spacing)
    high = max(math.ceil(a / spacing) * spacing, math.ceil(b / spacing) * spacing)
    return low, high


def snap_world_rect(
    start_m: tuple[float, float], current_m: tuple[float, float], spacing: float
) -> WorldRect:
    """Smallest grid-aligned rectangle containing both points."""
    min_x, max_x = snap_span(start_m[0], current_m[0], spacing)
    min_y, max_y = snap_span(start_m[1], current_m[1], spacing)
    return WorldRect(min_x, max_x, min_y, max_y)


class SelectionEngine:
    """Pointer-driven selection state machine.

    Map manipulation (pan, rotate, scroll zoom) is suspended through the
    interaction guard for the duration of a drag and restored afterwards.
    """

    def __init__(
        self,
        map_capability: "MapCapability",
        settings: GridSettings,
        runtime: GridRuntime,
        state: SelectionState,
        guard: "MapInteractionGuard",
        on_change: Optional[Callable[[], None]] = None,
        button: PointerButton = PointerButton.RIGHT,
    ):
        """Initialize the selection engine.

        Args:
            map_capability: Map used to project the grid anchor
            settings: Live grid settings (read on every event)
            runtime: Live grid runtime (meters per pixel)
            state: Selection state owned by this engine
            guard: Interaction guard for the map
            on_change: Called after every state change, typically a repaint request
            button: Pointer button that drives selection
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.map = map_capability
        self.settings = settings
        self.runtime = runtime
        self.state = state
        self.guard = guard
        self.on_change = on_change
        self.button = button

    @property
    def phase(self) -> SelectionPhase:
        return self.state.phase

    def _notify(self) -> None:
        if self.on_change:
            self.on_change()

    def _transformer(self) -> CoordinateTransformer:
        return CoordinateTransformer.from_state(self.map, self.settings, self.runtime)

    def pointer_down(self, pixel: PixelPoint, button: PointerButton) -> bool:
        """Start a new drag.

        Returns:
            True if the event started a selection drag
        """
        if not self.settings.enabled or button != self.button:
            return False

        if self.state.active:
            # A second press without a release still owes a restore
            self.guard.restore()
        self.state.reset()

        self.guard.snapshot()
        self.state.active = True
        self.state.start_px = pixel
        self.state.current_px = pixel

        self.logger.debug(f"Selection drag started at ({pixel.x:.1f}, {pixel.y:.1f})")
        self._notify()
        return True

    def pointer_move(self, pixel: PixelPoint) -> bool:
        """Update the drag with a new pointer position.

        Returns:
            True if the event was consumed by an active drag
        """
        if not self.state.active:
            return False
        if not self.settings.enabled:
            self.cancel()
            return True

        state = self.state
        state.current_px = pixel
        if state.start_px is None or pixel == state.start_px:
            # No movement means no extent
            state.world = None
            state.rect_px = None
            state.width_m = 0.0
            state.height_m = 0.0
            self._notify()
            return True

        transformer = self._transformer()
        spacing = self.settings.effective_spacing_m
        world = snap_world_rect(
            transformer.pixel_to_meters(state.start_px),
            transformer.pixel_to_meters(pixel),
            spacing,
        )

        state.world = world
        state.rect_px = transformer.world_rect_to_pixels(world)
        state.width_m = world.width
        state.height_m = world.height

        self._notify()
        return True

    def pointer_up(self, button: Optional[PointerButton] = None) -> bool:
        """Finish the drag; commits only a selection with positive area.

        Returns:
            True if a drag was finished
        """
        if not self.state.active:
            return False
        if button is not None and button != self.button:
            return False

        state = self.state
        state.active = False
        state.exists = state.world is not None and state.width_m > 0 and state.height_m > 0
        if state.exists:
            self.logger.debug(
                f"Selection committed: {state.width_m:.1f}m x {state.height_m:.1f}m "
                f"{telemetry.dumps(self.runtime, state)}"
            )
        else:
            state.reset()
            self.logger.debug("Selection released without extent")

        self.guard.restore()
        self._notify()
        return True

    def cancel(self) -> None:
        """Drop any selection, in progress or committed."""
        was_dragging = self.state.active
        had_selection = was_dragging or self.state.exists
        self.state.reset()
        if was_dragging:
            self.guard.restore()
        if had_selection:
            self.logger.debug("Selection cancelled")
        self._notify()

    def clear(self) -> None:
        self.cancel()

    def reproject(self) -> None:
        """Recompute the pixel rectangle of the current world rectangle.

        Called after the map view moved; the world extent stays fixed and
        only its screen placement changes.
        """
        state = self.state
        if state.world is None or not (state.active or state.exists):
            return
        state.rect_px = self._transformer().world_rect_to_pixels(state.world)
