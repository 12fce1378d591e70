"""Grid overlay orchestration.

GridOverlay owns the overlay canvas and keeps the runtime geometry in step
with the map. Geometry is recomputed synchronously in the handler that
observed the change; painting is deferred to the frame scheduler and
coalesced, so any number of draw requests within one frame produce a
single paint.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Union

from mapgrid.core import telemetry
from mapgrid.core.runtime import recompute_runtime
from mapgrid.core.selection import PointerButton, SelectionEngine
from mapgrid.core.types import RGBA, GridRuntime, GridSettings, SelectionState, Size
from mapgrid.map.capability import MapCapability, Unsubscribe
from mapgrid.map.interaction_guard import MapInteractionGuard

from .grid_renderer import GridRenderer
from .scheduler import FrameScheduler
from .surfaces import Canvas, PillowCanvas

PaintListener = Callable[[], None]


class GridOverlay:
    """Keeps the grid runtime current and paints it onto a canvas."""

    def __init__(
        self,
        canvas: Canvas,
        map_capability: MapCapability,
        settings: GridSettings,
        scheduler: FrameScheduler,
        selection: Optional[SelectionState] = None,
        dpr_provider: Optional[Callable[[], float]] = None,
    ):
        """Initialize the overlay and size it to the map container.

        Args:
            canvas: Canvas the overlay paints into
            map_capability: Map the grid is attached to
            settings: Live grid settings
            scheduler: Frame scheduler used to coalesce paints
            selection: Selection state to draw; a fresh one if omitted
            dpr_provider: Returns the current device pixel ratio
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.canvas = canvas
        self.map = map_capability
        self.settings = settings
        self.scheduler = scheduler
        self.selection = selection if selection is not None else SelectionState()
        self.dpr_provider = dpr_provider or (lambda: 1.0)

        self.runtime = GridRuntime()
        self.renderer = GridRenderer(self.settings, self.runtime, self.selection)

        self._frame_token: Optional[int] = None
        self._needs_draw = False
        self._torn_down = False
        self._paint_listeners: list[PaintListener] = []
        self.paint_count = 0

        self.resize()

    @property
    def torn_down(self) -> bool:
        return self._torn_down

    @property
    def frame_pending(self) -> bool:
        return self._frame_token is not None

    def add_paint_listener(self, listener: PaintListener) -> None:
        """Register a callback run after every paint."""
        self._paint_listeners.append(listener)

    def resize(self) -> None:
        """Match the canvas to the map container size and device pixel ratio."""
        if self._torn_down:
            return
        bounds = self.map.get_container_bounds()
        dpr = self.dpr_provider()
        self.canvas.resize(bounds.w, bounds.h, dpr)
        self.runtime.canvas_size = Size(bounds.w, bounds.h)
        self.runtime.dpr = dpr
        self.logger.debug(f"Overlay resized to {bounds.w:.0f}x{bounds.h:.0f} @ {dpr}x")

        self.update_geometry()
        self.request_draw()

    def update_geometry(self) -> None:
        """Recompute the runtime geometry from the current map view."""
        if recompute_runtime(self.runtime, self.map, self.settings):
            self.logger.debug(f"Render mode changed: {telemetry.dumps(self.runtime)}")

    def update_on_map_render(self) -> None:
        self.update_geometry()
        self.request_draw()

    def request_draw(self) -> None:
        """Ask for a paint in the next frame; repeated requests are merged."""
        if self._torn_down:
            return
        self._needs_draw = True
        if self._frame_token is None:
            self._frame_token = self.scheduler.request_frame(self._draw_now)

    def _draw_now(self) -> None:
        self._frame_token = None
        if self._torn_down or not self._needs_draw:
            return
        self._needs_draw = False

        with self.canvas.open_surface() as surface:
            self.renderer.render(surface)
        self.paint_count += 1

        for listener in self._paint_listeners:
            listener()

    def render_snapshot(self, path: Union[str, Path], background: Optional[RGBA] = None) -> Path:
        """Render the current overlay state into an image file.

        Args:
            path: Output file, PNG by suffix
            background: Optional color behind the transparent overlay

        Returns:
            The path written
        """
        size = self.runtime.canvas_size
        snapshot_canvas = PillowCanvas(size.width, size.height, self.runtime.dpr)
        with snapshot_canvas.open_surface() as surface:
            self.renderer.render(surface)
        return snapshot_canvas.save(path, background)

    def teardown(self) -> None:
        """Cancel any pending paint and stop accepting draw requests."""
        if self._frame_token is not None:
            self.scheduler.cancel_frame(self._frame_token)
            self._frame_token = None
        self._needs_draw = False
        self._torn_down = True
        self._paint_listeners.clear()
        self.logger.debug("Overlay torn down")


@dataclass
class OverlayHandles:
    """Everything created by ``attach_overlay``, held by the caller."""

    overlay: GridOverlay
    engine: SelectionEngine
    guard: MapInteractionGuard
    _subscriptions: list[Unsubscribe] = field(default_factory=list)

    @property
    def runtime(self) -> GridRuntime:
        return self.overlay.runtime

    @property
    def selection(self) -> SelectionState:
        return self.overlay.selection

    def refresh(self) -> None:
        """Recompute geometry and repaint after the map or settings changed."""
        self.overlay.update_geometry()
        self.engine.reproject()
        self.overlay.request_draw()

    def apply_settings(self) -> None:
        """React to an external change of the grid settings."""
        if not self.overlay.settings.enabled:
            self.engine.cancel()
        self.refresh()

    def detach(self) -> None:
        """Unsubscribe from the map and tear the overlay down."""
        for unsubscribe in self._subscriptions:
            unsubscribe()
        self._subscriptions.clear()
        self.engine.cancel()
        self.overlay.teardown()


def attach_overlay(
    map_capability: MapCapability,
    canvas: Canvas,
    settings: GridSettings,
    scheduler: FrameScheduler,
    dpr_provider: Optional[Callable[[], float]] = None,
    button: PointerButton = PointerButton.RIGHT,
) -> OverlayHandles:
    """Build the overlay and selection engine and hook them to the map.

    Args:
        map_capability: Map to attach to
        canvas: Canvas for the overlay
        settings: Live grid settings
        scheduler: Frame scheduler for paints
        dpr_provider: Returns the current device pixel ratio
        button: Pointer button that drives selection

    Returns:
        Handles to the created components
    """
    selection = SelectionState()
    overlay = GridOverlay(canvas, map_capability, settings, scheduler, selection, dpr_provider)
    guard = MapInteractionGuard(map_capability)
    engine = SelectionEngine(
        map_capability,
        settings,
        overlay.runtime,
        selection,
        guard,
        on_change=overlay.request_draw,
        button=button,
    )
    handles = OverlayHandles(overlay, engine, guard)

    def on_render(_map: MapCapability) -> None:
        handles.refresh()

    def on_resize(_map: MapCapability) -> None:
        overlay.resize()
        engine.reproject()

    handles._subscriptions.append(map_capability.on_render(on_render))
    handles._subscriptions.append(map_capability.on_resize(on_resize))
    return handles
