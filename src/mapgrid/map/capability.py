"""Map capability interface consumed by the overlay.

The overlay never touches a map provider directly. Providers expose
projection, view queries, movement hooks and three toggleable user
interactions through this interface.
"""

import logging
from typing import Callable, Optional, Protocol

from mapgrid.core.types import GeoPoint, PixelPoint, Rect

MapCallback = Callable[["MapCapability"], None]
Unsubscribe = Callable[[], None]


class InteractionHandle:
    """A user interaction of the map (panning, rotation, scroll zoom) that can be switched off."""

    def __init__(self, name: str, enabled: bool = True):
        self.name = name
        self._enabled = enabled

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        self._enabled = False

    def is_enabled(self) -> bool:
        return self._enabled

    def __repr__(self) -> str:
        return f"InteractionHandle({self.name!r}, enabled={self._enabled})"


class MapCapability(Protocol):
    """What the overlay needs from a map.

    ``project`` and ``unproject`` are approximate inverses for a fixed view
    state. Pixel coordinates share the space of ``get_container_bounds``.
    """

    drag_pan: Optional[InteractionHandle]
    drag_rotate: Optional[InteractionHandle]
    scroll_zoom: Optional[InteractionHandle]

    def project(self, geo: GeoPoint) -> PixelPoint: ...

    def unproject(self, pixel: PixelPoint) -> GeoPoint: ...

    def get_center(self) -> GeoPoint: ...

    def get_container_bounds(self) -> Rect: ...

    def on_ready_once(self, callback: MapCallback) -> Unsubscribe: ...

    def on_render(self, callback: MapCallback) -> Unsubscribe: ...

    def on_resize(self, callback: MapCallback) -> Unsubscribe: ...


class MapEventHooks:
    """Callback registry used by map providers to implement the event hooks."""

    def __init__(self, owner: "MapCapability"):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._owner = owner
        self._ready = False
        self._ready_callbacks: list[MapCallback] = []
        self._render_callbacks: list[MapCallback] = []
        self._resize_callbacks: list[MapCallback] = []

    @property
    def is_ready(self) -> bool:
        return self._ready

    @staticmethod
    def _subscribe(callbacks: list[MapCallback], callback: MapCallback) -> Unsubscribe:
        callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def on_ready_once(self, callback: MapCallback) -> Unsubscribe:
        """Register a ready callback; runs immediately if the map is already ready."""
        if self._ready:
            callback(self._owner)
            return lambda: None
        return self._subscribe(self._ready_callbacks, callback)

    def on_render(self, callback: MapCallback) -> Unsubscribe:
        return self._subscribe(self._render_callbacks, callback)

    def on_resize(self, callback: MapCallback) -> Unsubscribe:
        return self._subscribe(self._resize_callbacks, callback)

    def fire_ready(self) -> None:
        if self._ready:
            return
        self._ready = True
        callbacks, self._ready_callbacks = self._ready_callbacks, []
        self.logger.debug(f"Map ready, notifying {len(callbacks)} listener(s)")
        for callback in callbacks:
            callback(self._owner)

    def fire_render(self) -> None:
        for callback in list(self._render_callbacks):
            callback(self._owner)

    def fire_resize(self) -> None:
        for callback in list(self._resize_callbacks):
            callback(self._owner)
