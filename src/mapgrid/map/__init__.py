"""Map providers and the capability interface the overlay depends on."""

from .capability import InteractionHandle, MapCapability, MapEventHooks
from .interaction_guard import MapInteractionGuard
from .mercator import WebMercatorViewport

__all__ = [
    "InteractionHandle",
    "MapCapability",
    "MapEventHooks",
    "MapInteractionGuard",
    "WebMercatorViewport",
]
