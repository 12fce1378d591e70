"""Suspend and restore map interactions around a selection drag."""

import logging
from typing import TYPE_CHECKING, Optional

from mapgrid.errors import InteractionGuardError

if TYPE_CHECKING:
    from .capability import InteractionHandle, MapCapability


INTERACTIONS = ("drag_pan", "drag_rotate", "scroll_zoom")


class MapInteractionGuard:
    """Snapshot-and-disable / restore of map manipulation behaviors.

    ``restore`` only re-enables what was enabled at snapshot time, so a
    behavior switched off before the drag stays off afterwards.
    """

    def __init__(self, map_capability: "MapCapability"):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.map = map_capability
        self._snapshot: Optional[dict[str, bool]] = None

    @property
    def holding(self) -> bool:
        """Whether a snapshot is waiting to be restored."""
        return self._snapshot is not None

    def _handle(self, name: str) -> Optional["InteractionHandle"]:
        return getattr(self.map, name, None)

    def snapshot(self) -> None:
        """Record the enabled state of each interaction, then disable all of them.

        Raises:
            InteractionGuardError: If a previous snapshot was not restored
        """
        if self._snapshot is not None:
            raise InteractionGuardError("Map interactions already suspended")

        snapshot: dict[str, bool] = {}
        for name in INTERACTIONS:
            handle = self._handle(name)
            if handle is None:
                continue
            snapshot[name] = handle.is_enabled()
            handle.disable()

        self._snapshot = snapshot
        self.logger.debug(f"Map interactions suspended: {snapshot}")

    def restore(self) -> None:
        """Re-enable the interactions that were enabled at snapshot time.

        Does nothing when no snapshot is held.
        """
        if self._snapshot is None:
            return

        snapshot, self._snapshot = self._snapshot, None
        for name, was_enabled in snapshot.items():
            handle = self._handle(name)
            if handle is not None and was_enabled:
                handle.enable()
        self.logger.debug("Map interactions restored")
