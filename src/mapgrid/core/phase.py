"""Grid phase and checkerboard parity.

The phase places the first grid boundary on screen so that boundaries
always pass through ``anchor + offset``. Parity is the anchor-relative
index of the cell starting at that boundary (mod 2). Screen-relative
indices shift on every pan frame, anchor-relative ones only change when a
boundary is crossed, which keeps checkerboard colors from flickering.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class AxisAlignment:
    phase: float
    parity: int


@dataclass(frozen=True)
class GridAlignment:
    x: AxisAlignment
    y: AxisAlignment

    @property
    def base_parity(self) -> int:
        return (self.x.parity + self.y.parity) % 2


def phase(anchor_px: float, offset_px: float, spacing_px: float) -> float:
    """Euclidean remainder of ``anchor_px + offset_px`` by ``spacing_px``.

    Returns:
        Phase in ``[0, spacing_px)``; 0.0 for unusable spacing
    """
    if not (math.isfinite(spacing_px) and spacing_px > 0):
        return 0.0
    total = anchor_px + offset_px
    if not math.isfinite(total):
        return 0.0
    value = total % spacing_px
    # Float rounding can land exactly on spacing_px for tiny negative totals
    if value >= spacing_px:
        value = 0.0
    return value


def parity(anchor_px: float, offset_px: float, spacing_px: float) -> int:
    """Checkerboard side of the first on-screen cell, relative to the anchor."""
    if not (math.isfinite(spacing_px) and spacing_px > 0):
        return 0
    total = anchor_px + offset_px
    if not math.isfinite(total):
        return 0
    return int(math.floor(total / spacing_px)) % 2


class PhaseAligner:
    """Computes per-axis phase and parity for the grid origin."""

    @staticmethod
    def align_axis(anchor_px: float, offset_px: float, spacing_px: float) -> AxisAlignment:
        return AxisAlignment(
            phase(anchor_px, offset_px, spacing_px),
            parity(anchor_px, offset_px, spacing_px),
        )

    def align(
        self,
        anchor_px: tuple[float, float],
        offset_px: tuple[float, float],
        spacing_px: tuple[float, float],
    ) -> GridAlignment:
        """Align both axes.

        Args:
            anchor_px: Projected anchor (x, y)
            offset_px: Grid offset converted to pixels (x, y)
            spacing_px: Grid spacing in pixels (x, y)

        Returns:
            GridAlignment with phase and parity for each axis
        """
        return GridAlignment(
            self.align_axis(anchor_px[0], offset_px[0], spacing_px[0]),
            self.align_axis(anchor_px[1], offset_px[1], spacing_px[1]),
        )
