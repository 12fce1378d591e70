"""Read-only telemetry view of the overlay state.

Used by the selection label, debug logging and tests. Nothing here writes
back into the runtime or selection.
"""

from typing import Any, Optional

import orjson

from .types import GridRuntime, Rect, SelectionState


def _rect_dict(rect: Optional[Rect]) -> Optional[dict[str, float]]:
    if rect is None:
        return None
    return {"x": rect.x, "y": rect.y, "w": rect.w, "h": rect.h}


def snapshot(runtime: GridRuntime, selection: Optional[SelectionState] = None) -> dict[str, Any]:
    """Build a plain dict of the current runtime and selection."""
    data: dict[str, Any] = {
        "mpp": {"x": runtime.mpp_x, "y": runtime.mpp_y},
        "spacing_px": {"x": runtime.spacing_px_x, "y": runtime.spacing_px_y},
        "offset_px": {"x": runtime.offset_px_x, "y": runtime.offset_px_y},
        "phase": {"x": runtime.phase_x, "y": runtime.phase_y},
        "parity": {"x": runtime.parity_x, "y": runtime.parity_y},
        "dpr": runtime.dpr,
        "canvas": {"width": runtime.canvas_size.width, "height": runtime.canvas_size.height},
        "mode": runtime.mode.value,
    }

    if selection is not None:
        world = selection.world
        data["selection"] = {
            "phase": selection.phase.value,
            "active": selection.active,
            "exists": selection.exists,
            "rect_px": _rect_dict(selection.rect_px),
            "world": None
            if world is None
            else {"min_x": world.min_x, "max_x": world.max_x, "min_y": world.min_y, "max_y": world.max_y},
            "width_m": selection.width_m,
            "height_m": selection.height_m,
        }
    return data


def dumps(runtime: GridRuntime, selection: Optional[SelectionState] = None) -> str:
    """Serialize a telemetry snapshot to a compact JSON string."""
    return orjson.dumps(snapshot(runtime, selection), option=orjson.OPT_SORT_KEYS).decode("utf-8")
