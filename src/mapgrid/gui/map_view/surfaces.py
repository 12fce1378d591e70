"""Drawing surfaces for the grid overlay.

A drawing surface is an immediate-mode 2D raster target addressed in CSS
pixels. A canvas owns the backing raster (CSS size x device pixel ratio)
and hands out surfaces for one paint pass at a time.

This module holds the protocol plus two display-independent backends:
a Pillow image (snapshots, headless rendering) and a command recorder.
The Qt backend lives in ``qt_surface``.
"""

import logging
import math
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Protocol, Union

from PIL import Image, ImageDraw

from mapgrid.core.types import RGBA, Size
from mapgrid.errors import SurfaceUnavailableError


class DrawingSurface(Protocol):
    """Immediate-mode drawing commands in CSS pixel units."""

    def clear_rect(self, x: float, y: float, w: float, h: float) -> None: ...

    def fill_rect(self, x: float, y: float, w: float, h: float, color: RGBA) -> None: ...

    def stroke_rect(
        self, x: float, y: float, w: float, h: float, color: RGBA, width: float = 1.0
    ) -> None: ...

    def stroke_line(
        self, x1: float, y1: float, x2: float, y2: float, color: RGBA, width: float = 1.0
    ) -> None: ...


class Canvas(Protocol):
    """Owner of a backing raster that can be painted through a DrawingSurface."""

    @property
    def size(self) -> Size: ...

    @property
    def dpr(self) -> float: ...

    def resize(self, width: float, height: float, dpr: float) -> None: ...

    def open_surface(self): ...


def backing_size(width: float, height: float, dpr: float) -> tuple[int, int]:
    """Backing raster size in device pixels, never smaller than 1x1."""
    return max(1, math.floor(width * dpr)), max(1, math.floor(height * dpr))


class RecordingSurface:
    """Surface that records every command instead of drawing.

    Each entry is a tuple starting with the command name followed by its
    arguments, e.g. ``("fill_rect", x, y, w, h, color)``.
    """

    def __init__(self):
        self.commands: list[tuple] = []

    def clear_rect(self, x: float, y: float, w: float, h: float) -> None:
        self.commands.append(("clear_rect", x, y, w, h))

    def fill_rect(self, x: float, y: float, w: float, h: float, color: RGBA) -> None:
        self.commands.append(("fill_rect", x, y, w, h, color))

    def stroke_rect(
        self, x: float, y: float, w: float, h: float, color: RGBA, width: float = 1.0
    ) -> None:
        self.commands.append(("stroke_rect", x, y, w, h, color, width))

    def stroke_line(
        self, x1: float, y1: float, x2: float, y2: float, color: RGBA, width: float = 1.0
    ) -> None:
        self.commands.append(("stroke_line", x1, y1, x2, y2, color, width))

    def of_kind(self, name: str) -> list[tuple]:
        return [command for command in self.commands if command[0] == name]

    def reset(self) -> None:
        self.commands.clear()


def _pil_color(color: RGBA) -> tuple[int, int, int, int]:
    r, g, b, a = color
    return int(r), int(g), int(b), max(0, min(255, round(a * 255)))


class PillowSurface:
    """Surface drawing into a Pillow RGBA image with alpha compositing.

    Coordinates are CSS pixels and get scaled by the device pixel ratio.
    """

    def __init__(self, image: Image.Image, dpr: float = 1.0):
        if image.mode != "RGBA":
            raise SurfaceUnavailableError(f"Pillow surface needs an RGBA image, got {image.mode}")
        self.image = image
        self.dpr = dpr

    def _device_box(self, x: float, y: float, w: float, h: float) -> Optional[tuple[int, int, int, int]]:
        """Scale and clip a CSS rect to device pixels; None if nothing is left."""
        if w < 0:
            x, w = x + w, -w
        if h < 0:
            y, h = y + h, -h
        left = max(0, math.floor(x * self.dpr))
        top = max(0, math.floor(y * self.dpr))
        right = min(self.image.width, math.ceil((x + w) * self.dpr))
        bottom = min(self.image.height, math.ceil((y + h) * self.dpr))
        if right <= left or bottom <= top:
            return None
        return left, top, right, bottom

    def _composite(self, box: tuple[int, int, int, int], color: RGBA) -> None:
        left, top, right, bottom = box
        layer = Image.new("RGBA", (right - left, bottom - top), _pil_color(color))
        self.image.alpha_composite(layer, dest=(left, top))

    def clear_rect(self, x: float, y: float, w: float, h: float) -> None:
        box = self._device_box(x, y, w, h)
        if box is not None:
            self.image.paste((0, 0, 0, 0), box)

    def fill_rect(self, x: float, y: float, w: float, h: float, color: RGBA) -> None:
        box = self._device_box(x, y, w, h)
        if box is not None:
            self._composite(box, color)

    def stroke_rect(
        self, x: float, y: float, w: float, h: float, color: RGBA, width: float = 1.0
    ) -> None:
        half = width / 2
        self.fill_rect(x - half, y - half, w + width, width, color)
        self.fill_rect(x - half, y + h - half, w + width, width, color)
        self.fill_rect(x - half, y + half, width, h - width, color)
        self.fill_rect(x + w - half, y + half, width, h - width, color)

    def stroke_line(
        self, x1: float, y1: float, x2: float, y2: float, color: RGBA, width: float = 1.0
    ) -> None:
        half = width / 2
        if x1 == x2:
            self.fill_rect(x1 - half, min(y1, y2), width, abs(y2 - y1), color)
            return
        if y1 == y2:
            self.fill_rect(min(x1, x2), y1 - half, abs(x2 - x1), width, color)
            return

        # Arbitrary direction: draw on a scratch layer and composite it
        layer = Image.new("RGBA", self.image.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        draw.line(
            [(x1 * self.dpr, y1 * self.dpr), (x2 * self.dpr, y2 * self.dpr)],
            fill=_pil_color(color),
            width=max(1, round(width * self.dpr)),
        )
        self.image.alpha_composite(layer)


class PillowCanvas:
    """Canvas backed by a Pillow image; used for snapshots and headless rendering."""

    def __init__(self, width: float, height: float, dpr: float = 1.0):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._size = Size(width, height)
        self._dpr = dpr
        self.image = Image.new("RGBA", backing_size(width, height, dpr), (0, 0, 0, 0))

    @property
    def size(self) -> Size:
        return self._size

    @property
    def dpr(self) -> float:
        return self._dpr

    def resize(self, width: float, height: float, dpr: float) -> None:
        self._size = Size(width, height)
        self._dpr = dpr
        self.image = Image.new("RGBA", backing_size(width, height, dpr), (0, 0, 0, 0))

    @contextmanager
    def open_surface(self) -> Iterator[PillowSurface]:
        yield PillowSurface(self.image, self._dpr)

    def save(self, path: Union[str, Path], background: Optional[RGBA] = None) -> Path:
        """Write the canvas to an image file.

        Args:
            path: Target file; the format follows the suffix
            background: Optional color to flatten the transparent canvas onto

        Returns:
            The path written
        """
        target = Path(path)
        image = self.image
        if background is not None:
            base = Image.new("RGBA", image.size, _pil_color(background))
            base.alpha_composite(image)
            image = base
        target.parent.mkdir(parents=True, exist_ok=True)
        image.save(target)
        self.logger.info(f"Overlay snapshot saved to {target}")
        return target
