"""Pixel surfaces the progressive renderer draws onto.

Surface coordinates put row 0 at the bottom, matching the model space. The
array behind :class:`ArraySurface` is stored top row first so it can be
handed straight to pygame or Pillow.
"""

from typing import Protocol

import numpy as np

Color = tuple


class Surface(Protocol):
    width: int
    height: int

    def fill(self, color: Color) -> None: ...
    def set_pixel(self, x: int, y: int, color: Color) -> None: ...
    def fill_rect(self, x: int, y: int, w: int, h: int, color: Color) -> None: ...
    def stroke_line(self, start: tuple, end: tuple, color: Color) -> None: ...


class ArraySurface:
    """RGB surface backed by a ``(height, width, 3)`` uint8 array."""

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"surface size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.rgb = np.zeros((height, width, 3), dtype=np.uint8)

    def _row(self, y: int) -> int:
        return self.height - 1 - y

    def fill(self, color: Color) -> None:
        self.rgb[:, :] = color

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self.rgb[self._row(y), x] = color

    def get_pixel(self, x: int, y: int) -> Color:
        return tuple(int(c) for c in self.rgb[self._row(y), x])

    def fill_rect(self, x: int, y: int, w: int, h: int, color: Color) -> None:
        """Fill the rectangle whose bottom-left corner is ``(x, y)``, clipped."""
        x0, x1 = max(x, 0), min(x + w, self.width)
        y0, y1 = max(y, 0), min(y + h, self.height)
        if x0 >= x1 or y0 >= y1:
            return
        self.rgb[self._row(y1 - 1):self._row(y0) + 1, x0:x1] = color

    def stroke_line(self, start: tuple, end: tuple, color: Color) -> None:
        """Draw a one-pixel line between two points, clipped to the surface."""
        (x0, y0), (x1, y1) = tuple(start)[:2], tuple(end)[:2]
        steps = int(max(abs(x1 - x0), abs(y1 - y0))) + 1
        xs = np.rint(np.linspace(x0, x1, steps)).astype(int)
        ys = np.rint(np.linspace(y0, y1, steps)).astype(int)
        inside = (xs >= 0) & (xs < self.width) & (ys >= 0) & (ys < self.height)
        self.rgb[self.height - 1 - ys[inside], xs[inside]] = color
