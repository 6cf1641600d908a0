"""Tests for the numpy-backed pixel surface."""

import numpy as np
import pytest

from arose.surface import ArraySurface

RED = (255, 0, 0)
BLUE = (0, 0, 255)


def test_rejects_empty_size():
    """Surfaces need a positive size."""
    with pytest.raises(ValueError):
        ArraySurface(0, 10)


def test_row_zero_is_bottom():
    """Pixel (0, 0) is stored in the last array row."""
    surface = ArraySurface(4, 3)
    surface.set_pixel(0, 0, RED)
    assert tuple(surface.rgb[2, 0]) == RED
    assert surface.get_pixel(0, 0) == RED
    assert surface.rgb[0].sum() == 0


def test_out_of_bounds_pixels_are_ignored():
    """Writes outside the surface are dropped."""
    surface = ArraySurface(4, 3)
    surface.set_pixel(-1, 0, RED)
    surface.set_pixel(4, 2, RED)
    assert surface.rgb.sum() == 0


def test_fill_and_fill_rect():
    """Rectangles are clipped and anchored at their bottom-left corner."""
    surface = ArraySurface(5, 5)
    surface.fill(BLUE)
    surface.fill_rect(3, -1, 4, 2, RED)
    assert surface.get_pixel(3, 0) == RED
    assert surface.get_pixel(4, 0) == RED
    assert surface.get_pixel(3, 1) == BLUE
    assert surface.get_pixel(2, 0) == BLUE
    assert int(np.all(surface.rgb == RED, axis=2).sum()) == 2


def test_stroke_line():
    """Lines cover both endpoints and are clipped."""
    surface = ArraySurface(10, 10)
    surface.stroke_line((1, 1), (8, 8), RED)
    for i in range(1, 9):
        assert surface.get_pixel(i, i) == RED
    surface.stroke_line((-5, 0), (20, 0), BLUE)
    assert all(surface.get_pixel(x, 0) == BLUE for x in range(10))
