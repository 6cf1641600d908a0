"""Draggable control-point handles.

Pointer positions arrive already mapped into model space (see
:func:`window_to_model`). Every input call raises the invalidation flag,
which the render loop consumes to restart the progressive scan.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from .flower import DEFAULT_CONTROL_POINTS
from .threed import Vector

HOVER_RADIUS = 8.0


class HandleState(Enum):
    IDLE = "idle"
    HOVERED = "hovered"
    DRAGGING = "dragging"


@dataclass
class Handle:
    """One draggable control point."""
    position: Vector
    hovered: bool = False

    def hit(self, pointer: Vector, radius: float = HOVER_RADIUS) -> bool:
        return self.position.dist2(pointer) <= radius * radius


def window_to_model(pos: tuple, height: int) -> Vector:
    """Map window pixel coordinates (row 0 at the top) into model space."""
    return Vector(float(pos[0]), float(height - 1 - pos[1]), 0.0)


class Interaction:
    """Hover and drag state over a fixed list of handles.

    At most one handle drags at a time: pressing the pointer picks the first
    hovered handle in index order.
    """

    def __init__(self, control_points: Sequence[Vector] = DEFAULT_CONTROL_POINTS,
                 hover_radius: float = HOVER_RADIUS):
        self.hover_radius = hover_radius
        self.handles = [Handle(p) for p in control_points]
        self.dragging: Optional[int] = None
        self.invalidated = True
        self.last_key: Optional[str] = None

    def control_points(self) -> list:
        return [h.position for h in self.handles]

    def state(self, index: int) -> HandleState:
        if self.dragging == index:
            return HandleState.DRAGGING
        if self.handles[index].hovered:
            return HandleState.HOVERED
        return HandleState.IDLE

    def consume_invalidation(self) -> bool:
        """Return whether anything changed since the last call, and clear it."""
        invalidated = self.invalidated
        self.invalidated = False
        return invalidated

    def reset(self, control_points: Sequence[Vector] = DEFAULT_CONTROL_POINTS):
        """Put every handle back at its default position."""
        self.handles = [Handle(p) for p in control_points]
        self.dragging = None
        self.invalidated = True

    # =========================================================================
    # Input
    # =========================================================================

    def key_press(self, key: str):
        self.last_key = key
        self.invalidated = True

    def pointer_move(self, pointer: Vector):
        if self.dragging is not None:
            self.handles[self.dragging].position = pointer
        for handle in self.handles:
            handle.hovered = handle.hit(pointer, self.hover_radius)
        self.invalidated = True

    def pointer_down(self, pointer: Vector):
        for index, handle in enumerate(self.handles):
            if handle.hit(pointer, self.hover_radius):
                handle.hovered = True
                self.dragging = index
                break
        self.invalidated = True

    def pointer_up(self, pointer: Vector):
        self.dragging = None
        self.invalidated = True
