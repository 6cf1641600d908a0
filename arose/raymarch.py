"""Sphere tracing against arbitrary scalar distance fields."""

from dataclasses import dataclass
from typing import Callable, Optional

from .threed import Ray, Vector, X_AXIS, Y_AXIS, Z_AXIS

# Surface is reached once the field drops below this
EPSILON = 0.001

# Central-difference offset for normal estimation
NORMAL_OFFSET = 0.001


@dataclass(frozen=True)
class Hit:
    """Surface intersection found by :func:`raycast`."""
    point: Vector
    normal: Vector
    distance: float


def raymarch(ray: Ray, max_distance: float,
             scene: Callable[[Vector], float]) -> Optional[float]:
    """Distance travelled along ``ray`` to the surface of ``scene``.

    ``scene`` must not overestimate the true distance. Only ``max_distance``
    bounds the loop, so a misbehaving field can stall until it overshoots.

    Returns:
        The travelled distance, or None if the ray leaves ``max_distance``
    """
    traveled = 0.0
    while traveled <= max_distance:
        d = scene(ray.sample(traveled))
        if d < EPSILON:
            return traveled
        traveled += d
    return None


def estimate_normal(point: Vector, scene: Callable[[Vector], float],
                    offset: float = NORMAL_OFFSET) -> Vector:
    """Unit gradient of ``scene`` at ``point`` by central differences."""
    gradient = [
        scene(point + axis * offset) - scene(point - axis * offset)
        for axis in (X_AXIS, Y_AXIS, Z_AXIS)
    ]
    return Vector(*gradient).unit()


def raycast(ray: Ray, max_distance: float,
            scene: Callable[[Vector], float]) -> Optional[Hit]:
    """Raymarch ``scene`` and, on a hit, return the point and surface normal."""
    traveled = raymarch(ray, max_distance, scene)
    if traveled is None:
        return None
    point = ray.sample(traveled)
    return Hit(point, estimate_normal(point, scene), traveled)
