"""Signed distance model of a stylized rose stem with leaves.

The stem is a cubic Bezier through four control points. Leaves branch off
the stem at fixed parameters as quadratic midribs, and each midrib grows
short veins in a frame built from its tangent. Every piece is swept into a
tube and the tubes are blended with an exponential smooth minimum so the
junctions have no crease.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from .sdf import (
    SMOOTH_K,
    CubicBezier,
    Curve,
    LinearTaper,
    QuadraticBezier,
    StemProfile,
    Thickness,
    sdf_curve,
    smin_all,
)
from .threed import Frame, Vector

CONTROL_POINT_COUNT = 4

# Default stem, in canvas pixels with y pointing up
DEFAULT_CONTROL_POINTS = (
    Vector(200.0, 30.0, 0.0),
    Vector(170.0, 200.0, 0.0),
    Vector(250.0, 360.0, 0.0),
    Vector(210.0, 540.0, 0.0),
)

STEM_PROFILE = StemProfile(base_radius=5.0, tip_radius=4.0, ramp=1.0 / 25.0)
MIDRIB_PROFILE = LinearTaper(5.0, 1.0)
VEIN_PROFILE = LinearTaper(1.5, 0.5)

# Midrib parameters where veins branch, and vein reach in the vein frame
VEIN_POSITIONS = (0.3, 0.55, 0.8)
VEIN_LENGTH = 26.0
VEIN_SPREAD = 0.6

# Contributions whose lower bound exceeds this are not evaluated exactly
CULL_DISTANCE = 64.0


@dataclass(frozen=True)
class Leaf:
    """Leaf midrib branching off the stem at ``branch_s``.

    ``bend`` and ``tip`` are offsets from the branch point to the middle and
    last control points of the quadratic midrib.
    """
    branch_s: float
    bend: Vector
    tip: Vector

    def midrib(self, stem: CubicBezier) -> QuadraticBezier:
        base = stem(self.branch_s)
        return QuadraticBezier(base, base + self.bend, base + self.tip)


LEAVES = (
    Leaf(0.15, Vector(-50.0, -60.0, 0.0), Vector(-100.0, -80.0, 0.0)),
    Leaf(0.45, Vector(50.0, 25.0, 0.0), Vector(110.0, 15.0, 0.0)),
    Leaf(0.55, Vector(-45.0, 35.0, 0.0), Vector(-95.0, 40.0, 0.0)),
)


@dataclass(frozen=True)
class Tube:
    """A curve swept with a varying radius, plus a bounding sphere."""
    curve: Curve
    thickness: Thickness
    center: Vector
    radius: float

    @staticmethod
    def around(curve, thickness) -> "Tube":
        points = curve.control_points
        center = sum(points, Vector.zero()) / len(points)
        reach = max(center.dist(p) for p in points)
        return Tube(curve, thickness, center, reach + thickness.max_radius)

    def bound(self, point: Vector) -> float:
        """Lower bound on the tube distance."""
        return point.dist(self.center) - self.radius

    def distance(self, point: Vector, cull_distance: Optional[float] = None) -> float:
        if cull_distance is not None:
            bound = self.bound(point)
            if bound > cull_distance:
                return bound
        return sdf_curve(self.curve, self.thickness, point)


def grow_veins(midrib, length: float, depth: int = 1) -> list:
    """Sweep veins off both sides of ``midrib``.

    Each vein is a quadratic curve laid out in a frame whose first axis
    follows the midrib tangent and whose second axis points away from the
    midrib. With ``depth`` above 1 every vein grows its own, shorter veins.
    """
    if depth <= 0:
        return []
    tubes = []
    for s in VEIN_POSITIONS:
        origin = midrib(s)
        tangent = midrib.tangent(s)
        reach = length * (1.0 - 0.5 * s)
        for side in (1.0, -1.0):
            frame = Frame.from_tangent(origin, tangent, tangent.rz90() * side)
            vein = QuadraticBezier(
                origin,
                frame.project(Vector(reach * 0.4, reach * VEIN_SPREAD * 0.6, 0.0)),
                frame.project(Vector(reach, reach * VEIN_SPREAD, 0.0)),
            )
            tubes.append(Tube.around(vein, VEIN_PROFILE))
            tubes.extend(grow_veins(vein, reach * 0.4, depth - 1))
    return tubes


class Flower:
    """Immutable distance-field snapshot built from four stem control points."""

    def __init__(self, control_points: Sequence[Vector],
                 leaves: Sequence[Leaf] = LEAVES,
                 vein_depth: int = 1,
                 k: float = SMOOTH_K,
                 cull_distance: Optional[float] = CULL_DISTANCE):
        points = tuple(p if isinstance(p, Vector) else Vector.of(p) for p in control_points)
        if len(points) != CONTROL_POINT_COUNT:
            raise ValueError(
                f"expected {CONTROL_POINT_COUNT} control points, got {len(points)}"
            )
        self.control_points = points
        self.k = k
        self.cull_distance = cull_distance
        self.stem = CubicBezier(*points)
        self.tubes = self._build_tubes(leaves, vein_depth)

    def _build_tubes(self, leaves, vein_depth: int) -> tuple:
        tubes = [Tube.around(self.stem, STEM_PROFILE)]
        for leaf in leaves:
            midrib = leaf.midrib(self.stem)
            tubes.append(Tube.around(midrib, MIDRIB_PROFILE))
            tubes.extend(grow_veins(midrib, VEIN_LENGTH, vein_depth))
        return tuple(tubes)

    def stem_thickness(self, s: float) -> float:
        return STEM_PROFILE(s)

    def stem_point(self, s: float) -> Vector:
        return self.stem(s)

    def distance(self, point: Vector) -> float:
        """Signed distance from ``point`` to the flower surface."""
        return smin_all(
            (tube.distance(point, self.cull_distance) for tube in self.tubes),
            self.k,
        )


def rebuild_model(control_points: Sequence[Vector], **kwargs) -> Flower:
    """Build a fresh flower model from the current control points."""
    return Flower(control_points, **kwargs)
