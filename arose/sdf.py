"""Curve primitives and distance helpers for building signed distance fields.

Curves are plain callables mapping a parameter ``s`` in ``[0, 1]`` to a
:class:`~arose.threed.Vector`; thickness profiles map ``s`` to a radius. The
Bezier and profile classes below are the closed set the flower model uses,
but any callable with the same shape works.
"""

from dataclasses import dataclass
from typing import Callable, Optional
import math

from .threed import Vector, lerpf

# Smooth-minimum blend sharpness
SMOOTH_K = 2.0

# Closest-point search
CLOSEST_POINT_SAMPLES = 100
MIN_CLOSEST_POINT_SAMPLES = 20
CLOSEST_POINT_TOLERANCE = 0.001

# Step used for numeric tangents of arbitrary curves
TANGENT_STEP = 0.001


Curve = Callable[[float], Vector]
Thickness = Callable[[float], float]
Field = Callable[[Vector], float]


# =============================================================================
# Curves
# =============================================================================

@dataclass(frozen=True)
class QuadraticBezier:
    """Quadratic Bezier curve through three control points."""
    a: Vector
    b: Vector
    c: Vector

    def __call__(self, s: float) -> Vector:
        return Vector.bezier2(self.a, self.b, self.c, s)

    def tangent(self, s: float) -> Vector:
        """Derivative with respect to ``s``."""
        return (Vector.lerp(self.b, self.c, s) - Vector.lerp(self.a, self.b, s)) * 2.0

    @property
    def control_points(self) -> tuple:
        return (self.a, self.b, self.c)


@dataclass(frozen=True)
class CubicBezier:
    """Cubic Bezier curve through four control points."""
    a: Vector
    b: Vector
    c: Vector
    d: Vector

    def __call__(self, s: float) -> Vector:
        return Vector.bezier3(self.a, self.b, self.c, self.d, s)

    def tangent(self, s: float) -> Vector:
        """Derivative with respect to ``s``."""
        return (
            Vector.bezier2(self.b, self.c, self.d, s)
            - Vector.bezier2(self.a, self.b, self.c, s)
        ) * 3.0

    @property
    def control_points(self) -> tuple:
        return (self.a, self.b, self.c, self.d)


def curve_tangent(curve: Curve, s: float) -> Vector:
    """Tangent of any curve, analytic when the curve provides one."""
    tangent = getattr(curve, "tangent", None)
    if tangent is not None:
        return tangent(s)
    lo = max(s - TANGENT_STEP, 0.0)
    hi = min(s + TANGENT_STEP, 1.0)
    return (curve(hi) - curve(lo)) / (hi - lo)


# =============================================================================
# Thickness profiles
# =============================================================================

@dataclass(frozen=True)
class LinearTaper:
    """Radius interpolated linearly from ``start`` at s=0 to ``end`` at s=1."""
    start: float
    end: float

    def __call__(self, s: float) -> float:
        return lerpf(self.start, self.end, s)

    @property
    def max_radius(self) -> float:
        return max(self.start, self.end)


@dataclass(frozen=True)
class StemProfile:
    """Stem radius: ramps up from 0 over the first ``ramp`` of the curve,
    then tapers linearly toward ``tip_radius``."""
    base_radius: float = 5.0
    tip_radius: float = 4.0
    ramp: float = 1.0 / 25.0

    def __call__(self, s: float) -> float:
        base = lerpf(0.0, self.base_radius, min(s / self.ramp, 1.0))
        return lerpf(base, self.tip_radius, s)

    @property
    def max_radius(self) -> float:
        return max(self.base_radius, self.tip_radius)


# =============================================================================
# Distances
# =============================================================================

def find_closest_point(point: Vector, curve: Curve,
                       samples: int = CLOSEST_POINT_SAMPLES,
                       tolerance: float = CLOSEST_POINT_TOLERANCE,
                       debug: bool = False) -> float:
    """Approximate the curve parameter closest to ``point``.

    The curve is sampled uniformly, then the bracket one sample width either
    side of the best sample is bisected, keeping whichever end lies closer to
    the point, until it is narrower than ``tolerance``.

    This can miss the global minimum when two close local minima are not
    separated by the initial sampling.

    Args:
        point: Query point
        curve: Callable mapping ``s`` in [0, 1] to a point
        samples: Number of uniform samples (at least 20)
        tolerance: Final bracket width, in parameter units
        debug: Print every bisection step

    Returns:
        The midpoint of the final bracket
    """
    if samples < MIN_CLOSEST_POINT_SAMPLES:
        raise ValueError(
            f"samples must be at least {MIN_CLOSEST_POINT_SAMPLES}, got {samples}"
        )
    if tolerance <= 0.0:
        raise ValueError(f"tolerance must be positive, got {tolerance}")

    best_s = 0.0
    best_d = math.inf
    for i in range(samples):
        s = i / (samples - 1)
        d = curve(s).dist2(point)
        if d < best_d:
            best_s, best_d = s, d

    width = 1.0 / samples
    left_s = max(best_s - width, 0.0)
    right_s = min(best_s + width, 1.0)
    left = (left_s, curve(left_s).dist2(point))
    right = (right_s, curve(right_s).dist2(point))

    while right[0] - left[0] > tolerance:
        ms = left[0] / 2.0 + right[0] / 2.0
        md = curve(ms).dist2(point)
        if debug:
            print(f"L: {left}, R: {right}, M: {(ms, md)}")
        if left[1] < right[1]:
            right = (ms, md)
        else:
            left = (ms, md)

    if debug:
        print(f"F: L: {left} R: {right}")

    return left[0] / 2.0 + right[0] / 2.0


def sdf_curve(curve: Curve, thickness: Thickness, point: Vector,
              samples: int = CLOSEST_POINT_SAMPLES) -> float:
    """Signed distance from ``point`` to a tube swept along ``curve``."""
    s = find_closest_point(point, curve, samples=samples)
    return curve(s).dist(point) - thickness(s)


def smin(a: float, b: float, k: float = SMOOTH_K) -> float:
    """Exponential smooth minimum.

    Equal to ``-log2(2**(-k*a) + 2**(-k*b)) / k``, rearranged around the
    smaller argument so large distances cannot overflow.
    """
    lo = min(a, b)
    gap = abs(a - b)
    return lo - math.log2(1.0 + 2.0 ** (-k * gap)) / k


def smin_all(distances, k: float = SMOOTH_K) -> Optional[float]:
    """Fold ``smin`` left to right over a sequence; ``None`` when empty."""
    result = None
    for d in distances:
        result = d if result is None else smin(result, d, k)
    return result


def sdf_sphere(center: Vector, radius: float) -> Field:
    """Distance field of a sphere."""
    def distance(point: Vector) -> float:
        return point.dist(center) - radius
    return distance
