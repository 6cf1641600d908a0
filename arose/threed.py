"""Small 3D vector, frame and ray types used by the distance field and renderer.

Everything here is an immutable value; operations return new instances.
Degenerate inputs (zero vectors, zero-length frame axes) produce well-defined
fallback values instead of NaN or infinities.
"""

from dataclasses import dataclass
import math


def lerpf(a: float, b: float, s: float) -> float:
    """Linearly interpolate between two scalars."""
    return a * (1.0 - s) + b * s


def _fmt(value: float) -> str:
    return f"{value:g}"


@dataclass(frozen=True)
class Vector:
    """Immutable 3D vector."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @staticmethod
    def zero() -> "Vector":
        return Vector(0.0, 0.0, 0.0)

    @staticmethod
    def of(values) -> "Vector":
        """Build a vector from any 2- or 3-element sequence (z defaults to 0)."""
        values = tuple(values)
        if len(values) == 2:
            return Vector(float(values[0]), float(values[1]), 0.0)
        x, y, z = values
        return Vector(float(x), float(y), float(z))

    def __add__(self, other: "Vector") -> "Vector":
        return Vector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector") -> "Vector":
        return Vector(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> "Vector":
        return Vector(-self.x, -self.y, -self.z)

    def __mul__(self, scale: float) -> "Vector":
        return Vector(self.x * scale, self.y * scale, self.z * scale)

    __rmul__ = __mul__

    def __truediv__(self, scale: float) -> "Vector":
        return self * (1.0 / scale)

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def __str__(self) -> str:
        return f"<{_fmt(self.x)}, {_fmt(self.y)}, {_fmt(self.z)}>"

    def scale(self, x: float, y: float, z: float) -> "Vector":
        """Scale each component independently."""
        return Vector(self.x * x, self.y * y, self.z * z)

    def mul(self, other: "Vector") -> "Vector":
        """Component-wise product."""
        return self.scale(other.x, other.y, other.z)

    def dot(self, other: "Vector") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vector") -> "Vector":
        """Right-handed cross product."""
        return Vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def mag2(self) -> float:
        return self.dot(self)

    def mag(self) -> float:
        return math.sqrt(self.mag2())

    def dist2(self, other: "Vector") -> float:
        dx = other.x - self.x
        dy = other.y - self.y
        dz = other.z - self.z
        return dx * dx + dy * dy + dz * dz

    def dist(self, other: "Vector") -> float:
        return math.sqrt(self.dist2(other))

    def unit(self) -> "Vector":
        """Return this vector scaled to length 1.

        Zero and already-unit vectors come back unchanged.
        """
        m = self.mag2()
        if m == 0.0 or m == 1.0:
            return self
        return self / math.sqrt(m)

    def rz90(self) -> "Vector":
        """Rotate 90 degrees counter-clockwise in the XY plane."""
        return Vector(-self.y, self.x, self.z)

    def on_axis(self, axis: "Vector") -> "Vector":
        """Component of this vector along ``axis`` (zero for a zero axis)."""
        m = axis.mag2()
        if m == 0.0:
            return Vector.zero()
        return axis * (self.dot(axis) / m)

    def off_axis(self, axis: "Vector") -> "Vector":
        """Component of this vector perpendicular to ``axis``."""
        return self - self.on_axis(axis)

    @staticmethod
    def lerp(a: "Vector", b: "Vector", s: float) -> "Vector":
        return Vector(
            lerpf(a.x, b.x, s),
            lerpf(a.y, b.y, s),
            lerpf(a.z, b.z, s),
        )

    @staticmethod
    def bezier2(a: "Vector", b: "Vector", c: "Vector", s: float) -> "Vector":
        """Quadratic Bezier by repeated linear interpolation."""
        return Vector.lerp(Vector.lerp(a, b, s), Vector.lerp(b, c, s), s)

    @staticmethod
    def bezier3(a: "Vector", b: "Vector", c: "Vector", d: "Vector", s: float) -> "Vector":
        """Cubic Bezier by repeated linear interpolation."""
        return Vector.lerp(
            Vector.bezier2(a, b, c, s),
            Vector.bezier2(b, c, d, s),
            s,
        )


X_AXIS = Vector(1.0, 0.0, 0.0)
Y_AXIS = Vector(0.0, 1.0, 0.0)
Z_AXIS = Vector(0.0, 0.0, 1.0)


@dataclass(frozen=True)
class Frame:
    """Local coordinate system given by an origin and three basis axes.

    The basis does not have to be orthonormal, only non-degenerate. A
    zero-length axis unprojects to 0 along that axis.
    """
    origin: Vector = Vector.zero()
    i: Vector = X_AXIS
    j: Vector = Y_AXIS
    k: Vector = Z_AXIS

    @staticmethod
    def from_tangent(origin: Vector, tangent: Vector, away: Vector) -> "Frame":
        """Orthonormal frame with ``i`` along ``tangent`` and ``j`` toward ``away``.

        When ``away`` is parallel to the tangent, the tangent rotated in the
        XY plane is used instead.
        """
        i = tangent.unit()
        j = away.off_axis(i)
        if j.mag2() == 0.0:
            j = i.rz90().off_axis(i)
        j = j.unit()
        return Frame(origin, i, j, i.cross(j))

    @property
    def basis(self) -> tuple:
        return (self.i, self.j, self.k)

    def project(self, local: Vector) -> Vector:
        """Map local coordinates into world space."""
        return self.origin + self.i * local.x + self.j * local.y + self.k * local.z

    def unproject(self, world: Vector) -> Vector:
        """Map a world-space point into local coordinates."""
        d = world - self.origin
        return Vector(*(_axis_coordinate(d, axis) for axis in self.basis))


def _axis_coordinate(d: Vector, axis: Vector) -> float:
    m = axis.mag2()
    if m == 0.0:
        return 0.0
    return d.dot(axis) / m


@dataclass(frozen=True)
class Ray:
    """Half-line from ``origin``; ``direction`` is normalized on construction."""
    origin: Vector
    direction: Vector

    def __post_init__(self):
        object.__setattr__(self, "direction", self.direction.unit())

    def sample(self, t: float) -> Vector:
        return self.origin + self.direction * t
