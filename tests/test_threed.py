"""Tests for the vector, frame and ray types."""

import math

import pytest

from arose.threed import Frame, Ray, Vector, X_AXIS, Y_AXIS, Z_AXIS, lerpf


@pytest.mark.parametrize("v", [
    Vector(3.0, 4.0, 0.0),
    Vector(-1.0, 2.0, -3.0),
    Vector(1e-4, 0.0, 2e-4),
    Vector(250.0, -17.5, 900.0),
])
def test_unit_has_length_one(v):
    """Non-zero vectors normalize to length 1."""
    assert v.unit().mag() == pytest.approx(1.0)


def test_unit_of_zero_is_zero():
    """The zero vector normalizes to itself."""
    assert Vector.zero().unit() == Vector.zero()


def test_unit_vector_unchanged():
    """Already-unit vectors come back as the same value."""
    assert Y_AXIS.unit() is Y_AXIS


def test_subtraction_str():
    """Vectors print with their shortest numeric form."""
    assert str(Vector(4, 5, 6) - Vector(3, 3, 3)) == "<1, 2, 3>"


def test_cross_is_right_handed():
    """The cross product follows the right-hand rule."""
    assert X_AXIS.cross(Y_AXIS) == Z_AXIS
    assert Y_AXIS.cross(Z_AXIS) == X_AXIS
    assert Z_AXIS.cross(X_AXIS) == Y_AXIS
    assert Y_AXIS.cross(X_AXIS) == -Z_AXIS


def test_cross_is_perpendicular():
    """The cross product is orthogonal to both inputs."""
    a = Vector(1.0, 2.0, 3.0)
    b = Vector(-4.0, 0.5, 2.0)
    c = a.cross(b)
    assert c.dot(a) == pytest.approx(0.0)
    assert c.dot(b) == pytest.approx(0.0)


def test_arithmetic():
    """Basic operators behave component-wise."""
    a = Vector(1.0, 2.0, 3.0)
    assert a + a == Vector(2.0, 4.0, 6.0)
    assert a * 2 == 2 * a == Vector(2.0, 4.0, 6.0)
    assert a / 2 == Vector(0.5, 1.0, 1.5)
    assert a.mul(Vector(2.0, 0.0, -1.0)) == Vector(2.0, 0.0, -3.0)
    assert a.dot(a) == a.mag2() == 14.0
    assert Vector(0, 0, 0).dist(Vector(3, 4, 0)) == 5.0


def test_rz90():
    """rz90 rotates a quarter turn counter-clockwise in XY."""
    assert Vector(1.0, 0.0, 7.0).rz90() == Vector(0.0, 1.0, 7.0)
    assert Vector(0.0, 1.0, 0.0).rz90() == Vector(-1.0, 0.0, 0.0)


def test_on_and_off_axis():
    """A vector splits into parts along and across an axis."""
    v = Vector(3.0, 4.0, 5.0)
    axis = Vector(0.0, 2.0, 0.0)
    assert v.on_axis(axis) == Vector(0.0, 4.0, 0.0)
    assert v.off_axis(axis) == Vector(3.0, 0.0, 5.0)
    assert v.on_axis(Vector.zero()) == Vector.zero()


def test_lerp_endpoints():
    """Interpolation hits both endpoints exactly."""
    a = Vector(1.5, -2.0, 3.25)
    b = Vector(-7.0, 11.0, 0.1)
    assert Vector.lerp(a, b, 0.0) == a
    assert Vector.lerp(a, b, 1.0) == b
    assert lerpf(2.0, 6.0, 0.25) == 3.0


def test_bezier_endpoints():
    """Bezier curves start and end on their outer control points."""
    a, b, c, d = Vector(0, 0, 0), Vector(1, 5, 2), Vector(4, -3, 1), Vector(9, 2, -6)
    assert Vector.bezier2(a, b, c, 0.0) == a
    assert Vector.bezier2(a, b, c, 1.0) == c
    assert Vector.bezier3(a, b, c, d, 0.0) == a
    assert Vector.bezier3(a, b, c, d, 1.0) == d


def test_frame_round_trip():
    """unproject inverts project for an orthogonal, non-normalized basis."""
    frame = Frame(Vector(10.0, -5.0, 2.0), Vector(2.0, 0.0, 0.0),
                  Vector(0.0, 3.0, 0.0), Vector(0.0, 0.0, 0.5))
    local = Vector(1.25, -4.0, 8.0)
    world = frame.project(local)
    assert world == Vector(12.5, -17.0, 6.0)
    back = frame.unproject(world)
    for got, want in zip(back, local):
        assert got == pytest.approx(want)


def test_frame_zero_axis_unprojects_to_zero():
    """A degenerate axis yields 0 instead of dividing by zero."""
    frame = Frame(Vector.zero(), X_AXIS, Vector.zero(), Z_AXIS)
    assert frame.unproject(Vector(1.0, 2.0, 3.0)) == Vector(1.0, 0.0, 3.0)


def test_frame_from_tangent():
    """Frames built from a tangent are orthonormal and face ``away``."""
    frame = Frame.from_tangent(Vector(1, 1, 0), Vector(3.0, 0.0, 0.0), Vector(1.0, -2.0, 0.0))
    assert frame.i == X_AXIS
    assert frame.j == Vector(0.0, -1.0, 0.0)
    for a, b in ((frame.i, frame.j), (frame.j, frame.k), (frame.k, frame.i)):
        assert a.dot(b) == pytest.approx(0.0)
    assert frame.k.mag() == pytest.approx(1.0)


def test_frame_from_tangent_parallel_reference():
    """A reference parallel to the tangent still gives a valid frame."""
    frame = Frame.from_tangent(Vector.zero(), X_AXIS, Vector(5.0, 0.0, 0.0))
    assert frame.j == Y_AXIS
    assert all(math.isfinite(c) for c in frame.k)


def test_ray_normalizes_direction():
    """Rays normalize their direction and sample along it."""
    ray = Ray(Vector(1.0, 0.0, 0.0), Vector(0.0, 0.0, 10.0))
    assert ray.direction == Z_AXIS
    assert ray.sample(2.5) == Vector(1.0, 0.0, 2.5)
