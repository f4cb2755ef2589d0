import math

import pytest

from splinecad.errors import DegenerateOperationError
from splinecad.linalg import (
    Complex2,
    Vec2,
    Vec3,
    VecN,
    dehomogenize,
    distance,
    homogenize,
    norm,
)


def test_vec2_arithmetic():
    a = Vec2(1.0, 2.0)
    b = Vec2(3.0, -1.0)
    assert a + b == Vec2(4.0, 1.0)
    assert a - b == Vec2(-2.0, 3.0)
    assert 2.0 * a == Vec2(2.0, 4.0)
    assert a / 2.0 == Vec2(0.5, 1.0)
    assert a.dot(b) == 1.0
    assert a.cross(b) == -7.0
    assert math.isclose(Vec2(3.0, 4.0).length(), 5.0)


def test_vec2_rotation():
    v = Vec2(1.0, 0.0)
    assert v.rotate90() == Vec2(0.0, 1.0)
    assert v.rotate(math.pi / 2).almost_equals(Vec2(0.0, 1.0), 1e-12)


def test_vec2_normalize_zero():
    with pytest.raises(DegenerateOperationError):
        Vec2(0.0, 0.0).normalized()
    with pytest.raises(DegenerateOperationError):
        Vec2(1.0, 0.0) / 0.0


def test_vec3_cross_and_normalize():
    v1 = Vec3(1.0, 0.0, 0.0)
    v2 = Vec3(0.0, 1.0, 0.0)
    c = v1.cross(v2)
    assert c.x == 0.0 and c.y == 0.0 and c.z == 1.0
    n = Vec3(2.0, 3.0, 6.0).normalized()
    assert math.isclose(n.norm(), 1.0, abs_tol=1e-12)
    with pytest.raises(DegenerateOperationError):
        Vec3(0.0, 0.0, 0.0).normalized()


def test_vec3_axis_rotation():
    rotated = Vec3(1.0, 0.0, 0.0).rotate(Vec3(0.0, 0.0, 1.0), math.pi / 2)
    assert math.isclose(rotated.x, 0.0, abs_tol=1e-12)
    assert math.isclose(rotated.y, 1.0, abs_tol=1e-12)
    assert math.isclose(rotated.z, 0.0, abs_tol=1e-12)


def test_vecn():
    a = VecN([1.0, 2.0, 3.0, 4.0])
    b = VecN([1.0, 1.0, 1.0, 1.0])
    assert a + b == VecN([2.0, 3.0, 4.0, 5.0])
    assert (a - b)[3] == 3.0
    assert len(a * 2.0) == 4
    assert math.isclose(b.norm(), 2.0)
    with pytest.raises(AttributeError):
        a.coords = (0.0,)


def test_complex2():
    p = Complex2(2 + 2j, 1 + 1j)
    assert p.to_complex() == pytest.approx(2.0)
    assert (p * 2.0).almost_equals(Complex2(4 + 4j, 2 + 2j))
    with pytest.raises(DegenerateOperationError):
        Complex2(1 + 0j, 0j).to_complex()


def test_norm_and_distance_accept_scalars():
    assert norm(-3.0) == 3.0
    assert norm(3 + 4j) == 5.0
    assert distance(Vec2(0.0, 0.0), Vec2(3.0, 4.0)) == 5.0
    assert distance(1 + 1j, 4 + 5j) == 5.0


class TestHomogeneous:
    """Weighted coordinates used by the rational curves."""

    def test_round_trip_vec2(self):
        h = homogenize(Vec2(1.0, 2.0), 2.0)
        assert h == Vec3(2.0, 4.0, 2.0)
        point, w = dehomogenize(h)
        assert point == Vec2(1.0, 2.0)
        assert w == 2.0

    def test_round_trip_vec3(self):
        h = homogenize(Vec3(1.0, 2.0, 3.0), 0.5)
        assert len(h) == 4
        point, w = dehomogenize(h)
        assert point.almost_equals(Vec3(1.0, 2.0, 3.0))
        assert w == 0.5

    def test_scalar(self):
        point, w = dehomogenize(homogenize(3.0, 4.0))
        assert point == 3.0
        assert w == 4.0

    def test_zero_weight(self):
        with pytest.raises(DegenerateOperationError):
            dehomogenize(Vec3(1.0, 1.0, 0.0))
