import math

import numpy as np
import pytest

from splinecad.errors import CurveConstructionError, DegenerateOperationError, ParameterDomainError
from splinecad.geom import (
    BSplineCurve,
    ComplexRationalBSplineCurve,
    CurveKind,
    PeriodicBSplineCurve,
    PeriodicRationalBSplineCurve,
    RationalBSplineCurve,
)
from splinecad.geom.rational import removal_tolerance
from splinecad.linalg import Vec2, Vec3

PARAMS = np.linspace(0.0, 1.0, 21)


def quarter_circle():
    pts = [Vec2(1.0, 0.0), Vec2(1.0, 1.0), Vec2(0.0, 1.0)]
    return RationalBSplineCurve(pts, [0.0, 0.0, 0.0, 1.0, 1.0, 1.0], [1.0, math.sqrt(2.0) / 2.0, 1.0])


def assert_on_unit_circle(curve, params=PARAMS):
    for u in params:
        assert curve.evaluate(u).norm() == pytest.approx(1.0, abs=1e-9)


def test_quarter_circle():
    curve = quarter_circle()
    assert curve.kind is CurveKind.RATIONAL
    assert curve.degree == 2
    assert_on_unit_circle(curve)
    assert curve.evaluate(0.0).almost_equals(Vec2(1.0, 0.0))
    assert curve.evaluate(1.0).almost_equals(Vec2(0.0, 1.0))


def test_unit_weights_match_non_rational():
    pts = [Vec3(0.0, 0.0, 0.0), Vec3(1.0, 2.0, 1.0), Vec3(2.0, 0.0, 3.0), Vec3(3.0, 2.0, 0.0)]
    knots = [0.0, 0.0, 0.0, 1.0, 2.0, 2.0, 2.0]
    plain = BSplineCurve(pts, knots, 2)
    rational = RationalBSplineCurve(pts, knots)
    for u in np.linspace(0.0, 2.0, 21):
        assert rational.evaluate(u).almost_equals(plain.evaluate(u), 1e-12)


def test_accessors():
    curve = quarter_circle()
    assert curve.control_points[1].almost_equals(Vec2(1.0, 1.0))
    assert curve.weights[1] == pytest.approx(math.sqrt(2.0) / 2.0)
    assert curve.homogeneous.control_points[1].almost_equals(Vec3(0.5 * math.sqrt(2.0), 0.5 * math.sqrt(2.0), 0.5 * math.sqrt(2.0)))
    assert curve.get_control_point_weight(0) == 1.0


def test_derivative_matches_finite_difference():
    curve = quarter_circle()
    h = 1e-6
    for u in (0.2, 0.5, 0.8):
        approx = (curve.evaluate(u + h) - curve.evaluate(u - h)) / (2 * h)
        assert curve.derivative(u).almost_equals(approx, 1e-5)
        # tangent of a circle is orthogonal to the radius
        assert curve.derivative(u).dot(curve.evaluate(u)) == pytest.approx(0.0, abs=1e-9)


class TestEdits:
    def test_set_weight_keeps_position(self):
        curve = quarter_circle()
        heavier = curve.set_control_point_weight(1, 2.0)
        assert heavier.control_points[1].almost_equals(Vec2(1.0, 1.0))
        assert heavier.weights[1] == 2.0
        assert not heavier.evaluate(0.5).almost_equals(curve.evaluate(0.5))

    def test_set_position_keeps_weight(self):
        curve = quarter_circle()
        moved = curve.set_control_point_position(1, Vec2(2.0, 2.0))
        assert moved.weights[1] == pytest.approx(curve.weights[1])
        assert moved.control_points[1].almost_equals(Vec2(2.0, 2.0))

    def test_zero_weight(self):
        with pytest.raises(DegenerateOperationError):
            quarter_circle().set_control_point_weight(1, 0.0)
        with pytest.raises(CurveConstructionError):
            RationalBSplineCurve([Vec2(0.0, 0.0), Vec2(1.0, 1.0)], [0.0, 0.0, 1.0, 1.0], [1.0, 0.0])

    def test_index_out_of_range(self):
        curve = quarter_circle()
        with pytest.raises(ParameterDomainError):
            curve.set_control_point_position(3, Vec2(0.0, 0.0))
        with pytest.raises(ParameterDomainError):
            curve.set_control_point_weight(-1, 2.0)
        with pytest.raises(ParameterDomainError):
            curve.get_control_point_weight(3)

    def test_weight_count_mismatch(self):
        with pytest.raises(CurveConstructionError):
            RationalBSplineCurve([Vec2(0.0, 0.0), Vec2(1.0, 1.0)], [0.0, 0.0, 1.0, 1.0], [1.0])


class TestStructuralOperations:
    def test_insert_knot(self):
        refined = quarter_circle().insert_knot(0.3, times=2)
        assert len(refined.control_points) == 5
        assert_on_unit_circle(refined)

    def test_insert_then_remove(self):
        curve = quarter_circle()
        refined = curve.insert_knot(0.5)
        restored = refined.remove_knot(refined.knots.index(0.5))
        assert restored is not None
        assert restored.knots == curve.knots
        for a, b in zip(restored.weights, curve.weights):
            assert a == pytest.approx(b)
        assert_on_unit_circle(restored)

    def test_elevate_degree(self):
        elevated = quarter_circle().elevate_degree()
        assert elevated.degree == 3
        assert_on_unit_circle(elevated)

    def test_extract(self):
        section = quarter_circle().extract(0.25, 0.75)
        assert section.domain == (0.25, 0.75)
        assert_on_unit_circle(section, np.linspace(0.25, 0.75, 11))

    def test_clamp_and_reverse(self):
        curve = quarter_circle()
        assert_on_unit_circle(curve.clamp(0.5))
        assert curve.reverse().evaluate(0.0).almost_equals(Vec2(0.0, 1.0))


def test_removal_tolerance_scaling():
    plain = [Vec3(1.0, 0.0, 1.0), Vec3(0.0, 2.0, 1.0)]
    assert removal_tolerance(1e-4, plain) == 1e-4
    weighted = [Vec3(1.0, 0.0, 1.0), Vec3(0.0, 1.0, 0.5)]
    # wmin = 0.5, largest projected point has norm 2
    assert removal_tolerance(1e-4, weighted) == pytest.approx(1e-4 * 0.5 / 3.0)


def test_to_complex_rational():
    curve = quarter_circle()
    complex_curve = curve.to_complex_rational()
    assert isinstance(complex_curve, ComplexRationalBSplineCurve)
    for u in PARAMS:
        z = complex_curve.evaluate(u)
        p = curve.evaluate(u)
        assert z.real == pytest.approx(p.x)
        assert z.imag == pytest.approx(p.y)


def test_to_complex_rational_needs_planar_curve():
    curve = RationalBSplineCurve([Vec3(0.0, 0.0, 0.0), Vec3(1.0, 1.0, 1.0)], [0.0, 0.0, 1.0, 1.0])
    with pytest.raises(DegenerateOperationError):
        curve.to_complex_rational()


class TestPeriodicRational:
    """Closed rational curves keep their wrap-around copies in homogeneous space."""

    def circle(self):
        pts = [Vec2(1.0, 0.0), Vec2(0.0, 1.0), Vec2(-1.0, 0.0), Vec2(0.0, -1.0)]
        return PeriodicRationalBSplineCurve.from_free_control_points(pts, [1.0, 2.0, 1.0, 2.0], degree=2)

    def test_wrap(self):
        curve = self.circle()
        assert curve.kind is CurveKind.PERIODIC_RATIONAL
        assert curve.free_count == 4
        assert curve.evaluate(0.0).almost_equals(curve.evaluate(curve.period))
        assert len(curve.control_points_2d()) == 4
        assert curve.weights[4] == 1.0 and curve.weights[5] == 2.0

    def test_unit_weights_match_non_rational(self):
        plain = PeriodicBSplineCurve.from_free_control_points([Vec2(1.0, 0.0), Vec2(0.0, 1.0), Vec2(-1.0, 0.0)], 2)
        rational = plain.to_rational()
        for u in np.linspace(0.0, plain.period, 13):
            assert rational.evaluate(u).almost_equals(plain.evaluate(u), 1e-12)

    def test_set_weight_mirrors(self):
        curve = self.circle().set_control_point_weight(0, 3.0)
        assert curve.weights[0] == 3.0
        assert curve.weights[4] == 3.0
        assert curve.control_points[4].almost_equals(Vec2(1.0, 0.0))

    def test_set_position_mirrors(self):
        curve = self.circle().set_control_point_position(1, Vec2(0.0, 2.0))
        assert curve.control_points[5].almost_equals(Vec2(0.0, 2.0))
        assert curve.weights[5] == 2.0

    def test_index_out_of_range(self):
        curve = self.circle()
        with pytest.raises(ParameterDomainError):
            curve.set_control_point_position(6, Vec2(0.0, 0.0))
        with pytest.raises(ParameterDomainError):
            curve.get_control_point_weight(-1)

    def test_insert_and_elevate(self):
        curve = self.circle()
        params = np.linspace(0.0, curve.period, 25)
        for changed in (curve.insert_knot(1.5), curve.elevate_degree()):
            for u in params:
                assert changed.evaluate(u).almost_equals(curve.evaluate(u), 1e-9)

    def test_clamp_spline_and_extract(self):
        curve = self.circle()
        open_curve = curve.get_clamp_spline()
        assert isinstance(open_curve, RationalBSplineCurve)
        for u in np.linspace(0.0, 3.9, 14):
            assert open_curve.evaluate(u).almost_equals(curve.evaluate(u), 1e-9)
        section = curve.extract(3.0, 1.0)
        assert section.evaluate(5.0).almost_equals(curve.evaluate(1.0), 1e-9)

    def test_to_complex_rational(self):
        curve = self.circle()
        complex_curve = curve.to_complex_rational()
        assert isinstance(complex_curve, ComplexRationalBSplineCurve)
        assert complex_curve.domain == curve.domain
        assert complex_curve.get_control_point_weight(1) == 2 + 0j
        for u in np.linspace(0.0, curve.period, 17):
            z = complex_curve.evaluate(u)
            p = curve.evaluate(u)
            assert z.real == pytest.approx(p.x, abs=1e-9)
            assert z.imag == pytest.approx(p.y, abs=1e-9)
