import numpy as np
import pytest

from splinecad.errors import DegenerateOperationError
from splinecad.geom import BernsteinDecomposition, BSplineCurve
from splinecad.geom.bernstein import bernstein_elevate, bernstein_product
from splinecad.geom.knots import value_multiplicity

PARAMS = np.linspace(0.0, 2.0, 41)


def quadratic():
    return BSplineCurve([1.0, 3.0, -2.0, 0.5], [0.0, 0.0, 0.0, 1.0, 2.0, 2.0, 2.0], 2)


def cubic():
    return BSplineCurve([0.0, 2.0, 1.0, -1.0, 4.0], [0.0, 0.0, 0.0, 0.0, 1.0, 2.0, 2.0, 2.0, 2.0], 3)


def test_product_of_bernstein_polynomials():
    # (1 - t) * t == 2 t (1 - t) / 2
    coefficients = bernstein_product(np.array([1.0, 0.0]), np.array([0.0, 1.0]))
    assert coefficients == pytest.approx([0.0, 0.5, 0.0])


def test_elevate_keeps_polynomial():
    elevated = bernstein_elevate(np.array([1.0, 3.0, -2.0]), 2)
    assert len(elevated) == 5
    assert elevated[0] == pytest.approx(1.0)
    assert elevated[-1] == pytest.approx(-2.0)


def test_decomposition_evaluates_like_curve():
    curve = cubic()
    bern = BernsteinDecomposition.from_curve(curve)
    assert bern.breakpoints == (0.0, 1.0, 2.0)
    assert len(bern.segments) == 2
    for u in PARAMS:
        assert bern.evaluate(u) == pytest.approx(curve.evaluate(u), abs=1e-12)


def test_product():
    f, g = quadratic(), cubic()
    product = BernsteinDecomposition.from_curve(f) * BernsteinDecomposition.from_curve(g)
    assert product.degree == 5
    recomposed = product.to_curve()
    assert recomposed.degree == 5
    for u in PARAMS:
        expected = f.evaluate(u) * g.evaluate(u)
        assert product.evaluate(u) == pytest.approx(expected, abs=1e-12)
        assert recomposed.evaluate(u) == pytest.approx(expected, abs=1e-12)


def test_sum_and_difference_elevate_to_common_degree():
    f, g = quadratic(), cubic()
    bf, bg = BernsteinDecomposition.from_curve(f), BernsteinDecomposition.from_curve(g)
    total = (bf + bg).to_curve()
    diff = (bf - bg).to_curve()
    assert total.degree == 3
    for u in PARAMS:
        assert total.evaluate(u) == pytest.approx(f.evaluate(u) + g.evaluate(u), abs=1e-12)
        assert diff.evaluate(u) == pytest.approx(f.evaluate(u) - g.evaluate(u), abs=1e-12)


def test_scalar_multiple():
    f = quadratic()
    scaled = 2.0 * BernsteinDecomposition.from_curve(f)
    for u in PARAMS:
        assert scaled.evaluate(u) == pytest.approx(2.0 * f.evaluate(u))


def test_recomposed_knot_structure():
    product = BernsteinDecomposition.from_curve(quadratic()) * BernsteinDecomposition.from_curve(quadratic())
    curve = product.to_curve()
    assert curve.knots == (0.0,) * 5 + (1.0,) * 4 + (2.0,) * 5


def test_mismatched_breakpoints():
    other = BSplineCurve([0.0, 1.0, 2.0, 3.0], [0.0, 0.0, 0.0, 0.5, 2.0, 2.0, 2.0], 2)
    with pytest.raises(DegenerateOperationError):
        BernsteinDecomposition.from_curve(quadratic()) * BernsteinDecomposition.from_curve(other)


def test_product_across_a_break():
    # knot 0.5 has multiplicity degree + 1, so both channels jump there
    knots = [0.0, 0.0, 0.0, 0.5, 0.5, 0.5, 1.0, 1.0, 1.0]
    f = BSplineCurve([1.0, 2.0, 3.0, -1.0, 0.0, 4.0], knots, 2)
    g = BSplineCurve([0.5, 1.0, 2.0, 2.0, 1.0, 0.0], knots, 2)
    product = BernsteinDecomposition.from_curve(f) * BernsteinDecomposition.from_curve(g)
    assert product.breaks == (True,)
    curve = product.to_curve()
    assert value_multiplicity(curve.knots, 0.5) == 5
    for u in np.linspace(0.0, 1.0, 21):
        assert curve.evaluate(u) == pytest.approx(f.evaluate(u) * g.evaluate(u), abs=1e-12)
    assert curve.evaluate(0.4999999) == pytest.approx(3.0 * 2.0, abs=1e-5)


def test_continuous_curve_has_no_breaks():
    assert BernsteinDecomposition.from_curve(cubic()).breaks == (False,)
