"""Curve construction from raw arrays.

The editing layer hands over ``{kind, control_points, knots, degree,
weights}`` records; :func:`make_curve` picks the curve class for the
requested :class:`CurveKind` and :func:`curve_to_dict` goes the other way.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Union

from .. import settings
from ..errors import CurveConstructionError
from ..linalg import Complex2, Point, Vec2, Vec3, VecN
from .bspline import BSplineCurve
from .complex_rational import ComplexRationalBSplineCurve
from .curve import Curve, CurveKind
from .knots import uniform_knots
from .periodic import PeriodicBSplineCurve
from .rational import PeriodicRationalBSplineCurve, RationalBSplineCurve


def _infer_kind(control_points: Sequence[Point], weights: Optional[Sequence[float]]) -> CurveKind:
    if control_points and isinstance(control_points[0], Complex2):
        return CurveKind.COMPLEX
    if weights is not None:
        return CurveKind.RATIONAL
    return CurveKind.NON_RATIONAL


def make_curve(
    control_points: Sequence[Point],
    knots: Optional[Sequence[float]] = None,
    degree: Optional[int] = None,
    weights: Optional[Sequence[float]] = None,
    kind: Union[CurveKind, str, None] = None,
) -> Curve:
    """Build a curve of the requested kind.

    Without ``knots`` an open curve gets a clamped uniform knot vector and
    a periodic curve treats ``control_points`` as its free points.
    """
    control_points = list(control_points)
    kind = _infer_kind(control_points, weights) if kind is None else CurveKind(kind)
    if weights is not None and kind in (CurveKind.NON_RATIONAL, CurveKind.PERIODIC_NON_RATIONAL, CurveKind.COMPLEX):
        raise CurveConstructionError(f"Curves of kind {kind.value} do not take weights")

    if knots is None:
        if degree is None:
            degree = settings.DEFAULT_DEGREE
        if kind == CurveKind.PERIODIC_NON_RATIONAL:
            return PeriodicBSplineCurve.from_free_control_points(control_points, degree)
        if kind == CurveKind.PERIODIC_RATIONAL:
            return PeriodicRationalBSplineCurve.from_free_control_points(control_points, weights, degree)
        if len(control_points) <= degree:
            raise CurveConstructionError(
                f"A degree {degree} curve needs more than {degree} control points, got {len(control_points)}"
            )
        knots = uniform_knots(degree, len(control_points))

    if kind == CurveKind.NON_RATIONAL:
        return BSplineCurve(control_points, knots, degree)
    elif kind == CurveKind.RATIONAL:
        return RationalBSplineCurve(control_points, knots, weights, degree)
    elif kind == CurveKind.PERIODIC_NON_RATIONAL:
        return PeriodicBSplineCurve(control_points, knots, degree)
    elif kind == CurveKind.PERIODIC_RATIONAL:
        return PeriodicRationalBSplineCurve(control_points, knots, weights, degree)
    elif kind == CurveKind.COMPLEX:
        return ComplexRationalBSplineCurve(control_points, knots, degree)
    raise CurveConstructionError(f"Unknown curve kind {kind!r}")


def _point_to_record(point: Point) -> Any:
    if isinstance(point, Vec2):
        return [point.x, point.y]
    if isinstance(point, Vec3):
        return [point.x, point.y, point.z]
    if isinstance(point, VecN):
        return list(point.coords)
    if isinstance(point, Complex2):
        return [point.c0, point.c1]
    return point


def _point_from_record(value: Any, kind: CurveKind) -> Point:
    if kind == CurveKind.COMPLEX:
        if isinstance(value, Complex2):
            return value
        c0, c1 = value
        return Complex2(complex(c0), complex(c1))
    if isinstance(value, (list, tuple)):
        if len(value) == 2:
            return Vec2(float(value[0]), float(value[1]))
        if len(value) == 3:
            return Vec3(float(value[0]), float(value[1]), float(value[2]))
        return VecN(value)
    return value


def curve_to_dict(curve: Curve) -> Dict[str, Any]:
    """Plain record of a curve: projected control points plus weights where rational."""
    weights: Optional[List[float]] = None
    if curve.kind in (CurveKind.RATIONAL, CurveKind.PERIODIC_RATIONAL):
        weights = list(curve.weights)
    return {
        "kind": curve.kind.value,
        "control_points": [_point_to_record(p) for p in curve.control_points],
        "knots": list(curve.knots),
        "degree": curve.degree,
        "weights": weights,
    }


def curve_from_dict(record: Dict[str, Any]) -> Curve:
    kind = CurveKind(record.get("kind", CurveKind.NON_RATIONAL.value))
    points = [_point_from_record(p, kind) for p in record["control_points"]]
    return make_curve(points, record.get("knots"), record.get("degree"), record.get("weights"), kind)
