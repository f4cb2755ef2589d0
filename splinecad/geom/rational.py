"""Rational (NURBS) curves over homogeneous control points.

Both classes keep their control points as ``(point * w, w)`` on an
ordinary non-rational curve and project on evaluation.  Structural
operations run on the homogeneous curve and wrap the result again.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .. import settings
from ..errors import CurveConstructionError, DegenerateOperationError, ParameterDomainError
from ..linalg import Complex2, Point, Vec3, dehomogenize, homogenize, norm, split_homogeneous
from ..tolerance import get_tolerance
from .bspline import BSplineCurve
from .curve import Curve, CurveKind
from .periodic import PeriodicBSplineCurve


def _homogeneous_points(control_points: Sequence[Point], weights: Optional[Sequence[float]]) -> List[Point]:
    points = list(control_points)
    if weights is None:
        weights = [1.0] * len(points)
    if len(weights) != len(points):
        raise CurveConstructionError(
            f"Got {len(weights)} weights for {len(points)} control points"
        )
    for i, w in enumerate(weights):
        if w == 0:
            raise CurveConstructionError(f"Control point {i} has zero weight")
    return [homogenize(p, float(w)) for p, w in zip(points, weights)]


def check_index(index: int, count: int) -> None:
    if index < 0 or index >= count:
        raise ParameterDomainError(f"Control point index {index} is out of range")


def _complex_points(curve) -> List[Complex2]:
    points = []
    for h in curve.control_points:
        if not isinstance(h, Vec3):
            raise DegenerateOperationError("Only planar rational curves map to the complex plane")
        points.append(Complex2(complex(h.x, h.y), complex(h.z, 0.0)))
    return points


def removal_tolerance(tolerance: float, homogeneous: Sequence[Point]) -> float:
    """Scale a geometric tolerance for knot removal on homogeneous points.

    The NURBS Book (2nd ed.), p. 185: ``tolerance * wmin / (1 + |P|max)``.
    Unit weights leave the tolerance unchanged.
    """
    split = [split_homogeneous(h) for h in homogeneous]
    if all(w == 1.0 for _, w in split):
        return tolerance
    wmin = min(abs(w) for _, w in split)
    pmax = max((norm(p * (1.0 / w)) for p, w in split if w != 0), default=0.0)
    return tolerance * wmin / (1.0 + pmax)


class RationalBSplineCurve(Curve):
    """Rational B-spline curve with explicit weights."""

    kind = CurveKind.RATIONAL

    def __init__(
        self,
        control_points: Sequence[Point],
        knots: Sequence[float],
        weights: Optional[Sequence[float]] = None,
        degree: Optional[int] = None,
    ):
        self._homogeneous = BSplineCurve(_homogeneous_points(control_points, weights), knots, degree)

    @classmethod
    def from_homogeneous(cls, curve: BSplineCurve) -> "RationalBSplineCurve":
        obj = cls.__new__(cls)
        obj._homogeneous = curve
        return obj

    def __eq__(self, other) -> bool:
        return isinstance(other, RationalBSplineCurve) and self._homogeneous == other._homogeneous

    def __hash__(self) -> int:
        return hash(self._homogeneous)

    def __repr__(self) -> str:
        return (
            f"RationalBSplineCurve(control_points={self.control_points!r}, "
            f"weights={self.weights!r}, knots={self.knots!r}, degree={self.degree})"
        )

    # --- accessors ----------------------------------------------------------
    @property
    def homogeneous(self) -> BSplineCurve:
        return self._homogeneous

    @property
    def knots(self) -> Tuple[float, ...]:
        return self._homogeneous.knots

    @property
    def degree(self) -> int:
        return self._homogeneous.degree

    @property
    def control_points(self) -> Tuple[Point, ...]:
        return tuple(dehomogenize(h)[0] for h in self._homogeneous.control_points)

    @property
    def weights(self) -> Tuple[float, ...]:
        return tuple(split_homogeneous(h)[1] for h in self._homogeneous.control_points)

    def distinct_knots(self) -> List[float]:
        return self._homogeneous.distinct_knots()

    def greville_abscissae(self) -> List[float]:
        return self._homogeneous.greville_abscissae()

    def get_control_point_weight(self, index: int) -> float:
        check_index(index, len(self._homogeneous.control_points))
        return self.weights[index]

    # --- evaluation ---------------------------------------------------------
    def evaluate(self, u: float) -> Point:
        return dehomogenize(self._homogeneous.evaluate(u))[0]

    def derivative(self, u: float) -> Point:
        """First derivative by the quotient rule on the homogeneous curve."""
        point, w = dehomogenize(self._homogeneous.evaluate(u))
        d_spatial, d_w = split_homogeneous(self._homogeneous.derivative(u))
        return (d_spatial - point * d_w) * (1.0 / w)

    # --- edits --------------------------------------------------------------
    def set_control_point_position(self, index: int, value: Point) -> "RationalBSplineCurve":
        w = self.get_control_point_weight(index)
        return RationalBSplineCurve.from_homogeneous(
            self._homogeneous.set_control_point_position(index, homogenize(value, w))
        )

    def set_control_point_weight(self, index: int, weight: float) -> "RationalBSplineCurve":
        """Change one weight while keeping the control point where it is."""
        if weight == 0:
            raise DegenerateOperationError("A control point weight cannot be zero")
        check_index(index, len(self._homogeneous.control_points))
        point = self.control_points[index]
        return RationalBSplineCurve.from_homogeneous(
            self._homogeneous.set_control_point_position(index, homogenize(point, weight))
        )

    def insert_knot(self, u: float, times: int = 1) -> "RationalBSplineCurve":
        return RationalBSplineCurve.from_homogeneous(self._homogeneous.insert_knot(u, times))

    def remove_knot(self, index: int, tolerance: Optional[float] = None) -> Optional["RationalBSplineCurve"]:
        if tolerance is None:
            tolerance = get_tolerance().knot_removal
        scaled = removal_tolerance(tolerance, self._homogeneous.control_points)
        curve = self._homogeneous.remove_knot(index, scaled)
        if curve is None:
            return None
        return RationalBSplineCurve.from_homogeneous(curve)

    def elevate_degree(self) -> "RationalBSplineCurve":
        return RationalBSplineCurve.from_homogeneous(self._homogeneous.elevate_degree())

    def clamp(self, u: float) -> "RationalBSplineCurve":
        return RationalBSplineCurve.from_homogeneous(self._homogeneous.clamp(u))

    def extract(self, from_u: float, to_u: float) -> "RationalBSplineCurve":
        return RationalBSplineCurve.from_homogeneous(self._homogeneous.extract(from_u, to_u))

    def reverse(self) -> "RationalBSplineCurve":
        return RationalBSplineCurve.from_homogeneous(self._homogeneous.reverse())

    # --- conversions --------------------------------------------------------
    def to_complex_rational(self):
        """Planar curve as ``c0 / c1`` with ``c0 = X + iY`` and a real ``c1 = W``."""
        from .complex_rational import ComplexRationalBSplineCurve

        return ComplexRationalBSplineCurve(_complex_points(self._homogeneous), self.knots, self.degree)


class PeriodicRationalBSplineCurve(Curve):
    """Closed rational curve over a periodic curve of homogeneous points."""

    kind = CurveKind.PERIODIC_RATIONAL

    def __init__(
        self,
        control_points: Sequence[Point],
        knots: Sequence[float],
        weights: Optional[Sequence[float]] = None,
        degree: Optional[int] = None,
    ):
        self._homogeneous = PeriodicBSplineCurve(_homogeneous_points(control_points, weights), knots, degree)

    @classmethod
    def from_homogeneous(cls, curve: PeriodicBSplineCurve) -> "PeriodicRationalBSplineCurve":
        obj = cls.__new__(cls)
        obj._homogeneous = curve
        return obj

    @classmethod
    def from_free_control_points(
        cls,
        points: Sequence[Point],
        weights: Optional[Sequence[float]] = None,
        degree: int = settings.DEFAULT_DEGREE,
        period: Optional[float] = None,
    ) -> "PeriodicRationalBSplineCurve":
        homogeneous = _homogeneous_points(points, weights)
        return cls.from_homogeneous(PeriodicBSplineCurve.from_free_control_points(homogeneous, degree, period))

    def __eq__(self, other) -> bool:
        return isinstance(other, PeriodicRationalBSplineCurve) and self._homogeneous == other._homogeneous

    def __hash__(self) -> int:
        return hash(self._homogeneous)

    def __repr__(self) -> str:
        return (
            f"PeriodicRationalBSplineCurve(control_points={self.control_points!r}, "
            f"weights={self.weights!r}, knots={self.knots!r}, degree={self.degree})"
        )

    @property
    def homogeneous(self) -> PeriodicBSplineCurve:
        return self._homogeneous

    @property
    def knots(self) -> Tuple[float, ...]:
        return self._homogeneous.knots

    @property
    def degree(self) -> int:
        return self._homogeneous.degree

    @property
    def control_points(self) -> Tuple[Point, ...]:
        return tuple(dehomogenize(h)[0] for h in self._homogeneous.control_points)

    def control_points_2d(self) -> Tuple[Point, ...]:
        return self.control_points[:self.free_count]

    @property
    def weights(self) -> Tuple[float, ...]:
        return tuple(split_homogeneous(h)[1] for h in self._homogeneous.control_points)

    @property
    def period(self) -> float:
        return self._homogeneous.period

    @property
    def free_count(self) -> int:
        return self._homogeneous.free_count

    def get_control_point_weight(self, index: int) -> float:
        check_index(index, len(self._homogeneous.control_points))
        return self.weights[index]

    def evaluate(self, u: float) -> Point:
        return dehomogenize(self._homogeneous.evaluate(u))[0]

    def set_control_point_position(self, index: int, value: Point) -> "PeriodicRationalBSplineCurve":
        w = self.get_control_point_weight(index)
        return PeriodicRationalBSplineCurve.from_homogeneous(
            self._homogeneous.set_control_point_position(index, homogenize(value, w))
        )

    def set_control_point_weight(self, index: int, weight: float) -> "PeriodicRationalBSplineCurve":
        if weight == 0:
            raise DegenerateOperationError("A control point weight cannot be zero")
        check_index(index, len(self._homogeneous.control_points))
        point = self.control_points[index]
        return PeriodicRationalBSplineCurve.from_homogeneous(
            self._homogeneous.set_control_point_position(index, homogenize(point, weight))
        )

    def insert_knot(self, u: float, times: int = 1) -> "PeriodicRationalBSplineCurve":
        return PeriodicRationalBSplineCurve.from_homogeneous(self._homogeneous.insert_knot(u, times))

    def elevate_degree(self) -> "PeriodicRationalBSplineCurve":
        return PeriodicRationalBSplineCurve.from_homogeneous(self._homogeneous.elevate_degree())

    def get_clamp_spline(self) -> RationalBSplineCurve:
        return RationalBSplineCurve.from_homogeneous(self._homogeneous.get_clamp_spline())

    def extract(self, from_u: float, to_u: float) -> RationalBSplineCurve:
        return RationalBSplineCurve.from_homogeneous(self._homogeneous.extract(from_u, to_u))

    def to_complex_rational(self):
        """Open complex curve over the wrap-around control points.

        It shares the knots and the domain of this curve and agrees with it
        there.
        """
        from .complex_rational import ComplexRationalBSplineCurve

        return ComplexRationalBSplineCurve(_complex_points(self._homogeneous), self.knots, self.degree)
