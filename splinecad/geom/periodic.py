"""Closed (periodic) B-spline curves.

A periodic curve with ``n`` free control points of degree ``d`` stores
``n + d`` control points, the last ``d`` repeating the first ``d``, and
``n + 2d + 1`` knots with ``knots[i + n] - knots[i]`` equal to the
period.  Structural operations run on an open curve unrolled over
several periods and are rolled back into one period afterwards.
"""

from __future__ import annotations

import math
from bisect import bisect_left
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .. import settings
from ..errors import CurveConstructionError, DegenerateOperationError, ParameterDomainError
from ..linalg import Point, distance, norm
from ..tolerance import get_tolerance, nearly_equal
from .bspline import BSplineCurve
from .curve import Curve, CurveKind
from .knots import distinct_knots, greville_abscissae, knot_multiplicity, periodic_knots


def _unrolled(curve: BSplineCurve, free_count: int, copies: int) -> BSplineCurve:
    """Open curve covering ``2 * copies + 1`` periods around the base domain."""
    d = curve.degree
    n = free_count
    k = curve.knots
    period = k[n + d] - k[d]

    def knot(j: int) -> float:
        shift, offset = divmod(j - d, n)
        return k[d + offset] + shift * period

    points = [curve.control_points[i % n] for i in range(-copies * n, (copies + 1) * n + d)]
    knots = [knot(j) for j in range(-copies * n, (copies + 1) * n + 2 * d + 1)]
    return BSplineCurve(points, knots, d)


def _rolled(curve: BSplineCurve, start: float, period: float) -> Tuple[List[Point], List[float]]:
    """Cut one period starting at ``start`` out of an unrolled curve."""
    d = curve.degree
    k = curve.knots
    first = bisect_left(k, start)
    free = bisect_left(k, start + period) - first
    s = first - d
    knots = list(k[s:s + free + 2 * d + 1])
    points = list(curve.control_points[s:s + free + d])
    for i in range(d):
        points[free + i] = points[i]
    return points, knots


@dataclass(frozen=True)
class PeriodicBSplineCurve(Curve):
    control_points: Tuple[Point, ...]
    knots: Tuple[float, ...]
    degree: Optional[int] = None
    curve: BSplineCurve = field(init=False, repr=False, compare=False)

    kind = CurveKind.PERIODIC_NON_RATIONAL

    def __post_init__(self) -> None:
        curve = BSplineCurve(self.control_points, self.knots, self.degree)
        d = curve.degree
        n = len(curve.control_points) - d
        if n <= d:
            raise CurveConstructionError(
                f"A periodic curve of degree {d} needs more than {d} free control points, got {n}"
            )
        pts = curve.control_points
        tol = get_tolerance().point
        for i in range(d):
            if distance(pts[i], pts[n + i]) > tol * max(1.0, norm(pts[i])):
                raise CurveConstructionError(f"Control point {n + i} must repeat control point {i}")
        k = curve.knots
        period = k[n + d] - k[d]
        if period <= 0:
            raise CurveConstructionError("Periodic knot vector spans an empty period")
        for i in range(len(k) - n):
            if not nearly_equal(k[i + n] - k[i], period, eps=tol * max(1.0, period)):
                raise CurveConstructionError("Knot spacing does not repeat with the period")
        object.__setattr__(self, "control_points", curve.control_points)
        object.__setattr__(self, "knots", curve.knots)
        object.__setattr__(self, "degree", d)
        object.__setattr__(self, "curve", curve)

    @classmethod
    def from_free_control_points(
        cls,
        points: Sequence[Point],
        degree: int = settings.DEFAULT_DEGREE,
        period: Optional[float] = None,
    ) -> "PeriodicBSplineCurve":
        points = list(points)
        if len(points) <= degree:
            raise CurveConstructionError(
                f"A periodic curve of degree {degree} needs more than {degree} free control points"
            )
        return cls(points + points[:degree], periodic_knots(degree, len(points), period), degree)

    # --- queries ------------------------------------------------------------
    @property
    def free_count(self) -> int:
        return len(self.control_points) - self.degree

    @property
    def free_control_points(self) -> Tuple[Point, ...]:
        return self.control_points[:self.free_count]

    @property
    def period(self) -> float:
        start, end = self.domain
        return end - start

    def distinct_knots(self) -> List[float]:
        return distinct_knots(self.knots)

    def greville_abscissae(self) -> List[float]:
        return greville_abscissae(self.knots, self.degree)[:self.free_count]

    def wrap(self, u: float) -> float:
        """Map ``u`` into ``[start, start + period)``."""
        start = self.domain[0]
        w = start + math.fmod(u - start, self.period)
        if w < start:
            w += self.period
        if w >= start + self.period:
            w = start
        return w

    def evaluate(self, u: float) -> Point:
        return self.curve.evaluate(self.wrap(u))

    def derivative(self, u: float) -> Point:
        return self.curve.derivative(self.wrap(u))

    # --- edits --------------------------------------------------------------
    def set_control_point_position(self, index: int, value: Point) -> "PeriodicBSplineCurve":
        n = self.free_count
        points = list(self.control_points)
        if index < 0 or index >= len(points):
            raise ParameterDomainError(f"Control point index {index} is out of range")
        points[index] = value
        if index < self.degree:
            points[n + index] = value
        elif index >= n:
            points[index - n] = value
        return PeriodicBSplineCurve(points, self.knots, self.degree)

    def _unrolled(self, copies: int = 1) -> BSplineCurve:
        return _unrolled(self.curve, self.free_count, copies)

    def _roll(self, curve: BSplineCurve) -> "PeriodicBSplineCurve":
        points, knots = _rolled(curve, self.domain[0], self.period)
        return PeriodicBSplineCurve(points, knots, curve.degree)

    def insert_knot(self, u: float, times: int = 1) -> "PeriodicBSplineCurve":
        """Insert ``u`` and its periodic images, keeping the curve closed."""
        u = self.wrap(u)
        p = self.period
        curve = self._unrolled()
        for image in (u - p, u, u + p):
            curve = curve.insert_knot(image, times)
        return self._roll(curve)

    def elevate_degree(self) -> "PeriodicBSplineCurve":
        """Raise the degree by one on a clamped copy spanning five periods."""
        d = self.degree
        k = self.knots
        if knot_multiplicity(k, d) >= d + 1 and knot_multiplicity(k, len(k) - d - 1) >= d + 1:
            raise DegenerateOperationError(
                f"Periodic knot vector already has multiplicity {d + 1} at both domain ends"
            )
        unrolled = self._unrolled(copies=2)
        elevated = unrolled.extract(*unrolled.domain).elevate_degree()
        return self._roll(elevated)

    # --- open-curve views ---------------------------------------------------
    def get_clamp_spline(self) -> BSplineCurve:
        """Equivalent open curve clamped at both ends of one period."""
        return self.curve.extract(*self.domain)

    def extract(self, from_u: float, to_u: float) -> BSplineCurve:
        """Open section from ``from_u`` to ``to_u``, running across the seam if needed."""
        from_u = self.wrap(from_u)
        to_u = self.wrap(to_u)
        if to_u <= from_u:
            to_u += self.period
        return self._unrolled().extract(from_u, to_u)

    # --- conversions --------------------------------------------------------
    def to_rational(self):
        from .rational import PeriodicRationalBSplineCurve

        return PeriodicRationalBSplineCurve(
            self.control_points, self.knots, [1.0] * len(self.control_points), self.degree
        )
