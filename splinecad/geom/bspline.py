"""Non-rational B-spline curves.

``BSplineCurve`` is generic over its coordinate type: control points may
be floats, complex numbers or any of the :mod:`splinecad.linalg` value
types.  Every structural operation returns a new curve.
"""

from __future__ import annotations

import logging
from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..errors import DegenerateOperationError, ParameterDomainError
from ..linalg import Point, distance
from ..tolerance import get_tolerance
from .curve import Curve, CurveKind
from .knots import (
    basis_functions,
    clamping_find_span,
    distinct_knots,
    find_span,
    greville_abscissae,
    knot_multiplicity,
    validate_knots,
    value_multiplicity,
)

log = logging.getLogger("splinecad.geom")


def _weighted_sum(points: Sequence[Point], weights: Sequence[float]) -> Point:
    result = points[0] * weights[0]
    for p, w in zip(points[1:], weights[1:]):
        result = result + p * w
    return result


@dataclass(frozen=True)
class BSplineCurve(Curve):
    control_points: Tuple[Point, ...]
    knots: Tuple[float, ...]
    degree: Optional[int] = None

    kind = CurveKind.NON_RATIONAL

    def __post_init__(self) -> None:
        control_points = tuple(self.control_points)
        knots = tuple(float(k) for k in self.knots)
        degree = len(knots) - len(control_points) - 1 if self.degree is None else int(self.degree)
        validate_knots(knots, degree, len(control_points))
        object.__setattr__(self, "control_points", control_points)
        object.__setattr__(self, "knots", knots)
        object.__setattr__(self, "degree", degree)

    # --- queries ------------------------------------------------------------
    @property
    def is_clamped(self) -> bool:
        k = self.knots
        return knot_multiplicity(k, 0) == self.degree + 1 and knot_multiplicity(k, len(k) - 1) == self.degree + 1

    def distinct_knots(self) -> List[float]:
        return distinct_knots(self.knots)

    def greville_abscissae(self) -> List[float]:
        return greville_abscissae(self.knots, self.degree)

    def _check_parameter(self, u: float) -> None:
        start, end = self.domain
        tol = get_tolerance().parametric * max(1.0, abs(end - start))
        if u < start - tol or u > end + tol:
            raise ParameterDomainError(f"Parameter {u} lies outside the curve domain [{start}, {end}]")

    # --- evaluation ---------------------------------------------------------
    def evaluate(self, u: float) -> Point:
        """Evaluate the curve at ``u`` from the non-vanishing basis functions."""
        self._check_parameter(u)
        d = self.degree
        span = find_span(u, self.knots, d)
        basis = basis_functions(span, u, self.knots, d)
        return _weighted_sum(self.control_points[span - d:span + 1], basis)

    def derivative(self, u: float) -> Point:
        """First derivative at ``u`` from the derivative control polygon."""
        self._check_parameter(u)
        p = self.degree
        pts = self.control_points
        if p == 0:
            return pts[0] * 0.0
        k = self.knots
        span = find_span(u, k, p)
        basis = basis_functions(span, u, k, p - 1)
        d_ctrl = []
        for i in range(span - p + 1, span + 1):
            denom = k[i + p] - k[i]
            coef = p / denom if denom != 0 else 0.0
            d_ctrl.append((pts[i] - pts[i - 1]) * coef)
        return _weighted_sum(d_ctrl, basis)

    # --- edits --------------------------------------------------------------
    def set_control_point_position(self, index: int, value: Point) -> "BSplineCurve":
        if index < 0 or index >= len(self.control_points):
            raise ParameterDomainError(f"Control point index {index} is out of range")
        points = list(self.control_points)
        points[index] = value
        return BSplineCurve(points, self.knots, self.degree)

    def _insert_once(self, u: float) -> "BSplineCurve":
        d = self.degree
        k = self.knots
        p = self.control_points
        if value_multiplicity(k, u) >= d + 1:
            raise DegenerateOperationError(f"Knot {u} already has multiplicity {d + 1}")
        span = find_span(u, k, d)
        new_points = list(p[:span - d + 1])
        for i in range(span - d + 1, span + 1):
            denom = k[i + d] - k[i]
            alpha = (u - k[i]) / denom if denom != 0 else 0.0
            new_points.append(p[i] * alpha + p[i - 1] * (1.0 - alpha))
        new_points.extend(p[span:])
        new_knots = k[:span + 1] + (u,) + k[span + 1:]
        return BSplineCurve(new_points, new_knots, d)

    def insert_knot(self, u: float, times: int = 1) -> "BSplineCurve":
        """Insert ``u`` ``times`` times with Boehm's algorithm; the shape is unchanged."""
        self._check_parameter(u)
        start, end = self.domain
        u = min(max(u, start), end)
        curve = self
        for _ in range(times):
            curve = curve._insert_once(u)
        return curve

    def insert_knots(self, values: Sequence[float]) -> "BSplineCurve":
        curve = self
        for u in values:
            curve = curve.insert_knot(u)
        return curve

    def refine_to(self, target: Sequence[float]) -> "BSplineCurve":
        """Insert knots until the knot vector equals ``target`` (a superset)."""
        curve = self
        for v in distinct_knots(target):
            missing = value_multiplicity(target, v) - value_multiplicity(curve.knots, v)
            if missing > 0:
                curve = curve.insert_knot(v, missing)
        return curve

    def remove_knot(self, index: int, tolerance: Optional[float] = None) -> Optional["BSplineCurve"]:
        """Try to remove one copy of the knot stored at ``index``.

        Piegl & Tiller, The NURBS Book, algorithm A5.8 for a single
        removal.  Returns ``None`` when the curve would move by more than
        ``tolerance``.
        """
        if tolerance is None:
            tolerance = get_tolerance().knot_removal
        k = self.knots
        p = self.control_points
        d = self.degree
        if index < 0 or index >= len(k):
            raise ParameterDomainError(f"Knot index {index} is out of range")
        u = k[index]
        start, end = self.domain
        if not start < u < end:
            raise ParameterDomainError(f"End knot {u} cannot be removed")

        r = bisect_right(k, u) - 1
        s = r - bisect_left(k, u) + 1
        first = r - d
        last = r - s
        off = first - 1
        temp: List[Optional[Point]] = [None] * (last + 2 - off)
        temp[0] = p[off]
        temp[last + 1 - off] = p[last + 1]
        i, j = first, last
        ii, jj = 1, last - off
        while j - i > 0:
            alf_i = (u - k[i]) / (k[i + d + 1] - k[i])
            alf_j = (u - k[j]) / (k[j + d + 1] - k[j])
            temp[ii] = (p[i] - temp[ii - 1] * (1.0 - alf_i)) / alf_i
            temp[jj] = (p[j] - temp[jj + 1] * alf_j) / (1.0 - alf_j)
            i += 1
            ii += 1
            j -= 1
            jj -= 1
        if j - i < 0:
            deviation = distance(temp[ii - 1], temp[jj + 1])
        else:
            alf_i = (u - k[i]) / (k[i + d + 1] - k[i])
            deviation = distance(p[i], temp[ii + 1] * alf_i + temp[ii - 1] * (1.0 - alf_i))
        if deviation > tolerance:
            log.debug("knot %s (index %d) not removable: deviation %.3g > %.3g", u, index, deviation, tolerance)
            return None

        new_points = list(p)
        i, j = first, last
        while j - i > 0:
            new_points[i] = temp[i - off]
            new_points[j] = temp[j - off]
            i += 1
            j -= 1
        del new_points[(2 * r - s - d) // 2]
        new_knots = k[:r] + k[r + 1:]
        return BSplineCurve(new_points, new_knots, d)

    # --- degree elevation ---------------------------------------------------
    def _intermediate_curve(self, offset: int) -> "BSplineCurve":
        d = self.degree
        knots = list(self.knots)
        points = list(self.control_points)
        shift = 0
        for j in range(offset, len(self.knots), d + 1):
            knots.insert(j + shift, self.knots[j])
            if j < len(self.control_points):
                points.insert(j + shift, self.control_points[j])
            shift += 1
        return BSplineCurve(points, knots, d + 1)

    def elevate_degree(self) -> "BSplineCurve":
        """Raise the degree by one with Prautzsch's algorithm.

        The ``degree + 1`` intermediate splines each duplicate every
        ``(degree + 1)``-th knot; once refined to a common knot vector
        their control polygons are averaged.  Requires clamped ends.
        """
        d = self.degree
        if not self.is_clamped:
            raise DegenerateOperationError(
                f"Degree elevation needs end knots of multiplicity {d + 1}"
            )
        curves = [self._intermediate_curve(i) for i in range(d + 1)]
        target: List[float] = []
        for v in distinct_knots(sorted(set().union(*(c.knots for c in curves)))):
            target.extend([v] * max(value_multiplicity(c.knots, v) for c in curves))
        curves = [c.refine_to(target) for c in curves]
        points = list(curves[0].control_points)
        for c in curves[1:]:
            points = [a + b for a, b in zip(points, c.control_points)]
        points = [pt * (1.0 / (d + 1)) for pt in points]
        return BSplineCurve(points, target, d + 1)

    # --- clamping and sections ----------------------------------------------
    def clamp(self, u: float) -> "BSplineCurve":
        """Raise the multiplicity of ``u`` to ``degree + 1``, splitting the curve there."""
        missing = self.degree + 1 - value_multiplicity(self.knots, u)
        if missing <= 0:
            return self
        return self.insert_knot(u, missing)

    def extract(self, from_u: float, to_u: float) -> "BSplineCurve":
        """Return the section of the curve between ``from_u`` and ``to_u``."""
        if not from_u < to_u:
            raise ParameterDomainError(f"Empty section [{from_u}, {to_u}]")
        self._check_parameter(from_u)
        self._check_parameter(to_u)
        start, end = self.domain
        from_u = max(from_u, start)
        to_u = min(to_u, end)
        d = self.degree
        curve = self.clamp(from_u).clamp(to_u)
        k = curve.knots
        first = clamping_find_span(from_u, k, d) - d
        last = len(k) - 1 if to_u == k[-1] else clamping_find_span(to_u, k, d)
        return BSplineCurve(curve.control_points[first:last - d], k[first:last + 1], d)

    def bezier_segments(self) -> List[Tuple[Point, ...]]:
        """Control polygons of the Bezier pieces, one per non-empty span."""
        d = self.degree
        curve = self.extract(*self.domain)
        for v in curve.distinct_knots()[1:-1]:
            missing = d - value_multiplicity(curve.knots, v)
            if missing > 0:
                curve = curve.insert_knot(v, missing)
        k = curve.knots
        return [
            curve.control_points[i - d:i + 1]
            for i in range(d, len(curve.control_points))
            if k[i] < k[i + 1]
        ]

    def reverse(self) -> "BSplineCurve":
        a, b = self.knots[0], self.knots[-1]
        return BSplineCurve(self.control_points[::-1], [a + b - v for v in reversed(self.knots)], self.degree)

    # --- conversions --------------------------------------------------------
    def to_rational(self):
        from .rational import RationalBSplineCurve

        return RationalBSplineCurve(self.control_points, self.knots, [1.0] * len(self.control_points), self.degree)
