"""Rational curves in the complex plane.

Control points are :class:`~splinecad.linalg.Complex2` pairs and the
curve point is ``c0(u) / c1(u)``, which keeps the representation closed
under Mobius transformations of the plane.
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..errors import DegenerateOperationError
from ..linalg import Complex2, Vec2, Vec3
from ..tolerance import get_tolerance
from .bernstein import decompose
from .bspline import BSplineCurve
from .curve import Curve, CurveKind
from .knots import value_multiplicity
from .rational import RationalBSplineCurve, check_index

log = logging.getLogger("splinecad.geom")


@dataclass(frozen=True)
class ComplexRationalBSplineCurve(Curve):
    control_points: Tuple[Complex2, ...]
    knots: Tuple[float, ...]
    degree: Optional[int] = None
    curve: BSplineCurve = field(init=False, repr=False, compare=False)

    kind = CurveKind.COMPLEX

    def __post_init__(self) -> None:
        points = tuple(self.control_points)
        for p in points:
            if not isinstance(p, Complex2):
                raise TypeError(f"Expected Complex2 control points, got {type(p).__name__}")
        curve = BSplineCurve(points, self.knots, self.degree)
        object.__setattr__(self, "control_points", curve.control_points)
        object.__setattr__(self, "knots", curve.knots)
        object.__setattr__(self, "degree", curve.degree)
        object.__setattr__(self, "curve", curve)

    # --- accessors ----------------------------------------------------------
    def control_points_2d(self) -> List[Vec2]:
        result = []
        for p in self.control_points:
            z = p.to_complex()
            result.append(Vec2(z.real, z.imag))
        return result

    def numerator(self) -> BSplineCurve:
        return BSplineCurve([p.c0 for p in self.control_points], self.knots, self.degree)

    def denominator(self) -> BSplineCurve:
        return BSplineCurve([p.c1 for p in self.control_points], self.knots, self.degree)

    def distinct_knots(self) -> List[float]:
        return self.curve.distinct_knots()

    def greville_abscissae(self) -> List[float]:
        return self.curve.greville_abscissae()

    def get_control_point_weight(self, index: int) -> complex:
        check_index(index, len(self.control_points))
        return self.control_points[index].c1

    # --- evaluation ---------------------------------------------------------
    def evaluate(self, u: float) -> complex:
        return self.curve.evaluate(u).to_complex()

    # --- edits --------------------------------------------------------------
    def _replace(self, index: int, point: Complex2) -> "ComplexRationalBSplineCurve":
        points = list(self.control_points)
        points[index] = point
        return ComplexRationalBSplineCurve(points, self.knots, self.degree)

    def set_control_point_position(self, index: int, value: complex) -> "ComplexRationalBSplineCurve":
        weight = self.get_control_point_weight(index)
        return self._replace(index, Complex2(complex(value) * weight, weight))

    def set_control_point_weight(self, index: int, weight: complex) -> "ComplexRationalBSplineCurve":
        """Change the weight of one control point without moving it."""
        if weight == 0:
            raise DegenerateOperationError("A control point weight cannot be zero")
        check_index(index, len(self.control_points))
        position = self.control_points[index].to_complex()
        return self._replace(index, Complex2(position * weight, complex(weight)))

    def insert_knot(self, u: float, times: int = 1) -> "ComplexRationalBSplineCurve":
        c = self.curve.insert_knot(u, times)
        return ComplexRationalBSplineCurve(c.control_points, c.knots, c.degree)

    def elevate_degree(self) -> "ComplexRationalBSplineCurve":
        c = self.curve.elevate_degree()
        return ComplexRationalBSplineCurve(c.control_points, c.knots, c.degree)

    # --- conversions --------------------------------------------------------
    def _has_real_weights(self) -> bool:
        tol = get_tolerance().point
        return all(abs(p.c1.imag) <= tol for p in self.control_points)

    def to_rational_bspline(self) -> RationalBSplineCurve:
        """Equivalent real rational curve in the plane.

        With ``c0 = nx + i ny`` and ``c1 = dx + i dy`` the point
        ``c0 / c1`` equals ``(X + iY) / W`` for

            X = nx dx + ny dy,  Y = ny dx - nx dy,  W = dx^2 + dy^2

        which doubles the degree.  The products are formed span by span in
        Bernstein form, recomposed, and the knots the products do not need
        are removed again.
        """
        if self._has_real_weights():
            points = [Vec3(p.c0.real, p.c0.imag, p.c1.real) for p in self.control_points]
            return RationalBSplineCurve.from_homogeneous(BSplineCurve(points, self.knots, self.degree))

        k, d = self.knots, self.degree
        channels = [
            BSplineCurve([getattr(p, attr).real for p in self.control_points], k, d) for attr in ("c0", "c1")
        ] + [
            BSplineCurve([getattr(p, attr).imag for p in self.control_points], k, d) for attr in ("c0", "c1")
        ]
        nx, dx, ny, dy = decompose(channels)
        x = (nx * dx + ny * dy).to_curve()
        y = (ny * dx - nx * dy).to_curve()
        w = (dx * dx + dy * dy).to_curve()
        points = [Vec3(a, b, c) for a, b, c in zip(x.control_points, y.control_points, w.control_points)]
        result = RationalBSplineCurve.from_homogeneous(BSplineCurve(points, x.knots, x.degree))

        product_degree = result.degree
        start, end = self.domain
        removed = 0
        for value in self.distinct_knots():
            if not start < value < end:
                continue
            attempts = product_degree // 2 - value_multiplicity(k, value) + 1
            for _ in range(attempts):
                candidate = result.remove_knot(bisect_left(result.knots, value))
                if candidate is None:
                    break
                result = candidate
                removed += 1
        log.debug(
            "complex to rational conversion: degree %d -> %d, removed %d knots, %d control points",
            d, product_degree, removed, len(result.knots) - product_degree - 1,
        )
        return result
