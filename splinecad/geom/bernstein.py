"""Piecewise Bernstein (Bezier) form of scalar B-spline channels.

A :class:`BernsteinDecomposition` holds one coefficient array per
non-empty knot span.  Sums, differences and products are computed
segment by segment and the result is turned back into a B-spline with
:meth:`BernsteinDecomposition.to_curve`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import numpy as np

from ..errors import DegenerateOperationError
from ..tolerance import get_tolerance
from .bspline import BSplineCurve
from .knots import binomial, value_multiplicity


def _binomials(n: int) -> np.ndarray:
    return np.array([binomial(n, k) for k in range(n + 1)], dtype=float)


def bernstein_product(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Coefficients of the product of two Bernstein polynomials on the same interval."""
    p = len(a) - 1
    q = len(b) - 1
    scaled = np.convolve(a * _binomials(p), b * _binomials(q))
    return scaled / _binomials(p + q)


def bernstein_elevate(coefficients: np.ndarray, times: int) -> np.ndarray:
    """Raise the degree of one Bernstein polynomial by ``times``."""
    if times <= 0:
        return np.asarray(coefficients, dtype=float)
    return bernstein_product(np.asarray(coefficients, dtype=float), np.ones(times + 1))


@dataclass(frozen=True)
class BernsteinDecomposition:
    segments: Tuple[np.ndarray, ...]
    breakpoints: Tuple[float, ...]
    degree: int
    # one flag per interior breakpoint, set where the channel may jump
    breaks: Tuple[bool, ...] = ()

    def __post_init__(self) -> None:
        segments = tuple(np.asarray(s, dtype=float) for s in self.segments)
        breakpoints = tuple(float(b) for b in self.breakpoints)
        if len(breakpoints) != len(segments) + 1:
            raise DegenerateOperationError("Breakpoints must bound every segment")
        if any(len(s) != self.degree + 1 for s in segments):
            raise DegenerateOperationError(f"Every segment needs {self.degree + 1} coefficients")
        breaks = tuple(bool(b) for b in self.breaks) or (False,) * (len(segments) - 1)
        if len(breaks) != len(segments) - 1:
            raise DegenerateOperationError("Need one break flag per interior breakpoint")
        object.__setattr__(self, "segments", segments)
        object.__setattr__(self, "breakpoints", breakpoints)
        object.__setattr__(self, "breaks", breaks)

    @classmethod
    def from_curve(cls, curve: BSplineCurve) -> "BernsteinDecomposition":
        start, end = curve.domain
        breakpoints = [v for v in curve.distinct_knots() if start <= v <= end]
        segments = [np.array(seg, dtype=float) for seg in curve.bezier_segments()]
        breaks = [value_multiplicity(curve.knots, v) > curve.degree for v in breakpoints[1:-1]]
        return cls(tuple(segments), tuple(breakpoints), curve.degree, tuple(breaks))

    def elevate(self, degree: int) -> "BernsteinDecomposition":
        if degree < self.degree:
            raise DegenerateOperationError(f"Cannot lower degree {self.degree} to {degree}")
        if degree == self.degree:
            return self
        times = degree - self.degree
        return BernsteinDecomposition(
            tuple(bernstein_elevate(s, times) for s in self.segments), self.breakpoints, degree, self.breaks
        )

    def _check_compatible(self, other: "BernsteinDecomposition") -> None:
        tol = get_tolerance().parametric
        if len(self.breakpoints) != len(other.breakpoints) or any(
            abs(a - b) > tol * max(1.0, abs(a)) for a, b in zip(self.breakpoints, other.breakpoints)
        ):
            raise DegenerateOperationError("Bernstein decompositions have different breakpoints")

    def _merged_breaks(self, other: "BernsteinDecomposition") -> Tuple[bool, ...]:
        return tuple(a or b for a, b in zip(self.breaks, other.breaks))

    def _combine(self, other: "BernsteinDecomposition", sign: float) -> "BernsteinDecomposition":
        self._check_compatible(other)
        degree = max(self.degree, other.degree)
        a = self.elevate(degree)
        b = other.elevate(degree)
        segments = tuple(x + sign * y for x, y in zip(a.segments, b.segments))
        return BernsteinDecomposition(segments, self.breakpoints, degree, self._merged_breaks(other))

    def __add__(self, other: "BernsteinDecomposition") -> "BernsteinDecomposition":
        return self._combine(other, 1.0)

    def __sub__(self, other: "BernsteinDecomposition") -> "BernsteinDecomposition":
        return self._combine(other, -1.0)

    def __neg__(self) -> "BernsteinDecomposition":
        return BernsteinDecomposition(tuple(-s for s in self.segments), self.breakpoints, self.degree, self.breaks)

    def __mul__(self, other: Union["BernsteinDecomposition", float]) -> "BernsteinDecomposition":
        if isinstance(other, BernsteinDecomposition):
            self._check_compatible(other)
            segments = tuple(bernstein_product(a, b) for a, b in zip(self.segments, other.segments))
            return BernsteinDecomposition(
                segments, self.breakpoints, self.degree + other.degree, self._merged_breaks(other)
            )
        return BernsteinDecomposition(
            tuple(s * other for s in self.segments), self.breakpoints, self.degree, self.breaks
        )

    __rmul__ = __mul__

    def evaluate(self, u: float) -> float:
        """de Casteljau evaluation inside the segment containing ``u``."""
        bp = self.breakpoints
        if u < bp[0] or u > bp[-1]:
            raise DegenerateOperationError(f"Parameter {u} lies outside [{bp[0]}, {bp[-1]}]")
        index = int(np.searchsorted(bp, u, side="right")) - 1
        index = min(max(index, 0), len(self.segments) - 1)
        t = (u - bp[index]) / (bp[index + 1] - bp[index])
        coefficients = self.segments[index].copy()
        for r in range(1, self.degree + 1):
            coefficients[: self.degree + 1 - r] = (
                (1.0 - t) * coefficients[: self.degree + 1 - r] + t * coefficients[1: self.degree + 2 - r]
            )
        return float(coefficients[0])

    def to_curve(self) -> BSplineCurve:
        """Recompose the segments into one B-spline.

        Interior knots get multiplicity ``degree``, with neighbouring
        segments sharing their end coefficient.  At a break the knot gets
        ``degree + 1`` copies and both end coefficients are kept.
        """
        q = self.degree
        bp = self.breakpoints
        if q == 0:
            return BSplineCurve([float(s[0]) for s in self.segments], bp, 0)
        knots = [bp[0]] * (q + 1)
        points = [float(c) for c in self.segments[0]]
        for v, is_break, seg in zip(bp[1:-1], self.breaks, self.segments[1:]):
            if is_break:
                knots.extend([v] * (q + 1))
                points.extend(float(c) for c in seg)
            else:
                knots.extend([v] * q)
                points.extend(float(c) for c in seg[1:])
        knots.extend([bp[-1]] * (q + 1))
        return BSplineCurve(points, knots, q)


def decompose(curves: Sequence[BSplineCurve]) -> Tuple[BernsteinDecomposition, ...]:
    return tuple(BernsteinDecomposition.from_curve(c) for c in curves)
