"""Knot vector utilities.

Span finding, basis function evaluation and the small helpers used by
the curve classes to reason about knot multiplicities.  Knot vectors are
plain sequences of floats; nothing here mutates its input.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from functools import lru_cache
from typing import List, Optional, Sequence

from ..errors import CurveConstructionError, ParameterDomainError
from .. import settings


def find_span(u: float, knots: Sequence[float], degree: int) -> int:
    """Return the knot span index ``i`` with ``knots[i] <= u < knots[i+1]``.

    Parameters below the domain map to the first span, parameters at or
    beyond the domain end map to the last non-empty span.
    """
    n = len(knots) - degree - 2
    if u >= knots[n + 1]:
        span = n
        while span > degree and knots[span] == knots[n + 1]:
            span -= 1
        return span
    if u < knots[degree]:
        u = knots[degree]
    low = degree
    high = n + 1
    mid = (low + high) // 2
    while u < knots[mid] or u >= knots[mid + 1]:
        if u < knots[mid]:
            high = mid
        else:
            low = mid
        mid = (low + high) // 2
    return mid


def clamping_find_span(u: float, knots: Sequence[float], degree: int) -> int:
    """Span lookup over the whole knot vector.

    Unlike :func:`find_span` this refuses parameters outside
    ``[knots[0], knots[-1]]`` and, at the upper end, returns the index of
    the first copy of the last knot.
    """
    if u < knots[0] or u > knots[-1]:
        raise ParameterDomainError(f"Parameter {u} lies outside the knot range [{knots[0]}, {knots[-1]}]")
    if u == knots[-1]:
        return bisect_left(knots, u)
    return bisect_right(knots, u) - 1


def basis_functions(span: int, u: float, knots: Sequence[float], degree: int) -> List[float]:
    """Return the ``degree + 1`` non-vanishing basis functions at ``u``.

    Triangular Cox-de Boor table, O(degree^2).  A zero knot difference
    makes the corresponding term vanish.
    """
    values = [0.0] * (degree + 1)
    left = [0.0] * (degree + 1)
    right = [0.0] * (degree + 1)
    values[0] = 1.0
    for j in range(1, degree + 1):
        left[j] = u - knots[span + 1 - j]
        right[j] = knots[span + j] - u
        saved = 0.0
        for r in range(j):
            denom = right[r + 1] + left[j - r]
            temp = values[r] / denom if denom != 0 else 0.0
            values[r] = saved + right[r + 1] * temp
            saved = left[j - r] * temp
        values[j] = saved
    return values


def basis_function(i: int, degree: int, u: float, knots: Sequence[float]) -> float:
    """Naive recursive Cox-de Boor formula (exponential; reference use only)."""
    if degree == 0:
        return 1.0 if knots[i] <= u < knots[i + 1] else 0.0
    value = 0.0
    denom = knots[i + degree] - knots[i]
    if denom != 0:
        value += (u - knots[i]) / denom * basis_function(i, degree - 1, u, knots)
    denom = knots[i + degree + 1] - knots[i + 1]
    if denom != 0:
        value += (knots[i + degree + 1] - u) / denom * basis_function(i + 1, degree - 1, u, knots)
    return value


def knot_multiplicity(knots: Sequence[float], index: int) -> int:
    """Number of knots equal to ``knots[index]``."""
    value = knots[index]
    return bisect_right(knots, value) - bisect_left(knots, value)


def value_multiplicity(knots: Sequence[float], value: float) -> int:
    return bisect_right(knots, value) - bisect_left(knots, value)


def distinct_knots(knots: Sequence[float]) -> List[float]:
    result: List[float] = []
    for k in knots:
        if not result or k != result[-1]:
            result.append(k)
    return result


def knot_multiplicities(knots: Sequence[float]) -> List[int]:
    """Run-length count of adjacent equal knots."""
    result: List[int] = []
    last = None
    for k in knots:
        if result and k == last:
            result[-1] += 1
        else:
            last = k
            result.append(1)
    return result


def uniform_knots(degree: int, number_of_control_points: int) -> List[float]:
    """Clamped knot vector on [0, 1] with uniformly spaced interior knots."""
    interior = number_of_control_points - degree - 1
    if interior < 0:
        raise CurveConstructionError("The number of interior knots cannot be negative")
    step = 1.0 / (interior + 1)
    return [0.0] * (degree + 1) + [step * (i + 1) for i in range(interior)] + [1.0] * (degree + 1)


def periodic_knots(degree: int, free_count: int, period: Optional[float] = None) -> List[float]:
    """Uniform periodic knot vector whose domain is ``[0, period]``."""
    if period is None:
        period = free_count * settings.PERIODIC_KNOT_SPACING
    step = period / free_count
    return [(i - degree) * step for i in range(free_count + 2 * degree + 1)]


def greville_abscissae(knots: Sequence[float], degree: int) -> List[float]:
    count = len(knots) - degree - 1
    if degree == 0:
        return [0.5 * (knots[i] + knots[i + 1]) for i in range(count)]
    return [sum(knots[i + 1:i + degree + 1]) / degree for i in range(count)]


@lru_cache(maxsize=None)
def binomial(n: int, k: int) -> int:
    if n < k or k < 0:
        return 0
    k = min(k, n - k)
    result = 1
    for x in range(1, k + 1):
        result = result * (n - k + x) // x
    return result


def validate_knots(knots: Sequence[float], degree: int, count: int) -> None:
    """Raise :class:`CurveConstructionError` unless the triple is consistent."""
    if degree < 0:
        raise CurveConstructionError(f"Degree must be non-negative, got {degree}")
    if count <= degree:
        raise CurveConstructionError(
            f"A degree {degree} curve needs more than {degree} control points, got {count}"
        )
    if len(knots) != count + degree + 1:
        raise CurveConstructionError(
            f"Knot vector length {len(knots)} does not match expected {count + degree + 1}"
        )
    for a, b in zip(knots, knots[1:]):
        if b < a:
            raise CurveConstructionError("Knot vector must be non-decreasing")
    if max(knot_multiplicities(knots)) > degree + 1:
        raise CurveConstructionError(f"Knot multiplicity exceeds degree + 1 = {degree + 1}")
