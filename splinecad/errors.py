"""Exceptions raised by the curve kernel.

All of them derive from :class:`ValueError` so callers that guard curve
edits with ``except ValueError`` keep working.  Knot removal that fails
its distance check is *not* an error: it returns ``None``.
"""


class CurveError(ValueError):
    """Base class for curve kernel failures."""


class CurveConstructionError(CurveError):
    """Inconsistent degree / knot vector / control point count, or non-monotonic knots."""


class ParameterDomainError(CurveError):
    """A parameter or knot index lies outside the valid range."""


class DegenerateOperationError(CurveError):
    """An operation precondition does not hold (zero vector, zero weight, unclamped ends...)."""
