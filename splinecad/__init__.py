"""Top-level helpers for splinecad."""

import logging

__all__ = [
    "BSplineCurve",
    "ComplexRationalBSplineCurve",
    "Curve",
    "CurveKind",
    "PeriodicBSplineCurve",
    "PeriodicRationalBSplineCurve",
    "RationalBSplineCurve",
    "make_curve",
    "curve_from_dict",
    "curve_to_dict",
    # Errors
    "CurveError",
    "CurveConstructionError",
    "ParameterDomainError",
    "DegenerateOperationError",
    # Tolerances
    "TolerancePolicy",
    "get_tolerance",
    "set_tolerance",
    "tolerance_override",
]

from .errors import (
    CurveConstructionError,
    CurveError,
    DegenerateOperationError,
    ParameterDomainError,
)
from .geom import (
    BSplineCurve,
    ComplexRationalBSplineCurve,
    Curve,
    CurveKind,
    PeriodicBSplineCurve,
    PeriodicRationalBSplineCurve,
    RationalBSplineCurve,
    curve_from_dict,
    curve_to_dict,
    make_curve,
)
from .tolerance import TolerancePolicy, get_tolerance, set_tolerance, tolerance_override

logging.getLogger("splinecad").addHandler(logging.NullHandler())
