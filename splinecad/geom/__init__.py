"""Curve geometry for splinecad."""

from .bernstein import BernsteinDecomposition
from .bspline import BSplineCurve
from .complex_rational import ComplexRationalBSplineCurve
from .curve import Curve, CurveKind
from .factory import curve_from_dict, curve_to_dict, make_curve
from .periodic import PeriodicBSplineCurve
from .rational import PeriodicRationalBSplineCurve, RationalBSplineCurve

__all__ = [
    "BernsteinDecomposition",
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
]
from .knots import basis_functions, clamping_find_span, find_span, periodic_knots, uniform_knots

__all__.extend(
    [
        "basis_functions",
        "clamping_find_span",
        "find_span",
        "periodic_knots",
        "uniform_knots",
    ]
)
