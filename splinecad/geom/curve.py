from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, List, Sequence, Tuple

import numpy as np


class CurveKind(str, Enum):
    NON_RATIONAL = "non_rational"
    RATIONAL = "rational"
    PERIODIC_NON_RATIONAL = "periodic_non_rational"
    PERIODIC_RATIONAL = "periodic_rational"
    COMPLEX = "complex"


class Curve(ABC):
    """Abstract parametric curve over a knot vector.

    Concrete curves expose ``control_points``, ``knots`` and ``degree``
    as read-only attributes and a ``kind`` tag used for dispatch.
    """

    kind: CurveKind

    @abstractmethod
    def evaluate(self, u: float) -> Any:
        """Return the point on the curve at parameter ``u``."""
        raise NotImplementedError

    @property
    def domain(self) -> Tuple[float, float]:
        k = self.knots
        return k[self.degree], k[len(k) - self.degree - 1]

    def sample(self, count: int = 100) -> List[Any]:
        """Evaluate ``count`` evenly spaced parameters across the domain."""
        start, end = self.domain
        return [self.evaluate(float(u)) for u in np.linspace(start, end, count)]

    def evaluate_many(self, parameters: Sequence[float]) -> List[Any]:
        return [self.evaluate(float(u)) for u in parameters]
