"""Basic linear algebra value types for splinecad.

This module includes small immutable vectors used as the coordinate
types of curve control points: ``Vec2`` and ``Vec3`` for ordinary
points, ``VecN`` for homogeneous coordinates of any length and
``Complex2`` for the two-component complex points of Mobius-invariant
curves.  Every operation returns a new value.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Tuple, Union

from .errors import DegenerateOperationError

EPSILON: float = 1e-9


@dataclass(frozen=True)
class Vec2:
    """A lightweight immutable 2D vector."""

    x: float
    y: float

    # --- basic arithmetic -------------------------------------------------
    def __add__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Vec2":
        return Vec2(-self.x, -self.y)

    def __mul__(self, scalar: float) -> "Vec2":
        return Vec2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Vec2":
        if scalar == 0:
            raise DegenerateOperationError("Cannot divide a Vec2 by zero")
        return Vec2(self.x / scalar, self.y / scalar)

    # --- vector operations -------------------------------------------------
    def dot(self, other: "Vec2") -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Vec2") -> float:
        return self.x * other.y - self.y * other.x

    def norm(self) -> float:
        return math.hypot(self.x, self.y)

    length = norm

    def normalized(self, eps: float = EPSILON) -> "Vec2":
        l = self.norm()
        if l < eps:
            raise DegenerateOperationError("Cannot normalise near zero-length vector")
        return self / l

    def distance_to(self, other: "Vec2") -> float:
        return (self - other).norm()

    def rotate(self, angle: float) -> "Vec2":
        c, s = math.cos(angle), math.sin(angle)
        return Vec2(c * self.x - s * self.y, s * self.x + c * self.y)

    def rotate90(self) -> "Vec2":
        return Vec2(-self.y, self.x)

    def almost_equals(self, other: "Vec2", eps: float = EPSILON) -> bool:
        return math.isclose(self.x, other.x, abs_tol=eps) and math.isclose(self.y, other.y, abs_tol=eps)


@dataclass(frozen=True)
class Vec3:
    x: float
    y: float
    z: float

    def __add__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> "Vec3":
        return Vec3(-self.x, -self.y, -self.z)

    def __mul__(self, scalar: float) -> "Vec3":
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Vec3":
        if scalar == 0:
            raise DegenerateOperationError("Cannot divide a Vec3 by zero")
        return Vec3(self.x / scalar, self.y / scalar, self.z / scalar)

    def cross(self, other: "Vec3") -> "Vec3":
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def normalized(self) -> "Vec3":
        n = self.norm()
        if n == 0:
            raise DegenerateOperationError("Cannot normalise a zero vector")
        return self / n

    def dot(self, other: "Vec3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def norm(self) -> float:
        return math.sqrt(self.dot(self))

    length = norm

    def distance_to(self, other: "Vec3") -> float:
        return (self - other).norm()

    def rotate(self, axis: "Vec3", angle: float) -> "Vec3":
        """Rotate about ``axis`` by ``angle`` radians (Rodrigues' formula)."""
        k = axis.normalized()
        c, s = math.cos(angle), math.sin(angle)
        return self * c + k.cross(self) * s + k * (k.dot(self) * (1.0 - c))

    def almost_equals(self, other: "Vec3", eps: float = EPSILON) -> bool:
        return (
            math.isclose(self.x, other.x, abs_tol=eps)
            and math.isclose(self.y, other.y, abs_tol=eps)
            and math.isclose(self.z, other.z, abs_tol=eps)
        )


class VecN:
    """Immutable vector of arbitrary length, used for homogeneous points."""

    __slots__ = ("coords",)

    def __init__(self, coords: Iterable[float]):
        object.__setattr__(self, "coords", tuple(float(c) for c in coords))

    def __setattr__(self, name, value):
        raise AttributeError("VecN is immutable")

    def __add__(self, other: "VecN") -> "VecN":
        return VecN(a + b for a, b in zip(self.coords, other.coords))

    def __sub__(self, other: "VecN") -> "VecN":
        return VecN(a - b for a, b in zip(self.coords, other.coords))

    def __neg__(self) -> "VecN":
        return VecN(-a for a in self.coords)

    def __mul__(self, scalar: float) -> "VecN":
        return VecN(scalar * x for x in self.coords)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "VecN":
        if scalar == 0:
            raise DegenerateOperationError("Cannot divide a VecN by zero")
        return VecN(x / scalar for x in self.coords)

    def __eq__(self, other) -> bool:
        return isinstance(other, VecN) and self.coords == other.coords

    def __hash__(self) -> int:
        return hash(self.coords)

    def dot(self, other: "VecN") -> float:
        return sum(a * b for a, b in zip(self.coords, other.coords))

    def norm(self) -> float:
        return math.sqrt(self.dot(self))

    def almost_equals(self, other: "VecN", eps: float = EPSILON) -> bool:
        return len(self) == len(other) and all(
            math.isclose(a, b, abs_tol=eps) for a, b in zip(self.coords, other.coords)
        )

    def __len__(self) -> int:
        return len(self.coords)

    def __getitem__(self, idx):
        return self.coords[idx]

    def __repr__(self) -> str:
        return f"VecN({list(self.coords)})"


@dataclass(frozen=True)
class Complex2:
    """Pair of complex numbers ``(c0, c1)`` representing the point ``c0 / c1``."""

    c0: complex
    c1: complex

    def __add__(self, other: "Complex2") -> "Complex2":
        return Complex2(self.c0 + other.c0, self.c1 + other.c1)

    def __sub__(self, other: "Complex2") -> "Complex2":
        return Complex2(self.c0 - other.c0, self.c1 - other.c1)

    def __neg__(self) -> "Complex2":
        return Complex2(-self.c0, -self.c1)

    def __mul__(self, scalar: Union[float, complex]) -> "Complex2":
        return Complex2(self.c0 * scalar, self.c1 * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: Union[float, complex]) -> "Complex2":
        if scalar == 0:
            raise DegenerateOperationError("Cannot divide a Complex2 by zero")
        return Complex2(self.c0 / scalar, self.c1 / scalar)

    def norm(self) -> float:
        return math.sqrt(abs(self.c0) ** 2 + abs(self.c1) ** 2)

    def to_complex(self) -> complex:
        if self.c1 == 0:
            raise DegenerateOperationError("Complex2 with zero weight has no affine image")
        return self.c0 / self.c1

    def almost_equals(self, other: "Complex2", eps: float = EPSILON) -> bool:
        return abs(self.c0 - other.c0) <= eps and abs(self.c1 - other.c1) <= eps


Point = Union[float, complex, Vec2, Vec3, VecN, Complex2]


def norm(p: Point) -> float:
    """Euclidean norm of a control point of any supported coordinate type."""
    if isinstance(p, (int, float, complex)):
        return abs(p)
    return p.norm()


def distance(a: Point, b: Point) -> float:
    return norm(a - b)


def homogenize(point: Union[float, Vec2, Vec3], weight: float) -> Union[Vec2, Vec3, VecN]:
    """Return ``(point * weight, weight)`` one dimension up."""
    if isinstance(point, Vec2):
        return Vec3(point.x * weight, point.y * weight, weight)
    if isinstance(point, Vec3):
        return VecN((point.x * weight, point.y * weight, point.z * weight, weight))
    if isinstance(point, (int, float)):
        return Vec2(point * weight, weight)
    raise TypeError(f"Cannot build homogeneous coordinates for {type(point).__name__}")


def split_homogeneous(h: Union[Vec2, Vec3, VecN]) -> Tuple[Union[float, Vec2, Vec3], float]:
    """Return the weighted spatial part and the weight of ``h`` without dividing."""
    if isinstance(h, Vec3):
        return Vec2(h.x, h.y), h.z
    if isinstance(h, VecN) and len(h) == 4:
        return Vec3(h[0], h[1], h[2]), h[3]
    if isinstance(h, Vec2):
        return h.x, h.y
    raise TypeError(f"Cannot project homogeneous coordinates of {type(h).__name__}")


def dehomogenize(h: Union[Vec2, Vec3, VecN]) -> Tuple[Union[float, Vec2, Vec3], float]:
    """Inverse of :func:`homogenize`: return ``(point, weight)``."""
    spatial, w = split_homogeneous(h)
    if w == 0:
        raise DegenerateOperationError("Homogeneous point has zero weight")
    return spatial * (1.0 / w), w
