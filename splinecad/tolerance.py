"""Numeric tolerance configuration shared by the curve algorithms."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, replace
from threading import RLock
from typing import Callable, Iterator, List, Optional

from . import settings


@dataclass(frozen=True)
class TolerancePolicy:
    """Tolerances for knot removal, point equality and domain checks."""

    knot_removal: float = settings.KNOT_REMOVAL_TOLERANCE
    point: float = settings.POINT_TOLERANCE
    parametric: float = settings.PARAMETRIC_TOLERANCE

    def with_overrides(self, **changes: float) -> "TolerancePolicy":
        return replace(self, **changes)


_lock = RLock()
_policy = TolerancePolicy()
_listeners: List[Callable[[TolerancePolicy], None]] = []


def get_tolerance() -> TolerancePolicy:
    with _lock:
        return _policy


def set_tolerance(policy: TolerancePolicy) -> TolerancePolicy:
    """Install ``policy`` process-wide, notify listeners and return the previous one."""
    global _policy
    with _lock:
        previous, _policy = _policy, policy
        listeners = list(_listeners)
    for cb in listeners:
        cb(policy)
    return previous


def on_tolerance_changed(listener: Callable[[TolerancePolicy], None]) -> None:
    with _lock:
        _listeners.append(listener)


@contextmanager
def tolerance_override(**changes: float) -> Iterator[TolerancePolicy]:
    """Temporarily replace some tolerances, restoring the old policy on exit."""
    policy = get_tolerance().with_overrides(**changes)
    previous = set_tolerance(policy)
    try:
        yield policy
    finally:
        set_tolerance(previous)


def nearly_equal(a: float, b: float, *, eps: Optional[float] = None) -> bool:
    tol = eps if eps is not None else get_tolerance().point
    return abs(a - b) <= tol
