# MIT License (see LICENSE)
"""
Utility functions for vector math and numeric operations.

Small helpers shared by the dynamics providers: array conversion,
unit vectors, clamping and angle wrapping.
"""
from __future__ import annotations
import math

import numpy as np

from .constants import EPS


def f64(x) -> np.ndarray:
    """
    Convert any array-like to a float64 numpy array.

    Used throughout the codebase to ensure consistent numeric precision
    and allow tuple/list inputs for state vectors.
    """
    return np.array(x, dtype=np.float64)


def unit(v: np.ndarray, eps: float = EPS) -> np.ndarray:
    """
    Return a unit vector (any dimension) in the same direction as v.

    Returns a zero vector if |v| < eps to avoid division by zero.
    """
    n = float(np.linalg.norm(v))
    if n < eps:
        return np.zeros_like(v, dtype=np.float64)
    return v / n


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp x into [lo, hi]."""
    return max(lo, min(hi, x))


def wrap_angle(theta):
    """
    Wrap an angle (scalar or array) into [-π, π). Negative inputs wrap too.
    """
    return (np.asarray(theta) + math.pi) % (2.0 * math.pi) - math.pi


def guard(den: float, eps: float = EPS) -> float:
    """Push a denominator away from zero, preserving its sign."""
    if abs(den) >= eps:
        return den
    return eps if den >= 0.0 else -eps
