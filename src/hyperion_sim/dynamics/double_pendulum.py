# MIT License (see LICENSE)
"""
Planar double pendulum with optional linear damping.

State y = [θ1, ω1, θ2, ω2], angles from the downward vertical. With
Δ = θ2 - θ1 the Lagrangian equations of motion are

    den1 = (m1 + m2)·l1 - m2·l1·cos²Δ
    den2 = (l2 / l1)·den1

    ω̇1 = (m2·l1·ω1²·sinΔ·cosΔ + m2·g·sinθ2·cosΔ + m2·l2·ω2²·sinΔ
           - (m1 + m2)·g·sinθ1) / den1 - d·ω1
    ω̇2 = (-m2·l2·ω2²·sinΔ·cosΔ + (m1 + m2)·(g·sinθ1·cosΔ
           - l1·ω1²·sinΔ - g·sinθ2)) / den2 - d·ω2

Reference:
    https://www.myphysicslab.com/pendulum/double-pendulum-en.html
"""
from __future__ import annotations
from dataclasses import dataclass
import math

import numpy as np

from ..util import guard, wrap_angle

ANGLE_INDICES = (0, 2)


@dataclass(frozen=True)
class DoublePendulumCoefficients:
    m1: float
    m2: float
    l1: float
    l2: float
    gravity: float
    damping: float = 0.0


def derivatives(y: np.ndarray, t: float, c: DoublePendulumCoefficients) -> np.ndarray:
    th1, w1, th2, w2 = y[0], y[1], y[2], y[3]
    m1, m2, l1, l2, g = c.m1, c.m2, c.l1, c.l2, c.gravity
    delta = th2 - th1
    sd, cd = math.sin(delta), math.cos(delta)

    den1 = guard((m1 + m2) * l1 - m2 * l1 * cd * cd)
    den2 = guard((l2 / l1) * den1)

    dw1 = (
        m2 * l1 * w1 * w1 * sd * cd
        + m2 * g * math.sin(th2) * cd
        + m2 * l2 * w2 * w2 * sd
        - (m1 + m2) * g * math.sin(th1)
    ) / den1 - c.damping * w1
    dw2 = (
        -m2 * l2 * w2 * w2 * sd * cd
        + (m1 + m2) * (g * math.sin(th1) * cd - l1 * w1 * w1 * sd - g * math.sin(th2))
    ) / den2 - c.damping * w2
    return np.array([w1, dw1, w2, dw2], dtype=np.float64)


def wrap_state(y: np.ndarray) -> np.ndarray:
    """Copy of y with both angles wrapped into [-π, π)."""
    out = y.copy()
    out[0] = wrap_angle(out[0])
    out[2] = wrap_angle(out[2])
    return out


def phase_difference(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """a - b with angle components taken the short way round the circle."""
    d = a - b
    d[0] = wrap_angle(d[0])
    d[2] = wrap_angle(d[2])
    return d


def bob_positions(y: np.ndarray, c: DoublePendulumCoefficients) -> tuple[np.ndarray, np.ndarray]:
    """Bob centres relative to the pivot, y pointing up."""
    th1, th2 = y[0], y[2]
    p1 = np.array([c.l1 * math.sin(th1), -c.l1 * math.cos(th1)])
    p2 = p1 + np.array([c.l2 * math.sin(th2), -c.l2 * math.cos(th2)])
    return p1, p2


def energies(y: np.ndarray, c: DoublePendulumCoefficients) -> tuple[float, float]:
    """Returns (kinetic, potential), potential measured from the pivot height."""
    th1, w1, th2, w2 = y[0], y[1], y[2], y[3]
    v1 = c.l1 * w1 * np.array([math.cos(th1), math.sin(th1)])
    v2 = v1 + c.l2 * w2 * np.array([math.cos(th2), math.sin(th2)])
    p1, p2 = bob_positions(y, c)
    ke = 0.5 * c.m1 * float(v1 @ v1) + 0.5 * c.m2 * float(v2 @ v2)
    pe = c.m1 * c.gravity * p1[1] + c.m2 * c.gravity * p2[1]
    return ke, float(pe)
