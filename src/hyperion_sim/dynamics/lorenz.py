# MIT License (see LICENSE)
"""
Lorenz system.

    dx/dt = σ·(y - x)
    dy/dt = x·(ρ - z) - y
    dz/dt = x·y - β·z

Reference:
    Lorenz (1963), "Deterministic Nonperiodic Flow", J. Atmos. Sci. 20.
"""
from __future__ import annotations
from dataclasses import dataclass
import math

import numpy as np

# ρ above which the non-trivial fixed points lose stability (σ=10, β=8/3).
HOPF_RHO: float = 24.74


@dataclass(frozen=True)
class LorenzCoefficients:
    sigma: float
    rho: float
    beta: float


def derivatives(y: np.ndarray, t: float, c: LorenzCoefficients) -> np.ndarray:
    x, yy, z = y[0], y[1], y[2]
    return np.array(
        [c.sigma * (yy - x), x * (c.rho - z) - yy, x * yy - c.beta * z],
        dtype=np.float64,
    )


def fixed_points(c: LorenzCoefficients) -> list[tuple[float, float, float]]:
    """
    Equilibria: the origin, plus C± = (±√(β(ρ-1)), ±√(β(ρ-1)), ρ-1) for ρ > 1.
    """
    points = [(0.0, 0.0, 0.0)]
    if c.rho > 1.0:
        s = math.sqrt(c.beta * (c.rho - 1.0))
        points.append((s, s, c.rho - 1.0))
        points.append((-s, -s, c.rho - 1.0))
    return points


def system_state(rho: float, lyapunov: float, chaos_threshold: float = 0.01) -> str:
    """Qualitative regime label for the readout panel."""
    if rho < 1.0:
        return "stable origin"
    if rho < HOPF_RHO:
        return "stable fixed points"
    if lyapunov > chaos_threshold:
        return "chaotic"
    return "transitional"
