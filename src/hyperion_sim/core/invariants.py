# MIT License (see LICENSE)
"""
Utilities for calculating physical invariants and conserved quantities.

Used for the live readouts and for verifying simulation correctness.
In a closed system with no dissipation or external forces, total energy
and momentum should remain constant (within integration error).

All functions take plain arrays: ``masses`` of shape (n,), ``positions``
and ``velocities`` of shape (n,) for 1D systems or (n, 2) for planar ones.
"""
from __future__ import annotations
import numpy as np

from ..constants import EPS


def kinetic_energy(masses: np.ndarray, velocities: np.ndarray) -> float:
    """
    Total translational kinetic energy.

    T = Σ 0.5 * m * |v|²

    Returns:
        Kinetic energy in Joules.
    """
    m = np.asarray(masses, dtype=np.float64)
    v = np.asarray(velocities, dtype=np.float64)
    v_sq = v * v if v.ndim == 1 else np.sum(v * v, axis=1)
    return float(0.5 * np.sum(m * v_sq))


def linear_momentum(masses: np.ndarray, velocities: np.ndarray) -> np.ndarray | float:
    """
    Total linear momentum, P = Σ m * v.

    Returns:
        Signed scalar for 1D velocities, vector [Px, Py] for planar ones.
    """
    m = np.asarray(masses, dtype=np.float64)
    v = np.asarray(velocities, dtype=np.float64)
    if v.ndim == 1:
        return float(np.sum(m * v))
    return np.sum(m[:, None] * v, axis=0)


def angular_momentum_2d(masses: np.ndarray, positions: np.ndarray, velocities: np.ndarray) -> float:
    """
    z-component of the total angular momentum about the origin.

    L = Σ m * (x * vy - y * vx)
    """
    m = np.asarray(masses, dtype=np.float64)
    r = np.asarray(positions, dtype=np.float64)
    v = np.asarray(velocities, dtype=np.float64)
    return float(np.sum(m * (r[:, 0] * v[:, 1] - r[:, 1] * v[:, 0])))


def gravitational_potential_energy(
    masses: np.ndarray,
    positions: np.ndarray,
    G: float,
    softening: float = 0.0,
) -> float:
    """
    Pairwise Newtonian potential energy.

    U = -Σ_{i<j} G m_i m_j / sqrt(r_ij² + ε²)

    The same softening ε as the force law must be used, otherwise the
    reported total energy drifts during close encounters even when the
    integration is exact.
    """
    m = np.asarray(masses, dtype=np.float64)
    r = np.asarray(positions, dtype=np.float64)
    n = m.shape[0]
    if n < 2:
        return 0.0
    d = r[:, None, :] - r[None, :, :]
    dist = np.sqrt(np.maximum(np.sum(d * d, axis=2) + softening * softening, EPS))
    iu = np.triu_indices(n, k=1)
    return float(-G * np.sum(m[iu[0]] * m[iu[1]] / dist[iu]))


def relative_drift(reference: float, value: float, floor: float = 1e-12) -> float:
    """|value - reference| / max(|reference|, floor)."""
    return abs(value - reference) / max(abs(reference), floor)
