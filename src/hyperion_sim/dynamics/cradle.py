# MIT License (see LICENSE)
"""
Newton's cradle: a row of pendulums with ball-ball impacts.

Each ball swings on its own rigid string (state y = [θ..., ω...]):

    θ̈_i = -(g/L)·sin θ_i

Pivots sit on a horizontal line, ``spacing`` apart, with θ measured from
the downward vertical (positive to the right). After every sub-step,
``resolve_collisions`` handles contacts between neighbouring balls: the
normal velocity components are exchanged with the 1D restitution law and
the overlap is pushed apart.

Reference:
    https://en.wikipedia.org/wiki/Newton%27s_cradle
    https://en.wikipedia.org/wiki/Coefficient_of_restitution
"""
from __future__ import annotations
from dataclasses import dataclass

import numpy as np

from ..constants import EPS

# Fraction of the overlap removed from each ball per contact.
POSITION_CORRECTION: float = 0.5


@dataclass(frozen=True)
class CradleCoefficients:
    """
    Attributes:
        count: Number of balls.
        gravity: g in m/s².
        length: String length L in m.
        radius: Ball radius in m.
        spacing: Distance between neighbouring pivots in m (> 2·radius
                 leaves a small gap at rest).
        mass: Mass of each ball in kg.
        restitution: Coefficient of restitution e in [0, 1].
    """
    count: int
    gravity: float
    length: float
    radius: float
    spacing: float
    mass: float = 1.0
    restitution: float = 1.0

    def pivots(self) -> np.ndarray:
        """Pivot x-coordinates, centred on 0."""
        return (np.arange(self.count) - 0.5 * (self.count - 1)) * self.spacing


def derivatives(y: np.ndarray, t: float, c: CradleCoefficients) -> np.ndarray:
    n = y.shape[0] // 2
    theta, omega = y[:n], y[n:]
    return np.concatenate((omega, -(c.gravity / c.length) * np.sin(theta)))


def ball_positions(theta: np.ndarray, c: CradleCoefficients) -> np.ndarray:
    """Ball centres, shape (n, 2). Pivots at y = 0, balls hang below."""
    x = c.pivots() + c.length * np.sin(theta)
    y = -c.length * np.cos(theta)
    return np.stack((x, y), axis=1)


def ball_velocities(theta: np.ndarray, omega: np.ndarray, c: CradleCoefficients) -> np.ndarray:
    """Ball velocities, shape (n, 2): L·ω·(cos θ, sin θ)."""
    s = c.length * omega
    return np.stack((s * np.cos(theta), s * np.sin(theta)), axis=1)


def _resolve_pair(theta: np.ndarray, omega: np.ndarray, i: int, c: CradleCoefficients) -> bool:
    """Resolve contact between balls i and i+1 in place. Returns True on impulse."""
    j = i + 1
    L = c.length
    p1 = np.array([c.pivots()[i] + L * np.sin(theta[i]), -L * np.cos(theta[i])])
    p2 = np.array([c.pivots()[j] + L * np.sin(theta[j]), -L * np.cos(theta[j])])
    d = p2 - p1
    dist = float(np.hypot(d[0], d[1]))
    overlap = 2.0 * c.radius - dist
    if overlap <= 0.0 or dist < EPS:
        return False
    n = d / dist

    t1 = np.array([np.cos(theta[i]), np.sin(theta[i])])
    t2 = np.array([np.cos(theta[j]), np.sin(theta[j])])
    v1n = L * omega[i] * float(t1 @ n)
    v2n = L * omega[j] * float(t2 @ n)

    impulse = False
    if v1n - v2n > 0.0:
        # equal-mass balls: m1 = m2 = c.mass
        m1 = m2 = c.mass
        e = c.restitution
        v1n_new = (m1 * v1n + m2 * v2n - m2 * e * (v1n - v2n)) / (m1 + m2)
        v2n_new = (m1 * v1n + m2 * v2n + m1 * e * (v1n - v2n)) / (m1 + m2)
        for k, t_k, dv in ((i, t1, v1n_new - v1n), (j, t2, v2n_new - v2n)):
            proj = float(t_k @ n)
            if abs(proj) < EPS:
                proj = EPS if proj >= 0.0 else -EPS
            omega[k] += dv / (L * proj)
        impulse = True

    push = POSITION_CORRECTION * overlap * n[0] / L
    theta[i] -= push
    theta[j] += push
    return impulse


def resolve_collisions(y: np.ndarray, c: CradleCoefficients) -> tuple[np.ndarray, int]:
    """
    Resolve all neighbour contacts.

    Sweeps left to right until a sweep applies no impulse, at most
    ``count`` times, so a pulse can travel through the whole chain within
    one sub-step.

    Returns:
        Tuple (new_state, impulses_applied).
    """
    n = y.shape[0] // 2
    out = y.copy()
    theta, omega = out[:n], out[n:]
    total = 0
    for _ in range(max(1, n)):
        hits = 0
        for i in range(n - 1):
            if _resolve_pair(theta, omega, i, c):
                hits += 1
        total += hits
        if hits == 0:
            break
    return out, total


def energies(y: np.ndarray, c: CradleCoefficients) -> tuple[float, float]:
    """Returns (kinetic, potential): Σ½m(Lω)² and Σ m·g·L(1 - cos θ)."""
    n = y.shape[0] // 2
    theta, omega = y[:n], y[n:]
    ke = 0.5 * c.mass * float(np.sum((c.length * omega) ** 2))
    pe = c.mass * c.gravity * c.length * float(np.sum(1.0 - np.cos(theta)))
    return ke, pe


def momentum(y: np.ndarray, c: CradleCoefficients) -> float:
    """Signed tangential momentum Σ m·L·ω."""
    n = y.shape[0] // 2
    return float(c.mass * c.length * np.sum(y[n:]))
