# MIT License (see LICENSE)
"""
Analytic stationary states of a particle in an infinite square well.

    ψ_n(x, t) = √(2/L)·sin(nπx/L)·exp(-i·E_n·t/ℏ),   0 ≤ x ≤ L
    E_n = n²π²ℏ² / (2mL²)

Reference:
    https://en.wikipedia.org/wiki/Particle_in_a_box
"""
from __future__ import annotations
import math

import numpy as np


def energy_level(n: int, length: float, mass: float = 1.0, hbar: float = 1.0) -> float:
    if n < 1:
        raise ValueError("Quantum number must be >= 1")
    return (n * math.pi * hbar) ** 2 / (2.0 * mass * length * length)


def sample_points(length: float, samples: int) -> np.ndarray:
    """Interior points of the box (the walls, where ψ = 0, are excluded)."""
    dx = length / (samples + 1)
    return dx * np.arange(1, samples + 1, dtype=np.float64)


def stationary_state(
    n: int,
    x: np.ndarray,
    length: float,
    t: float = 0.0,
    mass: float = 1.0,
    hbar: float = 1.0,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Real and imaginary parts of ψ_n(x, t).
    """
    amplitude = math.sqrt(2.0 / length) * np.sin(n * math.pi * x / length)
    phase = -energy_level(n, length, mass, hbar) * t / hbar
    return amplitude * math.cos(phase), amplitude * math.sin(phase)


def position_spread(n: int, length: float) -> float:
    """Δx = L·√(1/12 - 1/(2n²π²))."""
    return length * math.sqrt(1.0 / 12.0 - 1.0 / (2.0 * (n * math.pi) ** 2))


def momentum_spread(n: int, length: float, hbar: float = 1.0) -> float:
    """Δp = nπℏ/L (⟨p⟩ = 0 for a standing wave)."""
    return n * math.pi * hbar / length
