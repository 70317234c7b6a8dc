# MIT License (see LICENSE)
"""
Driven, damped spring-mass oscillator.

Equation of motion (state y = [x, v]):

    m·ẍ = -k·x - c·ẋ + F0·cos(ω_d·t)

Reference:
    https://en.wikipedia.org/wiki/Harmonic_oscillator#Driven_harmonic_oscillators
"""
from __future__ import annotations
from dataclasses import dataclass
import math

import numpy as np


@dataclass(frozen=True)
class OscillatorCoefficients:
    """
    Attributes:
        mass: Mass m in kg (> 0).
        k: Spring constant in N/m (> 0).
        damping: Linear damping coefficient c in kg/s.
        drive_amplitude: Driving force amplitude F0 in N.
        drive_omega: Driving angular frequency ω_d in rad/s.
    """
    mass: float
    k: float
    damping: float = 0.0
    drive_amplitude: float = 0.0
    drive_omega: float = 0.0

    @property
    def natural_omega(self) -> float:
        """ω0 = √(k/m)."""
        return math.sqrt(self.k / self.mass)

    @property
    def period(self) -> float:
        """T = 2π√(m/k)."""
        return 2.0 * math.pi / self.natural_omega

    @property
    def damping_ratio(self) -> float:
        """ζ = c / (2√(km))."""
        return self.damping / (2.0 * math.sqrt(self.k * self.mass))


def derivatives(y: np.ndarray, t: float, c: OscillatorCoefficients) -> np.ndarray:
    x, v = y[0], y[1]
    force = -c.k * x - c.damping * v
    if c.drive_amplitude:
        force += c.drive_amplitude * math.cos(c.drive_omega * t)
    return np.array([v, force / c.mass], dtype=np.float64)


def acceleration(y: np.ndarray, t: float, c: OscillatorCoefficients) -> float:
    return float(derivatives(y, t, c)[1])


def energies(y: np.ndarray, c: OscillatorCoefficients) -> tuple[float, float]:
    """Returns (kinetic, potential): ½mv² and ½kx²."""
    x, v = float(y[0]), float(y[1])
    return 0.5 * c.mass * v * v, 0.5 * c.k * x * x
