# MIT License (see LICENSE)
"""
Signal analysis helpers for recorded histories.

- estimate_period: mean spacing of upward zero crossings
- power_spectrum: one-sided amplitude spectrum via numpy.fft
- damping_regime: classify a damping ratio
"""
from __future__ import annotations
import math

import numpy as np


def zero_crossings(times: np.ndarray, values: np.ndarray, level: float = 0.0) -> np.ndarray:
    """
    Times at which ``values`` crosses ``level`` upwards.

    Crossing instants are linearly interpolated between samples, so the
    result is much finer than the sampling interval for smooth signals.
    """
    t = np.asarray(times, dtype=np.float64)
    y = np.asarray(values, dtype=np.float64) - level
    idx = np.nonzero((y[:-1] < 0.0) & (y[1:] >= 0.0))[0]
    if idx.size == 0:
        return np.zeros(0, dtype=np.float64)
    y0, y1 = y[idx], y[idx + 1]
    frac = -y0 / (y1 - y0)
    return t[idx] + frac * (t[idx + 1] - t[idx])


def estimate_period(times: np.ndarray, values: np.ndarray, level: float = 0.0) -> float:
    """
    Period of an oscillating signal from its upward zero crossings.

    Returns:
        Mean crossing interval in seconds, or NaN with fewer than two crossings.
    """
    crossings = zero_crossings(times, values, level)
    if crossings.size < 2:
        return math.nan
    return float(np.mean(np.diff(crossings)))


def power_spectrum(samples: np.ndarray, sample_dt: float) -> tuple[np.ndarray, np.ndarray]:
    """
    One-sided amplitude spectrum of a real signal.

    The mean is removed first so the DC bin does not swamp the plot.

    Args:
        samples: Evenly spaced samples.
        sample_dt: Spacing between samples in seconds.

    Returns:
        Tuple (frequencies_hz, amplitudes), both of length N//2 + 1.
    """
    x = np.asarray(samples, dtype=np.float64)
    n = x.shape[0]
    if n < 2:
        return np.zeros(0), np.zeros(0)
    spec = np.fft.rfft(x - np.mean(x))
    freqs = np.fft.rfftfreq(n, d=sample_dt)
    return freqs, np.abs(spec) / n


def damping_regime(zeta: float, band: float = 0.02) -> str:
    """
    Classify a damping ratio ζ = c / (2√(km)).

    Values within ``band`` of 1 count as critically damped.
    """
    if zeta <= 0.0:
        return "undamped"
    if abs(zeta - 1.0) <= band:
        return "critically damped"
    if zeta < 1.0:
        return "underdamped"
    return "overdamped"
