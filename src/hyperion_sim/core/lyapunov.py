# MIT License (see LICENSE)
"""
Largest Lyapunov exponent by the two-trajectory (Benettin) method.

A shadow trajectory starts a distance d0 away from the primary one and is
integrated with exactly the same stepper and derivative function. Whenever
the separation d exceeds a threshold, the growth ln(d/d0) is banked and the
shadow is pulled back to distance d0 along the current separation
direction. The running estimate is

    λ ≈ (Σ ln(d_k / d0) + ln(d / d0)) / t

Reference:
    Benettin et al. (1980), Meccanica 15, 9-20.
    https://en.wikipedia.org/wiki/Lyapunov_exponent
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable
import logging
import math

import numpy as np

from ..util import unit

logger = logging.getLogger(__name__)

Difference = Callable[[np.ndarray, np.ndarray], np.ndarray]


def plain_difference(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return a - b


@dataclass(frozen=True)
class Renormalization:
    """One banked growth event."""
    time: float
    distance: float
    local_exponent: float


class LyapunovEstimator:
    """
    Tracks a shadow state and the running largest Lyapunov exponent.

    Args:
        d0: Initial (and post-renormalisation) separation.
        threshold: Separation at which growth is banked and the shadow
            pulled back. Must exceed d0.
        direction: Initial separation direction (normalised internally).
        difference: Phase-space difference shadow - primary. Systems with
            angular coordinates pass a version that wraps angle components.
        min_distance: Below this (or for a non-finite distance) the shadow
            is re-seeded along the last good direction.
    """

    def __init__(
        self,
        d0: float,
        threshold: float,
        direction: np.ndarray,
        difference: Difference = plain_difference,
        min_distance: float | None = None,
    ):
        if not (0.0 < d0 < threshold):
            raise ValueError("Lyapunov estimator requires 0 < d0 < threshold")
        direction = unit(np.asarray(direction, dtype=np.float64))
        if not np.any(direction):
            raise ValueError("Lyapunov direction must be non-zero")
        self.d0 = float(d0)
        self.threshold = float(threshold)
        self.difference = difference
        self.min_distance = float(min_distance) if min_distance is not None else 1e-6 * self.d0
        self._direction0 = direction
        self.shadow = np.zeros_like(direction)
        self.reset_counters()

    def reset_counters(self) -> None:
        self._last_direction = self._direction0.copy()
        self.log_sum = 0.0
        self.elapsed = 0.0
        self.since_renorm = 0.0
        self.distance = self.d0
        self.renormalizations: list[Renormalization] = []

    def seed(self, primary: np.ndarray) -> None:
        """Start a fresh estimate with the shadow at d0 along the initial direction."""
        self.reset_counters()
        self.shadow = primary + self.d0 * self._direction0

    def step(
        self,
        primary: np.ndarray,
        dt: float,
        advance: Callable[[np.ndarray], np.ndarray],
    ) -> Renormalization | None:
        """
        Advance the shadow by one sub-step and measure the separation.

        Args:
            primary: Primary state *after* this sub-step.
            dt: Length of the sub-step.
            advance: Maps a state at the start of the sub-step to its end,
                using the same stepper and coefficients as the primary.

        Returns:
            The renormalisation event if one happened, else None.
        """
        self.shadow = advance(self.shadow)
        self.elapsed += dt
        self.since_renorm += dt

        diff = self.difference(self.shadow, primary)
        d = float(np.linalg.norm(diff))
        if not math.isfinite(d) or d < self.min_distance:
            logger.warning("Shadow trajectory degenerate (d=%r); re-seeding", d)
            self.shadow = primary + self.d0 * self._last_direction
            self.distance = self.d0
            self.since_renorm = 0.0
            return None

        self._last_direction = diff / d
        self.distance = d
        if d <= self.threshold:
            return None

        growth = math.log(d / self.d0)
        self.log_sum += growth
        event = Renormalization(
            time=self.elapsed,
            distance=d,
            local_exponent=growth / self.since_renorm if self.since_renorm > 0 else 0.0,
        )
        self.renormalizations.append(event)
        self.shadow = primary + self.d0 * self._last_direction
        self.distance = self.d0
        self.since_renorm = 0.0
        return event

    @property
    def exponent(self) -> float:
        """Running estimate of the largest Lyapunov exponent (1/s)."""
        if self.elapsed <= 0.0:
            return 0.0
        return (self.log_sum + math.log(self.distance / self.d0)) / self.elapsed

    def divergence_time(self, tolerance: float = 1.0) -> float:
        """
        Time for an initial error d0 to grow to ``tolerance``:
        ln(tolerance / d0) / λ. Infinite when λ ≤ 0.
        """
        lam = self.exponent
        if lam <= 0.0:
            return math.inf
        return math.log(tolerance / self.d0) / lam
