# MIT License (see LICENSE)
"""
Gaussian wave packet evolving under the 1D Schrödinger equation.

Natural units (ℏ = m = 1 by default) on a grid of ``grid_size`` points
spaced 0.1 apart. While ``renormalize_every`` is non-zero the packet is
rescaled to Σ|ψ|²·dx = 1 every ``renormalize_every`` leapfrog steps and at
the end of every frame, so each published state is normalised. If the norm
ever degenerates, the last good state is restored.
"""
from __future__ import annotations
import logging
import math

import numpy as np

from ..dynamics import schrodinger as sch
from ..parameters import ParameterSpec
from ..simulation import Simulation
from ..types import Formula

logger = logging.getLogger(__name__)

GRID_SPACING = 0.1

PARAMETERS = (
    ParameterSpec("potential_type", "Potential", kind="choice", default="barrier",
                  choices=sch.POTENTIALS),
    ParameterSpec("potential_height", "Potential Height", 0.0, 20.0, 0.1, 5.0),
    ParameterSpec("potential_width", "Potential Width", 0.05, 0.5, 0.01, 0.2,
                  description="Fraction of the box length"),
    ParameterSpec("potential_center", "Potential Position", 0.1, 0.9, 0.01, 0.5,
                  description="Fraction of the box length"),
    ParameterSpec("boundary", "Boundary", kind="choice", default="infinite",
                  choices=sch.BOUNDARIES, structural=True),
    ParameterSpec("mass", "Particle Mass", 0.1, 5.0, 0.1, 1.0),
    ParameterSpec("hbar", "ℏ", 0.1, 2.0, 0.1, 1.0),
    ParameterSpec("packet_center", "Packet Position", 0.1, 0.9, 0.01, 0.2, structural=True),
    ParameterSpec("packet_width", "Packet Width", 0.01, 0.2, 0.01, 0.05, structural=True),
    ParameterSpec("packet_momentum", "Packet Momentum", -15.0, 15.0, 0.5, 5.0, structural=True),
    ParameterSpec("grid_size", "Grid Points", 128, 1024, 64, 512, kind="int", structural=True),
    ParameterSpec("renormalize_every", "Renormalize Every", 0, 1000, 10, 50, kind="int",
                  description="Leapfrog steps between renormalisations (0 = never)"),
)

FORMULAS = (
    Formula("Time-Dependent Schrödinger Equation", "iℏ·∂ψ/∂t = -(ℏ²/2m)·∂²ψ/∂x² + V(x)·ψ",
            "Evolution of the quantum state"),
    Formula("Probability Density", "P(x) = |ψ(x)|²", "Probability of finding the particle at x"),
    Formula("Uncertainty Principle", "Δx·Δp ≥ ℏ/2", "Position and momentum cannot both be sharp"),
    Formula("Expectation Value", "⟨A⟩ = ∫ψ*·Â·ψ dx", "Average of an observable"),
)


class WaveFunctionSimulation(Simulation):
    id = "wavefunction"
    title = "Wave Function"
    category = "quantum"
    parameter_specs = PARAMETERS
    formulas = FORMULAS
    max_step = 1e-3
    histories = {"position": 100, "momentum": 100, "energy": 100, "uncertainty": 100}

    def __init__(self, params=None, **kwargs):
        self._custom: np.ndarray | None = None
        super().__init__(params, **kwargs)

    # -- configuration -------------------------------------------------

    def _initial_state(self) -> np.ndarray:
        p = self.params
        n = p["grid_size"]
        self.x = sch.grid(n, GRID_SPACING)
        if self._custom is None or self._custom.size != n:
            self._custom = np.zeros(n)
        length = n * GRID_SPACING
        real, imag = sch.gaussian_packet(
            self.x,
            center=p["packet_center"] * length,
            sigma=p["packet_width"] * length,
            k0=p["packet_momentum"] / p["hbar"],
        )
        return np.stack((real, imag))

    def _on_reset(self) -> None:
        self._real_prev = self.state[0].copy()
        self._since_renorm = 0
        self.renormalizations = 0
        self._save_good()

    def _save_good(self) -> None:
        self._good = (self.state.copy(), self._real_prev.copy())

    def _restore_good(self) -> None:
        logger.warning("Wavefunction norm degenerated; restoring last good state")
        state, prev = self._good
        self.state = state.copy()
        self._real_prev = prev.copy()

    @property
    def length(self) -> float:
        return self.x.size * GRID_SPACING

    def _coefficients(self) -> sch.QuantumCoefficients:
        p = self.params
        potential = sch.build_potential(
            p["potential_type"], self.x,
            height=p["potential_height"],
            width=p["potential_width"],
            center=p["potential_center"],
            custom=self._custom,
        )
        return sch.QuantumCoefficients(
            potential=potential, hbar=p["hbar"], mass=p["mass"],
            dx=GRID_SPACING, boundary=p["boundary"],
        )

    def _step_limit(self, c: sch.QuantumCoefficients) -> float:
        return min(self.max_step, c.stable_dt)

    def paint_potential(self, start: float, end: float, height: float) -> None:
        """
        Set the custom potential to ``height`` between two box fractions
        and switch to the custom potential.
        """
        lo, hi = sorted((min(max(start, 0.0), 1.0), min(max(end, 0.0), 1.0)))
        n = self._custom.size
        i0 = int(math.floor(lo * (n - 1)))
        i1 = int(math.ceil(hi * (n - 1)))
        self._custom[i0:i1 + 1] = height
        self.params.set("potential_type", "custom")

    def clear_custom_potential(self) -> None:
        self._custom[:] = 0.0

    # -- stepping ------------------------------------------------------

    def _integrate(self, y: np.ndarray, t: float, h: float, c: sch.QuantumCoefficients) -> np.ndarray:
        self._real_prev = y[0].copy()
        real, imag = sch.step(y[0], y[1], h, c)
        return np.stack((real, imag))

    def _after_substep(self, c: sch.QuantumCoefficients, h: float, t0: float):
        self._since_renorm += 1
        every = self.params["renormalize_every"]
        if every and self._since_renorm >= every:
            self._renormalize(c)
        return c

    def _end_frame(self, c: sch.QuantumCoefficients) -> None:
        if self.params["renormalize_every"] and self._since_renorm:
            self._renormalize(c)

    def _renormalize(self, c: sch.QuantumCoefficients) -> None:
        self._since_renorm = 0
        total = sch.norm(self.state[0], self.state[1], c.dx)
        if not math.isfinite(total) or total <= 0.0:
            self._restore_good()
            return
        scale = 1.0 / math.sqrt(total)
        self.state = self.state * scale
        self._real_prev = self._real_prev * scale
        self.renormalizations += 1
        self._save_good()

    # -- readouts ------------------------------------------------------

    def _derived(self, c: sch.QuantumCoefficients) -> dict:
        real, imag = self.state[0], self.state[1]
        try:
            ev = sch.expectation_values(real, imag, self.x, c)
        except ValueError:
            self._restore_good()
            real, imag = self.state[0], self.state[1]
            ev = sch.expectation_values(real, imag, self.x, c)
        ev["total_probability"] = sch.norm(real, imag, c.dx)
        ev["conserved_norm"] = sch.staggered_norm(self._real_prev, real, imag, c.dx)
        ev["time"] = self.time
        ev["probability_density"] = real * real + imag * imag
        ev["potential"] = c.potential
        ev["x"] = self.x
        ev["renormalizations"] = self.renormalizations
        return ev

    def _record_history(self, d: dict) -> None:
        t = self.time
        self.history["position"].append(t, d["position"])
        self.history["momentum"].append(t, d["momentum"])
        self.history["energy"].append(t, d["energy"])
        self.history["uncertainty"].append(t, d["uncertainty_product"])
