# MIT License (see LICENSE)
"""
Particle in an infinite square well.

No integration is needed: the stationary state ψ_n(x, t) is evaluated
analytically at every sub-step. The same discrete expectation-value code
as the wave-packet simulation reports ⟨x⟩, Δx, Δp and E, so the numbers
can be compared with the closed forms.
"""
from __future__ import annotations

import numpy as np

from ..dynamics import box
from ..dynamics import schrodinger as sch
from ..parameters import ParameterSpec
from ..simulation import Simulation
from ..types import Formula

PARAMETERS = (
    ParameterSpec("quantum_number", "Quantum Number (n)", 1, 5, 1, 1, kind="int", structural=True),
    ParameterSpec("box_width", "Box Width", 0.5, 3.0, 0.1, 1.0, structural=True),
    ParameterSpec("mass", "Particle Mass", 0.1, 5.0, 0.1, 1.0, structural=True),
    ParameterSpec("hbar", "ℏ", 0.1, 2.0, 0.1, 1.0, structural=True),
    ParameterSpec("samples", "Sample Points", 50, 1000, 10, 400, kind="int", structural=True),
)

FORMULAS = (
    Formula("Wave Function", "ψₙ(x) = √(2/L)·sin(nπx/L)", "Standing waves vanishing at the walls"),
    Formula("Energy Levels", "Eₙ = n²π²ℏ² / (2mL²)", "Energy grows with the square of n"),
    Formula("Probability Density", "|ψₙ(x)|² = (2/L)·sin²(nπx/L)", "n - 1 interior nodes"),
)


class ParticleInBoxSimulation(Simulation):
    id = "particle_in_box"
    title = "Particle in a Box"
    category = "quantum"
    parameter_specs = PARAMETERS
    formulas = FORMULAS
    max_step = 1 / 60

    def _initial_state(self) -> np.ndarray:
        p = self.params
        self.x = box.sample_points(p["box_width"], p["samples"])
        return np.stack(self._psi(0.0))

    def _psi(self, t: float) -> tuple[np.ndarray, np.ndarray]:
        p = self.params
        return box.stationary_state(
            p["quantum_number"], self.x, p["box_width"], t, mass=p["mass"], hbar=p["hbar"],
        )

    def _coefficients(self) -> sch.QuantumCoefficients:
        p = self.params
        return sch.QuantumCoefficients(
            potential=np.zeros_like(self.x),
            hbar=p["hbar"],
            mass=p["mass"],
            dx=float(self.x[1] - self.x[0]),
            boundary="infinite",
        )

    def _integrate(self, y: np.ndarray, t: float, h: float, c) -> np.ndarray:
        return np.stack(self._psi(t + h))

    def _derived(self, c: sch.QuantumCoefficients) -> dict:
        p = self.params
        n, width = p["quantum_number"], p["box_width"]
        ev = sch.expectation_values(self.state[0], self.state[1], self.x, c)
        ev.update({
            "x": self.x,
            "probability_density": self.state[0] ** 2 + self.state[1] ** 2,
            "energy_exact": box.energy_level(n, width, p["mass"], p["hbar"]),
            "delta_x_exact": box.position_spread(n, width),
            "delta_p_exact": box.momentum_spread(n, width, p["hbar"]),
        })
        return ev
