# MIT License (see LICENSE)
"""
Spring-mass oscillator with damping and a sinusoidal drive.

Integrated with RK4 at up to one sub-step per 60 Hz frame; the damping
regime (under-, critically, over-damped) emerges from the parameters.
"""
from __future__ import annotations
import math

import numpy as np

from ..core.analysis import damping_regime
from ..dynamics import oscillator
from ..parameters import ParameterSpec
from ..simulation import Simulation
from ..types import Formula

PARAMETERS = (
    ParameterSpec("mass", "Mass", 0.1, 10.0, 0.1, 1.0, unit="kg"),
    ParameterSpec("spring_constant", "Spring Constant", 0.1, 50.0, 0.1, 10.0, unit="N/m"),
    ParameterSpec("damping", "Damping", 0.0, 2.0, 0.01, 0.05, unit="kg/s"),
    ParameterSpec("initial_position", "Initial Position", -3.0, 3.0, 0.1, 1.0, unit="m",
                  structural=True),
    ParameterSpec("initial_velocity", "Initial Velocity", -5.0, 5.0, 0.1, 0.0, unit="m/s",
                  structural=True),
    ParameterSpec("drive_amplitude", "Driving Force", 0.0, 10.0, 0.1, 0.0, unit="N"),
    ParameterSpec("drive_frequency", "Driving Frequency", 0.0, 5.0, 0.05, 0.0, unit="Hz"),
)

FORMULAS = (
    Formula("Equation of Motion", "m·ẍ + c·ẋ + k·x = F₀·cos(ωt)",
            "Newton's second law for a driven, damped spring"),
    Formula("Natural Frequency", "ω₀ = √(k/m)", "Angular frequency of the undamped oscillator"),
    Formula("Period", "T = 2π·√(m/k)", "Time for one full oscillation (undamped)"),
    Formula("Damping Ratio", "ζ = c / (2·√(k·m))",
            "ζ < 1 underdamped, ζ = 1 critically damped, ζ > 1 overdamped"),
    Formula("Energy", "E = ½·m·v² + ½·k·x²", "Conserved when c = 0 and F₀ = 0"),
)


class SpringMassSimulation(Simulation):
    id = "spring_mass"
    title = "Spring-Mass Oscillator"
    category = "classical"
    parameter_specs = PARAMETERS
    formulas = FORMULAS
    integrator = "rk4"
    max_step = 1 / 60
    histories = {"position": 300, "velocity": 300, "phase": 300, "energy": 300}

    derivatives = staticmethod(oscillator.derivatives)

    def _initial_state(self) -> np.ndarray:
        return np.array([self.params["initial_position"], self.params["initial_velocity"]])

    def _coefficients(self) -> oscillator.OscillatorCoefficients:
        p = self.params
        return oscillator.OscillatorCoefficients(
            mass=p["mass"],
            k=p["spring_constant"],
            damping=p["damping"],
            drive_amplitude=p["drive_amplitude"],
            drive_omega=2.0 * math.pi * p["drive_frequency"],
        )

    def _derived(self, c: oscillator.OscillatorCoefficients) -> dict:
        ke, pe = oscillator.energies(self.state, c)
        zeta = c.damping_ratio
        return {
            "position": float(self.state[0]),
            "velocity": float(self.state[1]),
            "acceleration": oscillator.acceleration(self.state, self.time, c),
            "kinetic_energy": ke,
            "potential_energy": pe,
            "total_energy": ke + pe,
            "angular_frequency": c.natural_omega,
            "natural_frequency": c.natural_omega / (2.0 * math.pi),
            "period": c.period,
            "damping_ratio": zeta,
            "damping_regime": damping_regime(zeta),
        }

    def _record_history(self, d: dict) -> None:
        t = self.time
        self.history["position"].append(t, d["position"])
        self.history["velocity"].append(t, d["velocity"])
        self.history["phase"].append(t, np.array([d["position"], d["velocity"]]))
        self.history["energy"].append(
            t, np.array([d["kinetic_energy"], d["potential_energy"], d["total_energy"]])
        )
