# MIT License (see LICENSE)
"""
Chaotic double pendulum with divergence tracking.

A shadow pendulum started 1e-3 rad away in θ1 is integrated alongside the
primary one; its separation feeds the largest-Lyapunov-exponent estimate
and the predicted divergence time.
"""
from __future__ import annotations
import math

import numpy as np

from ..constants import STANDARD_GRAVITY
from ..core.lyapunov import LyapunovEstimator
from ..dynamics import double_pendulum as dp
from ..parameters import ParameterSpec
from ..simulation import Simulation
from ..types import Formula

SHADOW_OFFSET = 1e-3
RENORMALIZE_AT = 1e-2

PARAMETERS = (
    ParameterSpec("mass1", "Mass 1", 1.0, 20.0, 0.5, 10.0, unit="kg"),
    ParameterSpec("mass2", "Mass 2", 1.0, 20.0, 0.5, 10.0, unit="kg"),
    ParameterSpec("length1", "Length 1", 0.2, 2.0, 0.05, 1.0, unit="m"),
    ParameterSpec("length2", "Length 2", 0.2, 2.0, 0.05, 1.0, unit="m"),
    ParameterSpec("angle1", "Initial Angle 1", -math.pi, math.pi, 0.01, math.pi / 2, unit="rad",
                  structural=True),
    ParameterSpec("angle2", "Initial Angle 2", -math.pi, math.pi, 0.01, math.pi / 2, unit="rad",
                  structural=True),
    ParameterSpec("angular_velocity1", "Initial Angular Velocity 1", -5.0, 5.0, 0.1, 0.0,
                  unit="rad/s", structural=True),
    ParameterSpec("angular_velocity2", "Initial Angular Velocity 2", -5.0, 5.0, 0.1, 0.0,
                  unit="rad/s", structural=True),
    ParameterSpec("gravity", "Gravity", 1.0, 20.0, 0.1, STANDARD_GRAVITY,
                  unit="m/s²"),
    ParameterSpec("damping", "Damping", 0.0, 0.1, 0.001, 0.01, unit="1/s"),
    ParameterSpec("show_comparison", "Show Comparison", kind="bool", default=True,
                  description="Track a nearby trajectory to measure divergence"),
)

FORMULAS = (
    Formula("Equations of Motion", "θ̈₁ = f(θ₁, θ₂, θ̇₁, θ̇₂),  θ̈₂ = g(θ₁, θ₂, θ̇₁, θ̇₂)",
            "Derived from the Euler-Lagrange equations"),
    Formula("Energy Conservation", "E = T + V = constant", "Holds in the absence of damping"),
    Formula("Lyapunov Exponent", "λ = lim(t→∞) (1/t)·ln(|δz(t)| / |δz₀|)",
            "Positive values indicate chaos"),
)


class DoublePendulumSimulation(Simulation):
    id = "double_pendulum"
    title = "Double Pendulum"
    category = "chaos"
    parameter_specs = PARAMETERS
    formulas = FORMULAS
    integrator = "rk4"
    max_step = 1 / 480
    histories = {"trail": 500, "phase": 500, "energy": 300, "lyapunov": 200}

    derivatives = staticmethod(dp.derivatives)

    def _initial_state(self) -> np.ndarray:
        p = self.params
        return dp.wrap_state(np.array([
            p["angle1"], p["angular_velocity1"], p["angle2"], p["angular_velocity2"],
        ], dtype=np.float64))

    def _on_reset(self) -> None:
        self.lyapunov = LyapunovEstimator(
            d0=SHADOW_OFFSET,
            threshold=RENORMALIZE_AT,
            direction=np.array([1.0, 0.0, 0.0, 0.0]),
            difference=dp.phase_difference,
        )
        self.lyapunov.seed(self.state)
        self._tracking = bool(self.params["show_comparison"])

    def _coefficients(self) -> dp.DoublePendulumCoefficients:
        p = self.params
        return dp.DoublePendulumCoefficients(
            m1=p["mass1"], m2=p["mass2"], l1=p["length1"], l2=p["length2"],
            gravity=p["gravity"], damping=p["damping"],
        )

    def _begin_frame(self, c) -> None:
        tracking = bool(self.params["show_comparison"])
        if tracking and not self._tracking:
            self.lyapunov.seed(self.state)
        self._tracking = tracking

    def _after_substep(self, c: dp.DoublePendulumCoefficients, h: float, t0: float):
        self.state = dp.wrap_state(self.state)
        if self._tracking:
            self.lyapunov.step(
                self.state, h,
                lambda s: dp.wrap_state(self._integrate(s, t0, h, c)),
            )
        return c

    def clear_trail(self) -> None:
        self.history["trail"].clear()

    def _derived(self, c: dp.DoublePendulumCoefficients) -> dict:
        ke, pe = dp.energies(self.state, c)
        p1, p2 = dp.bob_positions(self.state, c)
        out = {
            "angle1": float(self.state[0]),
            "angular_velocity1": float(self.state[1]),
            "angle2": float(self.state[2]),
            "angular_velocity2": float(self.state[3]),
            "bob1": p1,
            "bob2": p2,
            "kinetic_energy": ke,
            "potential_energy": pe,
            "total_energy": ke + pe,
        }
        if self._tracking:
            shadow = self.lyapunov.shadow
            out["lyapunov_exponent"] = self.lyapunov.exponent
            out["divergence_time"] = self.lyapunov.divergence_time()
            out["separation"] = self.lyapunov.distance
            out["comparison_state"] = shadow.copy()
            out["comparison_bob2"] = dp.bob_positions(shadow, c)[1]
        return out

    def _record_history(self, d: dict) -> None:
        t = self.time
        self.history["trail"].append(t, d["bob2"])
        self.history["phase"].append(t, np.array([d["angle1"], d["angular_velocity1"]]))
        self.history["energy"].append(
            t, np.array([d["kinetic_energy"], d["potential_energy"], d["total_energy"]])
        )
        if "lyapunov_exponent" in d:
            self.history["lyapunov"].append(t, d["lyapunov_exponent"])
