# MIT License (see LICENSE)
"""
Newton's cradle.

A row of identical pendulums integrated with semi-implicit Euler at
600 Hz. Ball-ball impacts are resolved after every sub-step, so an impulse
can run down the whole row within one frame.
"""
from __future__ import annotations
import math

import numpy as np

from ..constants import STANDARD_GRAVITY
from ..dynamics import cradle
from ..parameters import ParameterSpec
from ..simulation import Simulation
from ..types import Formula

# Geometry (SI). Pivot spacing slightly above one diameter leaves a
# visible gap between resting balls.
STRING_LENGTH = 1.0
BALL_RADIUS = 0.1
PIVOT_SPACING = 2.1 * BALL_RADIUS
BALL_MASS = 1.0

PARAMETERS = (
    ParameterSpec("gravity", "Gravity", 1.0, 20.0, 0.1, STANDARD_GRAVITY,
                  unit="m/s²"),
    ParameterSpec("restitution", "Restitution", 0.1, 1.0, 0.01, 1.0,
                  description="1 = perfectly elastic"),
    ParameterSpec("ball_count", "Number of Balls", 2, 10, 1, 5, kind="int", structural=True),
    ParameterSpec("pulled_count", "Balls Pulled", 1, 9, 1, 1, kind="int", structural=True),
    ParameterSpec("release_angle", "Release Angle", 0.1, 1.2, 0.05, math.pi / 4, unit="rad",
                  structural=True),
)

FORMULAS = (
    Formula("Conservation of Momentum", "m₁v₁ + m₂v₂ = m₁v₁' + m₂v₂'",
            "Total momentum is unchanged by each impact"),
    Formula("Conservation of Energy", "½m₁v₁² + ½m₂v₂² = ½m₁v₁'² + ½m₂v₂'²",
            "Holds for perfectly elastic impacts (e = 1)"),
    Formula("Coefficient of Restitution", "e = (v₂' - v₁') / (v₁ - v₂)",
            "Ratio of separation to approach speed"),
    Formula("Pendulum Period", "T = 2π·√(L/g)", "Small-angle period of each ball"),
)


class NewtonsCradleSimulation(Simulation):
    id = "newtons_cradle"
    title = "Newton's Cradle"
    category = "classical"
    parameter_specs = PARAMETERS
    formulas = FORMULAS
    integrator = "semi_implicit_euler"
    max_step = 1 / 600
    histories = {"energy": 100, "momentum": 100}

    derivatives = staticmethod(cradle.derivatives)

    def _initial_state(self) -> np.ndarray:
        count = self.params["ball_count"]
        pulled = self.params["pulled_count"]
        if pulled > count - 1:
            pulled = self.params.set("pulled_count", count - 1)
        theta = np.zeros(count)
        theta[:pulled] = -self.params["release_angle"]
        return np.concatenate((theta, np.zeros(count)))

    def _on_reset(self) -> None:
        self.impacts = 0

    def _coefficients(self) -> cradle.CradleCoefficients:
        return cradle.CradleCoefficients(
            count=self.params["ball_count"],
            gravity=self.params["gravity"],
            length=STRING_LENGTH,
            radius=BALL_RADIUS,
            spacing=PIVOT_SPACING,
            mass=BALL_MASS,
            restitution=self.params["restitution"],
        )

    def _after_substep(self, c: cradle.CradleCoefficients, h: float, t0: float):
        self.state, hits = cradle.resolve_collisions(self.state, c)
        self.impacts += hits
        return c

    @property
    def angles(self) -> np.ndarray:
        return self.state[: self.state.size // 2]

    @property
    def angular_velocities(self) -> np.ndarray:
        return self.state[self.state.size // 2:]

    def _derived(self, c: cradle.CradleCoefficients) -> dict:
        ke, pe = cradle.energies(self.state, c)
        p = cradle.momentum(self.state, c)
        return {
            "kinetic_energy": ke,
            "potential_energy": pe,
            "total_energy": ke + pe,
            "momentum": p,
            "momentum_magnitude": abs(p),
            "impacts": self.impacts,
            "period": 2.0 * math.pi * math.sqrt(c.length / c.gravity),
            "ball_positions": cradle.ball_positions(self.angles, c),
            "ball_velocities": cradle.ball_velocities(self.angles, self.angular_velocities, c),
            "pivots": c.pivots(),
        }

    def _record_history(self, d: dict) -> None:
        t = self.time
        self.history["energy"].append(
            t, np.array([d["kinetic_energy"], d["potential_energy"], d["total_energy"]])
        )
        self.history["momentum"].append(t, d["momentum"])
