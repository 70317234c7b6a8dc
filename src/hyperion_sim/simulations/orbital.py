# MIT License (see LICENSE)
"""
Planar N-body gravity with presets, merging and orbital elements.

Each 1/60 s of wall time covers ``time_step · time_scale`` simulated
seconds, split into sub-steps no longer than ``time_step``.
"""
from __future__ import annotations
from dataclasses import replace
import logging

import numpy as np

from ..constants import DEFAULT_SOFTENING, FRAME_DT, G_NEWTON
from ..core import invariants
from ..dynamics import gravity
from ..dynamics.gravity import Body
from ..history import HistoryBuffer
from ..parameters import ParameterSpec
from ..simulation import Simulation
from ..types import Formula

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86_400.0
TRAIL_LENGTH = 200

PARAMETERS = (
    ParameterSpec("gravitational_constant", "Gravitational Constant (G)", 1e-12, 1e-9, 1e-12,
                  G_NEWTON, unit="m³/(kg·s²)"),
    ParameterSpec("time_step", "Time Step", 60.0, 86_400.0, 60.0, 3600.0, unit="s"),
    ParameterSpec("time_scale", "Time Scale", 0.1, 10.0, 0.1, 1.0),
    ParameterSpec("relativistic", "Relativistic Corrections", kind="bool", default=False),
    ParameterSpec("collisions", "Enable Collisions", kind="bool", default=True),
    ParameterSpec("preset", "Preset", kind="choice", default="solar_system",
                  choices=tuple(gravity.PRESETS), structural=True),
    ParameterSpec("selected_body", "Selected Body", 0, 20, 1, 3, kind="int",
                  description="Body whose orbital elements are reported"),
)

FORMULAS = (
    Formula("Newton's Law of Gravitation", "F = G·m₁·m₂ / r²",
            "Attractive force between two point masses"),
    Formula("Kepler's Third Law", "T² = 4π²·a³ / (G·M)",
            "Orbital period grows with the semi-major axis"),
    Formula("Orbital Energy", "ε = v²/2 - μ/r = -μ / (2a)", "Negative for bound orbits"),
    Formula("Angular Momentum", "L = Σ m·(x·v_y - y·v_x)", "Conserved in a closed system"),
)


class OrbitalSimulation(Simulation):
    id = "orbital"
    title = "Orbital Motion"
    category = "gravity"
    parameter_specs = PARAMETERS
    formulas = FORMULAS
    integrator = "rk4"
    histories = {"energy": 100, "angular_momentum": 100}
    rk_tol = 1e-10
    rk_dt_min = 1.0

    derivatives = staticmethod(gravity.derivatives)

    def __init__(self, params=None, *, softening: float = DEFAULT_SOFTENING, **kwargs):
        if not softening >= 0.0:
            raise ValueError("softening must be non-negative")
        self.softening = softening
        self._initial_bodies: list[Body] | None = None
        self._loaded_preset: str | None = None
        super().__init__(params, **kwargs)

    # -- configuration -------------------------------------------------

    def _initial_state(self) -> np.ndarray:
        preset = self.params["preset"]
        if self._initial_bodies is None or preset != self._loaded_preset:
            self._initial_bodies = gravity.preset_bodies(preset)
            self._loaded_preset = preset
            logger.info("Loaded preset '%s' (%d bodies)", preset, len(self._initial_bodies))
        self.bodies = list(self._initial_bodies)
        return gravity.pack_state(self.bodies)

    def _on_reset(self) -> None:
        self.merges = 0
        self._add_trails()

    def _add_trails(self) -> None:
        for b in self.bodies:
            key = f"trail:{b.name}"
            if key not in self.history:
                self.history[key] = HistoryBuffer(TRAIL_LENGTH)

    def _drop_stale_trails(self) -> None:
        names = {f"trail:{b.name}" for b in self.bodies}
        for key in [k for k in self.history if k.startswith("trail:") and k not in names]:
            del self.history[key]

    def load_preset(self, name: str) -> None:
        """Replace the configuration by a preset and reset."""
        self._loaded_preset = None
        self.set_parameter("preset", name)
        if self._loaded_preset is None:
            # same preset as before: set_parameter did not reset
            self.reset()

    def add_body(
        self,
        name: str,
        mass: float,
        radius: float,
        position: tuple[float, float],
        velocity: tuple[float, float],
    ) -> None:
        """
        Add a body to the current configuration.

        The current positions become the new initial configuration, and the
        simulation resets so histories and time start over.
        """
        if mass <= 0 or radius <= 0:
            raise ValueError("Body mass and radius must be positive")
        current = gravity.bodies_from_state(self.bodies, self.state)
        current.append(Body(name, float(mass), float(radius),
                            (float(position[0]), float(position[1])),
                            (float(velocity[0]), float(velocity[1]))))
        current = gravity.unique_names(current)
        self._initial_bodies = current
        logger.info("Added body '%s' (%d bodies)", current[-1].name, len(current))
        self.reset()

    def clear_bodies(self) -> None:
        self._initial_bodies = []
        logger.info("Cleared all bodies")
        self.reset()

    def _coefficients(self) -> gravity.GravityCoefficients:
        return gravity.GravityCoefficients(
            masses=np.array([b.mass for b in self.bodies], dtype=np.float64),
            G=self.params["gravitational_constant"],
            softening=self.softening,
            relativistic=bool(self.params["relativistic"]),
        )

    def _span(self, dt: float) -> float:
        return self.params["time_step"] * self.params["time_scale"] * (dt / FRAME_DT)

    def _step_limit(self, c) -> float:
        return self.params["time_step"]

    # -- stepping ------------------------------------------------------

    def _after_substep(self, c: gravity.GravityCoefficients, h: float, t0: float):
        if not self.params["collisions"] or len(self.bodies) < 2:
            return c
        current = gravity.bodies_from_state(self.bodies, self.state)
        merged, count = gravity.merge_overlapping(current)
        if not count:
            return c
        self.merges += count
        merged = gravity.unique_names(merged)
        self.bodies = merged
        # fresh state vector; never patched in place
        self.state = gravity.pack_state(merged)
        self._drop_stale_trails()
        self._add_trails()
        return replace(c, masses=np.array([b.mass for b in merged], dtype=np.float64))

    # -- readouts ------------------------------------------------------

    def _derived(self, c: gravity.GravityCoefficients) -> dict:
        pos, vel = gravity.unpack_state(self.state)
        masses = c.masses
        ke = invariants.kinetic_energy(masses, vel) if masses.size else 0.0
        pe = invariants.gravitational_potential_energy(masses, pos, c.G, c.softening)
        out = {
            "time_days": self.time / SECONDS_PER_DAY,
            "body_count": len(self.bodies),
            "names": tuple(b.name for b in self.bodies),
            "masses": masses.copy(),
            "radii": np.array([b.radius for b in self.bodies], dtype=np.float64),
            "positions": pos.copy(),
            "velocities": vel.copy(),
            "kinetic_energy": ke,
            "potential_energy": pe,
            "total_energy": ke + pe,
            "momentum": (invariants.linear_momentum(masses, vel)
                         if masses.size else np.zeros(2)),
            "angular_momentum": (invariants.angular_momentum_2d(masses, pos, vel)
                                 if masses.size else 0.0),
            "merges": self.merges,
        }
        out["orbital_elements"] = self._elements(pos, vel, masses, c.G)
        return out

    def _elements(self, pos, vel, masses, G) -> dict | None:
        """Elements of the selected body relative to the most massive one."""
        idx = self.params["selected_body"]
        if masses.size < 2 or idx >= masses.size:
            return None
        central = int(np.argmax(masses))
        if idx == central:
            return None
        el = gravity.orbital_elements(
            pos[idx], vel[idx], pos[central], vel[central], G * (masses[central] + masses[idx]),
        )
        el["body"] = self.bodies[idx].name
        el["central_body"] = self.bodies[central].name
        return el

    def _record_history(self, d: dict) -> None:
        t = self.time
        self.history["energy"].append(
            t, np.array([d["kinetic_energy"], d["potential_energy"], d["total_energy"]])
        )
        self.history["angular_momentum"].append(t, d["angular_momentum"])
        for name, p in zip(d["names"], d["positions"]):
            self.history[f"trail:{name}"].append(t, p)
