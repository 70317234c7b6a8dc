# MIT License (see LICENSE)
"""
Equations of motion, one module per physical system.

Each module exposes a frozen coefficients dataclass and a derivative
function ``derivatives(state, t, coefficients)`` usable with any stepper
in :mod:`hyperion_sim.core.integrators`. The Schrödinger module instead
exposes its own leapfrog ``step``.
"""
from . import box, cradle, double_pendulum, gravity, lorenz, oscillator, schrodinger

__all__ = ["box", "cradle", "double_pendulum", "gravity", "lorenz", "oscillator", "schrodinger"]
