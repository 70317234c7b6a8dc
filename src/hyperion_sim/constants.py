# MIT License (see LICENSE)
"""
Physical and numerical constants used throughout the simulations.

All values are SI. Defaults for user-facing parameters live next to the
parameter schemas of each simulation; only shared constants belong here.
"""
from __future__ import annotations

# Standard gravity at Earth's surface, m/s².
STANDARD_GRAVITY: float = 9.81

# Newtonian constant of gravitation, m³/(kg·s²).
# Reference: https://physics.nist.gov/cgi-bin/cuu/Value?bg
G_NEWTON: float = 6.6743e-11

# Speed of light in vacuum, m/s (exact).
SPEED_OF_LIGHT: float = 299_792_458.0

# Default softening length for N-body gravity, in metres.
# r² → r² + ε² keeps the force finite during close encounters.
DEFAULT_SOFTENING: float = 1e3

# Guard for denominators that can approach zero (pendulum chains,
# double pendulum den1, vector normalisation).
EPS: float = 1e-12

# Nominal display frame period. Frame-relative quantities (N-body time
# scale) are expressed per 1/60 s of wall time.
FRAME_DT: float = 1.0 / 60.0
