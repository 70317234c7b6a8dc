# MIT License (see LICENSE)
"""Integrators, invariants and analysis shared by all simulations."""
from .integrators import (
    euler_step,
    semi_implicit_euler_step,
    rk4_step,
    rk4_adaptive_step,
    integrate_adaptive,
    get_stepper,
)
from .lyapunov import LyapunovEstimator

__all__ = [
    "euler_step",
    "semi_implicit_euler_step",
    "rk4_step",
    "rk4_adaptive_step",
    "integrate_adaptive",
    "get_stepper",
    "LyapunovEstimator",
]
