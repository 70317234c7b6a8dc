# MIT License (see LICENSE)
"""Concrete simulations, one per physical system."""
from .double_pendulum import DoublePendulumSimulation
from .lorenz import LorenzSimulation
from .newtons_cradle import NewtonsCradleSimulation
from .orbital import OrbitalSimulation
from .particle_in_box import ParticleInBoxSimulation
from .spring_mass import SpringMassSimulation
from .wavefunction import WaveFunctionSimulation

__all__ = [
    "DoublePendulumSimulation",
    "LorenzSimulation",
    "NewtonsCradleSimulation",
    "OrbitalSimulation",
    "ParticleInBoxSimulation",
    "SpringMassSimulation",
    "WaveFunctionSimulation",
]
