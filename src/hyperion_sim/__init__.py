# MIT License (see LICENSE)
"""
hyperion_sim - numerical engine for interactive physics simulations.

Each simulation owns a state vector, integrates its equations of motion
with a shared family of explicit integrators and publishes immutable
snapshots (state, derived quantities, histories) for a frontend to draw.

Main entry points:
    - Simulation: Controller base class (advance/reset/pause/set_parameter).
    - registry: Catalog of simulations by category; registry.create(id).
    - FrameLoop, ManualScheduler: Cancellable per-frame driver.

Simulations:
    - NewtonsCradleSimulation, SpringMassSimulation (classical)
    - DoublePendulumSimulation, LorenzSimulation (chaos)
    - OrbitalSimulation (gravity)
    - WaveFunctionSimulation, ParticleInBoxSimulation (quantum)

Submodules:
    - core: Integrators, invariants, Lyapunov estimation, signal analysis.
    - dynamics: Equations of motion per physical system.
    - renderer: Optional snapshot renderers.

Example:
    from hyperion_sim import SpringMassSimulation

    sim = SpringMassSimulation(params={"damping": 0.0})
    for _ in range(600):
        snap = sim.advance(1 / 60)
    print(snap["total_energy"])
"""
from .parameters import ParameterSet, ParameterSpec
from .simulation import Simulation
from .simulations import (
    DoublePendulumSimulation,
    LorenzSimulation,
    NewtonsCradleSimulation,
    OrbitalSimulation,
    ParticleInBoxSimulation,
    SpringMassSimulation,
    WaveFunctionSimulation,
)
from .types import Formula, SimulationStatus, Snapshot
from . import registry
from .runner import FrameLoop, ManualScheduler
from .logging_config import setup_logging

__version__ = "0.1.0"

__all__ = [
    # Controller
    "Simulation",
    "SimulationStatus",
    "Snapshot",
    "Formula",
    "ParameterSpec",
    "ParameterSet",
    # Simulations
    "DoublePendulumSimulation",
    "LorenzSimulation",
    "NewtonsCradleSimulation",
    "OrbitalSimulation",
    "ParticleInBoxSimulation",
    "SpringMassSimulation",
    "WaveFunctionSimulation",
    # Driving
    "registry",
    "FrameLoop",
    "ManualScheduler",
    "setup_logging",
]
