# MIT License (see LICENSE)
"""
Catalog of available simulations, grouped by category.

Example:
    from hyperion_sim import registry
    sim = registry.create("lorenz", params={"rho": 35})
    for category, entries in registry.catalog().items():
        print(category, [e.title for e in entries])
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any

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

CATEGORIES = {
    "classical": "Classical Mechanics",
    "chaos": "Chaos Theory",
    "gravity": "Gravity & Orbits",
    "quantum": "Quantum Mechanics",
}

_SIMULATIONS: dict[str, type[Simulation]] = {
    cls.id: cls
    for cls in (
        NewtonsCradleSimulation,
        SpringMassSimulation,
        DoublePendulumSimulation,
        LorenzSimulation,
        OrbitalSimulation,
        WaveFunctionSimulation,
        ParticleInBoxSimulation,
    )
}


@dataclass(frozen=True)
class CatalogEntry:
    id: str
    title: str
    category: str


def ids() -> list[str]:
    return list(_SIMULATIONS)


def get(sim_id: str) -> type[Simulation]:
    """Simulation class registered under sim_id."""
    try:
        return _SIMULATIONS[sim_id]
    except KeyError:
        raise KeyError(f"Unknown simulation: {sim_id}") from None


def create(sim_id: str, **kwargs: Any) -> Simulation:
    """Instantiate a simulation by id; kwargs go to its constructor."""
    return get(sim_id)(**kwargs)


def catalog() -> dict[str, list[CatalogEntry]]:
    """Entries grouped by category label, in declaration order."""
    out: dict[str, list[CatalogEntry]] = {label: [] for label in CATEGORIES.values()}
    for cls in _SIMULATIONS.values():
        out[CATEGORIES[cls.category]].append(CatalogEntry(cls.id, cls.title, cls.category))
    return out
