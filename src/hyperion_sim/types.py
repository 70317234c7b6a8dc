# MIT License (see LICENSE)
"""
Core data types shared by all simulations.

- SimulationStatus: lifecycle of a simulation controller.
- Formula: a displayable equation with a short explanation.
- Snapshot: immutable view of a simulation after an advance, handed to
  renderers and UI code.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

import numpy as np


class SimulationStatus(Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(frozen=True)
class Formula:
    title: str
    equation: str
    description: str = ""


def _frozen(x: Any) -> Any:
    """
    Read-only copy of arrays and containers, recursively: mappings become
    MappingProxyType, lists and tuples become tuples. Scalars and strings
    are returned unchanged.
    """
    if isinstance(x, np.ndarray):
        out = x.copy()
        out.setflags(write=False)
        return out
    if isinstance(x, Mapping):
        return MappingProxyType({k: _frozen(v) for k, v in x.items()})
    if isinstance(x, (tuple, list)):
        return tuple(_frozen(v) for v in x)
    return x


@dataclass(frozen=True)
class Snapshot:
    """
    Immutable state of a simulation at one instant.

    Attributes:
        simulation: Registry id of the producing simulation.
        time: Simulated time in seconds.
        status: Controller status when the snapshot was taken.
        state: Read-only copy of the integrated state vector.
        derived: Derived quantities (energies, momenta, expectation values,
                 labels). Array values are read-only copies.
        history: Mapping of series name to (times, values) arrays.
        step_count: Number of integrator sub-steps taken since reset.
    """
    simulation: str
    time: float
    status: SimulationStatus
    state: np.ndarray
    derived: Mapping[str, Any] = field(default_factory=dict)
    history: Mapping[str, tuple[np.ndarray, np.ndarray]] = field(default_factory=dict)
    step_count: int = 0

    @classmethod
    def build(
        cls,
        simulation: str,
        time: float,
        status: SimulationStatus,
        state: np.ndarray,
        derived: Mapping[str, Any],
        history: Mapping[str, tuple[np.ndarray, np.ndarray]],
        step_count: int,
    ) -> "Snapshot":
        """Copy and freeze everything so later advances cannot leak in."""
        return cls(
            simulation=simulation,
            time=float(time),
            status=status,
            state=_frozen(np.asarray(state, dtype=np.float64)),
            derived=MappingProxyType({k: _frozen(v) for k, v in derived.items()}),
            history=MappingProxyType({k: _frozen(v) for k, v in history.items()}),
            step_count=int(step_count),
        )

    def __getitem__(self, key: str) -> Any:
        """Shortcut for snapshot.derived[key]."""
        return self.derived[key]
