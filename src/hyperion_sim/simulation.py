# MIT License (see LICENSE)
"""
The simulation controller shared by every physical system.

A Simulation owns a state vector, the current time, a ParameterSet and
the history buffers. Per frame the host calls ``advance(dt)``, which:
    1. Freezes the current parameter values into a coefficients object.
    2. Splits the simulated span into equal sub-steps no longer than the
       system's stability limit.
    3. Integrates each sub-step and runs the per-sub-step hook
       (collisions, Lyapunov shadow, angle wrapping).
    4. Recomputes all derived quantities into a fresh mapping and appends
       to the history buffers.

Lifecycle:
    UNINITIALIZED -> READY (construction / reset)
    READY -> RUNNING (first advance)
    RUNNING <-> PAUSED (pause / resume)
    any -> READY (reset, or a change to a structural parameter)

Subclasses provide the physics through a handful of hooks:
    _initial_state, _coefficients, derivatives, _derived and optionally
    _span, _step_limit, _integrate, _begin_frame, _after_substep,
    _end_frame, _record_history.
"""
from __future__ import annotations
from typing import Any, Callable
import logging
import math

import numpy as np

from .core.integrators import get_stepper, integrate_adaptive
from .history import HistoryBuffer
from .parameters import ParameterSet, ParameterSpec
from .profiler import Profiler
from .types import Formula, SimulationStatus, Snapshot
from .util import f64

logger = logging.getLogger(__name__)


class Simulation:
    """
    Base class for all simulations.

    Class attributes (override in subclasses):
        id: Registry key, e.g. "lorenz".
        title: Display name.
        category: Catalog group.
        parameter_specs: Schema of adjustable parameters.
        formulas: Equations shown next to the simulation.
        integrator: "euler", "semi_implicit_euler", "rk4" or "rk4_adaptive".
        max_step: Largest allowed sub-step in simulated seconds.
        histories: Series name -> capacity.
        rk_tol, rk_dt_min: Adaptive RK4 settings (integrator == "rk4_adaptive").

    Args:
        params: Initial parameter overrides (clamped like set_parameter).
        integrator: Override the class integrator.
        max_step: Override the class sub-step limit.
        history_size: Cap every history buffer at this many samples.
        profiler: Optional Profiler instance for timing statistics.
    """
    id: str = ""
    title: str = ""
    category: str = ""
    parameter_specs: tuple[ParameterSpec, ...] = ()
    formulas: tuple[Formula, ...] = ()
    integrator: str = "rk4"
    max_step: float = 1 / 240
    histories: dict[str, int] = {}
    rk_tol: float = 1e-9
    rk_dt_min: float = 1e-6

    # derivative function f(state, t, coefficients)
    derivatives: Callable[[np.ndarray, float, Any], np.ndarray]

    def __init__(
        self,
        params: dict[str, Any] | None = None,
        *,
        integrator: str | None = None,
        max_step: float | None = None,
        history_size: int | None = None,
        profiler: Profiler | None = None,
    ):
        self.status = SimulationStatus.UNINITIALIZED
        if integrator is not None:
            self.integrator = integrator
        if max_step is not None:
            if not max_step > 0:
                raise ValueError("max_step must be positive")
            self.max_step = float(max_step)
        self.history_size = history_size
        self.profiler = profiler
        if self.integrator != "rk4_adaptive":
            self._stepper = get_stepper(self.integrator)
        self.params = ParameterSet(self.parameter_specs, dict(params or {}))
        self.reset()

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def _initial_state(self) -> np.ndarray:
        raise NotImplementedError

    def _coefficients(self) -> Any:
        raise NotImplementedError

    def _derived(self, coeffs: Any) -> dict[str, Any]:
        raise NotImplementedError

    def _span(self, dt: float) -> float:
        """Simulated seconds covered by a frame of ``dt`` wall seconds."""
        return dt

    def _step_limit(self, coeffs: Any) -> float:
        return self.max_step

    def _on_reset(self) -> None:
        """Rebuild auxiliary state after the state vector was recreated."""

    def _begin_frame(self, coeffs: Any) -> None:
        """Called once per advance, after coefficients are frozen."""

    def _end_frame(self, coeffs: Any) -> None:
        """Called once per advance, after the last sub-step and before publishing."""

    def _after_substep(self, coeffs: Any, h: float, t0: float) -> Any:
        """
        Called after each sub-step; t0 is the sub-step start time.

        Returns the coefficients for the remaining sub-steps (a collision
        that merges bodies changes the mass table).
        """
        return coeffs

    def _record_history(self, derived: dict[str, Any]) -> None:
        """Append the new derived values to the history buffers."""

    def _public_state(self) -> np.ndarray:
        return self.state

    # ------------------------------------------------------------------
    # Integration
    # ------------------------------------------------------------------

    def _integrate(self, y: np.ndarray, t: float, h: float, coeffs: Any) -> np.ndarray:
        """Advance y by one sub-step with the configured integrator."""
        if self.integrator == "rk4_adaptive":
            y, self._dt_hint, _ = integrate_adaptive(
                y, t, h, self.derivatives, coeffs,
                tol=self.rk_tol, dt_min=self.rk_dt_min, dt_max=h, dt_guess=self._dt_hint,
            )
            return y
        return self._stepper(y, t, h, self.derivatives, coeffs)

    def advance(self, dt: float) -> Snapshot:
        """
        Advance the simulation by one frame of ``dt`` seconds.

        A paused simulation ignores the call, as do non-positive or
        non-finite frame times. Parameter changes made during the frame
        take effect from the next call.

        Returns:
            Snapshot after the advance.
        """
        if self.status is SimulationStatus.PAUSED:
            return self.snapshot()
        if not (isinstance(dt, (int, float)) and math.isfinite(dt) and dt > 0.0):
            return self.snapshot()
        if self.status is SimulationStatus.READY:
            self.status = SimulationStatus.RUNNING

        prof = self.profiler
        coeffs = self._coefficients()
        span = self._span(float(dt))
        if span <= 0.0:
            return self.snapshot()
        limit = self._step_limit(coeffs)
        n = max(1, math.ceil(span / limit - 1e-9))
        h = span / n
        self._begin_frame(coeffs)

        if prof:
            with prof.section("integrate"):
                coeffs = self._substeps(n, h, coeffs)
        else:
            coeffs = self._substeps(n, h, coeffs)

        if prof:
            with prof.section("derived"):
                self._publish(coeffs)
        else:
            self._publish(coeffs)
        return self.snapshot()

    def _substeps(self, n: int, h: float, coeffs: Any) -> Any:
        for _ in range(n):
            t0 = self.time
            self.state = self._integrate(self.state, t0, h, coeffs)
            self.time = t0 + h
            self.step_count += 1
            coeffs = self._after_substep(coeffs, h, t0)
        self._end_frame(coeffs)
        return coeffs

    def _publish(self, coeffs: Any) -> None:
        # built completely before it replaces the previous mapping
        derived = self._derived(coeffs)
        self.derived = derived
        self._record_history(derived)

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """
        Rebuild state, auxiliary arrays and histories from the current
        parameter values and return to READY.
        """
        self.time = 0.0
        self.step_count = 0
        self._dt_hint: float | None = None
        self.state = f64(self._initial_state())
        self.history = {
            name: HistoryBuffer(min(size, self.history_size) if self.history_size else size)
            for name, size in self.histories.items()
        }
        self._on_reset()
        self._publish(self._coefficients())
        self.status = SimulationStatus.READY
        logger.debug("%s reset (state size %d)", self.id or type(self).__name__, self.state.size)

    def set_parameter(self, param_id: str, value: Any) -> Any:
        """
        Set a parameter, clamped to its declared bounds.

        Structural parameters (counts, presets, initial conditions, grid
        layout) rebuild the state through reset().

        Returns:
            The value actually stored.

        Raises:
            ValueError: Unknown parameter id.
        """
        spec = self.params.spec(param_id)
        old = self.params.get(param_id)
        new = self.params.set(param_id, value)
        if spec.structural and new != old:
            logger.info("%s: structural parameter '%s' changed, resetting", self.id, param_id)
            self.reset()
        return new

    def get_parameter(self, param_id: str) -> Any:
        return self.params.get(param_id)

    def pause(self) -> None:
        if self.status is not SimulationStatus.PAUSED:
            self._status_before_pause = self.status
            self.status = SimulationStatus.PAUSED

    def resume(self) -> None:
        if self.status is SimulationStatus.PAUSED:
            self.status = self._status_before_pause

    def toggle_pause(self) -> SimulationStatus:
        if self.status is SimulationStatus.PAUSED:
            self.resume()
        else:
            self.pause()
        return self.status

    @property
    def is_paused(self) -> bool:
        return self.status is SimulationStatus.PAUSED

    def snapshot(self) -> Snapshot:
        return Snapshot.build(
            simulation=self.id,
            time=self.time,
            status=self.status,
            state=self._public_state(),
            derived=self.derived,
            history={name: buf.arrays() for name, buf in self.history.items()},
            step_count=self.step_count,
        )
