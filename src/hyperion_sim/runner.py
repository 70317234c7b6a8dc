# MIT License (see LICENSE)
"""
Single-threaded frame loop.

The host environment supplies a scheduler with two calls:

    request_frame(callback) -> handle     # callback(timestamp_seconds)
    cancel_frame(handle)

(a browser would map these onto requestAnimationFrame). FrameLoop keeps at
most one pending request. Switching simulation, resetting and stopping all
cancel the pending request first, so a stale callback can never advance a
simulation that is no longer active.

ManualScheduler is a headless scheduler for tests, scripts and benchmarks:
frames run only when ``tick`` is called.
"""
from __future__ import annotations
from typing import Any, Callable, Protocol
import logging

from . import registry
from .renderer.adapter import RendererAdapter
from .simulation import Simulation
from .types import Snapshot

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]

# Longest frame interval fed to a simulation; longer gaps (a backgrounded
# tab, a debugger pause) are treated as one slow frame.
MAX_FRAME_DT = 0.1


class Scheduler(Protocol):
    def request_frame(self, callback: FrameCallback) -> Any: ...

    def cancel_frame(self, handle: Any) -> None: ...


class ManualScheduler:
    """Scheduler driven explicitly by ``tick(timestamp)``."""

    def __init__(self) -> None:
        self._next_handle = 1
        self._pending: dict[int, FrameCallback] = {}

    def request_frame(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def tick(self, timestamp: float) -> int:
        """
        Run every callback pending at call time. Callbacks requested while
        running wait for the next tick.

        Returns:
            Number of callbacks run.
        """
        batch = list(self._pending.items())
        self._pending.clear()
        for _, callback in batch:
            callback(timestamp)
        return len(batch)


class FrameLoop:
    """
    Drives the active simulation once per frame.

    Args:
        scheduler: Frame scheduler (request/cancel).
        renderer: Optional renderer receiving each snapshot.
        on_snapshot: Optional listener called with each snapshot.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        renderer: RendererAdapter | None = None,
        on_snapshot: Callable[[Snapshot], None] | None = None,
    ):
        self.scheduler = scheduler
        self.renderer = renderer
        self.on_snapshot = on_snapshot
        self.simulation: Simulation | None = None
        self.frames = 0
        self._handle: Any = None
        self._generation = 0
        self._last_timestamp: float | None = None

    @property
    def running(self) -> bool:
        return self._handle is not None

    def _cancel(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self.scheduler.cancel_frame(self._handle)
            self._handle = None
        self._last_timestamp = None

    def _schedule(self) -> None:
        self._handle = self.scheduler.request_frame(self._on_frame)

    def select(self, simulation: str | Simulation, **kwargs: Any) -> Simulation:
        """
        Make a simulation active (by registry id or instance) and start it.
        """
        self._cancel()
        if isinstance(simulation, str):
            simulation = registry.create(simulation, **kwargs)
        logger.info("Switching to simulation '%s'", simulation.id)
        self.simulation = simulation
        self._schedule()
        return simulation

    def start(self) -> None:
        if self.simulation is None:
            raise RuntimeError("No simulation selected")
        if self._handle is None:
            self._schedule()

    def stop(self) -> None:
        self._cancel()

    def reset(self) -> None:
        """Reset the active simulation and restart the frame chain."""
        if self.simulation is None:
            return
        self._cancel()
        self.simulation.reset()
        self._schedule()

    def _on_frame(self, timestamp: float) -> None:
        self._handle = None
        generation = self._generation
        sim = self.simulation
        if sim is None:
            return
        if self._last_timestamp is None:
            dt = 0.0
        else:
            dt = min(max(timestamp - self._last_timestamp, 0.0), MAX_FRAME_DT)
        self._last_timestamp = timestamp

        snap = sim.advance(dt) if dt > 0.0 else sim.snapshot()
        self.frames += 1
        if self.renderer is not None:
            self.renderer.render_snapshot(snap)
        if self.on_snapshot is not None:
            self.on_snapshot(snap)
        # a listener may have switched, reset or stopped the loop
        if generation == self._generation and self._handle is None:
            self._schedule()
