# MIT License (see LICENSE)
"""
Lightweight timing of simulation phases.

Every Simulation accepts an optional Profiler and times its "integrate"
and "derived" phases with it.

Example:
    profiler = Profiler()
    sim = LorenzSimulation(profiler=profiler)
    for _ in range(600):
        sim.advance(1 / 60)
    print(profiler.report())
"""
from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator
import time


@dataclass
class ProfileStats:
    """Raw timing samples (seconds) per named section."""
    samples: dict[str, list[float]] = field(default_factory=dict)

    def add(self, name: str, dt: float) -> None:
        self.samples.setdefault(name, []).append(dt)

    def summary(self) -> dict[str, dict[str, float]]:
        """
        Per-section statistics.

        Returns:
            Dict mapping section name to a dict with keys 'n', 'mean_ms',
            'max_ms' and 'total_ms'.
        """
        out = {}
        for name, times in self.samples.items():
            n = len(times)
            total = sum(times)
            out[name] = {
                "n": n,
                "mean_ms": 1e3 * total / n,
                "max_ms": 1e3 * max(times),
                "total_ms": 1e3 * total,
            }
        return out


class Profiler:
    """Context-manager based profiler for timing code sections."""

    def __init__(self) -> None:
        self.stats = ProfileStats()

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self.stats.add(name, time.perf_counter() - t0)

    def reset(self) -> None:
        self.stats = ProfileStats()

    def report(self) -> str:
        """One line per section, slowest total first."""
        rows = sorted(self.stats.summary().items(), key=lambda kv: -kv[1]["total_ms"])
        return "\n".join(
            f"{name:<12} n={s['n']:<6d} mean={s['mean_ms']:8.3f} ms  max={s['max_ms']:8.3f} ms"
            for name, s in rows
        )
