# MIT License (see LICENSE)
"""
Renderer adapters for simulation snapshots.

The engine has no drawing dependency: a frontend implements
RendererAdapter and receives one Snapshot per frame. Colours are never
looked up inside the physics; each adapter is constructed with a Palette.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, TextIO
import sys

import numpy as np

from ..types import Snapshot


@dataclass(frozen=True)
class Palette:
    """
    Colour table keyed by readout name.

    Attributes:
        colors: Readout name -> colour string (any format the frontend
                understands, e.g. "#3498DB").
        default: Colour for names without an entry.
    """
    colors: dict[str, str] = field(default_factory=dict)
    default: str = "#7F8C8D"

    def color_for(self, name: str) -> str:
        return self.colors.get(name, self.default)


DEFAULT_PALETTE = Palette({
    "kinetic_energy": "#E74C3C",
    "potential_energy": "#3498DB",
    "total_energy": "#2ECC71",
    "momentum": "#F39C12",
    "lyapunov_exponent": "#9B59B6",
    "probability_density": "#1ABC9C",
    "potential": "#34495E",
})


class RendererAdapter(ABC):
    """
    Abstract base class for renderer implementations.

    Usage:
        renderer = MyRenderer(palette)
        renderer.begin_frame(snapshot)
        for name, value in snapshot.derived.items():
            renderer.draw_value(name, value)
        renderer.end_frame()

    Or use the convenience method:
        renderer.render_snapshot(snapshot)
    """

    def __init__(self, palette: Palette = DEFAULT_PALETTE):
        self.palette = palette

    @abstractmethod
    def begin_frame(self, snapshot: Snapshot) -> None:
        ...

    @abstractmethod
    def draw_value(self, name: str, value: Any) -> None:
        ...

    @abstractmethod
    def end_frame(self) -> None:
        ...

    def render_snapshot(self, snapshot: Snapshot) -> None:
        self.begin_frame(snapshot)
        for name, value in snapshot.derived.items():
            self.draw_value(name, value)
        self.end_frame()


class DebugRenderer(RendererAdapter):
    """
    Text renderer for development and testing.

    Scalars are printed; arrays are summarised by their shape.

    Output:
        === lorenz t=1.0000 (running) ===
          x = 1.2345 [#7F8C8D]
          trajectory = array(3,) [#7F8C8D]
    """

    def __init__(self, output: TextIO | None = None, palette: Palette = DEFAULT_PALETTE,
                 show_colors: bool = True):
        super().__init__(palette)
        self.output = output or sys.stdout
        self.show_colors = show_colors

    def begin_frame(self, snapshot: Snapshot) -> None:
        self.output.write(
            f"=== {snapshot.simulation} t={snapshot.time:.4f} ({snapshot.status.value}) ===\n"
        )

    def draw_value(self, name: str, value: Any) -> None:
        if isinstance(value, np.ndarray):
            text = f"array{value.shape}"
        elif isinstance(value, float):
            text = f"{value:.6g}"
        else:
            text = repr(value)
        line = f"  {name} = {text}"
        if self.show_colors:
            line += f" [{self.palette.color_for(name)}]"
        self.output.write(line + "\n")

    def end_frame(self) -> None:
        self.output.write("\n")
        self.output.flush()


class NullRenderer(RendererAdapter):
    """No-op renderer for benchmarks."""

    def begin_frame(self, snapshot: Snapshot) -> None:
        pass

    def draw_value(self, name: str, value: Any) -> None:
        pass

    def end_frame(self) -> None:
        pass


class BufferedRenderer(RendererAdapter):
    """
    Records scalar readouts of every frame.

    Example:
        renderer = BufferedRenderer()
        loop = FrameLoop(ManualScheduler(), renderer=renderer)
        ...
        energies = [f["values"]["total_energy"] for f in renderer.frames]
    """

    def __init__(self, palette: Palette = DEFAULT_PALETTE):
        super().__init__(palette)
        self.frames: list[dict] = []
        self._current_frame: dict | None = None

    def begin_frame(self, snapshot: Snapshot) -> None:
        self._current_frame = {
            "simulation": snapshot.simulation,
            "time": snapshot.time,
            "values": {},
            "colors": {},
        }

    def draw_value(self, name: str, value: Any) -> None:
        if self._current_frame is None:
            return
        if isinstance(value, (int, float, str, bool, np.floating, np.integer)):
            self._current_frame["values"][name] = value
            self._current_frame["colors"][name] = self.palette.color_for(name)

    def end_frame(self) -> None:
        if self._current_frame is not None:
            self.frames.append(self._current_frame)
            self._current_frame = None

    def clear(self) -> None:
        self.frames.clear()
