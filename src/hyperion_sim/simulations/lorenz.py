# MIT License (see LICENSE)
"""
Lorenz attractor with Lyapunov estimate and power spectrum.

The simulated span per frame is ``dt · simulation_speed``, integrated with
RK4 in sub-steps no longer than ``time_step``.
"""
from __future__ import annotations

import numpy as np

from ..core.analysis import power_spectrum
from ..core.lyapunov import LyapunovEstimator
from ..dynamics import lorenz
from ..parameters import ParameterSpec
from ..simulation import Simulation
from ..types import Formula

SHADOW_OFFSET = 1e-4
RENORMALIZE_AT = 1e-2
SPECTRUM_SAMPLES = 64
SPECTRUM_INTERVAL = 5.0

PARAMETERS = (
    ParameterSpec("sigma", "σ (Prandtl number)", 0.1, 30.0, 0.1, 10.0),
    ParameterSpec("rho", "ρ (Rayleigh number)", 0.1, 100.0, 0.1, 28.0),
    ParameterSpec("beta", "β (geometric factor)", 0.1, 10.0, 0.01, 8.0 / 3.0),
    ParameterSpec("initial_x", "Initial X", -20.0, 20.0, 0.1, 0.1, structural=True),
    ParameterSpec("initial_y", "Initial Y", -20.0, 20.0, 0.1, 0.0, structural=True),
    ParameterSpec("initial_z", "Initial Z", -20.0, 20.0, 0.1, 0.0, structural=True),
    ParameterSpec("time_step", "Time Step", 0.001, 0.01, 0.001, 0.005, unit="s"),
    ParameterSpec("simulation_speed", "Simulation Speed", 0.1, 5.0, 0.1, 1.0),
    ParameterSpec("show_comparison", "Show Comparison", kind="bool", default=True),
)

FORMULAS = (
    Formula("Lorenz Equations", "ẋ = σ(y - x),  ẏ = x(ρ - z) - y,  ż = xy - βz",
            "Simplified model of atmospheric convection"),
    Formula("Fixed Points", "C₀ = (0, 0, 0),  C± = (±√(β(ρ-1)), ±√(β(ρ-1)), ρ-1)",
            "C± exist for ρ > 1 and lose stability near ρ ≈ 24.74"),
    Formula("Lyapunov Exponent", "λ = lim(t→∞) (1/t)·ln(|δ(t)| / |δ₀|)",
            "λ ≈ 0.9 for the classic parameters"),
)


class LorenzSimulation(Simulation):
    id = "lorenz"
    title = "Lorenz Attractor"
    category = "chaos"
    parameter_specs = PARAMETERS
    formulas = FORMULAS
    integrator = "rk4"
    histories = {"trajectory": 2000, "comparison": 2000, "time_series": 500, "lyapunov": 200}

    derivatives = staticmethod(lorenz.derivatives)

    def _initial_state(self) -> np.ndarray:
        p = self.params
        return np.array([p["initial_x"], p["initial_y"], p["initial_z"]], dtype=np.float64)

    def _on_reset(self) -> None:
        self.lyapunov = LyapunovEstimator(
            d0=SHADOW_OFFSET,
            threshold=RENORMALIZE_AT,
            direction=np.array([1.0, 0.0, 0.0]),
        )
        self.lyapunov.seed(self.state)
        self._tracking = bool(self.params["show_comparison"])
        self._spectrum = (np.zeros(0), np.zeros(0))
        self._spectrum_time = 0.0

    def _coefficients(self) -> lorenz.LorenzCoefficients:
        p = self.params
        return lorenz.LorenzCoefficients(sigma=p["sigma"], rho=p["rho"], beta=p["beta"])

    def _span(self, dt: float) -> float:
        return dt * self.params["simulation_speed"]

    def _step_limit(self, c) -> float:
        return self.params["time_step"]

    def _begin_frame(self, c) -> None:
        tracking = bool(self.params["show_comparison"])
        if tracking and not self._tracking:
            self.lyapunov.seed(self.state)
        self._tracking = tracking

    def _after_substep(self, c: lorenz.LorenzCoefficients, h: float, t0: float):
        if self._tracking:
            self.lyapunov.step(self.state, h, lambda s: self._integrate(s, t0, h, c))
        return c

    def clear_trajectory(self) -> None:
        self.history["trajectory"].clear()
        self.history["comparison"].clear()

    def _update_spectrum(self) -> None:
        """Sample x into the time series and refresh the spectrum when due."""
        series = self.history["time_series"]
        series.append(self.time, self.state)
        if len(series) < SPECTRUM_SAMPLES:
            return
        if self._spectrum[0].size and self.time - self._spectrum_time < SPECTRUM_INTERVAL:
            return
        times = series.times()[-SPECTRUM_SAMPLES:]
        xs = series.tail(SPECTRUM_SAMPLES)[:, 0]
        sample_dt = float(np.mean(np.diff(times)))
        self._spectrum = power_spectrum(xs, sample_dt)
        self._spectrum_time = self.time

    def _derived(self, c: lorenz.LorenzCoefficients) -> dict:
        self._update_spectrum()
        lam = self.lyapunov.exponent if self._tracking else 0.0
        out = {
            "x": float(self.state[0]),
            "y": float(self.state[1]),
            "z": float(self.state[2]),
            "lyapunov_exponent": lam,
            "divergence_time": self.lyapunov.divergence_time() if self._tracking else float("inf"),
            "system_state": lorenz.system_state(c.rho, lam),
            "fixed_points": tuple(np.array(fp) for fp in lorenz.fixed_points(c)),
            "spectrum_frequencies": self._spectrum[0],
            "spectrum_amplitudes": self._spectrum[1],
        }
        if self._tracking:
            out["comparison_state"] = self.lyapunov.shadow.copy()
            out["separation"] = self.lyapunov.distance
        return out

    def _record_history(self, d: dict) -> None:
        t = self.time
        self.history["trajectory"].append(t, self.state)
        if "comparison_state" in d:
            self.history["comparison"].append(t, d["comparison_state"])
            self.history["lyapunov"].append(t, d["lyapunov_exponent"])
