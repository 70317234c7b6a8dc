"""
Microbenchmark: time per frame for every registered simulation.
Run:
  python benchmarks/bench_steps.py
"""
import time

from hyperion_sim import registry
from hyperion_sim.profiler import Profiler


def run(sim_id: str, frames: int = 300, **params):
    prof = Profiler()
    sim = registry.create(sim_id, params=params, profiler=prof)

    # warmup
    for _ in range(30):
        sim.advance(1 / 60)
    prof.reset()

    t0 = time.perf_counter()
    for _ in range(frames):
        sim.advance(1 / 60)
    t1 = time.perf_counter()

    per_frame = (t1 - t0) / frames
    return per_frame, sim.step_count, prof.stats.summary()


if __name__ == "__main__":
    for sim_id in registry.ids():
        per_frame, steps, summary = run(sim_id)
        print(f"{sim_id:<16} frame={1e3*per_frame:8.3f} ms  frames/s={1/per_frame:8.1f}  steps={steps}")
        for k in ["integrate", "derived"]:
            if k in summary:
                print(" ", k, summary[k])
        print()

    # wave function cost grows with the grid
    for n in [128, 256, 512, 1024]:
        per_frame, steps, _ = run("wavefunction", grid_size=n)
        print(f"grid={n:5d}  frame={1e3*per_frame:8.3f} ms  steps={steps}")
