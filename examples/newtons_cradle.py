# examples/newtons_cradle.py
import logging

from hyperion_sim import NewtonsCradleSimulation, setup_logging
from hyperion_sim.renderer import DebugRenderer

setup_logging(logging.INFO)

sim = NewtonsCradleSimulation(params={"ball_count": 5, "pulled_count": 2})
renderer = DebugRenderer(show_colors=False)

for frame in range(180):
    snap = sim.advance(1 / 60)
    if frame % 60 == 59:
        renderer.render_snapshot(snap)

print("angles:", sim.angles)
print("impacts:", sim.impacts)
