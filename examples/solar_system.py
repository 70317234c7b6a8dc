# examples/solar_system.py
import logging

from hyperion_sim import FrameLoop, ManualScheduler, setup_logging
from hyperion_sim.renderer import BufferedRenderer

setup_logging(logging.INFO)

sched = ManualScheduler()
renderer = BufferedRenderer()
loop = FrameLoop(sched, renderer=renderer)
sim = loop.select("orbital", params={"time_step": 86_400.0})

# one simulated day per frame for a year
for i in range(366):
    sched.tick(i / 60)

first, last = renderer.frames[1], renderer.frames[-1]
e0, e1 = first["values"]["total_energy"], last["values"]["total_energy"]
print("days:", last["values"]["time_days"])
print("energy drift:", abs(e1 - e0) / abs(e0))
print("earth:", sim.snapshot()["orbital_elements"])
