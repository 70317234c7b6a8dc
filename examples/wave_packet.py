# examples/wave_packet.py
import logging

import numpy as np

from hyperion_sim import WaveFunctionSimulation, setup_logging

setup_logging(logging.DEBUG)

sim = WaveFunctionSimulation(params={"potential_type": "barrier", "potential_height": 20.0})

for _ in range(240):
    snap = sim.advance(1 / 60)

x, rho = snap["x"], snap["probability_density"]
dx = x[1] - x[0]
center = sim.get_parameter("potential_center") * sim.length
print("total probability:", snap["total_probability"])
print("transmitted:", float(np.sum(rho[x > center]) * dx))
print("<x>, <p>:", snap["position"], snap["momentum"])
print("dx*dp:", snap["uncertainty_product"])
