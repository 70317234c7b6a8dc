# examples/lorenz_divergence.py
import logging

from hyperion_sim import LorenzSimulation, setup_logging

setup_logging(logging.INFO)

sim = LorenzSimulation(params={"rho": 28.0, "show_comparison": True})

t_end = 30.0
while sim.time < t_end:
    snap = sim.advance(1 / 60)

print("t:", snap.time)
print("state:", snap.state)
print("regime:", snap["system_state"])
print("lyapunov exponent:", snap["lyapunov_exponent"])
print("time for 1e-4 to grow to 1:", snap["divergence_time"])
