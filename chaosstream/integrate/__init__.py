"""Integration engine: RK4 stepper, trajectory streams, parallel fan-out."""

from chaosstream.integrate.rk4 import (
    RungeKutta4,
    current_state,
    current_time,
    new_integrator,
    step,
)
from chaosstream.integrate.stream import (
    Sample,
    collect_states,
    take,
    trajectory_stream,
    until_non_finite,
)
from chaosstream.integrate.parallel import run_parallel
