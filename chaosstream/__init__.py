"""chaosstream: RK4 trajectories of Lorenz-family flows for rendering and audio."""

__version__ = "0.1.0"

from chaosstream.errors import (
    ChaosStreamError,
    ConfigError,
    DegenerateNormalizationError,
    EmptyInputError,
)
from chaosstream.systems.fields import (
    Lorenz96Field,
    LorenzField,
    ModelVariant,
    lorenz,
    lorenz96,
    make_field,
    wrap_index,
)
from chaosstream.integrate.rk4 import RungeKutta4, new_integrator
from chaosstream.integrate.stream import Sample, collect_states, take, trajectory_stream, until_non_finite
from chaosstream.integrate.parallel import run_parallel
from chaosstream.render.geometry import LineGeometry, Vertex, build_lines, line_strip_indices, project
from chaosstream.audio.normalize import normalize
from chaosstream.config import SimulationConfig, build_field, build_integrator, load_config
