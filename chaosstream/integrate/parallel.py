"""Bounded concurrency for independent trajectories.

Stepping a single trajectory is a sequential fold and cannot be split.
Separate integrators share no state, so whole trajectories can run side
by side and be joined at the end.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional, Sequence, Tuple

import numpy as np

from chaosstream.errors import ConfigError
from chaosstream.integrate.rk4 import RungeKutta4, VectorField
from chaosstream.integrate.stream import collect_states, trajectory_stream

logger = logging.getLogger(__name__)

Job = Tuple[RungeKutta4, VectorField]


def run_parallel(
    jobs: Sequence[Job],
    n: int,
    max_workers: int = 4,
    warmup_steps: int = 0,
) -> List[np.ndarray]:
    """Integrate each ``(integrator, field)`` job for ``n`` samples concurrently.

    Args:
        jobs: Independent integrator/field pairs. An integrator may appear
            only once.
        n: Samples to pull from every trajectory.
        max_workers: Maximum concurrent workers.
        warmup_steps: Steps discarded at the start of every trajectory.

    Returns:
        One ``(n, D)`` state array per job, in job order.

    Raises:
        ConfigError: If two jobs share an integrator or ``max_workers`` < 1.
    """
    if max_workers < 1:
        raise ConfigError(f"max_workers must be at least 1, got {max_workers}")
    seen = set()
    for integrator, _ in jobs:
        if id(integrator) in seen:
            raise ConfigError("Parallel jobs must not share an integrator instance")
        seen.add(id(integrator))

    def _run(job: Job) -> np.ndarray:
        integrator, field = job
        return collect_states(trajectory_stream(integrator, field, warmup_steps), n)

    results: List[Optional[np.ndarray]] = [None] * len(jobs)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_idx = {executor.submit(_run, job): i for i, job in enumerate(jobs)}
        for future in as_completed(future_to_idx):
            idx = future_to_idx[future]
            results[idx] = future.result()
            logger.debug("Trajectory %d finished (%d samples)", idx, n)

    return results
