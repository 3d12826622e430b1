"""Lazy trajectory streams built on a stepping integrator.

A stream has no notion of total length. The visualization path pulls as
many samples as it has frames for; the audio path pulls an exact count.
Each consumer imposes its own stop condition.
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List

import numpy as np

from chaosstream.errors import ConfigError
from chaosstream.integrate.rk4 import RungeKutta4, VectorField

logger = logging.getLogger(__name__)

__all__ = [
    "Sample",
    "trajectory_stream",
    "take",
    "collect_states",
    "until_non_finite",
]


@dataclass(frozen=True)
class Sample:
    """One trajectory point.

    Attributes:
        index: Position in the stream, starting at 0.
        t: Integrator time after the step that produced ``state``.
        state: State after the step (read-only copy).
        derivative: Field evaluated at ``(t, state)`` (read-only copy).
    """

    index: int
    t: float
    state: np.ndarray
    derivative: np.ndarray

    @property
    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.state)) and np.all(np.isfinite(self.derivative)))


def _frozen(values) -> np.ndarray:
    arr = np.array(values, dtype=float)
    arr.setflags(write=False)
    return arr


def trajectory_stream(
    integrator: RungeKutta4,
    field: VectorField,
    warmup_steps: int = 0,
) -> Iterator[Sample]:
    """Yield samples forever by stepping ``integrator`` under ``field``.

    The stream takes exclusive use of ``integrator``: every pull advances
    it by one step. ``warmup_steps`` steps are taken and dropped before
    sample 0. Non-finite states pass through unchanged.

    Args:
        integrator: Integrator to drive. Restart by building a fresh one.
        field: Vector field f(t, y).
        warmup_steps: Steps discarded before the first yielded sample.

    Raises:
        ConfigError: If ``warmup_steps`` is negative or the field's
            dimension disagrees with the integrator state length. Raised
            by this call, before any step is taken.
    """
    if warmup_steps < 0:
        raise ConfigError(f"warmup_steps must be non-negative, got {warmup_steps}")
    dimension = getattr(field, "dimension", None)
    if dimension is not None and dimension != integrator.dimension:
        raise ConfigError(
            f"Field dimension {dimension} does not match state length {integrator.dimension}"
        )

    return _generate(integrator, field, warmup_steps)


def _generate(integrator: RungeKutta4, field: VectorField, warmup_steps: int) -> Iterator[Sample]:
    for _ in range(warmup_steps):
        integrator.step(field)

    for index in itertools.count():
        state = integrator.step(field)
        t = integrator.t
        yield Sample(index=index, t=t, state=_frozen(state), derivative=_frozen(field(t, state)))


def take(stream: Iterable[Sample], n: int) -> List[Sample]:
    """Pull exactly ``n`` samples from ``stream``."""
    if n < 0:
        raise ConfigError(f"Sample count must be non-negative, got {n}")
    return list(itertools.islice(stream, n))


def collect_states(stream: Iterable[Sample], n: int) -> np.ndarray:
    """Pull ``n`` samples and stack their states into an ``(n, D)`` array."""
    samples = take(stream, n)
    if not samples:
        return np.empty((0, 0))
    return np.stack([s.state for s in samples])


def until_non_finite(stream: Iterable[Sample]) -> Iterator[Sample]:
    """Pass samples through, stopping before the first non-finite one."""
    for sample in stream:
        if not sample.is_finite:
            logger.warning(
                "Trajectory diverged at sample %d (t=%.6g); stopping stream",
                sample.index, sample.t,
            )
            return
        yield sample
