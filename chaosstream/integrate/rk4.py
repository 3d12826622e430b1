"""Fixed-step fourth-order Runge-Kutta integrator.

One implementation serves every state dimension: the state is a 1-D
numpy array whose length is fixed when the integrator is built.
"""

import math
from typing import Callable, Sequence

import numpy as np

from chaosstream.errors import ConfigError

__all__ = [
    "RungeKutta4",
    "new_integrator",
    "step",
    "current_time",
    "current_state",
]

VectorField = Callable[[float, np.ndarray], np.ndarray]


class RungeKutta4:
    """Classic RK4 stepper holding time ``t``, state ``y`` and step ``h``.

    Only :meth:`step` mutates the integrator. ``y`` hands out copies, so
    observing the state never changes it.
    """

    def __init__(self, t0: float, y0: Sequence[float], h: float):
        h = float(h)
        if not math.isfinite(h) or h <= 0.0:
            raise ConfigError(f"Step size must be positive and finite, got {h}")
        y = np.array(y0, dtype=float)
        if y.ndim != 1 or y.size == 0:
            raise ConfigError(f"Initial state must be a non-empty vector, got shape {y.shape}")
        self._t = float(t0)
        self._y = y
        self._h = h

    @property
    def t(self) -> float:
        return self._t

    @property
    def y(self) -> np.ndarray:
        return self._y.copy()

    @property
    def h(self) -> float:
        return self._h

    @property
    def dimension(self) -> int:
        return self._y.size

    def step(self, f: VectorField) -> np.ndarray:
        """Advance one step of size h under ``f(t, y)`` and return the new state.

        Stages are computed into temporaries before ``t`` and ``y`` are
        replaced, so a failing field leaves the integrator untouched.
        """
        t, y, h = self._t, self._y, self._h
        k1 = h * np.asarray(f(t, y), dtype=float)
        k2 = h * np.asarray(f(t + h / 2.0, y + k1 / 2.0), dtype=float)
        k3 = h * np.asarray(f(t + h / 2.0, y + k2 / 2.0), dtype=float)
        k4 = h * np.asarray(f(t + h, y + k3), dtype=float)
        y_next = y + (k1 + 2.0 * k2 + 2.0 * k3 + k4) / 6.0

        self._y = y_next
        self._t = t + h
        return y_next.copy()

    def __repr__(self) -> str:
        return f"RungeKutta4(t={self._t!r}, y={self._y.tolist()!r}, h={self._h!r})"


# ---------------------------------------------------------------------------
# Functional interface
# ---------------------------------------------------------------------------

def new_integrator(initial_time: float, initial_state: Sequence[float], step_size: float) -> RungeKutta4:
    """Build an integrator; ``step_size`` must be positive."""
    return RungeKutta4(initial_time, initial_state, step_size)


def step(integrator: RungeKutta4, field: VectorField) -> None:
    integrator.step(field)


def current_time(integrator: RungeKutta4) -> float:
    return integrator.t


def current_state(integrator: RungeKutta4) -> np.ndarray:
    return integrator.y
