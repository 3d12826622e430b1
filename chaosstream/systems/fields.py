"""Vector fields for the Lorenz family of chaotic flows.

Provides the Lorenz 1963 attractor and the cyclic Lorenz 1996 model as
pure right-hand sides, validated field objects callable as f(t, y), and a
small registry keyed by model variant.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Sequence, Tuple, Union

import numpy as np

from chaosstream.errors import ConfigError

__all__ = [
    "ModelVariant",
    "wrap_index",
    "lorenz",
    "lorenz96",
    "LorenzField",
    "Lorenz96Field",
    "FIELD_REGISTRY",
    "make_field",
]

LORENZ96_MIN_DIMENSION = 3
DEFAULT_PERTURBATION = 0.01


class ModelVariant(str, Enum):
    """Which vector field a simulation integrates."""

    LORENZ = "lorenz"
    LORENZ96 = "lorenz96"


# ---------------------------------------------------------------------------
# Pure right-hand sides
# ---------------------------------------------------------------------------

def wrap_index(i, n: int):
    """Return the cyclic index of ``i`` in ``[0, n)``.

    Works on ints and integer arrays. Negative offsets wrap from the end,
    so ``wrap_index(-2, 5) == 3``.
    """
    if n <= 0:
        raise ConfigError(f"Cyclic dimension must be positive, got {n}")
    return np.mod(i, n)


def lorenz(state: np.ndarray, sigma: float, rho: float, beta: float) -> np.ndarray:
    """Lorenz 1963 attractor."""
    x, y, z = state
    return np.array([sigma * (y - x), x * (rho - z) - y, x * y - beta * z])


def lorenz96(state: np.ndarray, forcing: Union[float, np.ndarray]) -> np.ndarray:
    """Lorenz 1996 model with cyclic neighbour coupling.

    dx[i] = (x[i+1] - x[i-2]) * x[i-1] - x[i] + F, indices taken mod N.
    ``forcing`` is a scalar or one value per coordinate.
    """
    x = np.asarray(state, dtype=float)
    n = len(x)
    idx = np.arange(n)
    return (x[wrap_index(idx + 1, n)] - x[wrap_index(idx - 2, n)]) * x[wrap_index(idx - 1, n)] - x + forcing


# ---------------------------------------------------------------------------
# Field objects
# ---------------------------------------------------------------------------

def _check_state(state, dimension: int, name: str) -> np.ndarray:
    y = np.asarray(state, dtype=float)
    if y.shape != (dimension,):
        raise ConfigError(
            f"{name} expects a state of length {dimension}, got shape {y.shape}"
        )
    return y


@dataclass(frozen=True)
class LorenzField:
    """Lorenz attractor with fixed (sigma, rho, beta).

    Attributes:
        sigma: Prandtl-like coupling.
        rho: Rayleigh-like forcing.
        beta: Geometric damping.
    """

    sigma: float = 10.0
    rho: float = 28.0
    beta: float = 8.0 / 3.0

    @property
    def dimension(self) -> int:
        return 3

    @property
    def params(self) -> Tuple[float, float, float]:
        return (self.sigma, self.rho, self.beta)

    def default_state(self) -> np.ndarray:
        return np.ones(3)

    def __call__(self, t: float, y: np.ndarray) -> np.ndarray:
        return lorenz(_check_state(y, 3, "Lorenz"), self.sigma, self.rho, self.beta)


@dataclass(frozen=True)
class Lorenz96Field:
    """Lorenz-96 model over ``dimension`` cyclically coupled variables.

    Attributes:
        dimension: Number of state variables N (at least 3).
        forcing: Scalar forcing F, or a length-N sequence of per-coordinate
            forcings.
    """

    dimension: int = 5
    forcing: Union[float, Tuple[float, ...]] = 8.0
    _forcing: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        try:
            dimension = int(self.dimension)
        except (TypeError, ValueError):
            raise ConfigError(f"Lorenz-96 dimension must be an integer, got {self.dimension!r}") from None
        if dimension != self.dimension or dimension < LORENZ96_MIN_DIMENSION:
            raise ConfigError(
                f"Lorenz-96 needs at least {LORENZ96_MIN_DIMENSION} variables, got {self.dimension}"
            )
        object.__setattr__(self, "dimension", dimension)
        forcing = np.array(self.forcing, dtype=float)
        if forcing.ndim == 0:
            forcing = np.full(self.dimension, float(forcing))
        elif forcing.shape != (self.dimension,):
            raise ConfigError(
                f"Lorenz-96 forcing must be a scalar or have length {self.dimension}, "
                f"got shape {forcing.shape}"
            )
        else:
            object.__setattr__(self, "forcing", tuple(float(f) for f in forcing))
        forcing.setflags(write=False)
        object.__setattr__(self, "_forcing", forcing)

    @property
    def base_forcing(self) -> float:
        """Scalar forcing used to build the default state."""
        return float(self._forcing[0])

    def default_state(self) -> np.ndarray:
        """All coordinates at F, with coordinates 1 and 3 nudged by -/+0.01."""
        y = np.full(self.dimension, self.base_forcing)
        y[1] -= DEFAULT_PERTURBATION
        y[3 % self.dimension] += DEFAULT_PERTURBATION
        return y

    def __call__(self, t: float, y: np.ndarray) -> np.ndarray:
        return lorenz96(_check_state(y, self.dimension, "Lorenz-96"), self._forcing)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

def _lorenz_from_params(params: Dict) -> LorenzField:
    return LorenzField(
        sigma=float(params.get("sigma", 10.0)),
        rho=float(params.get("rho", 28.0)),
        beta=float(params.get("beta", 8.0 / 3.0)),
    )


def _lorenz96_from_params(params: Dict) -> Lorenz96Field:
    forcing = params.get("forcing", 8.0)
    if isinstance(forcing, Sequence) and not isinstance(forcing, str):
        forcing = tuple(float(f) for f in forcing)
    return Lorenz96Field(dimension=params.get("dimension", 5), forcing=forcing)


FIELD_REGISTRY: Dict[ModelVariant, Callable[[Dict], object]] = {
    ModelVariant.LORENZ: _lorenz_from_params,
    ModelVariant.LORENZ96: _lorenz96_from_params,
}


def make_field(variant, params: Dict = None):
    """Build a vector field for ``variant`` from a parameter dict."""
    try:
        variant = ModelVariant(variant)
    except ValueError:
        raise ConfigError(
            f"Unknown model variant: {variant!r}. "
            f"Supported: {', '.join(v.value for v in ModelVariant)}"
        ) from None
    try:
        return FIELD_REGISTRY[variant](params or {})
    except ConfigError:
        raise
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {variant.value} parameters: {exc}") from exc
