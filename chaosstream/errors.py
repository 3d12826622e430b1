"""Error taxonomy for chaosstream.

All errors derive from ChaosStreamError and from ValueError, so callers
that already guard numeric calls with ``except ValueError`` keep working.
"""

__all__ = [
    "ChaosStreamError",
    "ConfigError",
    "EmptyInputError",
    "DegenerateNormalizationError",
]


class ChaosStreamError(Exception):
    """Base class for every error raised by chaosstream."""


class ConfigError(ChaosStreamError, ValueError):
    """Invalid construction parameter (step size, dimension, counts)."""


class EmptyInputError(ChaosStreamError, ValueError):
    """A sequence that must hold at least one value was empty."""


class DegenerateNormalizationError(ChaosStreamError, ValueError):
    """Normalization is undefined (all-zero or non-finite maximum)."""
