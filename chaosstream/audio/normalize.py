"""Peak normalization of finite channel buffers."""

from typing import Sequence

import numpy as np

from chaosstream.errors import DegenerateNormalizationError, EmptyInputError

__all__ = ["normalize"]


def normalize(values: Sequence[float]) -> np.ndarray:
    """Divide every value by the largest magnitude in ``values``.

    The result lies in [-1, 1] and the peak element maps to exactly +/-1.

    Raises:
        EmptyInputError: If ``values`` is empty.
        DegenerateNormalizationError: If the peak magnitude is zero or
            not finite.
    """
    data = np.asarray(values, dtype=float).ravel()
    if data.size == 0:
        raise EmptyInputError("Cannot normalize an empty channel")
    peak = float(np.max(np.abs(data)))
    if not np.isfinite(peak):
        raise DegenerateNormalizationError(f"Channel peak is not finite ({peak})")
    if peak == 0.0:
        raise DegenerateNormalizationError("Channel is all zeros")
    return data / peak
