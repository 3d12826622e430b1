"""Bounded audio export: one normalized mono WAV per state coordinate.

The integrator is stepped exactly ``round(total_time * sampling_rate)``
times; each coordinate of the collected states becomes one channel,
normalized to its own peak and written as 32-bit IEEE float.
"""

import logging
import string
from pathlib import Path
from typing import Dict, List, Union

import numpy as np
from scipy.io import wavfile

from chaosstream.audio.normalize import normalize
from chaosstream.config import SimulationConfig, build_field, build_integrator
from chaosstream.errors import ConfigError
from chaosstream.integrate.stream import collect_states, trajectory_stream

logger = logging.getLogger(__name__)

__all__ = [
    "total_samples",
    "channel_name",
    "collect_channels",
    "normalize_channels",
    "write_channels",
    "export_audio",
]


def total_samples(total_time: float, sampling_rate: int) -> int:
    """Number of samples needed for ``total_time`` seconds at ``sampling_rate``."""
    if total_time <= 0:
        raise ConfigError(f"total_time must be positive, got {total_time}")
    if sampling_rate <= 0:
        raise ConfigError(f"sampling_rate must be positive, got {sampling_rate}")
    n = int(round(total_time * sampling_rate))
    if n == 0:
        raise ConfigError(f"{total_time}s at {sampling_rate} Hz rounds to zero samples")
    return n


def channel_name(idx: int) -> str:
    """Name for coordinate ``idx``: x, y, z, a, ..., w, then x1, y1, ... so names stay unique."""
    letters = string.ascii_lowercase
    cycle, pos = divmod(idx, len(letters))
    letter = letters[(pos + letters.index("x")) % len(letters)]
    return letter if cycle == 0 else f"{letter}{cycle}"


def collect_channels(states: np.ndarray) -> Dict[str, np.ndarray]:
    """Split an ``(n, D)`` state array into named per-coordinate buffers."""
    states = np.asarray(states, dtype=float)
    if states.ndim != 2:
        raise ConfigError(f"Expected an (n, D) state array, got shape {states.shape}")
    return {channel_name(i): states[:, i].copy() for i in range(states.shape[1])}


def normalize_channels(channels: Dict[str, np.ndarray]) -> Dict[str, np.ndarray]:
    """Normalize every channel to its own peak magnitude."""
    return {name: normalize(data) for name, data in channels.items()}


def write_channels(
    channels: Dict[str, np.ndarray],
    sampling_rate: int,
    output_dir: Union[str, Path],
) -> List[Path]:
    """Write each channel to ``<output_dir>/<name>.wav`` as float32 mono."""
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    paths: List[Path] = []
    for name, data in channels.items():
        path = out / f"{name}.wav"
        wavfile.write(path, sampling_rate, np.asarray(data, dtype=np.float32))
        logger.info("Wrote %d samples → %s", len(data), path)
        paths.append(path)
    return paths


def export_audio(config: SimulationConfig) -> List[Path]:
    """Integrate, collect, normalize and write one WAV per coordinate.

    Raises:
        EmptyInputError / DegenerateNormalizationError: If any channel
            cannot be normalized. No file is written in that case.
    """
    field = build_field(config)
    integrator = build_integrator(config, field)
    n = total_samples(config.audio.total_time, config.audio.sampling_rate)

    logger.info(
        "Integrating %s for %d samples (dt=%g, %d Hz)",
        config.model.value, n, config.step_size, config.audio.sampling_rate,
    )
    states = collect_states(trajectory_stream(integrator, field), n)
    if not np.all(np.isfinite(states)):
        bad = int(np.argmax(~np.all(np.isfinite(states), axis=1)))
        logger.warning("Trajectory became non-finite at sample %d", bad)

    channels = normalize_channels(collect_channels(states))
    return write_channels(channels, config.audio.sampling_rate, config.audio.output_dir)
