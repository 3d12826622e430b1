"""Trajectory-to-geometry projection for line rendering.

Each sample becomes one vertex: a (scaled, optionally truncated) position
plus three attribute channels (normalized progress, raw index, speed).
Connectivity for a line list joins every vertex to its successor.
"""

import itertools
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Union

import numpy as np

from chaosstream.errors import ConfigError
from chaosstream.integrate.stream import Sample

logger = logging.getLogger(__name__)

__all__ = [
    "Vertex",
    "LineGeometry",
    "project",
    "line_strip_indices",
    "build_lines",
    "save_lines",
    "load_lines",
]


@dataclass(frozen=True)
class Vertex:
    """A renderable point.

    Attributes:
        position: Scaled coordinates (3 values when truncated).
        attributes: ``(index / n, index, |derivative|)``.
    """

    position: np.ndarray
    attributes: np.ndarray


@dataclass
class LineGeometry:
    """Vertex and index buffers ready for upload.

    Attributes:
        positions: ``(n, 3)`` float32 positions.
        attributes: ``(n, 3)`` float32 attribute channels.
        indices: ``(2 * (n - 1),)`` uint32 line-list indices.
    """

    positions: np.ndarray
    attributes: np.ndarray
    indices: np.ndarray

    @property
    def vertex_count(self) -> int:
        return len(self.positions)


def project(sample: Sample, run_length: int, scale: float = 1.0, truncate: bool = True) -> Vertex:
    """Map a trajectory sample to a vertex.

    Args:
        sample: Sample to project.
        run_length: Total vertices in the run, used to normalize the index.
        scale: Factor applied to every position coordinate.
        truncate: Keep only the first 3 coordinates of higher-dimensional states.
    """
    if run_length <= 0:
        raise ConfigError(f"run_length must be positive, got {run_length}")
    position = np.asarray(sample.state, dtype=float)
    if truncate:
        position = position[:3]
    speed = float(np.sqrt(np.sum(np.square(sample.derivative))))
    attributes = np.array([sample.index / run_length, float(sample.index), speed])
    return Vertex(position=position * scale, attributes=attributes)


def line_strip_indices(vertex_count: int) -> np.ndarray:
    """Index pairs joining consecutive vertices: 0,1, 1,2, 2,3, ...

    Returns ``2 * (vertex_count - 1)`` entries; fewer than two vertices
    give an empty array.
    """
    if vertex_count < 0:
        raise ConfigError(f"vertex_count must be non-negative, got {vertex_count}")
    if vertex_count < 2:
        return np.empty(0, dtype=np.uint32)
    i = np.arange(2 * (vertex_count - 1), dtype=np.uint32)
    return (i + 1) // 2


def build_lines(
    stream: Iterable[Sample],
    n: int,
    scale: float = 1.0,
    truncate: bool = True,
) -> LineGeometry:
    """Pull ``n`` samples and build vertex and index buffers from them.

    Samples are projected one at a time into preallocated float32
    buffers. A stream that ends early yields shorter geometry and a
    warning.
    """
    if n <= 0:
        raise ConfigError(f"Vertex count must be positive, got {n}")
    positions = None
    attributes = np.empty((n, 3), dtype=np.float32)
    count = 0
    for sample in itertools.islice(stream, n):
        vertex = project(sample, n, scale, truncate)
        if positions is None:
            positions = np.empty((n, len(vertex.position)), dtype=np.float32)
        positions[count] = vertex.position
        attributes[count] = vertex.attributes
        count += 1
    if count < n:
        logger.warning("Stream ended after %d of %d samples", count, n)
    if count == 0:
        raise ConfigError("Stream produced no samples")
    geometry = LineGeometry(
        positions=positions[:count],
        attributes=attributes[:count],
        indices=line_strip_indices(count),
    )
    logger.debug("Built %d vertices / %d indices", geometry.vertex_count, len(geometry.indices))
    return geometry


def save_lines(geometry: LineGeometry, path: Union[str, Path]) -> Path:
    """Write geometry buffers to a compressed ``.npz`` file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    np.savez_compressed(
        path,
        positions=geometry.positions,
        attributes=geometry.attributes,
        indices=geometry.indices,
    )
    logger.info("Wrote %d vertices → %s", geometry.vertex_count, path)
    return path


def load_lines(path: Union[str, Path]) -> LineGeometry:
    with np.load(path) as data:
        return LineGeometry(
            positions=data["positions"],
            attributes=data["attributes"],
            indices=data["indices"],
        )
