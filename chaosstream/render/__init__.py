"""Visualization path: vertex projection and line connectivity."""

from chaosstream.render.geometry import (
    LineGeometry,
    Vertex,
    build_lines,
    line_strip_indices,
    load_lines,
    project,
    save_lines,
)
