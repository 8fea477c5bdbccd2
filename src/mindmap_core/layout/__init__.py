"""Layout public API: tree layout and connection geometry."""

from __future__ import annotations

from mindmap_core.layout.connections import (
    BezierCurve,
    Connection,
    anchor_edges,
    anchor_point,
    compute_connections,
    connection_curve,
)
from mindmap_core.layout.tree import calculate_offset, compute_layout, get_final_position

__all__ = [
    "BezierCurve",
    "Connection",
    "anchor_edges",
    "anchor_point",
    "calculate_offset",
    "compute_connections",
    "compute_layout",
    "connection_curve",
    "get_final_position",
]
