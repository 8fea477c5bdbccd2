"""Shared type definitions for mindmap-core.

Enums and small value types used across the node model, layout, and
connection geometry.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Position:
    """A 2D point or displacement in canvas units."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Position) -> Position:
        return Position(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Position) -> Position:
        return Position(self.x - other.x, self.y - other.y)

    def distance_to(self, other: Position) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def lerp(self, other: Position, t: float) -> Position:
        """Linear interpolation towards ``other`` at parameter ``t``."""
        return Position(self.x + (other.x - self.x) * t, self.y + (other.y - self.y) * t)


ORIGIN = Position(0.0, 0.0)


class NodeShape(Enum):
    Rounded = "rounded"
    Square = "square"
    Circle = "circle"


class Priority(Enum):
    Low = "low"
    Medium = "medium"
    High = "high"


class AttachmentType(Enum):
    Image = "image"
    Link = "link"
    File = "file"


class AnchorEdge(Enum):
    """Side of a node's bounding box where a connection attaches."""

    Left = "left"
    Right = "right"
    Top = "top"
    Bottom = "bottom"

    def normal(self) -> tuple[int, int]:
        """Outward unit normal of this edge."""
        return _NORMALS[self]


_NORMALS: dict[AnchorEdge, tuple[int, int]] = {
    AnchorEdge.Right: (1, 0),
    AnchorEdge.Left: (-1, 0),
    AnchorEdge.Bottom: (0, 1),
    AnchorEdge.Top: (0, -1),
}
