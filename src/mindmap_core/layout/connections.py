"""Connection geometry between a node and its parent.

Each connection is a cubic Bezier curve from an anchor on the parent's box
to an anchor on the child's box. Anchors are chosen on the dominant axis of
the centre-to-centre vector, and control points extend along each anchor's
outward normal.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from mindmap_core.config import LayoutConfig
from mindmap_core.model.node import Node
from mindmap_core.types import AnchorEdge, Position

_DEFAULT_CONFIG = LayoutConfig()


# ─── Bezier curve ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class BezierCurve:
    start: Position
    control1: Position
    control2: Position
    end: Position

    def point_at(self, t: float) -> Position:
        """Evaluate the curve at parameter ``t`` by De Casteljau subdivision."""
        a = self.start.lerp(self.control1, t)
        b = self.control1.lerp(self.control2, t)
        c = self.control2.lerp(self.end, t)
        ab = a.lerp(b, t)
        bc = b.lerp(c, t)
        return ab.lerp(bc, t)

    def midpoint(self) -> Position:
        return self.point_at(0.5)

    def to_path(self) -> str:
        """SVG-style path data: ``M x y C x1 y1, x2 y2, x y``."""
        return (
            f"M {_fmt(self.start.x)} {_fmt(self.start.y)} "
            f"C {_fmt(self.control1.x)} {_fmt(self.control1.y)}, "
            f"{_fmt(self.control2.x)} {_fmt(self.control2.y)}, "
            f"{_fmt(self.end.x)} {_fmt(self.end.y)}"
        )


def _fmt(value: float) -> str:
    return f"{value:g}"


# ─── Anchors ─────────────────────────────────────────────────────────────────


def anchor_edges(
    parent_pos: Position,
    child_pos: Position,
    config: LayoutConfig | None = None,
) -> tuple[AnchorEdge, AnchorEdge]:
    """Return (parent_edge, child_edge). Ties between the axes go horizontal."""
    cfg = config or _DEFAULT_CONFIG
    half = Position(cfg.node_width / 2, cfg.node_height / 2)
    parent_center = parent_pos + half
    child_center = child_pos + half
    dx = child_center.x - parent_center.x
    dy = child_center.y - parent_center.y

    if abs(dx) >= abs(dy):
        if dx >= 0:
            return AnchorEdge.Right, AnchorEdge.Left
        return AnchorEdge.Left, AnchorEdge.Right
    if dy >= 0:
        return AnchorEdge.Bottom, AnchorEdge.Top
    return AnchorEdge.Top, AnchorEdge.Bottom


def anchor_point(pos: Position, edge: AnchorEdge, config: LayoutConfig | None = None) -> Position:
    """Midpoint of ``edge`` on the box whose top-left corner is ``pos``."""
    cfg = config or _DEFAULT_CONFIG
    w, h = cfg.node_width, cfg.node_height
    if edge == AnchorEdge.Right:
        return Position(pos.x + w, pos.y + h / 2)
    if edge == AnchorEdge.Left:
        return Position(pos.x, pos.y + h / 2)
    if edge == AnchorEdge.Top:
        return Position(pos.x + w / 2, pos.y)
    return Position(pos.x + w / 2, pos.y + h)


def connection_curve(
    parent_pos: Position,
    child_pos: Position,
    config: LayoutConfig | None = None,
) -> BezierCurve:
    """Build the curve from the parent's box to the child's box."""
    cfg = config or _DEFAULT_CONFIG
    parent_edge, child_edge = anchor_edges(parent_pos, child_pos, cfg)
    start = anchor_point(parent_pos, parent_edge, cfg)
    end = anchor_point(child_pos, child_edge, cfg)

    reach = max(start.distance_to(end) * cfg.control_ratio, cfg.min_control_offset)
    sx, sy = parent_edge.normal()
    ex, ey = child_edge.normal()
    return BezierCurve(
        start=start,
        control1=Position(start.x + sx * reach, start.y + sy * reach),
        control2=Position(end.x + ex * reach, end.y + ey * reach),
        end=end,
    )


# ─── Connections ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Connection:
    """Geometry and style of the link into one child node."""

    id: str
    parent_id: str
    child_id: str
    curve: BezierCurve
    midpoint: Position
    color: str | None = None
    dashed: bool = False

    @property
    def path(self) -> str:
        return self.curve.to_path()


def compute_connections(
    nodes: Mapping[str, Node],
    positions: Mapping[str, Position],
    config: LayoutConfig | None = None,
) -> list[Connection]:
    """Connections for every non-root node whose endpoints have positions."""
    cfg = config or _DEFAULT_CONFIG
    result: list[Connection] = []
    for node in nodes.values():
        if node.is_root:
            continue
        parent_pos = positions.get(node.parent_id)
        child_pos = positions.get(node.id)
        if parent_pos is None or child_pos is None:
            continue
        curve = connection_curve(parent_pos, child_pos, cfg)
        style = node.style
        color = None
        dashed = False
        if style is not None:
            color = style.connection_color or style.color
            dashed = bool(style.connection_dashed)
        result.append(
            Connection(
                id=f"{node.parent_id}-{node.id}",
                parent_id=node.parent_id,
                child_id=node.id,
                curve=curve,
                midpoint=curve.midpoint(),
                color=color,
                dashed=dashed,
            )
        )
    return result
