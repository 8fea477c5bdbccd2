"""Horizontal tree layout.

The root sits at depth 0 and children extend to the right, one column per
depth level. Leaves are stacked top to bottom in traversal order; every
internal node is centred on the span between its first and last child.
After the traversal the whole layout is shifted so the root's centre is at
the origin.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from mindmap_core.config import LayoutConfig
from mindmap_core.errors import TreeInvariantError
from mindmap_core.model.node import Node
from mindmap_core.model.tree import resolved_children
from mindmap_core.types import ORIGIN, Position

_DEFAULT_CONFIG = LayoutConfig()


def compute_layout(
    nodes: Mapping[str, Node],
    root_id: str | None,
    config: LayoutConfig | None = None,
) -> dict[str, Position]:
    """Compute the auto position of every node reachable from ``root_id``.

    Returns an empty mapping if ``root_id`` is None or not in ``nodes``.
    The traversal keeps its own stack, so tree depth is not bounded by the
    interpreter's recursion limit.

    Raises:
        TreeInvariantError: If a node is reached twice during the traversal.
    """
    if root_id is None or root_id not in nodes:
        return {}
    cfg = config or _DEFAULT_CONFIG

    layout: dict[str, Position] = {}
    stack = [_enter(nodes, root_id, 0, 0.0, layout)]
    while stack:
        frame = stack[-1]
        if frame.index < len(frame.children):
            child = frame.children[frame.index]
            frame.index += 1
            stack.append(_enter(nodes, child.id, frame.depth + 1, frame.cursor, layout))
            continue

        stack.pop()
        consumed = _place(frame, layout, cfg)
        if stack:
            stack[-1].cursor += consumed

    root_pos = layout[root_id]
    shift = Position(root_pos.x + cfg.node_width / 2, root_pos.y + cfg.node_height / 2)
    return {node_id: pos - shift for node_id, pos in layout.items()}


@dataclass
class _Frame:
    """A node whose subtree is being laid out."""

    node_id: str
    depth: int
    start_y: float
    children: list[Node]
    index: int = 0
    cursor: float = 0.0


def _enter(
    nodes: Mapping[str, Node],
    node_id: str,
    depth: int,
    start_y: float,
    layout: dict[str, Position],
) -> _Frame:
    if node_id in layout:
        raise TreeInvariantError(f"Node '{node_id}' is reached twice during layout")
    # Placeholder marks the node as visited until it is placed.
    layout[node_id] = ORIGIN
    return _Frame(node_id, depth, start_y, resolved_children(nodes, node_id), cursor=start_y)


def _place(frame: _Frame, layout: dict[str, Position], cfg: LayoutConfig) -> float:
    """Place a node whose children are done; return the height its subtree consumed."""
    x = frame.depth * cfg.horizontal_spacing
    if not frame.children:
        layout[frame.node_id] = Position(x, frame.start_y)
        return cfg.node_height + cfg.vertical_spacing

    first_y = layout[frame.children[0].id].y
    last_y = layout[frame.children[-1].id].y
    layout[frame.node_id] = Position(x, (first_y + last_y) / 2)
    return frame.cursor - frame.start_y


def get_final_position(auto_pos: Position | None, manual_offset: Position | None) -> Position:
    """Auto position plus the manual offset, if any; origin when unknown."""
    if auto_pos is None:
        return ORIGIN
    if manual_offset is None:
        return auto_pos
    return auto_pos + manual_offset


def calculate_offset(auto_pos: Position, desired_pos: Position) -> Position:
    """Manual offset that moves ``auto_pos`` to ``desired_pos``."""
    return desired_pos - auto_pos
