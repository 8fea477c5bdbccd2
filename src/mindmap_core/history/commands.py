"""History commands.

One frozen dataclass per mutation kind. Each carries the snapshots needed to
apply it forward or to build its inverse without consulting current state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from mindmap_core.model.node import Node
from mindmap_core.types import Position


@dataclass(frozen=True)
class AddNode:
    """Insert ``node``; ``descendants`` are restored beneath it in order.

    ``index`` is the slot in the parent's children; None appends.
    """

    node: Node
    index: int | None = None
    descendants: tuple[Node, ...] = ()

    def inverse(self) -> DeleteNode:
        return DeleteNode(node=self.node, parent_id=self.node.parent_id, index=self.index, descendants=self.descendants)


@dataclass(frozen=True)
class DeleteNode:
    """Remove ``node`` and its subtree."""

    node: Node
    parent_id: str | None
    index: int | None = None
    descendants: tuple[Node, ...] = ()

    def inverse(self) -> AddNode:
        return AddNode(node=self.node, index=self.index, descendants=self.descendants)


@dataclass(frozen=True)
class UpdateNode:
    node_id: str
    before: dict[str, Any] = field(default_factory=dict)
    after: dict[str, Any] = field(default_factory=dict)

    def inverse(self) -> UpdateNode:
        return UpdateNode(node_id=self.node_id, before=self.after, after=self.before)


@dataclass(frozen=True)
class OffsetCascade:
    """Manual offsets of a dragged node and its descendants, before and after."""

    old: dict[str, Position | None]
    new: dict[str, Position | None]

    def swapped(self) -> OffsetCascade:
        return OffsetCascade(old=self.new, new=self.old)


@dataclass(frozen=True)
class SetOffset:
    node_id: str
    from_offset: Position | None
    to_offset: Position | None
    cascade: OffsetCascade | None = None

    def inverse(self) -> SetOffset:
        return SetOffset(
            node_id=self.node_id,
            from_offset=self.to_offset,
            to_offset=self.from_offset,
            cascade=self.cascade.swapped() if self.cascade is not None else None,
        )

    def target_offsets(self) -> dict[str, Position | None]:
        """Offsets this command sets when applied."""
        if self.cascade is not None:
            return dict(self.cascade.new)
        return {self.node_id: self.to_offset}


Command = Union[AddNode, DeleteNode, UpdateNode, SetOffset]
