"""Node and document records.

Nodes are frozen dataclasses: every mutation in the store builds a new
instance with ``dataclasses.replace``, so a node captured in a history
command is never altered afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import Any

from mindmap_core.types import AttachmentType, NodeShape, Position, Priority

# Fields that encode tree structure; only the store's own add/delete paths
# may change them.
STRUCTURAL_FIELDS: frozenset[str] = frozenset({"id", "parent_id", "children_ids"})


@dataclass(frozen=True)
class NodeStyle:
    color: str | None = None
    shape: NodeShape | None = None
    font_family: str | None = None
    icon: str | None = None
    # Style of the incoming connection (owned by the child node)
    connection_color: str | None = None
    connection_dashed: bool | None = None


@dataclass(frozen=True)
class NodeTask:
    due_date: datetime | None = None
    priority: Priority | None = None
    is_complete: bool = False


@dataclass(frozen=True)
class NodeAttachment:
    type: AttachmentType
    url: str
    name: str | None = None


@dataclass(frozen=True)
class Node:
    """A vertex of the content tree."""

    id: str
    parent_id: str | None = None
    text: str = ""
    children_ids: tuple[str, ...] = ()
    style: NodeStyle | None = None
    task: NodeTask | None = None
    attachments: tuple[NodeAttachment, ...] = ()
    manual_offset: Position | None = None
    order: int = 0
    is_expanded: bool = True
    map_id: str = ""
    user_id: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def with_patch(self, patch: dict[str, Any]) -> Node:
        """Return a copy with ``patch`` shallow-merged in."""
        check_patch(patch)
        if "children_ids" in patch:
            patch = {**patch, "children_ids": tuple(patch["children_ids"])}
        return replace(self, **patch)

    def snapshot(self, keys: Any) -> dict[str, Any]:
        """Current values of the given fields, as a patch."""
        return {key: getattr(self, key) for key in keys}


_NODE_FIELDS: frozenset[str] = frozenset(f.name for f in fields(Node))


def check_patch(patch: dict[str, Any], allow_structural: bool = True) -> None:
    """Raise ValueError if ``patch`` names fields a Node does not have."""
    unknown = set(patch) - _NODE_FIELDS
    if unknown:
        raise ValueError(f"Unknown node field(s): {', '.join(sorted(unknown))}")
    if not allow_structural:
        structural = set(patch) & STRUCTURAL_FIELDS
        if structural:
            raise ValueError(f"Structural field(s) cannot be patched: {', '.join(sorted(structural))}")


@dataclass(frozen=True)
class DocumentSettings:
    theme: str = "system"
    layout_mode: str = "auto"
    default_node_color: str | None = None


@dataclass(frozen=True)
class Document:
    """Metadata of one mind-map document."""

    id: str
    root_id: str
    name: str = ""
    description: str | None = None
    user_id: str = ""
    settings: DocumentSettings = field(default_factory=DocumentSettings)
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class ViewTransform:
    scale: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0


DEFAULT_VIEW = ViewTransform()
