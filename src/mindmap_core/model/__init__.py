"""Data model: nodes, documents, and tree utilities."""

from mindmap_core.model.node import (
    DEFAULT_VIEW,
    Document,
    DocumentSettings,
    Node,
    NodeAttachment,
    NodeStyle,
    NodeTask,
    ViewTransform,
)
from mindmap_core.model.tree import build_digraph, collect_descendants, resolved_children, validate_tree

__all__ = [
    "DEFAULT_VIEW",
    "Document",
    "DocumentSettings",
    "Node",
    "NodeAttachment",
    "NodeStyle",
    "NodeTask",
    "ViewTransform",
    "build_digraph",
    "collect_descendants",
    "resolved_children",
    "validate_tree",
]
