"""mindmap-core: state, layout, and history core of a mind-map editor."""

from mindmap_core.autosave import AutoSaver
from mindmap_core.errors import PersistenceError, TreeInvariantError
from mindmap_core.history import AddNode, DeleteNode, HistoryManager, OffsetCascade, SetOffset, UpdateNode
from mindmap_core.layout import compute_connections, compute_layout, get_final_position
from mindmap_core.model import Document, Node, NodeStyle, NodeTask, ViewTransform
from mindmap_core.store import DocumentStore
from mindmap_core.types import Position

__all__ = [
    "AddNode",
    "AutoSaver",
    "DeleteNode",
    "Document",
    "DocumentStore",
    "HistoryManager",
    "Node",
    "NodeStyle",
    "NodeTask",
    "OffsetCascade",
    "PersistenceError",
    "Position",
    "SetOffset",
    "TreeInvariantError",
    "UpdateNode",
    "ViewTransform",
    "compute_connections",
    "compute_layout",
    "get_final_position",
]
