"""Command-based edit history."""

from mindmap_core.history.commands import AddNode, Command, DeleteNode, OffsetCascade, SetOffset, UpdateNode
from mindmap_core.history.manager import HistoryManager

__all__ = [
    "AddNode",
    "Command",
    "DeleteNode",
    "HistoryManager",
    "OffsetCascade",
    "SetOffset",
    "UpdateNode",
]
