"""Change accounting for incremental persistence."""

from __future__ import annotations

from collections.abc import Iterable


class DirtyTracker:
    """Tracks node ids changed or deleted since the last successful save.

    An id is never in both sets: marking it deleted evicts it from the dirty
    set. The map flag covers document-level changes (structure, text, styles).
    """

    def __init__(self) -> None:
        self._dirty: set[str] = set()
        self._deleted: set[str] = set()
        self._map_dirty = False

    def mark_dirty(self, ids: Iterable[str]) -> None:
        for node_id in ids:
            self._dirty.add(node_id)
            # A node re-created after deletion (undo) is live again.
            self._deleted.discard(node_id)

    def mark_deleted(self, node_id: str) -> None:
        self._dirty.discard(node_id)
        self._deleted.add(node_id)

    def mark_map_dirty(self) -> None:
        self._map_dirty = True

    def clear(self) -> None:
        self._dirty.clear()
        self._deleted.clear()
        self._map_dirty = False

    def dirty_node_ids(self) -> frozenset[str]:
        return frozenset(self._dirty)

    def deleted_node_ids(self) -> frozenset[str]:
        return frozenset(self._deleted)

    def map_dirty(self) -> bool:
        return self._map_dirty

    def has_pending_changes(self) -> bool:
        return bool(self._dirty or self._deleted or self._map_dirty)
