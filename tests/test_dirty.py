"""Tests for mindmap_core.dirty.DirtyTracker."""

from mindmap_core.dirty import DirtyTracker


class TestDirtyTracker:
    def test_starts_clean(self):
        tracker = DirtyTracker()
        assert not tracker.has_pending_changes()
        assert tracker.dirty_node_ids() == frozenset()
        assert tracker.deleted_node_ids() == frozenset()
        assert not tracker.map_dirty()

    def test_mark_dirty(self):
        tracker = DirtyTracker()
        tracker.mark_dirty(["a", "b", "a"])
        assert tracker.dirty_node_ids() == {"a", "b"}
        assert tracker.has_pending_changes()

    def test_deleted_evicts_dirty(self):
        tracker = DirtyTracker()
        tracker.mark_dirty(["a", "b"])
        tracker.mark_deleted("a")
        assert tracker.dirty_node_ids() == {"b"}
        assert tracker.deleted_node_ids() == {"a"}

    def test_dirty_after_delete_evicts_deleted(self):
        tracker = DirtyTracker()
        tracker.mark_deleted("a")
        tracker.mark_dirty(["a"])
        assert tracker.dirty_node_ids() == {"a"}
        assert tracker.deleted_node_ids() == frozenset()

    def test_map_flag_alone_is_pending(self):
        tracker = DirtyTracker()
        tracker.mark_map_dirty()
        assert tracker.map_dirty()
        assert tracker.has_pending_changes()

    def test_clear(self):
        tracker = DirtyTracker()
        tracker.mark_dirty(["a"])
        tracker.mark_deleted("b")
        tracker.mark_map_dirty()
        tracker.clear()
        assert not tracker.has_pending_changes()
