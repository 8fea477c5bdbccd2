"""Tests for mindmap_core.history: command inverses and the undo/redo stacks."""

from __future__ import annotations

from mindmap_core.history import AddNode, DeleteNode, HistoryManager, OffsetCascade, SetOffset, UpdateNode
from mindmap_core.model.node import Node
from mindmap_core.types import Position


def _update(n: int) -> UpdateNode:
    return UpdateNode(node_id="A", before={"text": f"v{n - 1}"}, after={"text": f"v{n}"})


class TestInverses:
    def test_add_inverts_to_delete(self):
        node = Node(id="A", parent_id="R")
        inv = AddNode(node=node).inverse()
        assert isinstance(inv, DeleteNode)
        assert inv.node is node
        assert inv.parent_id == "R"

    def test_delete_inverts_to_add_with_subtree(self):
        node = Node(id="A", parent_id="R", children_ids=("A1",))
        child = Node(id="A1", parent_id="A")
        inv = DeleteNode(node=node, parent_id="R", index=2, descendants=(child,)).inverse()
        assert inv == AddNode(node=node, index=2, descendants=(child,))

    def test_double_inverse_is_identity(self):
        cmd = DeleteNode(node=Node(id="A", parent_id="R"), parent_id="R", index=0)
        assert cmd.inverse().inverse() == cmd

    def test_update_swaps_patches(self):
        inv = _update(1).inverse()
        assert inv.before == {"text": "v1"}
        assert inv.after == {"text": "v0"}

    def test_set_offset_without_cascade(self):
        cmd = SetOffset(node_id="A", from_offset=None, to_offset=Position(5, 5))
        inv = cmd.inverse()
        assert inv.target_offsets() == {"A": None}
        assert cmd.target_offsets() == {"A": Position(5, 5)}

    def test_set_offset_with_cascade(self):
        cascade = OffsetCascade(
            old={"A": None, "A1": Position(1, 1)},
            new={"A": Position(10, 0), "A1": Position(11, 1)},
        )
        cmd = SetOffset(node_id="A", from_offset=None, to_offset=Position(10, 0), cascade=cascade)
        assert cmd.inverse().target_offsets() == {"A": None, "A1": Position(1, 1)}
        assert cmd.inverse().inverse() == cmd


class TestHistoryManager:
    def test_empty_undo_redo_are_noops(self):
        history = HistoryManager()
        applied: list = []
        assert history.undo(applied.append) is None
        assert history.redo(applied.append) is None
        assert applied == []

    def test_record_and_len(self):
        history = HistoryManager()
        history.record(_update(1))
        history.record(_update(2))
        assert len(history) == 2
        assert history.can_undo and not history.can_redo

    def test_undo_applies_inverse_and_moves_to_future(self):
        history = HistoryManager()
        history.record(_update(1))
        applied: list = []
        undone = history.undo(applied.append)
        assert undone == _update(1)
        assert applied == [_update(1).inverse()]
        assert history.past == ()
        assert history.future == (_update(1),)

    def test_redo_applies_forward(self):
        history = HistoryManager()
        history.record(_update(1))
        history.undo(lambda c: None)
        applied: list = []
        history.redo(applied.append)
        assert applied == [_update(1)]
        assert history.past == (_update(1),)
        assert not history.can_redo

    def test_redo_order_is_reverse_of_undo(self):
        history = HistoryManager()
        for n in (1, 2, 3):
            history.record(_update(n))
        history.undo(lambda c: None)
        history.undo(lambda c: None)
        applied: list = []
        history.redo(applied.append)
        history.redo(applied.append)
        assert applied == [_update(2), _update(3)]

    def test_record_clears_future(self):
        history = HistoryManager()
        history.record(_update(1))
        history.undo(lambda c: None)
        history.record(_update(5))
        assert history.future == ()
        assert history.past == (_update(5),)

    def test_clear(self):
        history = HistoryManager()
        history.record(_update(1))
        history.record(_update(2))
        history.undo(lambda c: None)
        history.clear()
        assert len(history) == 0
        assert not history.can_redo
