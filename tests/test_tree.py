"""Tests for mindmap_core.model.tree: descendant collection and validation."""

from __future__ import annotations

import networkx as nx
import pytest

from mindmap_core.errors import TreeInvariantError
from mindmap_core.model.node import Node
from mindmap_core.model.tree import build_digraph, collect_descendants, resolved_children, validate_tree


def _tree() -> dict[str, Node]:
    """R → (A → (A1 → A1a, A2), B)."""
    return {
        "R": Node(id="R", children_ids=("A", "B")),
        "A": Node(id="A", parent_id="R", children_ids=("A1", "A2")),
        "A1": Node(id="A1", parent_id="A", children_ids=("A1a",)),
        "A1a": Node(id="A1a", parent_id="A1"),
        "A2": Node(id="A2", parent_id="A"),
        "B": Node(id="B", parent_id="R"),
    }


class TestCollectDescendants:
    def test_preorder(self):
        assert collect_descendants(_tree(), "R") == ["A", "A1", "A1a", "A2", "B"]

    def test_leaf_has_none(self):
        assert collect_descendants(_tree(), "B") == []

    def test_unknown_node(self):
        assert collect_descendants(_tree(), "zzz") == []

    def test_dangling_child_skipped(self):
        nodes = _tree()
        nodes["B"] = Node(id="B", parent_id="R", children_ids=("ghost",))
        assert collect_descendants(nodes, "B") == []

    def test_cycle_raises(self):
        nodes = {
            "A": Node(id="A", children_ids=("B",)),
            "B": Node(id="B", parent_id="A", children_ids=("A",)),
        }
        with pytest.raises(TreeInvariantError):
            collect_descendants(nodes, "A")


class TestResolvedChildren:
    def test_order_and_skip(self):
        nodes = _tree()
        nodes["R"] = Node(id="R", children_ids=("B", "ghost", "A"))
        assert [n.id for n in resolved_children(nodes, "R")] == ["B", "A"]


class TestBuildDigraph:
    def test_edges_follow_parent_links(self):
        g = build_digraph(_tree())
        assert g.number_of_nodes() == 6
        assert set(g.successors("A")) == {"A1", "A2"}
        assert nx.is_arborescence(g)


class TestValidateTree:
    def test_valid_tree(self):
        validate_tree(_tree(), "R")

    def test_empty_mapping_is_valid(self):
        validate_tree({}, None)

    def test_missing_root(self):
        with pytest.raises(TreeInvariantError, match="Root"):
            validate_tree(_tree(), "nope")

    def test_second_root(self):
        nodes = _tree()
        nodes["X"] = Node(id="X")
        with pytest.raises(TreeInvariantError, match="no parent"):
            validate_tree(nodes, "R")

    def test_dangling_parent(self):
        nodes = _tree()
        nodes["X"] = Node(id="X", parent_id="ghost")
        with pytest.raises(TreeInvariantError, match="missing parent"):
            validate_tree(nodes, "R")

    def test_child_not_listed_by_parent(self):
        nodes = _tree()
        nodes["X"] = Node(id="X", parent_id="B")
        with pytest.raises(TreeInvariantError, match="missing from children"):
            validate_tree(nodes, "R")

    def test_dangling_child(self):
        nodes = _tree()
        nodes["B"] = Node(id="B", parent_id="R", children_ids=("ghost",))
        with pytest.raises(TreeInvariantError, match="missing child"):
            validate_tree(nodes, "R")

    def test_parent_cycle(self):
        nodes = {
            "R": Node(id="R"),
            "A": Node(id="A", parent_id="B", children_ids=("B",)),
            "B": Node(id="B", parent_id="A", children_ids=("A",)),
        }
        with pytest.raises(TreeInvariantError, match="cycle"):
            validate_tree(nodes, "R")
