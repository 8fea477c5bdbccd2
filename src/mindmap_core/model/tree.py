"""Tree traversal and structural validation over an ``id -> Node`` mapping.

The descendant collector here is the single traversal shared by subtree
deletion and the drag cascade.
"""

from __future__ import annotations

from collections.abc import Mapping

import networkx as nx

from mindmap_core.errors import TreeInvariantError
from mindmap_core.model.node import Node


def collect_descendants(nodes: Mapping[str, Node], node_id: str) -> list[str]:
    """Return every descendant id of ``node_id`` in depth-first preorder.

    Child ids that do not resolve to a node are skipped. Raises
    TreeInvariantError if a node is reached twice (a cycle or a shared child).
    """
    node = nodes.get(node_id)
    if node is None:
        return []

    result: list[str] = []
    seen: set[str] = {node_id}
    stack: list[str] = list(reversed(node.children_ids))
    while stack:
        child_id = stack.pop()
        child = nodes.get(child_id)
        if child is None:
            continue
        if child_id in seen:
            raise TreeInvariantError(f"Node '{child_id}' is reachable twice below '{node_id}'")
        seen.add(child_id)
        result.append(child_id)
        stack.extend(reversed(child.children_ids))
    return result


def resolved_children(nodes: Mapping[str, Node], node_id: str) -> list[Node]:
    """Children of ``node_id`` that exist in ``nodes``, in sibling order."""
    node = nodes.get(node_id)
    if node is None:
        return []
    return [nodes[cid] for cid in node.children_ids if cid in nodes]


def build_digraph(nodes: Mapping[str, Node]) -> nx.DiGraph:
    """Build a parent -> child DiGraph from the ``parent_id`` links."""
    digraph: nx.DiGraph = nx.DiGraph()
    for node_id, node in nodes.items():
        digraph.add_node(node_id, data=node)
    for node_id, node in nodes.items():
        if node.parent_id is not None and node.parent_id in nodes:
            digraph.add_edge(node.parent_id, node_id)
    return digraph


def validate_tree(nodes: Mapping[str, Node], root_id: str | None) -> None:
    """Check the structural invariants of a node mapping.

    Raises:
        TreeInvariantError: If the root is missing, a reference dangles,
            ``children_ids`` disagree with ``parent_id``, or the parent links
            do not form a single tree rooted at ``root_id``.
    """
    if not nodes:
        return
    if root_id is None or root_id not in nodes:
        raise TreeInvariantError(f"Root node '{root_id}' is not in the node mapping")

    for node_id, node in nodes.items():
        if node.id != node_id:
            raise TreeInvariantError(f"Node stored under '{node_id}' has id '{node.id}'")
        if node.parent_id is None:
            if node_id != root_id:
                raise TreeInvariantError(f"Node '{node_id}' has no parent but is not the root")
            continue
        parent = nodes.get(node.parent_id)
        if parent is None:
            raise TreeInvariantError(f"Node '{node_id}' references missing parent '{node.parent_id}'")
        if node_id not in parent.children_ids:
            raise TreeInvariantError(f"Node '{node_id}' is missing from children of '{parent.id}'")
        if len(set(node.children_ids)) != len(node.children_ids):
            raise TreeInvariantError(f"Node '{node_id}' lists a child more than once")

    for node_id, node in nodes.items():
        for child_id in node.children_ids:
            child = nodes.get(child_id)
            if child is None:
                raise TreeInvariantError(f"Node '{node_id}' references missing child '{child_id}'")
            if child.parent_id != node_id:
                raise TreeInvariantError(f"Child '{child_id}' of '{node_id}' points at parent '{child.parent_id}'")

    digraph = build_digraph(nodes)
    if not nx.is_arborescence(digraph):
        try:
            cycle = nx.find_cycle(digraph)
        except nx.NetworkXNoCycle:
            raise TreeInvariantError("Parent links do not form a single tree") from None
        path = " -> ".join(src for src, _ in cycle)
        raise TreeInvariantError(f"Parent links form a cycle: {path}")
