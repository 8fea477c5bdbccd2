"""Document store: the authoritative node tree and its mutation API.

The store owns the ``id -> Node`` mapping of one document together with the
selection and editing cursors, the view transform, the undo/redo history and
the dirty-state tracker. Layout, final positions and connection geometry are
derived on demand and memoized against a version counter that every node
mutation bumps.

Operations on unknown ids, attempts to delete the root, and undo/redo on an
empty stack are silent no-ops. Only structural corruption (a cycle in the
tree) and programming errors (patching unknown or structural fields) raise.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from types import MappingProxyType
from typing import Any, TypeVar

from mindmap_core.config import LayoutConfig, ViewConfig
from mindmap_core.dirty import DirtyTracker
from mindmap_core.history import AddNode, Command, DeleteNode, HistoryManager, OffsetCascade, SetOffset, UpdateNode
from mindmap_core.layout.connections import Connection, compute_connections
from mindmap_core.layout.tree import calculate_offset, compute_layout, get_final_position
from mindmap_core.model.node import DEFAULT_VIEW, Document, Node, NodeStyle, ViewTransform, check_patch
from mindmap_core.model.tree import collect_descendants, resolved_children, validate_tree
from mindmap_core.ports import Clock, IdGenerator, SystemClock, generate_id
from mindmap_core.types import ORIGIN, Position

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSET: Any = object()


class DocumentStore:
    """Tree container and mutation API for one editing session."""

    def __init__(
        self,
        config: LayoutConfig | None = None,
        view_config: ViewConfig | None = None,
        id_generator: IdGenerator | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.config = config or LayoutConfig()
        self.view_config = view_config or ViewConfig()
        self._id_generator: IdGenerator = id_generator or generate_id
        self._clock: Clock = clock or SystemClock()

        self.history = HistoryManager()
        self.dirty = DirtyTracker()

        self._document: Document | None = None
        self._nodes: dict[str, Node] = {}
        self._root_id: str | None = None
        self._selected_id: str | None = None
        self._editing_id: str | None = None
        self._view: ViewTransform = DEFAULT_VIEW

        self._version = 0
        self._cache: dict[str, tuple[int, Any]] = {}

    # ─── State accessors ─────────────────────────────────────────────────────

    @property
    def document(self) -> Document | None:
        return self._document

    @property
    def nodes(self) -> Mapping[str, Node]:
        return MappingProxyType(self._nodes)

    @property
    def root_id(self) -> str | None:
        return self._root_id

    @property
    def selected_node_id(self) -> str | None:
        return self._selected_id

    @property
    def editing_node_id(self) -> str | None:
        return self._editing_id

    @property
    def view(self) -> ViewTransform:
        return self._view

    @property
    def version(self) -> int:
        return self._version

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    # ─── Loading ─────────────────────────────────────────────────────────────

    def load_document(self, document: Document, nodes: Iterable[Node], validate: bool = True) -> None:
        """Replace the whole state with ``document`` and ``nodes``.

        Raises:
            TreeInvariantError: If ``validate`` is set and the nodes do not
                form a single tree rooted at ``document.root_id``.
        """
        mapping = {node.id: node for node in nodes}
        if validate:
            validate_tree(mapping, document.root_id)

        self._document = document
        self._nodes = mapping
        self._root_id = document.root_id
        self._selected_id = None
        self._editing_id = None
        self._view = DEFAULT_VIEW
        self.history.clear()
        self.dirty.clear()
        self._touch()
        logger.debug("loaded document %s with %d nodes", document.id, len(mapping))

    def clear(self) -> None:
        self._document = None
        self._nodes = {}
        self._root_id = None
        self._selected_id = None
        self._editing_id = None
        self._view = DEFAULT_VIEW
        self.history.clear()
        self.dirty.clear()
        self._touch()

    # ─── Selection and editing ───────────────────────────────────────────────

    def select(self, node_id: str | None) -> None:
        if node_id is not None and node_id not in self._nodes:
            logger.debug("select: unknown node %s", node_id)
            return
        self._selected_id = node_id
        self._editing_id = None

    def start_edit(self, node_id: str) -> None:
        if node_id not in self._nodes:
            logger.debug("start_edit: unknown node %s", node_id)
            return
        self._selected_id = node_id
        self._editing_id = node_id

    def stop_edit(self) -> None:
        self._editing_id = None

    # ─── Node mutations ──────────────────────────────────────────────────────

    def add_node(self, node: Node, replay: bool = False) -> None:
        """Insert ``node`` as the last child of its parent and select it.

        A new node starts as a leaf: any ``children_ids`` it carries are
        dropped so existing nodes never gain a second parent. Replayed adds
        keep the node as recorded.
        """
        if node.children_ids and not replay:
            logger.debug("add_node: dropping children %s of new node %s", node.children_ids, node.id)
            node = replace(node, children_ids=())
        command = AddNode(node=node)
        if self._insert(command) and not replay:
            self.history.record(command)

    def delete_node(self, node_id: str, replay: bool = False) -> None:
        """Remove ``node_id`` and its whole subtree; select the parent."""
        command = self._remove(node_id)
        if command is not None and not replay:
            self.history.record(command)

    def update_node(self, node_id: str, patch: Mapping[str, Any], replay: bool = False) -> None:
        """Shallow-merge ``patch`` into a node and stamp ``updated_at``.

        Raises:
            ValueError: If ``patch`` names an unknown or structural field.
        """
        check_patch(dict(patch), allow_structural=False)
        node = self._nodes.get(node_id)
        if node is None:
            logger.debug("update_node: unknown node %s", node_id)
            return

        after = dict(patch)
        after.setdefault("updated_at", self._clock.now())
        before = node.snapshot(after)
        self._nodes[node_id] = node.with_patch(after)

        self.dirty.mark_dirty([node_id])
        if "text" in patch:
            self.dirty.mark_map_dirty()
        self._touch()
        if not replay:
            self.history.record(UpdateNode(node_id=node_id, before=before, after=after))

    def update_connection_style(self, node_id: str, color: Any = _UNSET, dashed: Any = _UNSET) -> None:
        """Edit the style of the connection into ``node_id``.

        Only the arguments given are changed. ``color=None`` and
        ``dashed=False`` (or None) remove the override.
        """
        node = self._nodes.get(node_id)
        if node is None:
            logger.debug("update_connection_style: unknown node %s", node_id)
            return

        changes: dict[str, Any] = {}
        if color is not _UNSET:
            changes["connection_color"] = color or None
        if dashed is not _UNSET:
            changes["connection_dashed"] = True if dashed else None
        style = replace(node.style or NodeStyle(), **changes)

        self.update_node(node_id, {"style": style})
        self.dirty.mark_map_dirty()

    def set_manual_offset(self, node_id: str, desired: Position, replay: bool = False) -> None:
        """Move a node so its final position is ``desired``.

        Every descendant is translated by the same delta, added to its existing
        offset, so the subtree keeps its shape.
        """
        node = self._nodes.get(node_id)
        if node is None:
            logger.debug("set_manual_offset: unknown node %s", node_id)
            return

        auto_pos = self._layout().get(node_id)
        delta = desired - get_final_position(auto_pos, node.manual_offset)
        descendant_ids = collect_descendants(self._nodes, node_id)

        old: dict[str, Position | None] = {node_id: node.manual_offset}
        new: dict[str, Position | None] = {node_id: calculate_offset(auto_pos or ORIGIN, desired)}
        for desc_id in descendant_ids:
            current = self._nodes[desc_id].manual_offset
            old[desc_id] = current
            new[desc_id] = (current or ORIGIN) + delta

        for target_id, offset in new.items():
            self._nodes[target_id] = replace(self._nodes[target_id], manual_offset=offset)

        self.dirty.mark_dirty(new)
        self.dirty.mark_map_dirty()
        self._touch()
        if not replay:
            cascade = OffsetCascade(old=old, new=new) if descendant_ids else None
            self.history.record(
                SetOffset(node_id=node_id, from_offset=old[node_id], to_offset=new[node_id], cascade=cascade)
            )

    def clear_manual_offset(self, node_id: str) -> None:
        """Drop the node's offset override. Not cascaded and not undoable."""
        node = self._nodes.get(node_id)
        if node is None:
            logger.debug("clear_manual_offset: unknown node %s", node_id)
            return
        self._nodes[node_id] = replace(node, manual_offset=None, updated_at=self._clock.now())
        self.dirty.mark_dirty([node_id])
        self.dirty.mark_map_dirty()
        self._touch()

    def create_child(self, parent_id: str, text: str = "New Node") -> Node | None:
        """Add a new last child under ``parent_id`` and start editing it.

        The child copies the parent's manual offset so it appears next to the
        parent's visual position. Returns the new node, or None if the parent
        does not exist.
        """
        parent = self._nodes.get(parent_id)
        if parent is None:
            logger.debug("create_child: unknown parent %s", parent_id)
            return None

        now = self._clock.now()
        node = Node(
            id=self._id_generator(),
            parent_id=parent.id,
            text=text,
            order=len(parent.children_ids),
            manual_offset=parent.manual_offset,
            map_id=parent.map_id,
            user_id=parent.user_id,
            created_at=now,
            updated_at=now,
        )
        self.add_node(node)
        self.start_edit(node.id)
        return node

    def create_sibling(self, node_id: str, text: str = "New Node") -> Node | None:
        """Add a new last sibling of ``node_id``. The root has no siblings."""
        node = self._nodes.get(node_id)
        if node is None or node.is_root:
            logger.debug("create_sibling: %s is unknown or the root", node_id)
            return None
        return self.create_child(node.parent_id, text)

    # ─── View ────────────────────────────────────────────────────────────────

    def update_view(self, **partial: float) -> None:
        view = replace(self._view, **partial)
        self._view = replace(view, scale=self.view_config.clamp(view.scale))

    def reset_view(self) -> None:
        self._view = DEFAULT_VIEW

    def zoom_in(self) -> None:
        self.update_view(scale=self._view.scale * self.view_config.zoom_step)

    def zoom_out(self) -> None:
        self.update_view(scale=self._view.scale / self.view_config.zoom_step)

    # ─── History ─────────────────────────────────────────────────────────────

    def undo(self) -> None:
        self.history.undo(self._apply)

    def redo(self) -> None:
        self.history.redo(self._apply)

    def _apply(self, command: Command) -> None:
        """Apply ``command`` forward without recording it."""
        if isinstance(command, AddNode):
            self._insert(command)
        elif isinstance(command, DeleteNode):
            self._remove(command.node.id)
        elif isinstance(command, UpdateNode):
            self.update_node(command.node_id, command.after, replay=True)
        elif isinstance(command, SetOffset):
            self._set_offsets(command.target_offsets())
        else:
            raise TypeError(f"Unknown history command: {command!r}")

    # ─── Dirty state ─────────────────────────────────────────────────────────

    @property
    def map_dirty(self) -> bool:
        return self.dirty.map_dirty()

    @property
    def has_pending_changes(self) -> bool:
        return self.dirty.has_pending_changes()

    def clear_dirty_state(self) -> None:
        self.dirty.clear()

    def get_dirty_nodes(self) -> list[Node]:
        """Nodes changed since the last save, ordered by id."""
        return [self._nodes[i] for i in sorted(self.dirty.dirty_node_ids()) if i in self._nodes]

    def get_deleted_node_ids(self) -> list[str]:
        return sorted(self.dirty.deleted_node_ids())

    # ─── Derived views ───────────────────────────────────────────────────────

    def nodes_array(self) -> list[Node]:
        return list(self._nodes.values())

    @property
    def root_node(self) -> Node | None:
        if self._root_id is None:
            return None
        return self._nodes.get(self._root_id)

    @property
    def selected_node(self) -> Node | None:
        if self._selected_id is None:
            return None
        return self._nodes.get(self._selected_id)

    def computed_layout(self) -> dict[str, Position]:
        """Auto position of every node reachable from the root."""
        return dict(self._layout())

    def node_positions(self) -> dict[str, Position]:
        """Final position (auto position plus manual offset) of every node."""
        return dict(self._positions())

    def get_node_position(self, node_id: str) -> Position:
        return self._positions().get(node_id, ORIGIN)

    def connections(self) -> list[Connection]:
        return list(self._memo("connections", lambda: compute_connections(self._nodes, self._positions(), self.config)))

    def get_child_nodes(self, node_id: str) -> list[Node]:
        return resolved_children(self._nodes, node_id)

    def get_descendant_ids(self, node_id: str) -> list[str]:
        return collect_descendants(self._nodes, node_id)

    # ─── Internals ───────────────────────────────────────────────────────────

    def _touch(self) -> None:
        self._version += 1

    def _memo(self, key: str, compute: Callable[[], T]) -> T:
        entry = self._cache.get(key)
        if entry is not None and entry[0] == self._version:
            return entry[1]
        value = compute()
        self._cache[key] = (self._version, value)
        return value

    def _layout(self) -> dict[str, Position]:
        return self._memo("layout", lambda: compute_layout(self._nodes, self._root_id, self.config))

    def _positions(self) -> dict[str, Position]:
        def compute() -> dict[str, Position]:
            layout = self._layout()
            return {
                node_id: get_final_position(layout.get(node_id), node.manual_offset)
                for node_id, node in self._nodes.items()
            }

        return self._memo("positions", compute)

    def _insert(self, command: AddNode) -> bool:
        """Insert the command's node (and restored descendants). True if applied."""
        node = command.node
        if node.id in self._nodes:
            logger.debug("add_node: %s already exists", node.id)
            return False

        if node.is_root:
            if self.root_node is not None:
                logger.debug("add_node: %s would be a second root", node.id)
                return False
            self._root_id = node.id
            if self._document is not None and self._document.root_id != node.id:
                self._document = replace(self._document, root_id=node.id)
        else:
            parent = self._nodes.get(node.parent_id)
            if parent is None:
                logger.debug("add_node: parent %s of %s does not exist", node.parent_id, node.id)
                return False
            children = list(parent.children_ids)
            if command.index is None or command.index > len(children):
                children.append(node.id)
            else:
                children.insert(command.index, node.id)
            self._nodes[parent.id] = replace(parent, children_ids=tuple(children))

        self._nodes[node.id] = node
        for descendant in command.descendants:
            self._nodes.setdefault(descendant.id, descendant)

        self._selected_id = node.id
        if self._editing_id != node.id:
            self._editing_id = None

        touched = [node.id, *(d.id for d in command.descendants)]
        if node.parent_id is not None:
            touched.append(node.parent_id)
        self.dirty.mark_dirty(touched)
        self.dirty.mark_map_dirty()
        self._touch()
        return True

    def _remove(self, node_id: str) -> DeleteNode | None:
        """Remove a non-root node and its subtree; return the command that did it."""
        node = self._nodes.get(node_id)
        if node is None:
            logger.debug("delete_node: unknown node %s", node_id)
            return None
        if node.is_root:
            logger.debug("delete_node: refusing to delete root %s", node_id)
            return None

        descendant_ids = collect_descendants(self._nodes, node_id)
        command = DeleteNode(
            node=node,
            parent_id=node.parent_id,
            index=None,
            descendants=tuple(self._nodes[d] for d in descendant_ids),
        )

        parent = self._nodes.get(node.parent_id)
        if parent is not None:
            children = list(parent.children_ids)
            if node_id in children:
                command = replace(command, index=children.index(node_id))
                children.remove(node_id)
            self._nodes[parent.id] = replace(parent, children_ids=tuple(children))

        for removed_id in (node_id, *descendant_ids):
            del self._nodes[removed_id]
            self.dirty.mark_deleted(removed_id)

        self._selected_id = node.parent_id
        self._editing_id = None
        if parent is not None:
            self.dirty.mark_dirty([parent.id])
        self.dirty.mark_map_dirty()
        self._touch()
        return command

    def _set_offsets(self, offsets: Mapping[str, Position | None]) -> None:
        """Set recorded offsets directly, skipping ids no longer present."""
        present = [node_id for node_id in offsets if node_id in self._nodes]
        for node_id in present:
            self._nodes[node_id] = replace(self._nodes[node_id], manual_offset=offsets[node_id])
        self.dirty.mark_dirty(present)
        self.dirty.mark_map_dirty()
        self._touch()
