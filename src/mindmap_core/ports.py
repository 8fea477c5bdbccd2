"""Interfaces to external collaborators: persistence, id generation, clock."""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Protocol

from mindmap_core.errors import PersistenceError
from mindmap_core.model.node import Document, Node


class PersistencePort(Protocol):
    """Protocol that storage backends must implement."""

    def load(self, map_id: str) -> tuple[Document, list[Node]]:
        """Return the document and all of its nodes."""
        ...

    def save_nodes(self, nodes: list[Node]) -> None: ...

    def delete_nodes(self, ids: list[str]) -> None: ...

    def update_document_meta(self, map_id: str, patch: dict[str, Any]) -> None: ...


class IdGenerator(Protocol):
    def __call__(self, prefix: str = "node") -> str: ...


class Clock(Protocol):
    def now(self) -> datetime: ...


def generate_id(prefix: str = "node") -> str:
    """Collision-resistant id such as ``node_3f2a...``."""
    return f"{prefix}_{uuid.uuid4().hex}"


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class MemoryBackend:
    """In-memory PersistencePort keeping one document per map id."""

    def __init__(self, documents: Iterable[tuple[Document, list[Node]]] = ()) -> None:
        self.documents: dict[str, Document] = {}
        self.nodes: dict[str, dict[str, Node]] = {}
        for document, nodes in documents:
            self.add(document, nodes)

    def add(self, document: Document, nodes: Iterable[Node]) -> None:
        self.documents[document.id] = document
        self.nodes[document.id] = {node.id: node for node in nodes}

    def load(self, map_id: str) -> tuple[Document, list[Node]]:
        if map_id not in self.documents:
            raise PersistenceError(f"Unknown document '{map_id}'")
        return self.documents[map_id], list(self.nodes[map_id].values())

    def save_nodes(self, nodes: list[Node]) -> None:
        for node in nodes:
            if node.map_id not in self.nodes:
                raise PersistenceError(f"Node '{node.id}' belongs to unknown document '{node.map_id}'")
            self.nodes[node.map_id][node.id] = node

    def delete_nodes(self, ids: list[str]) -> None:
        targets = set(ids)
        for stored in self.nodes.values():
            for node_id in targets & stored.keys():
                del stored[node_id]

    def update_document_meta(self, map_id: str, patch: dict[str, Any]) -> None:
        if map_id not in self.documents:
            raise PersistenceError(f"Unknown document '{map_id}'")
        self.documents[map_id] = replace(self.documents[map_id], **patch)
