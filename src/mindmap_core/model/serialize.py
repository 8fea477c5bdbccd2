"""JSON interchange for documents and nodes.

The interchange shape is ``{"document": {...}, "nodes": [...]}`` with
snake_case keys, ISO-8601 timestamps and lower-case enum values. Fields
that are None are left out when dumping and default back when loading.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from mindmap_core.model.node import Document, Node


class MindMapPayload(BaseModel):
    """A whole document with its nodes, as stored on disk."""

    document: Document
    nodes: list[Node] = []


_NODE = TypeAdapter(Node)
_DOCUMENT = TypeAdapter(Document)


def node_from_dict(data: dict[str, Any]) -> Node:
    """Build a Node from its interchange dict.

    Raises:
        ValueError: If ``id`` is missing or a field has the wrong type.
    """
    return _NODE.validate_python(data)


def node_to_dict(node: Node) -> dict[str, Any]:
    return _NODE.dump_python(node, mode="json", exclude_none=True)


def document_from_dict(data: dict[str, Any]) -> Document:
    return _DOCUMENT.validate_python(data)


def document_to_dict(document: Document) -> dict[str, Any]:
    return _DOCUMENT.dump_python(document, mode="json", exclude_none=True)


def load_json(text: str) -> tuple[Document, list[Node]]:
    """Parse an interchange JSON string.

    Raises:
        ValueError: If the text is not valid JSON or lacks required keys.
    """
    try:
        payload = MindMapPayload.model_validate_json(text)
    except ValidationError as e:
        raise ValueError(f"Malformed document: {e.error_count()} error(s), first: {e.errors()[0]['msg']}") from e
    return payload.document, payload.nodes


def dump_json(document: Document, nodes: list[Node]) -> str:
    return MindMapPayload(document=document, nodes=nodes).model_dump_json(indent=2, exclude_none=True)
