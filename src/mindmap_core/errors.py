"""Exceptions raised by mindmap-core."""

from __future__ import annotations


class TreeInvariantError(ValueError):
    """The node mapping no longer describes a single acyclic tree."""


class PersistenceError(Exception):
    """A persistence backend failed to complete a write or read."""
