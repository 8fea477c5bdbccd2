"""Undo/redo stacks."""

from __future__ import annotations

import logging
from collections.abc import Callable

from mindmap_core.history.commands import Command

logger = logging.getLogger(__name__)


class HistoryManager:
    """Two unbounded command stacks.

    ``past`` holds applied commands, most recent last. ``future`` holds undone
    commands, most recently undone last. Recording a new command clears
    ``future``.
    """

    def __init__(self) -> None:
        self._past: list[Command] = []
        self._future: list[Command] = []

    @property
    def past(self) -> tuple[Command, ...]:
        return tuple(self._past)

    @property
    def future(self) -> tuple[Command, ...]:
        return tuple(self._future)

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    def __len__(self) -> int:
        return len(self._past)

    def record(self, command: Command) -> None:
        self._past.append(command)
        self._future.clear()

    def clear(self) -> None:
        self._past.clear()
        self._future.clear()

    def undo(self, apply: Callable[[Command], None]) -> Command | None:
        """Apply the inverse of the last command. Returns it, or None if empty."""
        if not self._past:
            logger.debug("undo: nothing to undo")
            return None
        command = self._past.pop()
        apply(command.inverse())
        self._future.append(command)
        return command

    def redo(self, apply: Callable[[Command], None]) -> Command | None:
        """Re-apply the last undone command. Returns it, or None if empty."""
        if not self._future:
            logger.debug("redo: nothing to redo")
            return None
        command = self._future.pop()
        apply(command)
        self._past.append(command)
        return command
