"""Debounced persistence of a store's dirty state.

The saver never runs on its own thread. ``trigger()`` pushes a deadline
forward; the host's event loop calls ``poll()`` and the flush runs once the
deadline has passed. Dirty state is cleared only after every write of a
flush has returned; a failed flush keeps it for the next attempt.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from mindmap_core.config import AUTOSAVE_DEBOUNCE
from mindmap_core.errors import PersistenceError
from mindmap_core.ports import Clock, PersistencePort, SystemClock
from mindmap_core.store import DocumentStore

logger = logging.getLogger(__name__)


class AutoSaver:
    def __init__(
        self,
        store: DocumentStore,
        backend: PersistencePort,
        clock: Clock | None = None,
        debounce: float = AUTOSAVE_DEBOUNCE,
    ) -> None:
        self.store = store
        self.backend = backend
        self.clock: Clock = clock or SystemClock()
        self.debounce = timedelta(seconds=debounce)
        self.enabled = False
        self._deadline: datetime | None = None

    @property
    def pending(self) -> bool:
        """True while a debounced save is scheduled."""
        return self._deadline is not None

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False
        self._deadline = None

    def trigger(self) -> None:
        """Schedule a save ``debounce`` seconds from now, replacing any earlier one."""
        if not self.enabled:
            return
        self._deadline = self.clock.now() + self.debounce

    def poll(self) -> bool:
        """Flush if the scheduled deadline has passed. Returns True if a save ran and succeeded."""
        if self._deadline is None or self.clock.now() < self._deadline:
            return False
        self._deadline = None
        return self.flush()

    def save_now(self) -> bool:
        """Cancel any scheduled save and flush immediately."""
        self._deadline = None
        return self.flush()

    def flush(self) -> bool:
        """Write pending changes to the backend.

        Returns True if nothing was pending or every write succeeded, False if
        the backend raised PersistenceError (dirty state is then kept).
        """
        document = self.store.document
        if document is None or not self.store.has_pending_changes:
            return True

        dirty_nodes = self.store.get_dirty_nodes()
        deleted_ids = self.store.get_deleted_node_ids()
        logger.info("auto-saving %s: %d nodes, %d deletions", document.id, len(dirty_nodes), len(deleted_ids))

        try:
            if dirty_nodes:
                self.backend.save_nodes(dirty_nodes)
            if deleted_ids:
                self.backend.delete_nodes(deleted_ids)
            self.backend.update_document_meta(document.id, {"updated_at": self.clock.now()})
        except PersistenceError:
            logger.exception("auto-save of %s failed; changes kept for retry", document.id)
            return False

        self.store.clear_dirty_state()
        logger.info("auto-save of %s complete", document.id)
        return True
