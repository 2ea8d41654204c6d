from __future__ import annotations

import logging
from typing import List, Optional

from .models import Task
from .store import LOADED, REMOVED, StoreEvent, TaskStore


logger = logging.getLogger(__name__)


class OpenTabsController:
    """Editor tabs over the store: an ordered set of open ids plus one active id.

    Every open id is present in the store. Deleting a task, or a reload that
    no longer contains it, closes its tab.
    """

    def __init__(self, store: TaskStore) -> None:
        self.store = store
        self._open: List[str] = []
        self.active_id: Optional[str] = None
        self._unsubscribe = store.subscribe(self._on_store_event)

    @property
    def open_ids(self) -> List[str]:
        return list(self._open)

    def is_open(self, task_id: str) -> bool:
        return task_id in self._open

    def open(self, task_id: Optional[str]) -> bool:
        if task_id is None or task_id not in self.store:
            return False
        if task_id not in self._open:
            self._open.append(task_id)
        self.active_id = task_id
        return True

    def activate(self, task_id: str) -> bool:
        if task_id not in self._open:
            return False
        self.active_id = task_id
        return True

    def close(self, task_id: str) -> bool:
        if task_id not in self._open:
            return False
        index = self._open.index(task_id)
        self._open.pop(index)
        if self.active_id == task_id:
            if not self._open:
                self.active_id = None
            elif index > 0:
                self.active_id = self._open[index - 1]
            else:
                self.active_id = self._open[0]
        return True

    def close_all(self) -> None:
        self._open = []
        self.active_id = None

    def open_tasks(self) -> List[Task]:
        return [t for t in (self.store.get(i) for i in self._open) if t is not None]

    def active_task(self) -> Optional[Task]:
        return self.store.get(self.active_id)

    def detach(self) -> None:
        self._unsubscribe()

    def _on_store_event(self, event: StoreEvent) -> None:
        if event.kind == REMOVED and event.task_id is not None:
            self.close(event.task_id)
        elif event.kind == LOADED:
            for task_id in [i for i in self._open if i not in self.store]:
                logger.debug("Closing tab for %s after reload", task_id)
                self.close(task_id)
