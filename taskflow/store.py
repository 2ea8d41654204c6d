"""In-memory task store: the single source of truth every view reads from.

Entries are keyed by task id and kept in load/insertion order. Views never
hold copies of tasks; they call ``get_all()`` and derive what they need.
Interested parties (the open-tabs controller, mainly) ``subscribe`` to be
told when entries are loaded, replaced or removed.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .models import Task
from .results import OperationResult


logger = logging.getLogger(__name__)

LOADED = "loaded"
UPSERTED = "upserted"
REMOVED = "removed"


@dataclass(frozen=True)
class StoreEvent:
    kind: str
    task_id: Optional[str] = None


Listener = Callable[[StoreEvent], None]


class TaskStore:
    def __init__(self, source: Optional[Any] = None) -> None:
        self._source = source
        self._tasks: Dict[str, Task] = {}
        self._listeners: List[Listener] = []
        self.loading = False
        self.loaded = False
        self.error: Optional[str] = None

    # -------------------- subscription --------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: StoreEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:  # noqa: BLE001
                logger.exception("Store listener failed on %s", event)

    # -------------------- loading --------------------
    def load(self) -> OperationResult:
        """Replace the contents with a fresh fetch.

        On failure the previous contents stay in place and ``error`` is set.
        """
        if self._source is None:
            self.error = "No task source configured."
            return OperationResult.failure(self.error)

        self.loading = True
        try:
            result = self._source.get_all_tasks()
        finally:
            self.loading = False

        if not result.ok:
            self.error = result.error or "Failed to load tasks."
            logger.warning("Task load failed: %s", self.error)
            return OperationResult.failure(self.error)

        self.replace_all(result.tasks)
        return OperationResult.success()

    def replace_all(self, tasks: List[Task]) -> None:
        fresh: Dict[str, Task] = {}
        for task in tasks:
            if task.id is None:
                logger.warning("Skipping task without id: %r", task.title)
                continue
            # Duplicates keep the first position and the last value.
            fresh[task.id] = task
        self._tasks = fresh
        self.error = None
        self.loaded = True
        self._notify(StoreEvent(LOADED))

    # -------------------- mutation --------------------
    def upsert(self, task: Task) -> bool:
        """Insert or replace in place. Returns False when nothing changed."""
        if task.id is None:
            raise ValueError("cannot upsert a task without an id")
        current = self._tasks.get(task.id)
        if current is not None and current == task:
            return False
        self._tasks[task.id] = task
        self._notify(StoreEvent(UPSERTED, task.id))
        return True

    def remove(self, task_id: str) -> bool:
        if task_id not in self._tasks:
            return False
        del self._tasks[task_id]
        self._notify(StoreEvent(REMOVED, task_id))
        return True

    # -------------------- queries --------------------
    def get_all(self) -> List[Task]:
        return list(self._tasks.values())

    def get(self, task_id: Optional[str]) -> Optional[Task]:
        if task_id is None:
            return None
        return self._tasks.get(task_id)

    def ids(self) -> List[str]:
        return list(self._tasks.keys())

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)
