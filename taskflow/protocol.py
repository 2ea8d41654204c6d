"""Create/edit/delete against the backend, then merge into the store.

The store is only touched after the server has confirmed a write, so a
failed call never leaves a half-applied edit behind. Validation happens
before any request is sent.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Set, Union

from .models import (
    PriorityValue,
    StatusValue,
    Task,
    TaskPriority,
    TaskStatus,
    normalize_id,
    parse_date,
    parse_priority,
    parse_status,
)
from .results import OperationResult
from .store import TaskStore
from .tasks_repo import TaskRepository


logger = logging.getLogger(__name__)

TITLE_REQUIRED = "Task title is required"
DUE_DATE_REQUIRED = "Due date is required"

_CREATE_KEY = "<new>"
_TASK_FIELDS = {f.name for f in fields(Task)}
# Fields the backend may not echo back; the client keeps its own values.
_CLIENT_FIELDS = ("story_points", "assignee", "labels", "dependencies", "acceptance_criteria", "activity")


@dataclass
class TaskForm:
    title: str = ""
    description: str = ""
    due_date: Optional[date] = None
    priority: PriorityValue = TaskPriority.MEDIUM
    status: StatusValue = TaskStatus.TODO
    category_id: Optional[str] = None
    story_points: Optional[int] = None
    labels: List[str] = field(default_factory=list)

    @classmethod
    def from_task(cls, task: Task) -> "TaskForm":
        return cls(
            title=task.title,
            description=task.description or "",
            due_date=task.due_date,
            priority=task.priority,
            status=task.status,
            category_id=task.category_id,
            story_points=task.story_points,
            labels=list(task.labels),
        )

    def validate(self, require_due_date: bool = True) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        if not (self.title or "").strip():
            errors["title"] = TITLE_REQUIRED
        if require_due_date and self.due_date is None:
            errors["due_date"] = DUE_DATE_REQUIRED
        return errors

    def apply_to(self, task: Task) -> Task:
        return task.with_changes(
            title=self.title.strip(),
            description=self.description or None,
            due_date=self.due_date,
            priority=parse_priority(self.priority),
            status=parse_status(self.status),
            category_id=normalize_id(self.category_id),
            story_points=self.story_points,
            labels=list(self.labels),
        )

    def to_task(self) -> Task:
        return self.apply_to(Task(title=self.title))


def reconcile_completion(before: Optional[Task], after: Task) -> Task:
    """Keep ``completed`` and ``status`` in agreement; status wins.

    A change to ``completed`` alone moves the status to DONE, or from DONE
    back to TODO.
    """
    if before is not None and after.status == before.status and after.completed != before.completed:
        if after.completed:
            return after.with_changes(status=TaskStatus.DONE)
        if before.status == TaskStatus.DONE:
            return after.with_changes(status=TaskStatus.TODO)
        return after
    return after.with_changes(completed=after.status == TaskStatus.DONE)


def carry_client_fields(server: Task, submitted: Task) -> Task:
    changes: Dict[str, Any] = {}
    for name in _CLIENT_FIELDS:
        if not getattr(server, name) and getattr(submitted, name):
            changes[name] = getattr(submitted, name)
    return server.with_changes(**changes) if changes else server


def _coerce_changes(changes: Mapping[str, Any]) -> Dict[str, Any]:
    unknown = set(changes) - _TASK_FIELDS
    if unknown or "id" in changes:
        raise ValueError(f"unsupported task fields: {sorted(unknown | ({'id'} & set(changes)))}")
    coerced = dict(changes)
    if "status" in coerced:
        coerced["status"] = parse_status(coerced["status"])
    if "priority" in coerced:
        coerced["priority"] = parse_priority(coerced["priority"])
    if "due_date" in coerced:
        coerced["due_date"] = parse_date(coerced["due_date"])
    if "category_id" in coerced:
        coerced["category_id"] = normalize_id(coerced["category_id"])
    return coerced


class TaskEditor:
    def __init__(self, store: TaskStore, repository: TaskRepository) -> None:
        self.store = store
        self.repository = repository
        self._in_flight: Set[str] = set()

    def is_pending(self, task_id: Optional[str] = None) -> bool:
        return (task_id or _CREATE_KEY) in self._in_flight

    def _begin(self, key: str) -> bool:
        if key in self._in_flight:
            return False
        self._in_flight.add(key)
        return True

    # -------------------- create --------------------
    def create(self, form: TaskForm) -> OperationResult:
        errors = form.validate()
        if errors:
            return OperationResult.invalid(errors)
        if not self._begin(_CREATE_KEY):
            return OperationResult.failure("A task is already being created.")
        try:
            draft = reconcile_completion(None, form.to_task())
            result = self.repository.create_task(draft)
        finally:
            self._in_flight.discard(_CREATE_KEY)

        if not result.ok or result.task is None:
            return result
        created = carry_client_fields(result.task, draft)
        self.store.upsert(created)
        logger.info("Created task %s", created.id)
        return OperationResult.success(created, status_code=result.status_code)

    # -------------------- update --------------------
    def update(self, task_id: str, changes: Union[Mapping[str, Any], Task, TaskForm]) -> OperationResult:
        current = self.store.get(task_id)
        if current is None:
            return OperationResult.failure("Task not found.")

        if isinstance(changes, Task):
            proposed = changes.with_changes(id=task_id)
        elif isinstance(changes, TaskForm):
            proposed = changes.apply_to(current)
        else:
            proposed = current.with_changes(**_coerce_changes(changes))
        proposed = reconcile_completion(current, proposed)

        # Tasks may already exist without a due date; only creation demands one.
        errors = TaskForm.from_task(proposed).validate(require_due_date=False)
        if errors:
            return OperationResult.invalid(errors)
        if not self._begin(task_id):
            return OperationResult.failure("This task is already being saved.")
        try:
            result = self.repository.update_task(proposed)
        finally:
            self._in_flight.discard(task_id)

        if not result.ok or result.task is None:
            return result
        saved = carry_client_fields(result.task, proposed)
        if saved.id is None:
            saved = saved.with_changes(id=task_id)
        self.store.upsert(saved)
        return OperationResult.success(saved, status_code=result.status_code)

    def set_status(self, task_id: str, status: StatusValue) -> OperationResult:
        return self.update(task_id, {"status": status})

    def toggle_completed(self, task_id: str) -> OperationResult:
        current = self.store.get(task_id)
        if current is None:
            return OperationResult.failure("Task not found.")
        return self.update(task_id, {"completed": not current.completed})

    # -------------------- delete --------------------
    def delete(self, task_id: str) -> OperationResult:
        if task_id not in self.store:
            return OperationResult.failure("Task not found.")
        if not self._begin(task_id):
            return OperationResult.failure("This task is already being saved.")
        try:
            result = self.repository.delete_task(task_id)
        finally:
            self._in_flight.discard(task_id)

        if result.ok:
            self.store.remove(task_id)
            logger.info("Deleted task %s", task_id)
        return result

    # -------------------- refresh --------------------
    def refresh(self, task_id: str) -> OperationResult:
        """Re-fetch one task and replace its store entry."""
        result = self.repository.get_task(task_id)
        if result.ok and result.task is not None:
            current = self.store.get(task_id)
            task = carry_client_fields(result.task, current) if current is not None else result.task
            self.store.upsert(task.with_changes(id=task.id or task_id))
        return result
