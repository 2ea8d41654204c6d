"""Task repository backed by the TaskFlow REST API.

Translates between ``Task`` objects and the backend's JSON contract:

  GET    /tasks          -> list envelope (see ``taskflow.envelope``)
  GET    /tasks/{id}     -> {"data": Task}
  POST   /tasks          -> {"data": Task}
  PUT    /tasks/{id}     -> {"data": Task}
  DELETE /tasks/{id}     -> 2xx on success

Nothing here raises on HTTP or network failures; results carry ``ok`` and a
user-facing ``error`` instead.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .envelope import EnvelopeShape, classify, unwrap_item
from .gateway import GatewayResponse, TaskflowGateway
from .models import Task, enum_value, to_iso_date, wire_id
from .results import OperationResult, describe_failure


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    ok: bool
    tasks: List[Task] = field(default_factory=list)
    error: Optional[str] = None
    shape: EnvelopeShape = EnvelopeShape.UNRECOGNIZED
    skipped: int = 0


def create_payload(task: Task) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "title": task.title,
        "dueDate": to_iso_date(task.due_date),
        "priority": enum_value(task.priority),
        "status": enum_value(task.status),
        "completed": task.completed,
    }
    if task.description:
        payload["description"] = task.description
    if task.category_id is not None:
        payload["categoryId"] = wire_id(task.category_id)
    if task.story_points is not None:
        payload["storyPoints"] = task.story_points
    if task.labels:
        payload["labels"] = list(task.labels)
    return payload


def update_payload(task: Task) -> Dict[str, Any]:
    return {
        "title": task.title,
        "description": task.description,
        "dueDate": to_iso_date(task.due_date),
        "priority": enum_value(task.priority),
        "completed": task.completed,
        "categoryId": wire_id(task.category_id),
        "status": enum_value(task.status),
        "storyPoints": task.story_points,
        "labels": list(task.labels),
        "dependencies": [wire_id(d) for d in task.dependencies],
    }


def _entity(response: GatewayResponse) -> Optional[Task]:
    item = unwrap_item(response.data)
    if item is None:
        return None
    try:
        return Task.from_dict(item)
    except (TypeError, ValueError, AttributeError):
        logger.warning("Could not read the task entity in the response", exc_info=True)
        return None


class TaskRepository:
    def __init__(self, gateway: TaskflowGateway) -> None:
        self.gateway = gateway

    def get_all_tasks(self) -> FetchResult:
        response = self.gateway.get("/tasks")
        if not response.ok:
            return FetchResult(ok=False, error=describe_failure("load tasks", response))

        shape, items = classify(response.data)
        if shape is EnvelopeShape.UNRECOGNIZED:
            logger.warning("GET /tasks returned an unrecognised envelope; treating as empty")

        tasks: List[Task] = []
        skipped = 0
        for item in items:
            if not isinstance(item, dict):
                skipped += 1
                continue
            try:
                tasks.append(Task.from_dict(item))
            except (TypeError, ValueError, AttributeError):
                logger.warning("Could not read task entry %r", item.get("id"), exc_info=True)
                skipped += 1
        if skipped:
            logger.warning("Skipped %d malformed entries in GET /tasks", skipped)
        return FetchResult(ok=True, tasks=tasks, shape=shape, skipped=skipped)

    def get_task(self, task_id: str) -> OperationResult:
        response = self.gateway.get(f"/tasks/{task_id}")
        if not response.ok:
            return OperationResult.failure(describe_failure("load task", response), status_code=response.status_code)
        task = _entity(response)
        if task is None:
            return OperationResult.failure("Task not found.", status_code=response.status_code)
        return OperationResult.success(task, status_code=response.status_code)

    def create_task(self, task: Task) -> OperationResult:
        response = self.gateway.post("/tasks", json_body=create_payload(task))
        if not response.ok:
            return OperationResult.failure(describe_failure("create task", response), status_code=response.status_code)
        created = _entity(response)
        if created is None or created.id is None:
            logger.warning("POST /tasks succeeded without returning the created entity")
            return OperationResult.failure(
                "Failed to create task. Please try again.", status_code=response.status_code
            )
        return OperationResult.success(created, status_code=response.status_code)

    def update_task(self, task: Task) -> OperationResult:
        if task.id is None:
            return OperationResult.failure("Cannot update a task that has not been saved.")
        response = self.gateway.put(f"/tasks/{task.id}", json_body=update_payload(task))
        if not response.ok:
            return OperationResult.failure(describe_failure("update task", response), status_code=response.status_code)
        # Some deployments answer 204; the submitted task is then the best we know.
        return OperationResult.success(_entity(response) or task, status_code=response.status_code)

    def delete_task(self, task_id: str) -> OperationResult:
        response = self.gateway.delete(f"/tasks/{task_id}")
        if not response.ok:
            return OperationResult.failure(describe_failure("delete task", response), status_code=response.status_code)
        return OperationResult.success(status_code=response.status_code)
