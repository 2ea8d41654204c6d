from datetime import date, datetime
from typing import Dict, List, Optional

import pytest

from taskflow.models import Task, TaskPriority, TaskStatus
from taskflow.protocol import TaskEditor
from taskflow.results import OperationResult
from taskflow.store import TaskStore
from taskflow.tabs import OpenTabsController
from taskflow.tasks_repo import FetchResult


class FakeBackend:
    """In-memory stand-in for ``TaskRepository``."""

    def __init__(self, tasks: Optional[List[Task]] = None) -> None:
        self.tasks: Dict[str, Task] = {t.id: t for t in (tasks or [])}
        self.calls: List[tuple] = []
        self.fail_with: Optional[str] = None
        self.echo_client_fields = True
        self._next_id = 100

    def _fail(self) -> Optional[OperationResult]:
        if self.fail_with:
            return OperationResult.failure(self.fail_with, status_code=500)
        return None

    def get_all_tasks(self) -> FetchResult:
        self.calls.append(("get_all",))
        if self.fail_with:
            return FetchResult(ok=False, error=self.fail_with)
        return FetchResult(ok=True, tasks=list(self.tasks.values()))

    def get_task(self, task_id: str) -> OperationResult:
        self.calls.append(("get", task_id))
        failed = self._fail()
        if failed:
            return failed
        task = self.tasks.get(task_id)
        if task is None:
            return OperationResult.failure("Task not found.", status_code=404)
        return OperationResult.success(task)

    def create_task(self, task: Task) -> OperationResult:
        self.calls.append(("create", task))
        failed = self._fail()
        if failed:
            return failed
        self._next_id += 1
        stamp = datetime(2024, 5, 15, 9, 0)
        created = task.with_changes(id=str(self._next_id), created_at=stamp, updated_at=stamp)
        if not self.echo_client_fields:
            created = created.with_changes(labels=[], story_points=None)
        self.tasks[created.id] = created
        return OperationResult.success(created, status_code=201)

    def update_task(self, task: Task) -> OperationResult:
        self.calls.append(("update", task))
        failed = self._fail()
        if failed:
            return failed
        saved = task.with_changes(updated_at=datetime(2024, 5, 15, 12, 0))
        if not self.echo_client_fields:
            saved = saved.with_changes(labels=[], dependencies=[], story_points=None, assignee=None)
        self.tasks[task.id] = saved
        return OperationResult.success(saved)

    def delete_task(self, task_id: str) -> OperationResult:
        self.calls.append(("delete", task_id))
        failed = self._fail()
        if failed:
            return failed
        self.tasks.pop(task_id, None)
        return OperationResult.success(status_code=204)


def make_task(task_id, title=None, due=None, status=TaskStatus.TODO, **kwargs) -> Task:
    return Task(
        id=None if task_id is None else str(task_id),
        title=title or f"Task {task_id}",
        due_date=due,
        status=status,
        priority=kwargs.pop("priority", TaskPriority.MEDIUM),
        completed=kwargs.pop("completed", status == TaskStatus.DONE),
        **kwargs,
    )


@pytest.fixture
def today():
    # A Wednesday; the week starts on Sunday 2024-05-12.
    return date(2024, 5, 15)


@pytest.fixture
def sample_tasks():
    return [
        make_task("A", due=date(2024, 5, 1), status=TaskStatus.TODO),
        make_task("B", due=date(2024, 5, 10), status=TaskStatus.IN_PROGRESS),
        make_task("C", due=date(2024, 4, 20), status=TaskStatus.REVIEW),
        make_task("D", due=date(2024, 5, 20), status=TaskStatus.DONE),
    ]


@pytest.fixture
def backend(sample_tasks):
    return FakeBackend(sample_tasks)


@pytest.fixture
def store(backend):
    s = TaskStore(backend)
    s.load()
    return s


@pytest.fixture
def tabs(store):
    return OpenTabsController(store)


@pytest.fixture
def editor(store, backend):
    return TaskEditor(store, backend)
