from datetime import date

from conftest import make_task
from taskflow.models import TaskPriority, TaskStatus
from taskflow.protocol import DUE_DATE_REQUIRED, TITLE_REQUIRED, TaskForm, reconcile_completion


def test_create_requires_title_and_due_date(editor, backend):
    result = editor.create(TaskForm(title="  "))
    assert not result.ok
    assert result.field_errors == {"title": TITLE_REQUIRED, "due_date": DUE_DATE_REQUIRED}
    assert not [c for c in backend.calls if c[0] == "create"]


def test_create_upserts_server_entity(editor, store, backend):
    result = editor.create(TaskForm(title="Write docs", due_date=date(2024, 6, 1)))
    assert result.ok
    created = result.task
    assert created.id is not None
    assert created.created_at is not None
    assert created.status is TaskStatus.TODO
    assert created.completed is False
    assert store.get(created.id) == created
    assert store.ids()[-1] == created.id


def test_create_keeps_client_fields_the_server_drops(editor, backend):
    backend.echo_client_fields = False
    result = editor.create(TaskForm(title="Labelled", due_date=date(2024, 6, 1), labels=["ui"], story_points=5))
    assert result.task.labels == ["ui"]
    assert result.task.story_points == 5


def test_create_failure_leaves_store_unchanged(editor, store, backend):
    before = store.get_all()
    backend.fail_with = "Failed to create task. Please try again."
    result = editor.create(TaskForm(title="Nope", due_date=date(2024, 6, 1)))
    assert not result.ok
    assert result.error == "Failed to create task. Please try again."
    assert store.get_all() == before


def test_update_replaces_entry(editor, store):
    result = editor.update("A", {"priority": "HIGH"})
    assert result.ok
    assert store.get("A").priority is TaskPriority.HIGH
    assert store.get("A").updated_at is not None
    assert store.ids() == ["A", "B", "C", "D"]


def test_update_failure_leaves_store_unchanged(editor, store, backend):
    before = store.get("A")
    backend.fail_with = "boom"
    result = editor.update("A", {"title": "Changed"})
    assert not result.ok
    assert store.get("A") == before


def test_update_validates_before_sending(editor, backend):
    result = editor.update("A", {"title": ""})
    assert result.field_errors == {"title": TITLE_REQUIRED}
    assert not [c for c in backend.calls if c[0] == "update"]


def test_status_edits_on_task_without_due_date(editor, store, backend):
    store.upsert(make_task("U"))
    backend.tasks["U"] = store.get("U")
    assert editor.set_status("U", TaskStatus.IN_PROGRESS).ok
    assert store.get("U").status is TaskStatus.IN_PROGRESS
    assert editor.toggle_completed("U").ok
    assert store.get("U").status is TaskStatus.DONE
    assert editor.update("U", {"priority": "LOW"}).ok
    assert store.get("U").due_date is None


def test_update_unknown_task(editor):
    assert not editor.update("missing", {"title": "x"}).ok


def test_status_change_drives_completed(editor, store):
    editor.set_status("A", "DONE")
    assert store.get("A").status is TaskStatus.DONE
    assert store.get("A").completed is True
    editor.set_status("A", TaskStatus.REVIEW)
    assert store.get("A").completed is False


def test_toggle_completed_moves_status(editor, store):
    editor.toggle_completed("B")
    assert store.get("B").status is TaskStatus.DONE
    editor.toggle_completed("B")
    assert store.get("B").status is TaskStatus.TODO
    assert store.get("B").completed is False


def test_reconcile_completion_status_wins(sample_tasks):
    task = sample_tasks[1].with_changes(completed=True, status=TaskStatus.TODO)
    assert reconcile_completion(sample_tasks[1], task).completed is False


def test_update_with_form(editor, store):
    form = TaskForm.from_task(store.get("C"))
    form.title = "Reviewed"
    assert editor.update("C", form).ok
    assert store.get("C").title == "Reviewed"
    assert store.get("C").status is TaskStatus.REVIEW


def test_delete_removes_after_confirmation(editor, store, tabs):
    tabs.open("A")
    tabs.open("B")
    assert editor.delete("B").ok
    assert "B" not in store
    assert tabs.open_ids == ["A"]
    assert tabs.active_id == "A"


def test_delete_failure_keeps_task_and_tab(editor, store, tabs, backend):
    tabs.open("B")
    backend.fail_with = "boom"
    assert not editor.delete("B").ok
    assert "B" in store
    assert tabs.active_id == "B"


def test_in_flight_guard_rejects_reentrant_save(editor, backend):
    nested = []
    real_update = backend.update_task

    def reentrant(task):
        nested.append(editor.update(task.id, {"title": "second"}))
        return real_update(task)

    backend.update_task = reentrant
    assert editor.update("A", {"title": "first"}).ok
    assert not nested[0].ok
    assert not editor.is_pending("A")


def test_refresh_replaces_from_server(editor, store, backend):
    backend.tasks["A"] = backend.tasks["A"].with_changes(title="Server title")
    assert editor.refresh("A").ok
    assert store.get("A").title == "Server title"


def test_create_update_delete_end_to_end(editor, store, tabs):
    created = editor.create(TaskForm(title="E2E", due_date=date(2024, 7, 1))).task
    tabs.open(created.id)
    assert tabs.active_task().title == "E2E"

    before = store.get(created.id)
    assert editor.update(created.id, {"priority": TaskPriority.HIGH}).ok
    after = tabs.active_task()
    assert after.priority is TaskPriority.HIGH
    assert after.updated_at != before.updated_at
    assert after.with_changes(priority=before.priority, updated_at=before.updated_at) == before

    assert editor.delete(created.id).ok
    assert created.id not in store
    assert created.id not in tabs.open_ids
    assert tabs.active_id is None
