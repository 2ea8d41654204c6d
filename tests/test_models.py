from datetime import date, datetime

from taskflow.models import Category, Task, TaskPriority, TaskStatus, parse_date, parse_status


def test_from_dict_truncates_due_timestamp():
    task = Task.from_dict({"id": 7, "title": "Ship", "dueDate": "2024-05-10T23:30:00"})
    assert task.id == "7"
    assert task.due_date == date(2024, 5, 10)


def test_from_dict_reads_nested_user_and_category():
    task = Task.from_dict(
        {
            "id": 1,
            "title": "Nested",
            "user": {"id": 3, "email": "a@b.c"},
            "category": {"id": 9, "name": "Work"},
        }
    )
    assert task.user_id == "3"
    assert task.category_id == "9"


def test_flat_ids_win_over_nested():
    task = Task.from_dict({"id": 1, "title": "x", "categoryId": 4, "category": {"id": 9}})
    assert task.category_id == "4"


def test_unknown_status_is_kept_verbatim():
    task = Task.from_dict({"id": 1, "title": "x", "status": "BLOCKED"})
    assert task.status == "BLOCKED"
    assert not task.has_known_status


def test_defaults_for_missing_fields():
    task = Task.from_dict({"id": "abc", "title": "x"})
    assert task.status is TaskStatus.TODO
    assert task.priority is TaskPriority.MEDIUM
    assert task.completed is False
    assert task.labels == []
    assert task.due_date is None


def test_invalid_date_becomes_none():
    assert parse_date("not-a-date") is None
    assert parse_date("") is None
    assert parse_date([2024, 5, 3]) == date(2024, 5, 3)


def test_parse_status_is_case_insensitive():
    assert parse_status("in_progress") is TaskStatus.IN_PROGRESS
    assert parse_status(None) is TaskStatus.TODO


def test_to_dict_uses_wire_names():
    task = Task(
        id="12",
        title="Wire",
        due_date=date(2024, 6, 1),
        status=TaskStatus.REVIEW,
        category_id="5",
        story_points=3,
        created_at=datetime(2024, 5, 1, 8, 0),
    )
    data = task.to_dict()
    assert data["id"] == 12
    assert data["dueDate"] == "2024-06-01"
    assert data["status"] == "REVIEW"
    assert data["categoryId"] == 5
    assert data["storyPoints"] == 3
    assert data["createdAt"] == "2024-05-01T08:00:00"


def test_activity_and_extended_fields():
    task = Task.from_dict(
        {
            "id": 2,
            "title": "x",
            "storyPoints": "5",
            "labels": ["ui", {"name": "backend"}],
            "dependencies": [1, "3"],
            "acceptanceCriteria": ["works"],
            "activity": [{"user": "sam", "date": "2024-05-02T10:00:00Z", "comment": "started"}],
        }
    )
    assert task.story_points == 5
    assert task.labels == ["ui", "backend"]
    assert task.dependencies == ["1", "3"]
    assert task.acceptance_criteria == ["works"]
    assert task.activity[0].user == "sam"
    assert task.activity[0].date is not None


def test_non_list_collections_become_empty():
    task = Task.from_dict(
        {"id": 7, "title": "x", "labels": 5, "dependencies": 3, "acceptanceCriteria": True, "activity": "today"}
    )
    assert task.labels == []
    assert task.dependencies == []
    assert task.acceptance_criteria == []
    assert task.activity == []


def test_category_from_dict():
    category = Category.from_dict({"id": 2, "name": "Home", "color": "#ff0000"})
    assert category.id == "2"
    assert category.to_dict()["id"] == 2
