"""Task and category entities as the client sees them.

Wire payloads use camelCase keys (``dueDate``, ``categoryId``); the Python
attributes are snake_case. ``from_dict`` accepts either spelling and
``to_dict`` always emits the wire form.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union


logger = logging.getLogger(__name__)


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    REVIEW = "REVIEW"
    DONE = "DONE"


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


STATUS_ORDER: List[TaskStatus] = [
    TaskStatus.TODO,
    TaskStatus.IN_PROGRESS,
    TaskStatus.REVIEW,
    TaskStatus.DONE,
]
STATUS_LABELS: Dict[str, str] = {
    TaskStatus.TODO.value: "To Do",
    TaskStatus.IN_PROGRESS.value: "In Progress",
    TaskStatus.REVIEW.value: "Review",
    TaskStatus.DONE.value: "Done",
}
PRIORITY_ORDER: List[TaskPriority] = [TaskPriority.LOW, TaskPriority.MEDIUM, TaskPriority.HIGH]
STORY_POINT_CHOICES: List[int] = [1, 2, 3, 5, 8, 13]

# A status the server sent that this client does not know is kept verbatim.
StatusValue = Union[TaskStatus, str]
PriorityValue = Union[TaskPriority, str]


def parse_status(value: Any, default: TaskStatus = TaskStatus.TODO) -> StatusValue:
    if value is None or value == "":
        return default
    if isinstance(value, TaskStatus):
        return value
    raw = str(value).strip()
    try:
        return TaskStatus(raw.upper())
    except ValueError:
        logger.debug("Keeping unrecognised task status %r", raw)
        return raw


def parse_priority(value: Any, default: TaskPriority = TaskPriority.MEDIUM) -> PriorityValue:
    if value is None or value == "":
        return default
    if isinstance(value, TaskPriority):
        return value
    raw = str(value).strip()
    try:
        return TaskPriority(raw.upper())
    except ValueError:
        return raw


def enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def normalize_id(value: Any) -> Optional[str]:
    """Ids are opaque; keep them as strings so 7 and "7" key the same entry."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def wire_id(value: Optional[str]) -> Any:
    """Numeric ids go back to the server as numbers."""
    if value is None:
        return None
    return int(value) if value.isdigit() else value


def parse_date(value: Any) -> Optional[date]:
    """Truncate a wire date or timestamp to its calendar date; None when invalid."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (list, tuple)) and len(value) >= 3:
        try:
            return date(int(value[0]), int(value[1]), int(value[2]))
        except (TypeError, ValueError):
            return None
    text = str(value).strip().split("T")[0].split(" ")[0]
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse a server timestamp into a naive local datetime; None when invalid."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            only_date = parse_date(text)
            if only_date is None:
                return None
            parsed = datetime(only_date.year, only_date.month, only_date.day)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def to_iso_date(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _nested_id(data: Mapping[str, Any], flat_key: str, snake_key: str, nested_key: str) -> Optional[str]:
    flat = _pick(data, flat_key, snake_key)
    if flat is not None:
        return normalize_id(flat)
    nested = data.get(nested_key)
    if isinstance(nested, Mapping):
        return normalize_id(nested.get("id"))
    return None


def _list_or_empty(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def _str_list(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple, set)):
        return []
    out: List[str] = []
    for item in value:
        if isinstance(item, Mapping):
            item = item.get("name") or item.get("id")
        if item is None:
            continue
        out.append(str(item))
    return out


@dataclass(frozen=True)
class ActivityLog:
    user: str
    date: Optional[datetime]
    comment: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ActivityLog":
        return cls(
            user=str(data.get("user") or ""),
            date=parse_datetime(data.get("date")),
            comment=str(data.get("comment") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user": self.user,
            "date": self.date.isoformat() if self.date else None,
            "comment": self.comment,
        }


@dataclass
class Task:
    title: str
    id: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[date] = None
    status: StatusValue = TaskStatus.TODO
    priority: PriorityValue = TaskPriority.MEDIUM
    completed: bool = False
    user_id: Optional[str] = None
    category_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    story_points: Optional[int] = None
    assignee: Optional[str] = None
    labels: List[str] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)
    acceptance_criteria: List[str] = field(default_factory=list)
    activity: List[ActivityLog] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Task":
        """Build a task from a server DTO or a locally-built mapping.

        Nested ``category`` / ``user`` objects are reduced to their ids and
        timestamps on ``dueDate`` are truncated to the date part.
        """
        story_points = _pick(data, "storyPoints", "story_points")
        try:
            story_points = int(story_points) if story_points is not None else None
        except (TypeError, ValueError):
            story_points = None

        assignee = _pick(data, "assignee")
        if isinstance(assignee, Mapping):
            assignee = assignee.get("username") or assignee.get("name")

        return cls(
            id=normalize_id(data.get("id")),
            title=str(data.get("title") or ""),
            description=_pick(data, "description"),
            due_date=parse_date(_pick(data, "dueDate", "due_date")),
            status=parse_status(data.get("status")),
            priority=parse_priority(data.get("priority")),
            completed=bool(data.get("completed", False)),
            user_id=_nested_id(data, "userId", "user_id", "user"),
            category_id=_nested_id(data, "categoryId", "category_id", "category"),
            created_at=parse_datetime(_pick(data, "createdAt", "created_at")),
            updated_at=parse_datetime(_pick(data, "updatedAt", "updated_at")),
            story_points=story_points,
            assignee=str(assignee) if assignee else None,
            labels=_str_list(data.get("labels")),
            dependencies=[d for d in (normalize_id(x) for x in _str_list(data.get("dependencies"))) if d],
            acceptance_criteria=_str_list(_pick(data, "acceptanceCriteria", "acceptance_criteria")),
            activity=[
                ActivityLog.from_dict(entry)
                for entry in _list_or_empty(data.get("activity"))
                if isinstance(entry, Mapping)
            ],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": wire_id(self.id),
            "title": self.title,
            "description": self.description,
            "dueDate": to_iso_date(self.due_date),
            "status": enum_value(self.status),
            "priority": enum_value(self.priority),
            "completed": self.completed,
            "userId": wire_id(self.user_id),
            "categoryId": wire_id(self.category_id),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
            "storyPoints": self.story_points,
            "assignee": self.assignee,
            "labels": list(self.labels),
            "dependencies": [wire_id(d) for d in self.dependencies],
            "acceptanceCriteria": list(self.acceptance_criteria),
            "activity": [entry.to_dict() for entry in self.activity],
        }

    def with_changes(self, **changes: Any) -> "Task":
        return replace(self, **changes)

    @property
    def is_done(self) -> bool:
        return self.status == TaskStatus.DONE

    @property
    def has_known_status(self) -> bool:
        return isinstance(self.status, TaskStatus)

    @property
    def status_label(self) -> str:
        raw = enum_value(self.status)
        return STATUS_LABELS.get(raw, str(raw))


@dataclass(frozen=True)
class Category:
    id: Optional[str]
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Category":
        return cls(
            id=normalize_id(data.get("id")),
            name=str(data.get("name") or ""),
            description=data.get("description"),
            color=data.get("color"),
            user_id=_nested_id(data, "userId", "user_id", "user"),
            created_at=parse_datetime(_pick(data, "createdAt", "created_at")),
            updated_at=parse_datetime(_pick(data, "updatedAt", "updated_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": wire_id(self.id),
            "name": self.name,
            "description": self.description,
            "color": self.color,
            "userId": wire_id(self.user_id),
        }
