"""Read-only views over a task snapshot.

Every function here takes the current ``store.get_all()`` list (plus, for
some, a reference date) and returns a fresh derived structure. Nothing is
cached and nothing mutates the tasks, so any edit is visible to every view
on the next render.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Set

from .models import STATUS_ORDER, Task, TaskStatus, enum_value


UNKNOWN_COLUMN = "UNKNOWN"
DAY_LABELS: List[str] = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
TIMELINE_DAYS = 14
TIMELINE_LOOKBACK_DAYS = 7
STATUS_PROGRESS: Dict[str, int] = {
    TaskStatus.DONE.value: 100,
    TaskStatus.REVIEW.value: 80,
    TaskStatus.IN_PROGRESS.value: 50,
    TaskStatus.TODO.value: 0,
}


def _today(today: Optional[date]) -> date:
    return today if today is not None else date.today()


# -------------------- board --------------------
def board_columns(
    tasks: Iterable[Task],
    *,
    merge_review: bool = False,
    include_unknown: bool = False,
) -> Dict[str, List[Task]]:
    """Bucket tasks by status in workflow order.

    ``merge_review`` folds REVIEW into IN_PROGRESS for a three-column board.
    Tasks with a status outside the workflow only appear when
    ``include_unknown`` adds an ``UNKNOWN`` column.
    """
    statuses = [s for s in STATUS_ORDER if not (merge_review and s is TaskStatus.REVIEW)]
    columns: Dict[str, List[Task]] = {s.value: [] for s in statuses}
    if include_unknown:
        columns[UNKNOWN_COLUMN] = []

    for task in tasks:
        key = enum_value(task.status)
        if merge_review and key == TaskStatus.REVIEW.value:
            key = TaskStatus.IN_PROGRESS.value
        if key in columns and key != UNKNOWN_COLUMN:
            columns[key].append(task)
        elif include_unknown and not task.has_known_status:
            columns[UNKNOWN_COLUMN].append(task)
    return columns


# -------------------- explorer --------------------
CURRENT_SPRINT = "current-sprint"
BACKLOG = "backlog"


@dataclass(frozen=True)
class ExplorerGroup:
    key: str
    title: str
    tasks: List[Task]


def explorer_groups(tasks: Iterable[Task], *, sprint_title: str = "Current Sprint") -> List[ExplorerGroup]:
    snapshot = list(tasks)
    sprint = [t for t in snapshot if t.status in (TaskStatus.IN_PROGRESS, TaskStatus.REVIEW)]
    backlog = [t for t in snapshot if t.status == TaskStatus.TODO]
    return [
        ExplorerGroup(CURRENT_SPRINT, sprint_title, sprint),
        ExplorerGroup(BACKLOG, "Backlog", backlog),
    ]


@dataclass
class ExplorerState:
    expanded: Set[str] = field(default_factory=lambda: {CURRENT_SPRINT})

    def toggle(self, key: str) -> bool:
        if key in self.expanded:
            self.expanded.discard(key)
            return False
        self.expanded.add(key)
        return True

    def is_expanded(self, key: str) -> bool:
        return key in self.expanded


# -------------------- dashboard --------------------
def recent_tasks(tasks: Iterable[Task], count: int = 2) -> List[Task]:
    """Earliest-due first; ties keep store order, undated tasks go last."""
    ordered = sorted(tasks, key=lambda t: (t.due_date is None, t.due_date or date.min))
    return ordered[: max(0, count)]


@dataclass(frozen=True)
class CompletionStats:
    upcoming: int
    in_progress: int
    completed: int
    total: int

    @property
    def completion_rate(self) -> float:
        return (self.completed / self.total) if self.total else 0.0


def completion_stats(tasks: Iterable[Task], today: Optional[date] = None) -> CompletionStats:
    ref = _today(today)
    snapshot = list(tasks)
    upcoming = sum(
        1 for t in snapshot if t.status == TaskStatus.TODO and t.due_date is not None and t.due_date >= ref
    )
    in_progress = sum(1 for t in snapshot if t.status == TaskStatus.IN_PROGRESS)
    completed = sum(1 for t in snapshot if t.status == TaskStatus.DONE)
    return CompletionStats(upcoming=upcoming, in_progress=in_progress, completed=completed, total=len(snapshot))


def week_start(today: Optional[date] = None) -> date:
    ref = _today(today)
    # date.weekday() is Monday=0; shift so Sunday starts the week.
    return ref - timedelta(days=(ref.weekday() + 1) % 7)


def weekly_activity(tasks: Iterable[Task], today: Optional[date] = None) -> List[int]:
    """Count tasks due this week up to today, Sunday first."""
    ref = _today(today)
    start = week_start(ref)
    counts = [0] * 7
    for task in tasks:
        due = task.due_date
        if due is None or due < start or due > ref:
            continue
        counts[(due.weekday() + 1) % 7] += 1
    return counts


@dataclass(frozen=True)
class ActivitySummary:
    completed: int
    incomplete: int
    hours_spent: int

    @property
    def time_spent_label(self) -> str:
        return f"{self.hours_spent}h"


def activity_summary(tasks: Iterable[Task], now: Optional[datetime] = None) -> ActivitySummary:
    """Completion counts by the ``completed`` flag and hours since the oldest task."""
    snapshot = list(tasks)
    ref = now or datetime.now()
    completed = sum(1 for t in snapshot if t.completed)
    created = [t.created_at for t in snapshot if t.created_at is not None]
    hours = 0
    if created:
        elapsed = ref - min(created)
        hours = max(1, int(elapsed.total_seconds() // 3600))
    return ActivitySummary(completed=completed, incomplete=len(snapshot) - completed, hours_spent=hours)


def is_overdue(task: Task, today: Optional[date] = None) -> bool:
    return task.due_date is not None and task.due_date < _today(today) and not task.is_done


# -------------------- filtering --------------------
def search_tasks(tasks: Iterable[Task], query: Optional[str]) -> List[Task]:
    needle = (query or "").strip().lower()
    if not needle:
        return list(tasks)
    out: List[Task] = []
    for task in tasks:
        haystack = [task.title, task.description or ""] + list(task.labels)
        if any(needle in part.lower() for part in haystack):
            out.append(task)
    return out


def filter_by_category(tasks: Iterable[Task], category_id: Optional[str]) -> List[Task]:
    if category_id is None:
        return list(tasks)
    return [t for t in tasks if t.category_id == category_id]


def filter_by_priority(tasks: Iterable[Task], priorities: Sequence[str]) -> List[Task]:
    if not priorities:
        return list(tasks)
    wanted = {str(p) for p in priorities}
    return [t for t in tasks if enum_value(t.priority) in wanted]


# -------------------- timeline --------------------
@dataclass(frozen=True)
class TimelineRow:
    task_id: Optional[str]
    title: str
    status: str
    start: date
    end: date
    offset: int
    duration: int
    progress: int


def timeline_window(today: Optional[date] = None) -> List[date]:
    first = _today(today) - timedelta(days=TIMELINE_LOOKBACK_DAYS)
    return [first + timedelta(days=i) for i in range(TIMELINE_DAYS)]


def timeline_rows(tasks: Iterable[Task], today: Optional[date] = None) -> List[TimelineRow]:
    """One bar per task from creation to due date, placed on the 14-day window.

    ``offset`` is in days from the window's first day and may be negative or
    beyond the window for tasks that started earlier or end later.
    """
    window_start = timeline_window(today)[0]
    rows: List[TimelineRow] = []
    for task in tasks:
        start = task.created_at.date() if task.created_at else task.due_date
        end = task.due_date or start
        if start is None or end is None:
            continue
        if end < start:
            start, end = end, start
        status = str(enum_value(task.status))
        rows.append(
            TimelineRow(
                task_id=task.id,
                title=task.title,
                status=status,
                start=start,
                end=end,
                offset=(start - window_start).days,
                duration=max(1, (end - start).days),
                progress=STATUS_PROGRESS.get(status, 0),
            )
        )
    return rows
