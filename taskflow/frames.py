"""pandas frames for the tabular and chart views."""
from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

import pandas as pd

from .categories import CategoryIndex
from .models import Task, enum_value
from .projections import DAY_LABELS, TimelineRow, is_overdue


TASK_COLUMNS = ["ID", "Title", "Status", "Priority", "Due", "Category", "Assignee", "Points", "Overdue"]


def tasks_frame(
    tasks: Iterable[Task],
    categories: Optional[CategoryIndex] = None,
    today: Optional[date] = None,
) -> pd.DataFrame:
    index = categories or CategoryIndex()
    rows = [
        {
            "ID": t.id,
            "Title": t.title,
            "Status": t.status_label,
            "Priority": enum_value(t.priority),
            "Due": t.due_date,
            "Category": index.name_for(t.category_id, default=""),
            "Assignee": t.assignee or "",
            "Points": t.story_points,
            "Overdue": is_overdue(t, today),
        }
        for t in tasks
    ]
    return pd.DataFrame(rows, columns=TASK_COLUMNS)


def weekly_frame(counts: List[int]) -> pd.DataFrame:
    return pd.DataFrame({"Day": DAY_LABELS, "Tasks": counts})


def timeline_frame(rows: Iterable[TimelineRow]) -> pd.DataFrame:
    records = [
        {
            "Task": r.title,
            "Status": r.status,
            "Start": pd.Timestamp(r.start),
            # Bars end at the close of the due day.
            "Finish": pd.Timestamp(r.end) + pd.Timedelta(days=1),
            "Progress": r.progress,
        }
        for r in rows
    ]
    return pd.DataFrame(records, columns=["Task", "Status", "Start", "Finish", "Progress"])
