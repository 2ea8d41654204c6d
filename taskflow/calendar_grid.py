from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from .models import Task


@dataclass(frozen=True)
class CalendarCell:
    day: date
    in_month: bool
    is_today: bool
    tasks: List[Task] = field(default_factory=list)
    overflow: int = 0


def calendar_grid(
    tasks: Iterable[Task],
    year: int,
    month: int,
    *,
    max_per_cell: int = 3,
    today: Optional[date] = None,
) -> List[CalendarCell]:
    """Sunday-first month grid padded with neighbouring days to whole weeks.

    Only in-month cells carry tasks. Each shows at most ``max_per_cell``
    tasks in store order; the rest are counted in ``overflow``.
    """
    ref = today if today is not None else date.today()
    by_day: Dict[date, List[Task]] = {}
    for task in tasks:
        if task.due_date is None:
            continue
        if task.due_date.year == year and task.due_date.month == month:
            by_day.setdefault(task.due_date, []).append(task)

    cells: List[CalendarCell] = []
    for day in calendar.Calendar(firstweekday=calendar.SUNDAY).itermonthdates(year, month):
        in_month = day.month == month
        due = by_day.get(day, []) if in_month else []
        cells.append(
            CalendarCell(
                day=day,
                in_month=in_month,
                is_today=day == ref,
                tasks=due[:max_per_cell],
                overflow=max(0, len(due) - max_per_cell),
            )
        )
    return cells


def calendar_weeks(cells: List[CalendarCell]) -> List[List[CalendarCell]]:
    return [cells[i : i + 7] for i in range(0, len(cells), 7)]


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_label(year: int, month: int) -> str:
    return f"{calendar.month_name[month]} {year}"
