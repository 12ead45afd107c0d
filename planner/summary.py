from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from planner.constants import DEFAULT_CATEGORY_ID
from planner.dateutils import month_grid
from planner.models import UNCATEGORIZED, Category, TodoItem


@dataclass(frozen=True)
class CategorySummary:
    id: str
    name: str
    color: str
    total: int
    completed: int

    @property
    def all_done(self) -> bool:
        return self.total > 0 and self.completed == self.total


@dataclass(frozen=True)
class DayCell:
    day: Optional[int]
    day_key: Optional[str]
    summaries: List[CategorySummary]
    is_today: bool = False
    is_selected: bool = False


def summarize_day(todos: Sequence[TodoItem], categories: Sequence[Category]) -> List[CategorySummary]:
    """Per-category counts for one calendar cell.

    To-dos pointing at the sentinel or at a category that no longer exists are
    folded into a single uncategorized row, which always comes first.
    """
    known = {category.id for category in categories if category.id != DEFAULT_CATEGORY_ID}
    totals: Dict[str, List[int]] = {}
    for todo in todos:
        bucket = todo.category_id if todo.category_id in known else DEFAULT_CATEGORY_ID
        counts = totals.setdefault(bucket, [0, 0])
        counts[0] += 1
        if todo.completed:
            counts[1] += 1

    rows: List[CategorySummary] = []
    if DEFAULT_CATEGORY_ID in totals:
        total, completed = totals[DEFAULT_CATEGORY_ID]
        rows.append(CategorySummary(UNCATEGORIZED.id, UNCATEGORIZED.name, UNCATEGORIZED.color, total, completed))
    for category in categories:
        if category.id == DEFAULT_CATEGORY_ID or category.id not in totals:
            continue
        total, completed = totals[category.id]
        rows.append(CategorySummary(category.id, category.name, category.color, total, completed))
    return rows


def month_cells(year, month, todos_by_day, categories, today_key=None, selected_key=None) -> List[List[DayCell]]:
    weeks = []
    for week in month_grid(year, month):
        cells = []
        for day in week:
            if day is None:
                cells.append(DayCell(None, None, []))
                continue
            key = f"{year:04d}-{month:02d}-{day:02d}"
            cells.append(
                DayCell(
                    day=day,
                    day_key=key,
                    summaries=summarize_day(todos_by_day.get(key, []), categories),
                    is_today=key == today_key,
                    is_selected=key == selected_key,
                )
            )
        weeks.append(cells)
    return weeks
