from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from planner.constants import DEFAULT_CATEGORY_ID, PASTEL_COLORS, VIEW_CALENDAR, VIEW_DAY
from planner.data.persistence import PersistenceTarget
from planner.data.sync import WriteQueue
from planner.dateutils import day_key, shift_month, to_reference_date, today_in_zone
from planner.errors import PersistenceError
from planner.models import UNCATEGORIZED, Category, TodoItem, default_categories, new_id, now_ms
from planner.summary import month_cells, summarize_day

logger = logging.getLogger(__name__)

CATEGORIES_WRITE_KEY = "categories"
LOAD_KEY = "load"


@dataclass
class AppState:
    categories: List[Category] = field(default_factory=default_categories)
    todos: Dict[str, List[TodoItem]] = field(default_factory=dict)
    view_mode: str = VIEW_CALENDAR
    selected_date: Optional[date] = None
    current_year: int = 1970
    current_month: int = 1
    version: int = 0


class PlannerController:
    """Owns the in-memory planner state and mirrors every change to a target.

    Mutations apply to memory first. The durable write then runs inline for
    a local target, or on the write queue for a remote one.
    """

    def __init__(self, target=None, queue=None, tz_name=None):
        self.tz_name = tz_name
        self.queue = queue or WriteQueue()
        self._lock = threading.RLock()
        self._target = target
        self._generation = 0
        today = today_in_zone(tz_name)
        self.state = AppState(current_year=today.year, current_month=today.month)

    @property
    def target(self):
        return self._target

    def use_target(self, target: PersistenceTarget):
        with self._lock:
            self._target = target
            self._generation += 1

    def reset_to_defaults(self):
        with self._lock:
            self.state.categories = default_categories()
            self.state.todos = {}
            self.state.view_mode = VIEW_CALENDAR
            self.state.selected_date = None
            self.state.version += 1

    def clear_todos(self):
        with self._lock:
            self.state.todos = {}
            self.state.version += 1

    def load_all(self):
        with self._lock:
            target = self._target
            generation = self._generation
        if target is None:
            return None
        if target.is_remote:
            return self.queue.submit(LOAD_KEY, self._load_from, target, generation)
        self._load_from(target, generation)
        return None

    def _load_from(self, target, generation):
        try:
            categories = target.load_categories()
            todos = target.load_todos()
        except PersistenceError:
            logger.exception("Load from %s target failed; keeping current state", target.name)
            return
        with self._lock:
            if generation != self._generation:
                logger.info("Discarding stale %s load", target.name)
                return
            if target.is_remote:
                if categories:
                    self.state.categories = categories
            elif categories is None:
                self.state.categories = default_categories()
            else:
                self.state.categories = categories
            self.state.todos = todos
            self.state.version += 1

    def flush(self, timeout=None):
        return self.queue.drain(timeout)

    def close(self, timeout=5.0):
        self.flush(timeout)
        self.queue.shutdown(wait_for_pending=False)

    def _persist(self, target, key, fn, *args):
        if target is None:
            return
        if target.is_remote:
            self.queue.submit(key, fn, *args)
        else:
            fn(*args)

    def set_categories(self, categories):
        with self._lock:
            self.state.categories = list(categories)
            self.state.version += 1
            target = self._target
            snapshot = list(self.state.categories)
        if target is not None:
            self._persist(target, CATEGORIES_WRITE_KEY, target.replace_categories, snapshot)

    def set_day_todos(self, key, todos):
        with self._lock:
            self.state.todos[key] = list(todos)
            self.state.version += 1
            target = self._target
            snapshot = list(self.state.todos[key])
        if target is not None:
            self._persist(target, key, target.replace_todos_for_day, key, snapshot)

    @property
    def categories(self):
        with self._lock:
            return list(self.state.categories)

    @property
    def version(self):
        return self.state.version

    def todos_for(self, key):
        with self._lock:
            return list(self.state.todos.get(key, []))

    def all_todos(self):
        with self._lock:
            return {key: list(items) for key, items in self.state.todos.items()}

    def resolve_category(self, category_id):
        for category in self.categories:
            if category.id == category_id:
                return category
        return UNCATEGORIZED

    def day_summary(self, key):
        return summarize_day(self.todos_for(key), self.categories)

    def month_view(self):
        today_key = day_key(today_in_zone(self.tz_name))
        selected = self.state.selected_date
        return month_cells(
            self.state.current_year,
            self.state.current_month,
            self.all_todos(),
            self.categories,
            today_key=today_key,
            selected_key=selected.isoformat() if selected else None,
        )

    def on_date_click(self, value):
        selected = to_reference_date(value, self.tz_name)
        with self._lock:
            self.state.selected_date = selected
            self.state.current_year = selected.year
            self.state.current_month = selected.month
            self.state.view_mode = VIEW_DAY
        return selected.isoformat()

    def back_to_calendar(self):
        with self._lock:
            self.state.view_mode = VIEW_CALENDAR

    def _shift_month(self, delta):
        with self._lock:
            self.state.current_year, self.state.current_month = shift_month(
                self.state.current_year, self.state.current_month, delta
            )

    def prev_month(self):
        self._shift_month(-1)

    def next_month(self):
        self._shift_month(1)

    def go_to_today(self):
        today = today_in_zone(self.tz_name)
        with self._lock:
            self.state.current_year = today.year
            self.state.current_month = today.month

    def _find_category(self, category_id):
        if category_id == DEFAULT_CATEGORY_ID:
            return None
        for category in self.categories:
            if category.id == category_id:
                return category
        return None

    def add_category(self, name):
        clean = str(name or "").strip()
        if not clean:
            return None
        current = self.categories
        category = Category(new_id(), clean, PASTEL_COLORS[len(current) % len(PASTEL_COLORS)])
        self.set_categories(current + [category])
        return category

    def rename_category(self, category_id, name):
        clean = str(name or "").strip()
        existing = self._find_category(category_id)
        if not clean or existing is None:
            return None
        updated = Category(existing.id, clean, existing.color)
        self.set_categories([updated if item.id == category_id else item for item in self.categories])
        return updated

    def recolor_category(self, category_id, color):
        existing = self._find_category(category_id)
        if existing is None or color not in PASTEL_COLORS:
            return None
        updated = Category(existing.id, existing.name, color)
        self.set_categories([updated if item.id == category_id else item for item in self.categories])
        return updated

    def remove_category(self, category_id):
        if self._find_category(category_id) is None:
            return False
        self.set_categories([item for item in self.categories if item.id != category_id])
        return True

    def _day(self, value):
        try:
            return day_key(value, self.tz_name)
        except (TypeError, ValueError):
            logger.debug("Ignoring invalid day value %r", value)
            return None

    def add_todo(self, day, text, category_id=DEFAULT_CATEGORY_ID):
        key = self._day(day)
        clean = str(text or "").strip()
        if key is None or not clean:
            return None
        category_id = category_id or DEFAULT_CATEGORY_ID
        if category_id != DEFAULT_CATEGORY_ID and self._find_category(category_id) is None:
            return None
        todo = TodoItem(id=new_id(), text=clean, completed=False, created_at=now_ms(), category_id=category_id)
        self.set_day_todos(key, self.todos_for(key) + [todo])
        return todo

    def _update_todo(self, key, todo_id, **changes):
        items = self.todos_for(key)
        if not any(item.id == todo_id for item in items):
            return None
        updated = [item.with_changes(**changes) if item.id == todo_id else item for item in items]
        self.set_day_todos(key, updated)
        return next(item for item in updated if item.id == todo_id)

    def toggle_todo(self, day, todo_id):
        key = self._day(day)
        if key is None:
            return None
        current = next((item for item in self.todos_for(key) if item.id == todo_id), None)
        if current is None:
            return None
        return self._update_todo(key, todo_id, completed=not current.completed)

    def move_todo_to_category(self, day, todo_id, category_id):
        key = self._day(day)
        if key is None:
            return None
        if category_id != DEFAULT_CATEGORY_ID and self._find_category(category_id) is None:
            return None
        return self._update_todo(key, todo_id, category_id=category_id)

    def delete_todo(self, day, todo_id):
        key = self._day(day)
        if key is None:
            return False
        items = self.todos_for(key)
        remaining = [item for item in items if item.id != todo_id]
        if len(remaining) == len(items):
            return False
        self.set_day_todos(key, remaining)
        return True

    def reorder_todos(self, day, ordered_ids):
        key = self._day(day)
        if key is None:
            return False
        items = self.todos_for(key)
        by_id = {item.id: item for item in items}
        ordered_ids = list(ordered_ids)
        if len(ordered_ids) != len(items) or set(ordered_ids) != set(by_id):
            return False
        self.set_day_todos(key, [by_id[todo_id] for todo_id in ordered_ids])
        return True

    def move_todo(self, day, todo_id, offset):
        key = self._day(day)
        if key is None:
            return False
        ids = [item.id for item in self.todos_for(key)]
        if todo_id not in ids:
            return False
        index = ids.index(todo_id)
        target_index = index + int(offset)
        if target_index < 0 or target_index >= len(ids) or target_index == index:
            return False
        ids.insert(target_index, ids.pop(index))
        return self.reorder_todos(key, ids)
