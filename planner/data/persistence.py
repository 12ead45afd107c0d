from __future__ import annotations

from typing import Dict, List, Optional, Protocol, Sequence, runtime_checkable

from planner.models import Category, TodoItem


@runtime_checkable
class PersistenceTarget(Protocol):
    """Durable mirror of one owner's categories and per-day to-dos.

    ``replace_*`` calls never raise: transport problems are logged and the
    in-memory model stays authoritative. Loads may raise ``PersistenceError``.
    A target may return ``None`` from ``load_categories`` when nothing was
    ever stored there; an empty list is a deliberate empty sequence.
    """

    is_remote: bool
    name: str

    def load_categories(self) -> Optional[List[Category]]: ...

    def load_todos(self) -> Dict[str, List[TodoItem]]: ...

    def replace_categories(self, categories: Sequence[Category]) -> None: ...

    def replace_todos_for_day(self, day_key: str, todos: Sequence[TodoItem]) -> None: ...
