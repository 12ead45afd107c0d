import logging

from planner.constants import DEFAULT_CATEGORY_ID
from planner.data import api_client
from planner.data.sync import SyncIndicator
from planner.errors import PersistenceError
from planner.models import Category, TodoItem, is_seeded_id

logger = logging.getLogger(__name__)


def remote_category_ref(category_id):
    if not category_id or category_id == DEFAULT_CATEGORY_ID:
        return None
    if is_seeded_id(category_id):
        return None
    return category_id


class RemoteTarget:
    """Owner-scoped persistence against the planner API."""

    is_remote = True
    name = "remote"

    def __init__(self, user_id, request=None, indicator=None):
        if not user_id:
            raise ValueError("RemoteTarget requires an owner id")
        self.user_id = user_id
        self._request = request or api_client.request
        self.indicator = indicator or SyncIndicator()

    def _call(self, method, path, **kwargs):
        return self._request(method, path, user_id=self.user_id, **kwargs)

    def load_categories(self):
        with self.indicator:
            try:
                payload = self._call("GET", "/v1/categories")
            except (RuntimeError, ValueError) as exc:
                raise PersistenceError(f"Could not load categories: {exc}", target=self.name) from exc
        categories = []
        for item in (payload or {}).get("items", []):
            try:
                categories.append(Category.from_dict(item))
            except (AttributeError, ValueError):
                logger.warning("Skipping malformed remote category: %r", item)
        return categories

    def load_todos(self):
        with self.indicator:
            try:
                payload = self._call("GET", "/v1/todos")
            except (RuntimeError, ValueError) as exc:
                raise PersistenceError(f"Could not load todos: {exc}", target=self.name) from exc
        todos = {}
        for key, rows in ((payload or {}).get("items") or {}).items():
            items = []
            for row in rows or []:
                try:
                    items.append(
                        TodoItem(
                            id=str(row["id"]),
                            text=str(row.get("text") or ""),
                            completed=bool(row.get("completed")),
                            created_at=int(row.get("created_at") or 0),
                            category_id=row.get("category_id") or DEFAULT_CATEGORY_ID,
                        )
                    )
                except (KeyError, TypeError, ValueError):
                    logger.warning("Skipping malformed remote todo on %s: %r", key, row)
            if items:
                todos[key] = items
        return todos

    def replace_categories(self, categories):
        items = []
        for category in categories:
            if category.is_sentinel:
                continue
            items.append(
                {
                    "id": None if category.is_seeded else category.id,
                    "name": category.name,
                    "color": category.color,
                }
            )
        with self.indicator:
            try:
                self._call("PUT", "/v1/categories", json={"items": items})
            except (RuntimeError, ValueError):
                logger.exception("Failed to replace remote categories for %s", self.user_id)

    def replace_todos_for_day(self, day_key, todos):
        items = [
            {
                "id": todo.id,
                "text": todo.text,
                "completed": todo.completed,
                "created_at": todo.created_at or None,
                "category_id": remote_category_ref(todo.category_id),
            }
            for todo in todos
        ]
        with self.indicator:
            try:
                self._call("PUT", f"/v1/todos/{day_key}", json={"items": items})
            except (RuntimeError, ValueError):
                logger.exception("Failed to replace remote todos on %s for %s", day_key, self.user_id)
