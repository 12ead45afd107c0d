import json
import logging

from sqlalchemy import create_engine, text as sql_text
from sqlalchemy.exc import SQLAlchemyError

from planner.constants import LOCAL_CATEGORIES_KEY, LOCAL_STORAGE_TABLE, LOCAL_TODOS_KEY
from planner.models import Category, TodoItem

logger = logging.getLogger(__name__)


def build_local_engine(database_url):
    return create_engine(
        database_url,
        connect_args={"check_same_thread": False},
        future=True,
    )


class LocalStorage:
    """String key/value storage on a single SQLite table."""

    def __init__(self, engine):
        self.engine = engine
        with self.engine.begin() as conn:
            conn.execute(
                sql_text(
                    f"CREATE TABLE IF NOT EXISTS {LOCAL_STORAGE_TABLE} ("
                    "key TEXT PRIMARY KEY, value TEXT)"
                )
            )

    @classmethod
    def from_url(cls, database_url):
        return cls(build_local_engine(database_url))

    def get_item(self, key):
        with self.engine.connect() as conn:
            row = conn.execute(
                sql_text(f"SELECT value FROM {LOCAL_STORAGE_TABLE} WHERE key = :key"),
                {"key": key},
            ).fetchone()
        return row[0] if row else None

    def set_item(self, key, value):
        with self.engine.begin() as conn:
            conn.execute(
                sql_text(
                    f"INSERT INTO {LOCAL_STORAGE_TABLE} (key, value) VALUES (:key, :value) "
                    "ON CONFLICT(key) DO UPDATE SET value=EXCLUDED.value"
                ),
                {"key": key, "value": str(value)},
            )

    def remove_item(self, key):
        with self.engine.begin() as conn:
            conn.execute(
                sql_text(f"DELETE FROM {LOCAL_STORAGE_TABLE} WHERE key = :key"),
                {"key": key},
            )

    def clear(self):
        with self.engine.begin() as conn:
            conn.execute(sql_text(f"DELETE FROM {LOCAL_STORAGE_TABLE}"))


class LocalTarget:
    """Guest persistence: whole collections serialized under fixed keys."""

    is_remote = False
    name = "local"

    def __init__(self, storage):
        self.storage = storage

    def _read_json(self, key):
        try:
            raw = self.storage.get_item(key)
        except SQLAlchemyError:
            logger.exception("Local storage read failed for %s", key)
            return None
        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Ignoring unreadable local value under %s", key)
            return None

    def load_categories(self):
        payload = self._read_json(LOCAL_CATEGORIES_KEY)
        if not isinstance(payload, list):
            return None
        categories = []
        for item in payload:
            try:
                categories.append(Category.from_dict(item))
            except (AttributeError, ValueError):
                logger.warning("Skipping malformed local category: %r", item)
        return categories

    def load_todos(self):
        payload = self._read_json(LOCAL_TODOS_KEY)
        if not isinstance(payload, dict):
            return {}
        todos = {}
        for key, items in payload.items():
            if not isinstance(items, list):
                continue
            parsed = []
            for item in items:
                try:
                    parsed.append(TodoItem.from_dict(item))
                except (AttributeError, TypeError, ValueError):
                    logger.warning("Skipping malformed local todo on %s: %r", key, item)
            if parsed:
                todos[key] = parsed
        return todos

    def replace_categories(self, categories):
        payload = json.dumps([category.to_dict() for category in categories], ensure_ascii=False)
        try:
            self.storage.set_item(LOCAL_CATEGORIES_KEY, payload)
        except SQLAlchemyError:
            logger.exception("Failed to write local categories")

    def replace_todos_for_day(self, day_key, todos):
        stored = self._read_json(LOCAL_TODOS_KEY)
        if not isinstance(stored, dict):
            stored = {}
        if todos:
            stored[day_key] = [todo.to_dict() for todo in todos]
        else:
            stored.pop(day_key, None)
        try:
            self.storage.set_item(LOCAL_TODOS_KEY, json.dumps(stored, ensure_ascii=False))
        except SQLAlchemyError:
            logger.exception("Failed to write local todos for %s", day_key)
