from __future__ import annotations

import time
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import text as sql_text

from planner_api.db import get_sessionmaker

CATEGORIES_TABLE = "categories"
TODOS_TABLE = "todos"


def _new_id() -> str:
    return uuid4().hex


def _now_ms() -> int:
    return int(time.time() * 1000)


def _category_row(row) -> dict:
    return {"id": row["id"], "name": row["name"], "color": row["color"]}


def _todo_row(row) -> dict:
    return {
        "id": row["id"],
        "text": row["text"],
        "completed": bool(row["completed"]),
        "created_at": int(row["created_at"]),
        "category_id": row["category_id"],
    }


async def list_categories(user_id: str) -> list[dict]:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        result = await session.execute(
            sql_text(
                f"SELECT id, name, color FROM {CATEGORIES_TABLE} "
                "WHERE user_id = :user_id ORDER BY position, created_at"
            ),
            {"user_id": user_id},
        )
        return [_category_row(row) for row in result.mappings().all()]


async def replace_categories(user_id: str, items: list[dict]) -> list[dict]:
    """Swap the owner's category set for ``items`` in one transaction.

    Items without an id get a fresh one; the stored order follows the list.
    """
    now_iso = datetime.now(timezone.utc).isoformat()
    rows = []
    for position, item in enumerate(items):
        rows.append(
            {
                "user_id": user_id,
                "id": item.get("id") or _new_id(),
                "name": item["name"],
                "color": item["color"],
                "position": position,
                "created_at": now_iso,
            }
        )
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(f"DELETE FROM {CATEGORIES_TABLE} WHERE user_id = :user_id"),
            {"user_id": user_id},
        )
        if rows:
            await session.execute(
                sql_text(
                    f"INSERT INTO {CATEGORIES_TABLE} (user_id, id, name, color, position, created_at) "
                    "VALUES (:user_id, :id, :name, :color, :position, :created_at)"
                ),
                rows,
            )
        await session.commit()
    return [_category_row(row) for row in rows]


async def list_todos(user_id: str, start: str | None = None, end: str | None = None) -> dict[str, list[dict]]:
    clauses = ["user_id = :user_id"]
    params: dict = {"user_id": user_id}
    if start:
        clauses.append("date_key >= :start")
        params["start"] = start
    if end:
        clauses.append("date_key <= :end")
        params["end"] = end
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        result = await session.execute(
            sql_text(
                f"SELECT date_key, id, text, completed, category_id, created_at FROM {TODOS_TABLE} "
                f"WHERE {' AND '.join(clauses)} "
                "ORDER BY date_key, created_at, position"
            ),
            params,
        )
        rows = result.mappings().all()
    grouped: dict[str, list[dict]] = {}
    for row in rows:
        grouped.setdefault(row["date_key"], []).append(_todo_row(row))
    return grouped


async def replace_todos_for_day(user_id: str, day_key: str, items: list[dict]) -> list[dict]:
    now_ms = _now_ms()
    rows = []
    for position, item in enumerate(items):
        rows.append(
            {
                "user_id": user_id,
                "date_key": day_key,
                "id": item.get("id") or _new_id(),
                "text": item["text"],
                "completed": 1 if item.get("completed") else 0,
                "category_id": item.get("category_id"),
                "created_at": int(item.get("created_at") or now_ms),
                "position": position,
            }
        )
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(f"DELETE FROM {TODOS_TABLE} WHERE user_id = :user_id AND date_key = :date_key"),
            {"user_id": user_id, "date_key": day_key},
        )
        if rows:
            await session.execute(
                sql_text(
                    f"INSERT INTO {TODOS_TABLE} "
                    "(user_id, date_key, id, text, completed, category_id, created_at, position) "
                    "VALUES (:user_id, :date_key, :id, :text, :completed, :category_id, :created_at, :position)"
                ),
                rows,
            )
        await session.commit()
    return [_todo_row(row) for row in rows]
