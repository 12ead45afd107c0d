from __future__ import annotations

import logging

from sqlalchemy import text as sql_text
from sqlalchemy.exc import SQLAlchemyError

from planner_api.db import get_engine
from planner_api.repositories import CATEGORIES_TABLE, TODOS_TABLE

logger = logging.getLogger(__name__)


async def init_db():
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {CATEGORIES_TABLE} (
                    user_id TEXT NOT NULL,
                    id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    color TEXT NOT NULL,
                    position INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT,
                    PRIMARY KEY (user_id, id)
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {TODOS_TABLE} (
                    user_id TEXT NOT NULL,
                    date_key TEXT NOT NULL,
                    id TEXT NOT NULL,
                    text TEXT NOT NULL,
                    completed INTEGER NOT NULL DEFAULT 0,
                    category_id TEXT,
                    created_at BIGINT NOT NULL,
                    position INTEGER NOT NULL DEFAULT 0,
                    PRIMARY KEY (user_id, date_key, id)
                )
                """
            )
        )

    async def ensure_index(index_sql: str) -> None:
        try:
            async with engine.begin() as conn:
                await conn.execute(sql_text(index_sql))
        except SQLAlchemyError:
            logger.warning("Index creation skipped: %s", index_sql)

    await ensure_index(
        f"CREATE INDEX IF NOT EXISTS idx_{TODOS_TABLE}_user_date "
        f"ON {TODOS_TABLE} (user_id, date_key)"
    )
    await ensure_index(
        f"CREATE INDEX IF NOT EXISTS idx_{CATEGORIES_TABLE}_user_position "
        f"ON {CATEGORIES_TABLE} (user_id, position)"
    )
