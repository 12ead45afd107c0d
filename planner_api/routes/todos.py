from __future__ import annotations

import logging
from datetime import date as dt_date

from fastapi import APIRouter, Depends, HTTPException, Query

from planner_api.auth import require_user_id
from planner_api.schemas import TodoReplace
from planner_api import repositories

logger = logging.getLogger(__name__)

router = APIRouter()


def _validate_day_key(value: str) -> str:
    try:
        return dt_date.fromisoformat(value).isoformat()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid date") from exc


@router.get("/v1/todos")
async def list_todos(
    start: str | None = Query(default=None),
    end: str | None = Query(default=None),
    user_id: str = Depends(require_user_id),
):
    start_key = _validate_day_key(start) if start else None
    end_key = _validate_day_key(end) if end else None
    items = await repositories.list_todos(user_id, start_key, end_key)
    return {"items": items}


@router.put("/v1/todos/{day_key}")
async def replace_day_todos(day_key: str, payload: TodoReplace, user_id: str = Depends(require_user_id)):
    day_key = _validate_day_key(day_key)
    items = [item.model_dump() for item in payload.items]
    ids = [item["id"] for item in items if item.get("id")]
    if len(ids) != len(set(ids)):
        raise HTTPException(status_code=422, detail="Duplicate todo id")
    saved = await repositories.replace_todos_for_day(user_id, day_key, items)
    logger.info("Replaced %d todos on %s for %s", len(saved), day_key, user_id)
    return {"day_key": day_key, "items": saved}
