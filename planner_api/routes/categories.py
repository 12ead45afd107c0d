from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from planner_api.auth import require_user_id
from planner_api.schemas import CategoryReplace
from planner_api import repositories

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/v1/categories")
async def list_categories(user_id: str = Depends(require_user_id)):
    items = await repositories.list_categories(user_id)
    return {"items": items}


@router.put("/v1/categories")
async def replace_categories(payload: CategoryReplace, user_id: str = Depends(require_user_id)):
    items = [item.model_dump() for item in payload.items]
    ids = [item["id"] for item in items if item.get("id")]
    if len(ids) != len(set(ids)):
        raise HTTPException(status_code=422, detail="Duplicate category id")
    saved = await repositories.replace_categories(user_id, items)
    logger.info("Replaced %d categories for %s", len(saved), user_id)
    return {"items": saved}
