from __future__ import annotations

from fastapi import APIRouter, Depends

from planner_api.auth import require_user_id
from planner_api import repositories

router = APIRouter()


@router.get("/v1/bootstrap")
async def bootstrap(user_id: str = Depends(require_user_id)):
    categories = await repositories.list_categories(user_id)
    todos = await repositories.list_todos(user_id)
    return {
        "user_id": user_id,
        "categories": categories,
        "todos": todos,
    }
