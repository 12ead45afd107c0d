from __future__ import annotations

import time
from dataclasses import dataclass, replace
from typing import Any, Dict, List
from uuid import uuid4

from planner.constants import (
    DEFAULT_CATEGORY_ID,
    DEFAULT_CATEGORY_SEED,
    FIXED_DEFAULT_COLOR,
    GUEST_NICKNAME,
    SEEDED_CATEGORY_PREFIX,
    UNCATEGORIZED_LABEL,
)


def new_id() -> str:
    return uuid4().hex


def now_ms() -> int:
    return int(time.time() * 1000)


def is_seeded_id(category_id: str) -> bool:
    return bool(category_id) and category_id.startswith(SEEDED_CATEGORY_PREFIX)


@dataclass(frozen=True)
class User:
    id: str
    nickname: str = GUEST_NICKNAME
    profile_image: str = ""


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    color: str

    @property
    def is_sentinel(self) -> bool:
        return self.id == DEFAULT_CATEGORY_ID

    @property
    def is_seeded(self) -> bool:
        return is_seeded_id(self.id)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "color": self.color}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Category":
        category_id = str(payload.get("id") or "").strip()
        if not category_id:
            raise ValueError("category record without id")
        return cls(
            id=category_id,
            name=str(payload.get("name") or ""),
            color=str(payload.get("color") or FIXED_DEFAULT_COLOR),
        )


@dataclass(frozen=True)
class TodoItem:
    id: str
    text: str
    completed: bool = False
    created_at: int = 0
    category_id: str = DEFAULT_CATEGORY_ID

    def with_changes(self, **changes) -> "TodoItem":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "createdAt": self.created_at,
            "categoryId": self.category_id,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "TodoItem":
        todo_id = str(payload.get("id") or "").strip()
        if not todo_id:
            raise ValueError("todo record without id")
        created = payload.get("createdAt", payload.get("created_at")) or 0
        return cls(
            id=todo_id,
            text=str(payload.get("text") or ""),
            completed=bool(payload.get("completed", False)),
            created_at=int(created),
            category_id=str(payload.get("categoryId") or DEFAULT_CATEGORY_ID),
        )


UNCATEGORIZED = Category(DEFAULT_CATEGORY_ID, UNCATEGORIZED_LABEL, FIXED_DEFAULT_COLOR)


def default_categories() -> List[Category]:
    return [Category(category_id, name, color) for category_id, name, color in DEFAULT_CATEGORY_SEED]
