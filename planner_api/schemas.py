from __future__ import annotations

from typing import Optional, List

from pydantic import BaseModel, Field, field_validator


class CategoryIn(BaseModel):
    id: Optional[str] = None
    name: str
    color: str = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class CategoryReplace(BaseModel):
    items: List[CategoryIn] = Field(default_factory=list)


class TodoIn(BaseModel):
    id: Optional[str] = None
    text: str
    completed: bool = False
    created_at: Optional[int] = None
    category_id: Optional[str] = None

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("text must not be blank")
        return value


class TodoReplace(BaseModel):
    items: List[TodoIn] = Field(default_factory=list)
