from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CategoryCreateRequest(BaseModel):
    name: str = Field(min_length=2, description="カテゴリ名")
    description: str | None = Field(default=None, description="説明（任意）")
    is_active: bool = Field(default=True)


class CategoryUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=2)
    description: str | None = None
    is_active: bool | None = None


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime
