from __future__ import annotations

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(description="ユーザー名")
    password: str = Field(description="パスワード")
