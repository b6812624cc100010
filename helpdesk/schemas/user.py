from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from helpdesk.models.enums import UserRole
from helpdesk.schemas.common import PageMeta

# bcrypt は 72 バイトを超える入力を受け付けない（文字数ではなくバイト数）
PASSWORD_MAX_BYTES = 72
USERNAME_MAX_LENGTH = 64


def _check_password_bytes(v: str | None) -> str | None:
    if v is not None and len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"password must be at most {PASSWORD_MAX_BYTES} bytes in UTF-8")
    return v


class UserCreateRequest(BaseModel):
    username: str = Field(
        min_length=3, max_length=USERNAME_MAX_LENGTH, description="ユーザー名（一意, 3〜64文字）"
    )
    name: str = Field(min_length=2, description="表示名")
    email: EmailStr = Field(description="メールアドレス（一意）")
    password: str = Field(min_length=6, description="パスワード（6文字以上, UTF-8 で 72 バイト以内）")
    role: UserRole = Field(description="pelapor | admin")
    is_active: bool = Field(default=True)

    _password_bytes = field_validator("password")(_check_password_bytes)


class UserUpdateRequest(BaseModel):
    """Partial update. Keys that are not sent are left untouched."""

    username: str | None = Field(default=None, min_length=3, max_length=USERNAME_MAX_LENGTH)
    name: str | None = Field(default=None, min_length=2)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=6)
    role: UserRole | None = None
    is_active: bool | None = None

    _password_bytes = field_validator("password")(_check_password_bytes)


class PasswordResetRequest(BaseModel):
    new_password: str = Field(
        min_length=6, description="新しいパスワード（6文字以上, UTF-8 で 72 バイト以内）"
    )

    _password_bytes = field_validator("new_password")(_check_password_bytes)


class UserOut(BaseModel):
    """Account as exposed to callers. The password hash is never included."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    name: str
    email: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UserListResponse(PageMeta):
    data: list[UserOut]
