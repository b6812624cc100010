from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from helpdesk.api.deps import get_user_service
from helpdesk.models import UserRole
from helpdesk.schemas.common import ErrorResponse, OkResponse
from helpdesk.schemas.user import (
    PasswordResetRequest,
    UserCreateRequest,
    UserListResponse,
    UserOut,
    UserUpdateRequest,
)
from helpdesk.services.users import UserService

router = APIRouter(prefix="/users", tags=["users"])

_NOT_FOUND = {404: {"model": ErrorResponse}}


@router.post(
    "",
    response_model=UserOut,
    status_code=201,
    summary="アカウント作成",
    responses={409: {"model": ErrorResponse}},
)
async def create_user(payload: UserCreateRequest, svc: UserService = Depends(get_user_service)):
    return await svc.create(payload)


@router.get("", response_model=UserListResponse, summary="アカウント一覧（検索・ページング）")
async def list_users(
    search: str | None = Query(None, description="名前/ユーザー名/メールの部分一致"),
    role: UserRole | None = Query(None, description="pelapor | admin"),
    is_active: bool | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    svc: UserService = Depends(get_user_service),
):
    return await svc.list(search=search, role=role, is_active=is_active, page=page, limit=limit)


@router.get("/{user_id}", response_model=UserOut, responses=_NOT_FOUND)
async def get_user(user_id: int, svc: UserService = Depends(get_user_service)):
    user = await svc.get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.patch("/{user_id}", response_model=UserOut, responses=_NOT_FOUND)
async def update_user(
    user_id: int, payload: UserUpdateRequest, svc: UserService = Depends(get_user_service)
):
    return await svc.update(user_id, payload)


@router.delete(
    "/{user_id}", response_model=OkResponse, summary="無効化（論理削除）", responses=_NOT_FOUND
)
async def deactivate_user(user_id: int, svc: UserService = Depends(get_user_service)):
    if not await svc.deactivate(user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return {"ok": True}


@router.post("/{user_id}/reset-password", response_model=OkResponse, responses=_NOT_FOUND)
async def reset_password(
    user_id: int, payload: PasswordResetRequest, svc: UserService = Depends(get_user_service)
):
    if not await svc.reset_password(user_id, payload.new_password):
        raise HTTPException(status_code=404, detail="User not found")
    return {"ok": True}
