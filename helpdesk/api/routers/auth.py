from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from helpdesk.api.deps import get_auth_service
from helpdesk.schemas.auth import LoginRequest
from helpdesk.schemas.common import ErrorResponse
from helpdesk.schemas.user import UserOut
from helpdesk.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=UserOut,
    summary="ログイン（ユーザー名 + パスワード）",
    responses={401: {"model": ErrorResponse}},
)
async def login(payload: LoginRequest, svc: AuthService = Depends(get_auth_service)):
    return await svc.login(payload.username, payload.password)


@router.get("/me", response_model=UserOut, responses={404: {"model": ErrorResponse}})
async def me(
    user_id: int = Query(..., description="ログイン中のユーザーID"),
    svc: AuthService = Depends(get_auth_service),
):
    user = await svc.get_current_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user
