from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from helpdesk.api.deps import get_category_service
from helpdesk.schemas.category import CategoryCreateRequest, CategoryOut, CategoryUpdateRequest
from helpdesk.schemas.common import ErrorResponse, OkResponse
from helpdesk.services.categories import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.post("", response_model=CategoryOut, status_code=201, summary="カテゴリ作成")
async def create_category(
    payload: CategoryCreateRequest, svc: CategoryService = Depends(get_category_service)
):
    return await svc.create(payload)


@router.get("", response_model=list[CategoryOut], summary="有効なカテゴリ（名前順）")
async def list_active_categories(svc: CategoryService = Depends(get_category_service)):
    return await svc.list_active()


@router.get("/all", response_model=list[CategoryOut], summary="全カテゴリ（管理画面用）")
async def list_all_categories(svc: CategoryService = Depends(get_category_service)):
    return await svc.list_all()


@router.get(
    "/{category_id}", response_model=CategoryOut, responses={404: {"model": ErrorResponse}}
)
async def get_category(category_id: int, svc: CategoryService = Depends(get_category_service)):
    category = await svc.get_by_id(category_id)
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.patch(
    "/{category_id}", response_model=CategoryOut, responses={404: {"model": ErrorResponse}}
)
async def update_category(
    category_id: int,
    payload: CategoryUpdateRequest,
    svc: CategoryService = Depends(get_category_service),
):
    return await svc.update(category_id, payload)


@router.delete(
    "/{category_id}",
    response_model=OkResponse,
    summary="無効化（使用中は409）",
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_category(category_id: int, svc: CategoryService = Depends(get_category_service)):
    if not await svc.delete(category_id):
        raise HTTPException(status_code=404, detail="Category not found")
    return {"ok": True}
