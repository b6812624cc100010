from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from helpdesk.api.deps import get_report_query_service, get_report_service
from helpdesk.schemas.common import ErrorResponse, OkResponse
from helpdesk.schemas.report import (
    ReportCreateRequest,
    ReportFilter,
    ReportListResponse,
    ReportOut,
    ReportStatusUpdateRequest,
    ReportUpdateRequest,
    ReportWithRelations,
)
from helpdesk.services.report_queries import ReportQueryService
from helpdesk.services.reports import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])

_ERRORS = {404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}}


@router.post(
    "",
    response_model=ReportOut,
    status_code=201,
    summary="報告を作成（status=baru, 初回タイムライン付き）",
    responses={404: {"model": ErrorResponse}},
)
async def create_report(
    payload: ReportCreateRequest, svc: ReportService = Depends(get_report_service)
):
    return await svc.create(payload)


@router.get("", response_model=ReportListResponse, summary="報告一覧（フィルタ・ページング）")
async def list_reports(
    filters: ReportFilter = Depends(ReportFilter.as_query),
    svc: ReportQueryService = Depends(get_report_query_service),
):
    return await svc.list(filters)


@router.get(
    "/by-user/{user_id}", response_model=ReportListResponse, summary="報告者ごとの一覧"
)
async def list_reports_by_user(
    user_id: int,
    filters: ReportFilter = Depends(ReportFilter.as_query),
    svc: ReportQueryService = Depends(get_report_query_service),
):
    return await svc.list_by_user(user_id, filters)


@router.get(
    "/{report_id}",
    response_model=ReportWithRelations,
    summary="報告詳細（タイムラインは古い順）",
    responses={404: {"model": ErrorResponse}},
)
async def get_report(
    report_id: int, svc: ReportQueryService = Depends(get_report_query_service)
):
    report = await svc.get_by_id(report_id)
    if report is None:
        raise HTTPException(status_code=404, detail="Report not found")
    return report


@router.patch(
    "/{report_id}",
    response_model=ReportOut,
    summary="報告者による編集（baru のみ）",
    responses=_ERRORS,
)
async def update_report(
    report_id: int,
    payload: ReportUpdateRequest,
    svc: ReportService = Depends(get_report_service),
):
    return await svc.update_by_reporter(report_id, payload)


@router.delete(
    "/{report_id}",
    response_model=OkResponse,
    summary="報告者による削除（baru のみ）",
    responses=_ERRORS,
)
async def delete_report(
    report_id: int,
    user_id: int = Query(..., description="操作する報告者ID"),
    svc: ReportService = Depends(get_report_service),
):
    await svc.delete_by_reporter(report_id, user_id)
    return {"ok": True}


@router.patch(
    "/{report_id}/status",
    response_model=ReportOut,
    summary="管理者によるステータス変更",
    responses={404: {"model": ErrorResponse}},
)
async def update_report_status(
    report_id: int,
    payload: ReportStatusUpdateRequest,
    svc: ReportService = Depends(get_report_service),
):
    return await svc.update_status(report_id, payload.status, payload.notes, payload.admin_id)
