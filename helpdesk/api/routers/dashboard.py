from __future__ import annotations

from fastapi import APIRouter, Depends

from helpdesk.api.deps import get_dashboard_service
from helpdesk.schemas.dashboard import AdminDashboard, ReportsSummary, SummaryQuery, UserDashboard
from helpdesk.services.dashboard import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/user/{user_id}", response_model=UserDashboard, summary="報告者のステータス別件数")
async def user_dashboard(user_id: int, svc: DashboardService = Depends(get_dashboard_service)):
    return await svc.user_dashboard(user_id)


@router.get("/admin", response_model=AdminDashboard, summary="全体集計（直近12か月）")
async def admin_dashboard(svc: DashboardService = Depends(get_dashboard_service)):
    return await svc.admin_dashboard()


@router.get("/summary", response_model=ReportsSummary, summary="期間・カテゴリ別の集計")
async def reports_summary(
    query: SummaryQuery = Depends(SummaryQuery.as_query),
    svc: DashboardService = Depends(get_dashboard_service),
):
    return await svc.summary(query.date_from, query.date_to, query.category_id)
