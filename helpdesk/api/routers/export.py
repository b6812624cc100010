from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from helpdesk.api.deps import get_export_service
from helpdesk.schemas.dashboard import SummaryQuery
from helpdesk.schemas.report import ReportFilter
from helpdesk.services.export import ExportService
from helpdesk.utils.datetime import utcnow

router = APIRouter(prefix="/export", tags=["export"])

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"


def _csv_response(body: str, prefix: str) -> Response:
    filename = f"{prefix}-{utcnow().date().isoformat()}.csv"
    return Response(
        content=body,
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/reports.csv", summary="報告一覧CSV（一覧と同じフィルタ, ページングなし）")
async def export_reports(
    filters: ReportFilter = Depends(ReportFilter.as_query),
    svc: ExportService = Depends(get_export_service),
):
    return _csv_response(await svc.reports_csv(filters), "laporan")


@router.get("/summary.csv", summary="集計CSV")
async def export_summary(
    query: SummaryQuery = Depends(SummaryQuery.as_query),
    svc: ExportService = Depends(get_export_service),
):
    body = await svc.summary_csv(query.date_from, query.date_to, query.category_id)
    return _csv_response(body, "ringkasan-laporan")
