"""Read-side views over reports: filtered lists and single-report detail."""

from __future__ import annotations

from helpdesk.infra.unit_of_work import UnitOfWorkFactory
from helpdesk.repositories.interfaces import ReportCriteria, ReportRow
from helpdesk.schemas.progress import ProgressOut
from helpdesk.schemas.report import (
    ReportFilter,
    ReportListResponse,
    ReportOut,
    ReportWithRelations,
)
from helpdesk.utils.datetime import end_of_day, start_of_day
from helpdesk.utils.paging import page_offset, total_pages


def criteria_from_filter(filters: ReportFilter) -> ReportCriteria:
    return ReportCriteria(
        status=filters.status,
        category_id=filters.category_id,
        reporter_id=filters.reporter_id,
        npsn=filters.npsn,
        created_from=start_of_day(filters.date_from),
        created_to=end_of_day(filters.date_to),
        search=filters.search,
    )


def to_report_with_relations(
    row: ReportRow, progress: list[ProgressOut] | None = None
) -> ReportWithRelations:
    return ReportWithRelations(
        **ReportOut.model_validate(row.report).model_dump(),
        category_name=row.category_name,
        reporter_name=row.reporter_name,
        progress=progress,
    )


class ReportQueryService:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    async def list(self, filters: ReportFilter) -> ReportListResponse:
        offset = page_offset(filters.page, filters.limit)
        async with self._uow_factory() as uow:
            rows, total = await uow.reports.list_rows(
                criteria_from_filter(filters), offset=offset, limit=filters.limit
            )
            data = [to_report_with_relations(r) for r in rows]
        return ReportListResponse(
            data=data,
            total=total,
            page=filters.page,
            limit=filters.limit,
            total_pages=total_pages(total, filters.limit),
        )

    async def list_by_user(
        self, user_id: int, filters: ReportFilter | None = None
    ) -> ReportListResponse:
        """Same as ``list`` with reporter_id pinned to ``user_id``."""
        base = filters or ReportFilter()
        return await self.list(base.model_copy(update={"reporter_id": user_id}))

    async def get_by_id(self, report_id: int) -> ReportWithRelations | None:
        async with self._uow_factory() as uow:
            row = await uow.reports.get_row(report_id)
            if row is None:
                return None
            # 詳細画面のタイムラインは古い順（単体のタイムライン API とは逆順）
            entries = await uow.progress.list_oldest_first(report_id)
            progress = [ProgressOut.model_validate(e) for e in entries]
            return to_report_with_relations(row, progress)
