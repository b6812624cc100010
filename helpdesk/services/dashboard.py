"""Dashboard rollups and the date/category summary."""

from __future__ import annotations

from datetime import date

from helpdesk.infra.unit_of_work import UnitOfWork, UnitOfWorkFactory
from helpdesk.models import ReportStatus
from helpdesk.repositories.interfaces import ReportCriteria
from helpdesk.schemas.dashboard import (
    AdminDashboard,
    CategoryCount,
    MonthCount,
    ReportsSummary,
    StatusCount,
    UserDashboard,
)
from helpdesk.utils.datetime import (
    end_of_day,
    month_label,
    start_of_day,
    trailing_months_start,
    utcnow,
)

MONTHLY_WINDOW = 12


def _status_counts(counts: dict[ReportStatus, int]) -> dict[str, int]:
    return {
        "total_reports": sum(counts.values()),
        "new_reports": counts.get(ReportStatus.new, 0),
        "in_progress_reports": counts.get(ReportStatus.in_progress, 0),
        "completed_reports": counts.get(ReportStatus.done, 0),
    }


async def build_summary(uow: UnitOfWork, criteria: ReportCriteria) -> ReportsSummary:
    by_status = await uow.stats.count_by_status(criteria)
    by_category = await uow.stats.count_by_category(criteria)
    by_month = await uow.stats.count_by_month(criteria)
    return ReportsSummary(
        total=sum(by_status.values()),
        # baru -> proses -> selesai の順、件数0は出さない
        by_status=[
            StatusCount(status=s.value, count=by_status[s]) for s in ReportStatus if s in by_status
        ],
        by_category=[CategoryCount(category_name=n, count=c) for n, c in by_category],
        by_month=[MonthCount(month=month_label(y, m), count=c) for y, m, c in by_month],
    )


class DashboardService:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    async def user_dashboard(self, user_id: int) -> UserDashboard:
        async with self._uow_factory() as uow:
            counts = await uow.stats.count_by_status(ReportCriteria(reporter_id=user_id))
        return UserDashboard(**_status_counts(counts))

    async def admin_dashboard(self) -> AdminDashboard:
        everything = ReportCriteria()
        recent = ReportCriteria(created_from=trailing_months_start(utcnow(), MONTHLY_WINDOW))
        async with self._uow_factory() as uow:
            counts = await uow.stats.count_by_status(everything)
            by_category = await uow.stats.count_by_category(everything)
            by_month = await uow.stats.count_by_month(recent)
        return AdminDashboard(
            **_status_counts(counts),
            reports_by_category=[
                CategoryCount(category_name=n, count=c) for n, c in by_category
            ],
            reports_by_month=[MonthCount(month=month_label(y, m), count=c) for y, m, c in by_month],
        )

    async def summary(
        self,
        date_from: date | None = None,
        date_to: date | None = None,
        category_id: int | None = None,
    ) -> ReportsSummary:
        criteria = ReportCriteria(
            category_id=category_id,
            created_from=start_of_day(date_from),
            created_to=end_of_day(date_to),
        )
        async with self._uow_factory() as uow:
            return await build_summary(uow, criteria)
