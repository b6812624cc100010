"""Aggregation queries for dashboards and summaries."""

from __future__ import annotations

from sqlalchemy import extract, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.models import Category, Report, ReportStatus
from helpdesk.repositories.interfaces import ReportCriteria
from helpdesk.repositories.sqlalchemy.report import apply_report_criteria


class SqlAlchemyStatsRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def count_by_status(self, criteria: ReportCriteria) -> dict[ReportStatus, int]:
        stmt = select(Report.status, func.count(Report.id)).group_by(Report.status)
        stmt = apply_report_criteria(stmt, criteria)
        rows = (await self._session.execute(stmt)).all()
        return {ReportStatus(status): int(count) for status, count in rows}

    async def count_by_category(self, criteria: ReportCriteria) -> list[tuple[str, int]]:
        stmt = (
            select(Category.name, func.count(Report.id))
            .join(Category, Category.id == Report.category_id)
            .group_by(Category.name)
            .order_by(func.count(Report.id).desc(), Category.name.asc())
        )
        stmt = apply_report_criteria(stmt, criteria)
        rows = (await self._session.execute(stmt)).all()
        return [(str(name), int(count)) for name, count in rows]

    async def count_by_month(self, criteria: ReportCriteria) -> list[tuple[int, int, int]]:
        """(year, month, count) ascending.

        TO_CHAR / strftime の方言差を避けるため EXTRACT で年・月を取り出し、
        ラベル整形は呼び出し側で行う。
        """
        year = extract("year", Report.created_at)
        month = extract("month", Report.created_at)
        stmt = (
            select(year.label("y"), month.label("m"), func.count(Report.id))
            .group_by(year, month)
            .order_by(year.asc(), month.asc())
        )
        stmt = apply_report_criteria(stmt, criteria)
        rows = (await self._session.execute(stmt)).all()
        return [(int(y), int(m), int(count)) for y, m, count in rows]
