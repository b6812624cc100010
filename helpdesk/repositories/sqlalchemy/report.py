"""SQLAlchemy implementation of the report repository."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.models import Category, Report, User
from helpdesk.repositories.interfaces import ReportCriteria, ReportRow
from helpdesk.utils.datetime import utcnow
from helpdesk.utils.search import LIKE_ESCAPE, contains_pattern


def apply_report_criteria(stmt: Select, criteria: ReportCriteria) -> Select:
    """Attach WHERE clauses for the given criteria.

    search だけは OR（学校名 / NPSN / 詳細の部分一致）、その他はすべて AND。
    """
    if criteria.status is not None:
        stmt = stmt.where(Report.status == criteria.status)
    if criteria.category_id is not None:
        stmt = stmt.where(Report.category_id == int(criteria.category_id))
    if criteria.reporter_id is not None:
        stmt = stmt.where(Report.reporter_id == int(criteria.reporter_id))
    if criteria.npsn:
        stmt = stmt.where(Report.npsn == criteria.npsn)
    if criteria.created_from is not None:
        stmt = stmt.where(Report.created_at >= criteria.created_from)
    if criteria.created_to is not None:
        stmt = stmt.where(Report.created_at <= criteria.created_to)
    if criteria.search:
        term = contains_pattern(criteria.search)
        stmt = stmt.where(
            or_(
                Report.school_name.ilike(term, escape=LIKE_ESCAPE),
                Report.npsn.ilike(term, escape=LIKE_ESCAPE),
                Report.issue_description.ilike(term, escape=LIKE_ESCAPE),
            )
        )
    return stmt


class SqlAlchemyReportRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, report_id: int) -> Report | None:
        return await self._session.get(Report, int(report_id))

    async def add(self, **fields: Any) -> Report:
        report = Report(**fields)
        self._session.add(report)
        await self._session.flush()
        return report

    async def update(self, report: Report, changes: dict[str, Any]) -> Report:
        for key, value in changes.items():
            setattr(report, key, value)
        report.updated_at = utcnow()
        await self._session.flush()
        return report

    async def delete(self, report_id: int) -> None:
        await self._session.execute(delete(Report).where(Report.id == int(report_id)))

    async def count_for_category(self, category_id: int) -> int:
        stmt = select(func.count()).select_from(Report).where(
            Report.category_id == int(category_id)
        )
        return int((await self._session.execute(stmt)).scalar_one())

    def _joined(self) -> Select:
        return (
            select(Report, Category.name, User.name)
            .join(Category, Category.id == Report.category_id)
            .join(User, User.id == Report.reporter_id)
        )

    async def get_row(self, report_id: int) -> ReportRow | None:
        stmt = self._joined().where(Report.id == int(report_id))
        row = (await self._session.execute(stmt)).first()
        if row is None:
            return None
        report, category_name, reporter_name = row
        return ReportRow(report=report, category_name=category_name, reporter_name=reporter_name)

    async def list_rows(
        self, criteria: ReportCriteria, *, offset: int = 0, limit: int | None = None
    ) -> tuple[list[ReportRow], int]:
        stmt = apply_report_criteria(self._joined(), criteria)
        stmt = stmt.order_by(Report.created_at.desc(), Report.id.desc()).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        rows = (await self._session.execute(stmt)).all()

        count_stmt = apply_report_criteria(select(func.count()).select_from(Report), criteria)
        total = int((await self._session.execute(count_stmt)).scalar_one())

        items = [
            ReportRow(report=report, category_name=category_name, reporter_name=reporter_name)
            for report, category_name, reporter_name in rows
        ]
        return items, total
