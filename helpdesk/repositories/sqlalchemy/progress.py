from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.models import ReportProgress, ReportStatus


class SqlAlchemyProgressRepository:
    """Append-only access to the report timeline."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append(
        self, *, report_id: int, admin_id: int | None, status: ReportStatus, notes: str | None
    ) -> ReportProgress:
        entry = ReportProgress(report_id=report_id, admin_id=admin_id, status=status, notes=notes)
        self._session.add(entry)
        await self._session.flush()
        return entry

    async def list_newest_first(self, report_id: int) -> list[ReportProgress]:
        # 同一時刻のエントリは id で挿入順を保つ
        stmt = (
            select(ReportProgress)
            .where(ReportProgress.report_id == int(report_id))
            .order_by(ReportProgress.created_at.desc(), ReportProgress.id.desc())
        )
        return list((await self._session.scalars(stmt)).all())

    async def list_oldest_first(self, report_id: int) -> list[ReportProgress]:
        stmt = (
            select(ReportProgress)
            .where(ReportProgress.report_id == int(report_id))
            .order_by(ReportProgress.created_at.asc(), ReportProgress.id.asc())
        )
        return list((await self._session.scalars(stmt)).all())

    async def delete_for_report(self, report_id: int) -> None:
        await self._session.execute(
            delete(ReportProgress).where(ReportProgress.report_id == int(report_id))
        )
