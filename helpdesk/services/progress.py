"""Report progress ledger (timeline).

The ledger is append-only. Entries are written by the lifecycle controller
(report creation, status changes) and by ``add_note``; nothing else inserts.
"""

from __future__ import annotations

import structlog

from helpdesk.core.exceptions import NotFoundError
from helpdesk.infra.unit_of_work import UnitOfWork, UnitOfWorkFactory
from helpdesk.models import ReportProgress, ReportStatus, UserRole
from helpdesk.schemas.progress import ProgressOut

logger = structlog.get_logger(__name__)

INITIAL_PROGRESS_NOTE = "report created"


async def append_progress(
    uow: UnitOfWork,
    *,
    report_id: int,
    admin_id: int | None,
    status: ReportStatus,
    notes: str | None,
) -> ReportProgress:
    """Insert one timeline entry inside the caller's unit of work."""
    return await uow.progress.append(
        report_id=report_id, admin_id=admin_id, status=status, notes=notes
    )


async def require_active_admin(uow: UnitOfWork, admin_id: int) -> None:
    # 非管理者には報告の存在を知らせないため Forbidden ではなく NotFound を返す
    admin = await uow.users.get(admin_id)
    if admin is None or not admin.is_active or admin.role != UserRole.admin:
        logger.warning("admin_lookup_failed", admin_id=admin_id)
        raise NotFoundError("Admin not found")


class ProgressService:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    async def list_by_report(self, report_id: int) -> list[ProgressOut]:
        """Standalone timeline, newest entry first. Unknown reports yield []."""
        async with self._uow_factory() as uow:
            entries = await uow.progress.list_newest_first(report_id)
            return [ProgressOut.model_validate(e) for e in entries]

    async def add_note(self, report_id: int, notes: str, admin_id: int) -> ProgressOut:
        """Annotate a report without changing it; the entry keeps the current status."""
        async with self._uow_factory() as uow:
            report = await uow.reports.get(report_id)
            if report is None:
                logger.warning("progress_note_rejected", report_id=report_id, reason="not_found")
                raise NotFoundError("Report not found")
            await require_active_admin(uow, admin_id)
            entry = await append_progress(
                uow, report_id=report.id, admin_id=admin_id, status=report.status, notes=notes
            )
            out = ProgressOut.model_validate(entry)
        logger.info("progress_note_added", report_id=report_id, admin_id=admin_id)
        return out
