"""Report lifecycle controller.

Reporters may edit or delete their own reports only while the status is
``baru``. Admins move reports between statuses; every status change appends
exactly one timeline entry in the same transaction. Transitions are not
restricted (``selesai`` can be reopened).
"""

from __future__ import annotations

import structlog

from helpdesk.core.exceptions import InvalidStateError, NotFoundError, NotFoundOrForbiddenError
from helpdesk.infra.unit_of_work import UnitOfWork, UnitOfWorkFactory
from helpdesk.models import Report, ReportStatus
from helpdesk.schemas.report import ReportCreateRequest, ReportOut, ReportUpdateRequest
from helpdesk.services.progress import INITIAL_PROGRESS_NOTE, append_progress, require_active_admin

logger = structlog.get_logger(__name__)


async def _require_active_category(uow: UnitOfWork, category_id: int) -> None:
    category = await uow.categories.get(category_id)
    if category is None or not category.is_active:
        logger.warning("category_lookup_failed", category_id=category_id)
        raise NotFoundError("Category not found")


async def _get_own_editable(
    uow: UnitOfWork, report_id: int, reporter_id: int, action: str
) -> Report:
    report = await uow.reports.get(report_id)
    if report is None or report.reporter_id != reporter_id:
        logger.warning(
            f"report_{action}_rejected",
            report_id=report_id,
            reporter_id=reporter_id,
            reason="not_found_or_forbidden",
        )
        raise NotFoundOrForbiddenError("Report not found or access denied")
    if report.status != ReportStatus.new:
        logger.warning(
            f"report_{action}_rejected",
            report_id=report_id,
            status=report.status.value,
            reason="invalid_state",
        )
        raise InvalidStateError(f'Can only {action} reports with status "baru"')
    return report


class ReportService:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    async def create(self, payload: ReportCreateRequest) -> ReportOut:
        async with self._uow_factory() as uow:
            await _require_active_category(uow, payload.category_id)
            reporter = await uow.users.get(payload.reporter_id)
            if reporter is None or not reporter.is_active:
                logger.warning("report_create_rejected", reporter_id=payload.reporter_id)
                raise NotFoundError("Reporter not found")

            report = await uow.reports.add(
                npsn=payload.npsn,
                school_name=payload.school_name,
                category_id=payload.category_id,
                issue_description=payload.issue_description,
                nisn=payload.nisn,
                status=ReportStatus.new,
                reporter_id=payload.reporter_id,
            )
            await append_progress(
                uow,
                report_id=report.id,
                admin_id=None,
                status=ReportStatus.new,
                notes=INITIAL_PROGRESS_NOTE,
            )
            out = ReportOut.model_validate(report)
        logger.info("report_created", report_id=out.id, category_id=out.category_id)
        return out

    async def update_by_reporter(self, report_id: int, payload: ReportUpdateRequest) -> ReportOut:
        changes = payload.changes()
        async with self._uow_factory() as uow:
            report = await _get_own_editable(uow, report_id, payload.user_id, "update")
            if "category_id" in changes:
                await _require_active_category(uow, changes["category_id"])
            report = await uow.reports.update(report, changes)
            out = ReportOut.model_validate(report)
        logger.info("report_updated", report_id=report_id, fields=sorted(changes))
        return out

    async def delete_by_reporter(self, report_id: int, reporter_id: int) -> bool:
        async with self._uow_factory() as uow:
            await _get_own_editable(uow, report_id, reporter_id, "delete")
            await uow.progress.delete_for_report(report_id)
            await uow.reports.delete(report_id)
        logger.info("report_deleted", report_id=report_id)
        return True

    async def update_status(
        self, report_id: int, status: ReportStatus, notes: str | None, admin_id: int
    ) -> ReportOut:
        async with self._uow_factory() as uow:
            report = await uow.reports.get(report_id)
            if report is None:
                logger.warning("report_status_rejected", report_id=report_id, reason="not_found")
                raise NotFoundError("Report not found")
            await require_active_admin(uow, admin_id)

            previous = report.status
            report = await uow.reports.update(report, {"status": status})
            await append_progress(
                uow, report_id=report.id, admin_id=admin_id, status=status, notes=notes
            )
            out = ReportOut.model_validate(report)
        logger.info(
            "report_status_changed",
            report_id=report_id,
            admin_id=admin_id,
            from_status=previous.value,
            to_status=status.value,
        )
        return out
