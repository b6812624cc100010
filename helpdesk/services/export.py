"""CSV export of reports and of the report summary."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from datetime import date, datetime

import structlog

from helpdesk.infra.unit_of_work import UnitOfWorkFactory
from helpdesk.repositories.interfaces import ReportCriteria
from helpdesk.schemas.report import ReportFilter
from helpdesk.services.dashboard import build_summary
from helpdesk.services.report_queries import criteria_from_filter
from helpdesk.utils.datetime import end_of_day, start_of_day

logger = structlog.get_logger(__name__)

REPORT_HEADERS = (
    "ID",
    "NPSN",
    "Nama Madrasah",
    "Kategori",
    "Deskripsi Masalah",
    "NISN",
    "Status",
    "Pelapor",
    "Tanggal Dibuat",
    "Tanggal Diperbarui",
)


def format_date(value: datetime | None) -> str:
    return value.date().isoformat() if value else ""


def write_csv(rows: Iterable[Iterable[object]]) -> str:
    """Serialize rows; None becomes an empty field.

    QUOTE_MINIMAL: カンマ・ダブルクォート・改行を含むフィールドのみ "..." で囲み、
    内部の " は "" にエスケープされる。
    """
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    for row in rows:
        writer.writerow(["" if v is None else v for v in row])
    return buf.getvalue()


class ExportService:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    async def reports_csv(self, filters: ReportFilter) -> str:
        """All reports matching ``filters`` (page/limit ignored), newest first."""
        async with self._uow_factory() as uow:
            rows, total = await uow.reports.list_rows(criteria_from_filter(filters))

        lines: list[Iterable[object]] = [REPORT_HEADERS]
        for row in rows:
            r = row.report
            lines.append(
                (
                    r.id,
                    r.npsn,
                    r.school_name,
                    row.category_name,
                    r.issue_description,
                    r.nisn,
                    r.status.value,
                    row.reporter_name,
                    format_date(r.created_at),
                    format_date(r.updated_at),
                )
            )
        logger.info("reports_exported", rows=total)
        return write_csv(lines)

    async def summary_csv(
        self,
        date_from: date | None = None,
        date_to: date | None = None,
        category_id: int | None = None,
    ) -> str:
        criteria = ReportCriteria(
            category_id=category_id,
            created_from=start_of_day(date_from),
            created_to=end_of_day(date_to),
        )
        async with self._uow_factory() as uow:
            summary = await build_summary(uow, criteria)

        lines: list[Iterable[object]] = [("Ringkasan", "Jumlah"), ()]
        lines.append(("Ringkasan per Status", ""))
        lines.extend((s.status, s.count) for s in summary.by_status)
        lines.append(())
        lines.append(("Ringkasan per Kategori", ""))
        lines.extend((c.category_name, c.count) for c in summary.by_category)
        lines.append(())
        lines.append(("Ringkasan per Bulan", ""))
        lines.extend((m.month, m.count) for m in summary.by_month)
        lines.append(())
        lines.append(("Total Laporan", summary.total))
        return write_csv(lines)
