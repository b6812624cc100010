from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from helpdesk.models.base import Base
from helpdesk.models.enums import ReportStatus
from helpdesk.models.report import report_status_enum
from helpdesk.utils.datetime import utcnow


class ReportProgress(Base):
    """Append-only timeline entry for a report.

    admin_id が NULL のものはシステム生成（作成時の初期エントリ）。
    """

    __tablename__ = "report_progress"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    report_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True
    )
    admin_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )
    status: Mapped[ReportStatus] = mapped_column(report_status_enum, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, server_default=func.now()
    )

    # NOTE: updated_at 不要 (タイムラインは追記のみ)


__all__ = ["ReportProgress"]
