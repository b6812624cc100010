from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from helpdesk.models.base import Base
from helpdesk.models.enums import ReportStatus
from helpdesk.utils.datetime import utcnow

report_status_enum = SQLEnum(
    ReportStatus, name="report_status", values_callable=lambda e: [m.value for m in e]
)


class Report(Base):
    """A school issue report (laporan).

    - npsn: 8桁の学校ID
    - nisn: 10桁の生徒ID（任意）
    - status: baru -> proses -> selesai（遷移は admin のみ、制限なし）
    """

    __tablename__ = "reports"
    __table_args__ = (Index("ix_reports_created_at_id", "created_at", "id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    npsn: Mapped[str] = mapped_column(String(8), nullable=False, index=True)
    school_name: Mapped[str] = mapped_column(Text, nullable=False)
    category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("categories.id"), nullable=False, index=True
    )
    issue_description: Mapped[str] = mapped_column(Text, nullable=False)
    nisn: Mapped[str | None] = mapped_column(String(10), nullable=True)
    status: Mapped[ReportStatus] = mapped_column(
        report_status_enum,
        nullable=False,
        default=ReportStatus.new,
        server_default=text("'baru'"),
        index=True,
    )
    reporter_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, server_default=func.now(), onupdate=utcnow
    )


__all__ = ["Report", "report_status_enum"]
