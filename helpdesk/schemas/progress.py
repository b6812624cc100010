from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from helpdesk.models.enums import ReportStatus


class ProgressOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    report_id: int
    admin_id: int | None = Field(description="NULL はシステム生成")
    status: ReportStatus
    notes: str | None
    created_at: datetime


class ProgressNoteRequest(BaseModel):
    notes: str = Field(min_length=1, description="メモ")
    admin_id: int = Field(description="記録する管理者ID")
