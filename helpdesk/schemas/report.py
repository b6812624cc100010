from __future__ import annotations

from datetime import date, datetime
from typing import Annotated

from fastapi import HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from helpdesk.models.enums import ReportStatus
from helpdesk.schemas.common import PageMeta
from helpdesk.schemas.progress import ProgressOut

NPSN_PATTERN = r"^[0-9]{8}$"
NISN_PATTERN = r"^[0-9]{10}$"
MIN_DESCRIPTION_LENGTH = 10


class ReportCreateRequest(BaseModel):
    npsn: str = Field(pattern=NPSN_PATTERN, description="NPSN（8桁の数字）")
    school_name: str = Field(min_length=2, description="学校名（Nama Madrasah）")
    category_id: int = Field(description="カテゴリID（有効なもの）")
    issue_description: str = Field(
        min_length=MIN_DESCRIPTION_LENGTH, description="問題の詳細（10文字以上）"
    )
    nisn: str | None = Field(default=None, pattern=NISN_PATTERN, description="NISN（10桁, 任意）")
    reporter_id: int = Field(description="報告者ID（有効なアカウント）")


class ReportUpdateRequest(BaseModel):
    """Reporter-side partial edit.

    送られなかったキーは変更しない。nisn は明示的な null でクリアされる。
    status はこの操作では変更できない（未定義キーは無視）。
    """

    user_id: int = Field(description="操作する報告者ID")
    npsn: str | None = Field(default=None, pattern=NPSN_PATTERN)
    school_name: str | None = Field(default=None, min_length=2)
    category_id: int | None = None
    issue_description: str | None = Field(default=None, min_length=MIN_DESCRIPTION_LENGTH)
    nisn: str | None = Field(default=None, pattern=NISN_PATTERN)

    def changes(self) -> dict:
        data = self.model_dump(exclude_unset=True)
        data.pop("user_id", None)
        # NOT NULL 列への null は「未指定」と同じ扱い
        return {k: v for k, v in data.items() if v is not None or k == "nisn"}


class ReportStatusUpdateRequest(BaseModel):
    status: ReportStatus = Field(description="baru | proses | selesai")
    notes: str | None = Field(default=None, description="進捗メモ（任意）")
    admin_id: int = Field(description="操作する管理者ID")


class ReportOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    npsn: str
    school_name: str
    category_id: int
    issue_description: str
    nisn: str | None
    status: ReportStatus
    reporter_id: int
    created_at: datetime
    updated_at: datetime


class ReportWithRelations(ReportOut):
    category_name: str
    reporter_name: str
    progress: list[ProgressOut] | None = Field(
        default=None, description="詳細取得時のみ（古い順）"
    )


class ReportListResponse(PageMeta):
    data: list[ReportWithRelations]


class ReportFilter(BaseModel):
    """Filters shared by the report list, per-user list and CSV export.

    search 以外は AND 結合。search は school_name / npsn / issue_description の
    いずれかに部分一致（大文字小文字を区別しない）。
    """

    status: ReportStatus | None = None
    category_id: int | None = None
    reporter_id: int | None = None
    npsn: str | None = None
    date_from: date | None = Field(default=None, description="作成日の下限（含む）")
    date_to: date | None = Field(default=None, description="作成日の上限（その日の終わりまで含む）")
    search: str | None = None
    page: int = Field(default=1, ge=1, description="ページ番号（1始まり）")
    limit: int = Field(default=10, ge=1, le=100, description="1ページ件数（1..100）")

    # FastAPI で BaseModel をそのまま Query から受け取れないため依存関数を提供する。
    @classmethod
    def as_query(
        cls,
        status: Annotated[ReportStatus | None, Query(description="baru | proses | selesai")] = None,
        category_id: Annotated[int | None, Query(description="カテゴリID")] = None,
        reporter_id: Annotated[int | None, Query(description="報告者ID")] = None,
        npsn: Annotated[str | None, Query(description="NPSN（完全一致）")] = None,
        date_from: Annotated[date | None, Query(description="YYYY-MM-DD")] = None,
        date_to: Annotated[date | None, Query(description="YYYY-MM-DD")] = None,
        search: Annotated[str | None, Query(description="学校名/NPSN/詳細の部分一致")] = None,
        page: Annotated[int, Query(description="ページ番号（1始まり）", ge=1)] = 1,
        limit: Annotated[int, Query(description="1ページ件数（1..100）", ge=1, le=100)] = 10,
    ) -> ReportFilter:
        try:
            return cls.model_validate(
                {
                    "status": status,
                    "category_id": category_id,
                    "reporter_id": reporter_id,
                    "npsn": npsn,
                    "date_from": date_from,
                    "date_to": date_to,
                    # 空文字は未指定扱い
                    "search": search.strip() if search and search.strip() else None,
                    "page": page,
                    "limit": limit,
                }
            )
        except ValidationError:
            raise HTTPException(status_code=422, detail="Unprocessable Entity")
