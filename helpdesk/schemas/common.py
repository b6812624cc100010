# helpdesk/schemas/common.py
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    detail: str = Field(description="エラーメッセージ")

    model_config = {"json_schema_extra": {"examples": [{"detail": "Not Found"}]}}


class OkResponse(BaseModel):
    ok: bool = Field(description="成功可否")

    model_config = {"json_schema_extra": {"examples": [{"ok": True}]}}


class PageMeta(BaseModel):
    total: int = Field(description="総件数（ページに依存しない）")
    page: int = Field(description="現在のページ（1始まり）")
    limit: int = Field(description="1ページ件数")
    total_pages: int = Field(description="ceil(total / limit)")
