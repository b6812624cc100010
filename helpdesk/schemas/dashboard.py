from __future__ import annotations

from datetime import date
from typing import Annotated

from fastapi import Query
from pydantic import BaseModel, Field


class UserDashboard(BaseModel):
    total_reports: int
    new_reports: int
    in_progress_reports: int
    completed_reports: int


class CategoryCount(BaseModel):
    category_name: str
    count: int


class MonthCount(BaseModel):
    month: str = Field(description="YYYY-MM")
    count: int


class StatusCount(BaseModel):
    status: str
    count: int


class AdminDashboard(UserDashboard):
    reports_by_category: list[CategoryCount]
    reports_by_month: list[MonthCount] = Field(description="直近12か月（古い順）")


class ReportsSummary(BaseModel):
    total: int
    by_status: list[StatusCount]
    by_category: list[CategoryCount]
    by_month: list[MonthCount]


class SummaryQuery(BaseModel):
    date_from: date | None = None
    date_to: date | None = None
    category_id: int | None = None

    @classmethod
    def as_query(
        cls,
        date_from: Annotated[date | None, Query(description="YYYY-MM-DD")] = None,
        date_to: Annotated[date | None, Query(description="YYYY-MM-DD")] = None,
        category_id: Annotated[int | None, Query(description="カテゴリID")] = None,
    ) -> SummaryQuery:
        return cls(date_from=date_from, date_to=date_to, category_id=category_id)
