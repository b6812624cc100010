"""Repository abstractions for the service layer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from helpdesk.models import Category, Report, ReportProgress, ReportStatus, User, UserRole


@dataclass
class ReportCriteria:
    """Resolved report filters. None means "no constraint"."""

    status: ReportStatus | None = None
    category_id: int | None = None
    reporter_id: int | None = None
    npsn: str | None = None
    created_from: datetime | None = None
    created_to: datetime | None = None
    search: str | None = None


@dataclass
class ReportRow:
    report: Report
    category_name: str
    reporter_name: str


@dataclass
class UserCriteria:
    search: str | None = None
    role: UserRole | None = None
    is_active: bool | None = None


class UserRepository(Protocol):
    async def get(self, user_id: int) -> User | None: ...

    async def get_by_username(self, username: str) -> User | None: ...

    async def add(self, **fields: Any) -> User: ...

    async def update(self, user: User, changes: dict[str, Any]) -> User: ...

    async def list(
        self, criteria: UserCriteria, *, offset: int, limit: int
    ) -> tuple[list[User], int]: ...


class CategoryRepository(Protocol):
    async def get(self, category_id: int) -> Category | None: ...

    async def add(self, **fields: Any) -> Category: ...

    async def update(self, category: Category, changes: dict[str, Any]) -> Category: ...

    async def list(self, *, active_only: bool) -> list[Category]: ...


class ReportRepository(Protocol):
    async def get(self, report_id: int) -> Report | None: ...

    async def add(self, **fields: Any) -> Report: ...

    async def update(self, report: Report, changes: dict[str, Any]) -> Report: ...

    async def delete(self, report_id: int) -> None: ...

    async def count_for_category(self, category_id: int) -> int: ...

    async def get_row(self, report_id: int) -> ReportRow | None: ...

    async def list_rows(
        self, criteria: ReportCriteria, *, offset: int = 0, limit: int | None = None
    ) -> tuple[list[ReportRow], int]: ...


class ProgressRepository(Protocol):
    async def append(
        self, *, report_id: int, admin_id: int | None, status: ReportStatus, notes: str | None
    ) -> ReportProgress: ...

    async def list_newest_first(self, report_id: int) -> list[ReportProgress]: ...

    async def list_oldest_first(self, report_id: int) -> list[ReportProgress]: ...

    async def delete_for_report(self, report_id: int) -> None: ...


class StatsRepository(Protocol):
    async def count_by_status(self, criteria: ReportCriteria) -> dict[ReportStatus, int]: ...

    async def count_by_category(self, criteria: ReportCriteria) -> list[tuple[str, int]]: ...

    async def count_by_month(self, criteria: ReportCriteria) -> list[tuple[int, int, int]]: ...


__all__ = [
    "ReportCriteria",
    "ReportRow",
    "UserCriteria",
    "UserRepository",
    "CategoryRepository",
    "ReportRepository",
    "ProgressRepository",
    "StatsRepository",
]
