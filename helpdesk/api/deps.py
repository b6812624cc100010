"""API dependency helpers and service providers."""

from collections.abc import AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from helpdesk import db
from helpdesk.infra.unit_of_work import SqlAlchemyUnitOfWork, UnitOfWorkFactory
from helpdesk.services.auth import AuthService
from helpdesk.services.categories import CategoryService
from helpdesk.services.dashboard import DashboardService
from helpdesk.services.export import ExportService
from helpdesk.services.health import HealthService
from helpdesk.services.progress import ProgressService
from helpdesk.services.report_queries import ReportQueryService
from helpdesk.services.reports import ReportService
from helpdesk.services.users import UserService

__all__ = [
    "get_session_factory",
    "get_uow_factory",
    "get_auth_service",
    "get_user_service",
    "get_category_service",
    "get_report_service",
    "get_report_query_service",
    "get_progress_service",
    "get_dashboard_service",
    "get_export_service",
    "get_health_service",
]


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    # db.configure_engine() で差し替えられるためモジュール属性を都度参照する
    return db.SessionLocal


def get_uow_factory(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> UnitOfWorkFactory:
    def _factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(session_factory)

    return _factory


# --- Service providers for DI ---


def get_auth_service(uow_factory: UnitOfWorkFactory = Depends(get_uow_factory)) -> AuthService:
    return AuthService(uow_factory)


def get_user_service(uow_factory: UnitOfWorkFactory = Depends(get_uow_factory)) -> UserService:
    return UserService(uow_factory)


def get_category_service(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> CategoryService:
    return CategoryService(uow_factory)


def get_report_service(uow_factory: UnitOfWorkFactory = Depends(get_uow_factory)) -> ReportService:
    return ReportService(uow_factory)


def get_report_query_service(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ReportQueryService:
    return ReportQueryService(uow_factory)


def get_progress_service(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ProgressService:
    return ProgressService(uow_factory)


def get_dashboard_service(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> DashboardService:
    return DashboardService(uow_factory)


def get_export_service(uow_factory: UnitOfWorkFactory = Depends(get_uow_factory)) -> ExportService:
    return ExportService(uow_factory)


async def get_health_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> AsyncIterator[HealthService]:
    async with session_factory() as session:
        yield HealthService(session)
