"""Unit of Work abstraction used by the service layer."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Protocol

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from helpdesk.core.exceptions import InfrastructureError
from helpdesk.repositories.interfaces import (
    CategoryRepository,
    ProgressRepository,
    ReportRepository,
    StatsRepository,
    UserRepository,
)
from helpdesk.repositories.sqlalchemy import (
    SqlAlchemyCategoryRepository,
    SqlAlchemyProgressRepository,
    SqlAlchemyReportRepository,
    SqlAlchemyStatsRepository,
    SqlAlchemyUserRepository,
)


class UnitOfWork(Protocol, AbstractAsyncContextManager["UnitOfWork"]):
    """Defines the repository boundary exposed to services.

    One unit = one transaction: leaving the context normally commits,
    leaving it with an exception rolls everything back.
    """

    users: UserRepository
    categories: CategoryRepository
    reports: ReportRepository
    progress: ProgressRepository
    stats: StatsRepository

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


UnitOfWorkFactory = Callable[[], UnitOfWork]


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Unit of Work backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: AsyncSession | None = None
        self.users: UserRepository
        self.categories: CategoryRepository
        self.reports: ReportRepository
        self.progress: ProgressRepository
        self.stats: StatsRepository

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        session = self._session_factory()
        self._session = session
        self.users = SqlAlchemyUserRepository(session)
        self.categories = SqlAlchemyCategoryRepository(session)
        self.reports = SqlAlchemyReportRepository(session)
        self.progress = SqlAlchemyProgressRepository(session)
        self.stats = SqlAlchemyStatsRepository(session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._session is None:
            return
        try:
            if exc_type:
                await self._session.rollback()
            else:
                await self._session.commit()
        finally:
            await self._session.close()
            self._session = None
        if isinstance(exc, OperationalError | InterfaceError):
            raise InfrastructureError("database unavailable") from exc

    async def commit(self) -> None:
        if self._session is not None:
            await self._session.commit()

    async def rollback(self) -> None:
        if self._session is not None:
            await self._session.rollback()

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork session is not initialized. Use within context manager.")
        return self._session
