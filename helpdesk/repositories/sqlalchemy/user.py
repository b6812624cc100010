"""SQLAlchemy implementation of the account repository."""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.models import User
from helpdesk.repositories.interfaces import UserCriteria
from helpdesk.utils.datetime import utcnow
from helpdesk.utils.search import LIKE_ESCAPE, contains_pattern


class SqlAlchemyUserRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: int) -> User | None:
        return await self._session.get(User, int(user_id))

    async def get_by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == username).limit(1)
        return (await self._session.scalars(stmt)).first()

    async def add(self, **fields: Any) -> User:
        user = User(**fields)
        self._session.add(user)
        await self._session.flush()
        return user

    async def update(self, user: User, changes: dict[str, Any]) -> User:
        for key, value in changes.items():
            setattr(user, key, value)
        user.updated_at = utcnow()
        await self._session.flush()
        return user

    async def list(
        self, criteria: UserCriteria, *, offset: int, limit: int
    ) -> tuple[list[User], int]:
        conditions = []
        if criteria.search:
            term = contains_pattern(criteria.search)
            conditions.append(
                or_(
                    User.name.ilike(term, escape=LIKE_ESCAPE),
                    User.username.ilike(term, escape=LIKE_ESCAPE),
                    User.email.ilike(term, escape=LIKE_ESCAPE),
                )
            )
        if criteria.role is not None:
            conditions.append(User.role == criteria.role)
        if criteria.is_active is not None:
            conditions.append(User.is_active.is_(criteria.is_active))

        stmt = select(User).where(*conditions).order_by(User.id.asc()).offset(offset).limit(limit)
        count_stmt = select(func.count()).select_from(User).where(*conditions)
        users = list((await self._session.scalars(stmt)).all())
        total = int((await self._session.execute(count_stmt)).scalar_one())
        return users, total
