from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.models import Category
from helpdesk.utils.datetime import utcnow


class SqlAlchemyCategoryRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, category_id: int) -> Category | None:
        return await self._session.get(Category, int(category_id))

    async def add(self, **fields: Any) -> Category:
        category = Category(**fields)
        self._session.add(category)
        await self._session.flush()
        return category

    async def update(self, category: Category, changes: dict[str, Any]) -> Category:
        for key, value in changes.items():
            setattr(category, key, value)
        category.updated_at = utcnow()
        await self._session.flush()
        return category

    async def list(self, *, active_only: bool) -> list[Category]:
        stmt = select(Category)
        if active_only:
            stmt = stmt.where(Category.is_active.is_(True))
        stmt = stmt.order_by(Category.name.asc(), Category.id.asc())
        return list((await self._session.scalars(stmt)).all())
