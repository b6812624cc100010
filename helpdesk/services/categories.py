from __future__ import annotations

import structlog

from helpdesk.core.exceptions import ConflictError, NotFoundError
from helpdesk.infra.unit_of_work import UnitOfWorkFactory
from helpdesk.schemas.category import CategoryCreateRequest, CategoryOut, CategoryUpdateRequest

logger = structlog.get_logger(__name__)


class CategoryService:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    async def create(self, payload: CategoryCreateRequest) -> CategoryOut:
        async with self._uow_factory() as uow:
            category = await uow.categories.add(**payload.model_dump())
            out = CategoryOut.model_validate(category)
        logger.info("category_created", category_id=out.id)
        return out

    async def list_active(self) -> list[CategoryOut]:
        return await self._list(active_only=True)

    async def list_all(self) -> list[CategoryOut]:
        return await self._list(active_only=False)

    async def _list(self, *, active_only: bool) -> list[CategoryOut]:
        async with self._uow_factory() as uow:
            categories = await uow.categories.list(active_only=active_only)
            return [CategoryOut.model_validate(c) for c in categories]

    async def get_by_id(self, category_id: int) -> CategoryOut | None:
        async with self._uow_factory() as uow:
            category = await uow.categories.get(category_id)
            return CategoryOut.model_validate(category) if category else None

    async def update(self, category_id: int, payload: CategoryUpdateRequest) -> CategoryOut:
        # description は明示的な null でクリアできる
        changes = {
            k: v
            for k, v in payload.model_dump(exclude_unset=True).items()
            if v is not None or k == "description"
        }
        async with self._uow_factory() as uow:
            category = await uow.categories.get(category_id)
            if category is None:
                logger.warning(
                    "category_update_rejected", category_id=category_id, reason="not_found"
                )
                raise NotFoundError("Category not found")
            category = await uow.categories.update(category, changes)
            out = CategoryOut.model_validate(category)
        logger.info("category_updated", category_id=category_id, fields=sorted(changes))
        return out

    async def delete(self, category_id: int) -> bool:
        """Soft delete. Refused while any report still references the category."""
        async with self._uow_factory() as uow:
            category = await uow.categories.get(category_id)
            if category is None:
                return False
            in_use = await uow.reports.count_for_category(category_id)
            if in_use:
                logger.warning("category_delete_rejected", category_id=category_id, reports=in_use)
                raise ConflictError("category is used by reports")
            await uow.categories.update(category, {"is_active": False})
        logger.info("category_deactivated", category_id=category_id)
        return True
