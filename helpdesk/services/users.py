"""Account management (admin-facing)."""

from __future__ import annotations

import asyncio

import structlog
from sqlalchemy.exc import IntegrityError

from helpdesk.core.exceptions import ConflictError, NotFoundError
from helpdesk.core.security import hash_password
from helpdesk.infra.unit_of_work import UnitOfWorkFactory
from helpdesk.models import UserRole
from helpdesk.repositories.interfaces import UserCriteria
from helpdesk.schemas.user import UserCreateRequest, UserListResponse, UserOut, UserUpdateRequest
from helpdesk.utils.paging import page_offset, total_pages

logger = structlog.get_logger(__name__)

DUPLICATE_ACCOUNT = "username or email already exists"


class UserService:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    async def create(self, payload: UserCreateRequest) -> UserOut:
        password_hash = await asyncio.to_thread(hash_password, payload.password)
        try:
            async with self._uow_factory() as uow:
                user = await uow.users.add(
                    username=payload.username,
                    name=payload.name,
                    email=str(payload.email),
                    password_hash=password_hash,
                    role=payload.role,
                    is_active=payload.is_active,
                )
                out = UserOut.model_validate(user)
        except IntegrityError as exc:
            logger.warning("user_create_conflict", username=payload.username)
            raise ConflictError(DUPLICATE_ACCOUNT) from exc
        logger.info("user_created", user_id=out.id, role=out.role.value)
        return out

    async def list(
        self,
        *,
        search: str | None = None,
        role: UserRole | None = None,
        is_active: bool | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> UserListResponse:
        criteria = UserCriteria(
            search=(search or "").strip() or None, role=role, is_active=is_active
        )
        async with self._uow_factory() as uow:
            users, total = await uow.users.list(
                criteria, offset=page_offset(page, limit), limit=limit
            )
            data = [UserOut.model_validate(u) for u in users]
        return UserListResponse(
            data=data,
            total=total,
            page=page,
            limit=limit,
            total_pages=total_pages(total, limit),
        )

    async def get_by_id(self, user_id: int) -> UserOut | None:
        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            return UserOut.model_validate(user) if user else None

    async def update(self, user_id: int, payload: UserUpdateRequest) -> UserOut:
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        password = changes.pop("password", None)
        if password is not None:
            changes["password_hash"] = await asyncio.to_thread(hash_password, password)
        if "email" in changes:
            changes["email"] = str(changes["email"])
        try:
            async with self._uow_factory() as uow:
                user = await uow.users.get(user_id)
                if user is None:
                    logger.warning("user_update_rejected", user_id=user_id, reason="not_found")
                    raise NotFoundError("User not found")
                user = await uow.users.update(user, changes)
                out = UserOut.model_validate(user)
        except IntegrityError as exc:
            logger.warning("user_update_conflict", user_id=user_id)
            raise ConflictError(DUPLICATE_ACCOUNT) from exc
        # password_hash はログに出さない
        fields = sorted(k for k in changes if k != "password_hash")
        logger.info("user_updated", user_id=user_id, fields=fields)
        return out

    async def deactivate(self, user_id: int) -> bool:
        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            if user is None:
                return False
            await uow.users.update(user, {"is_active": False})
        logger.info("user_deactivated", user_id=user_id)
        return True

    async def reset_password(self, user_id: int, new_password: str) -> bool:
        password_hash = await asyncio.to_thread(hash_password, new_password)
        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            if user is None:
                return False
            await uow.users.update(user, {"password_hash": password_hash})
        logger.info("user_password_reset", user_id=user_id)
        return True
