"""Credential check. Token issuance lives outside this service."""

from __future__ import annotations

import asyncio

import structlog

from helpdesk.core.exceptions import AuthenticationError
from helpdesk.core.security import verify_password
from helpdesk.infra.unit_of_work import UnitOfWorkFactory
from helpdesk.schemas.user import UserOut

logger = structlog.get_logger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"


class AuthService:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    async def login(self, username: str, password: str) -> UserOut:
        async with self._uow_factory() as uow:
            user = await uow.users.get_by_username(username)
        # ユーザー不在とパスワード不一致は同じメッセージ
        verified = user is not None and await asyncio.to_thread(
            verify_password, password, user.password_hash
        )
        if not verified:
            logger.warning("login_failed", username=username)
            raise AuthenticationError(INVALID_CREDENTIALS)
        if not user.is_active:
            logger.warning("login_rejected_inactive", user_id=user.id)
            raise AuthenticationError("User account is disabled")
        logger.info("login_succeeded", user_id=user.id)
        return UserOut.model_validate(user)

    async def get_current_user(self, user_id: int) -> UserOut | None:
        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            return UserOut.model_validate(user) if user else None
