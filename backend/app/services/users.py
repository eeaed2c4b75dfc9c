"""User service for administrative CRUD."""
from __future__ import annotations

import asyncio
import logging
import math
import uuid
from typing import Callable

from uuid6 import uuid7

from app.core.errors import UserEmailAlreadyExists, UserNotFound
from app.core.security import PasswordHasher
from app.models.user import User
from app.repositories.users import UserRepository
from app.schemas.user import (
    PaginationMeta,
    UserCreate,
    UserIdResponse,
    UserListQuery,
    UserListResponse,
    UserRead,
    UserStats,
    UserUpdate,
)

logger = logging.getLogger(__name__)


class UserService:
    def __init__(
        self,
        repository: UserRepository,
        hasher: PasswordHasher,
        id_factory: Callable[[], uuid.UUID] = uuid7,
    ) -> None:
        self._repository = repository
        self._hasher = hasher
        self._id_factory = id_factory

    async def list_users(self, query: UserListQuery) -> UserListResponse:
        users = await self._repository.list_users(query)
        total = await self._repository.count_users(query)
        return UserListResponse(
            users=[UserRead.model_validate(user) for user in users],
            meta=PaginationMeta(
                page=query.page,
                limit=query.limit,
                total_data=total,
                total_page=math.ceil(total / query.limit),
            ),
        )

    async def get_user(self, user_id: uuid.UUID) -> UserRead:
        user = await self._repository.get_by_id(user_id)
        if user is None:
            raise UserNotFound()
        return UserRead.model_validate(user)

    async def get_stats(self) -> UserStats:
        active, deleted = await self._repository.count_by_state()
        return UserStats(
            total_users=active + deleted,
            total_non_deleted_users=active,
            total_deleted_users=deleted,
        )

    async def create_user(self, user_in: UserCreate) -> UserIdResponse:
        if await self._repository.get_by_email(user_in.email) is not None:
            raise UserEmailAlreadyExists()

        password_hash = await asyncio.to_thread(self._hasher.hash, user_in.password)
        user = User(
            id=self._id_factory(),
            name=user_in.name,
            email=user_in.email,
            password=password_hash,
            role_id=user_in.role.role_id,
        )
        user_id = await self._repository.insert(user)
        logger.info("Created user %s with role %s", user_id, user_in.role)
        return UserIdResponse(id=user_id)

    async def update_user(self, user_id: uuid.UUID, user_in: UserUpdate) -> UserIdResponse:
        user = await self._repository.get_by_id(user_id)
        if user is None:
            raise UserNotFound()

        if user_in.email is not None:
            existing = await self._repository.get_by_email(user_in.email)
            if existing is not None and existing.id != user.id:
                raise UserEmailAlreadyExists()
            user.email = user_in.email
        if user_in.name is not None:
            user.name = user_in.name
        if user_in.password is not None:
            user.password = await asyncio.to_thread(self._hasher.hash, user_in.password)
        if user_in.role is not None:
            user.role_id = user_in.role.role_id

        await self._repository.save(user)
        logger.info("Updated user %s", user_id)
        return UserIdResponse(id=user_id)

    async def soft_delete_user(self, user_id: uuid.UUID) -> UserIdResponse:
        if not await self._repository.soft_delete(user_id):
            raise UserNotFound()
        logger.info("Soft-deleted user %s", user_id)
        return UserIdResponse(id=user_id)

    async def restore_user(self, user_id: uuid.UUID) -> UserIdResponse:
        user = await self._repository.get_by_id(user_id, include_deleted=True)
        if user is None or not user.is_deleted:
            raise UserNotFound()
        # The email may have been taken by another user while this one was deleted
        if await self._repository.get_by_email(user.email) is not None:
            raise UserEmailAlreadyExists()

        if not await self._repository.restore(user_id):
            raise UserNotFound()
        logger.info("Restored user %s", user_id)
        return UserIdResponse(id=user_id)

    async def delete_user(self, user_id: uuid.UUID) -> UserIdResponse:
        if not await self._repository.delete(user_id):
            raise UserNotFound()
        logger.info("Deleted user %s", user_id)
        return UserIdResponse(id=user_id)
