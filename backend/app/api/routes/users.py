"""User administration endpoints."""
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.responses import Envelope, envelope
from app.core.dependencies import get_db, get_user_service, require_auth, require_one_of_roles
from app.core.roles import Role
from app.schemas.user import (
    UserCreate,
    UserIdResponse,
    UserListQuery,
    UserListResponse,
    UserRead,
    UserStats,
    UserUpdate,
)
from app.services.users import UserService

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(require_auth), Depends(require_one_of_roles(Role.ADMIN))],
)


@router.get("", response_model=Envelope[UserListResponse])
async def list_users(
    query: Annotated[UserListQuery, Query()],
    user_service: UserService = Depends(get_user_service),
) -> dict:
    return envelope(await user_service.list_users(query))


@router.get("/stats", response_model=Envelope[UserStats])
async def get_users_stats(user_service: UserService = Depends(get_user_service)) -> dict:
    return envelope(await user_service.get_stats())


@router.get("/{user_id}", response_model=Envelope[UserRead])
async def get_user(user_id: uuid.UUID, user_service: UserService = Depends(get_user_service)) -> dict:
    return envelope(await user_service.get_user(user_id))


@router.post("", response_model=Envelope[UserIdResponse], status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    session: AsyncSession = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
) -> dict:
    result = await user_service.create_user(payload)
    await session.commit()
    return envelope(result)


@router.patch("/{user_id}", response_model=Envelope[UserIdResponse])
async def update_user(
    user_id: uuid.UUID,
    payload: UserUpdate,
    session: AsyncSession = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
) -> dict:
    result = await user_service.update_user(user_id, payload)
    await session.commit()
    return envelope(result)


@router.delete("/{user_id}", response_model=Envelope[UserIdResponse])
async def soft_delete_user(
    user_id: uuid.UUID,
    session: AsyncSession = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
) -> dict:
    result = await user_service.soft_delete_user(user_id)
    await session.commit()
    return envelope(result)


@router.post("/{user_id}/restore", response_model=Envelope[UserIdResponse])
async def restore_user(
    user_id: uuid.UUID,
    session: AsyncSession = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
) -> dict:
    result = await user_service.restore_user(user_id)
    await session.commit()
    return envelope(result)


@router.delete(
    "/{user_id}/permanent",
    response_model=Envelope[UserIdResponse],
    dependencies=[Depends(require_one_of_roles(Role.SUPER_ADMIN))],
)
async def delete_user(
    user_id: uuid.UUID,
    session: AsyncSession = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
) -> dict:
    result = await user_service.delete_user(user_id)
    await session.commit()
    return envelope(result)
