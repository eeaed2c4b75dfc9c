"""Pydantic schemas for user operations."""
from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.roles import DEFAULT_ROLE, Role
from app.schemas.auth import Email, Name, Password

SortField = Literal["created_at", "updated_at", "name", "email"]
SortOrder = Literal["asc", "desc"]


def _parse_role(value: Role | str | int | None) -> Role | None:
    if value is None or isinstance(value, Role):
        return value
    if isinstance(value, int):
        return Role.from_id(value)
    if isinstance(value, str) and value.isdigit():
        return Role.from_id(int(value))
    return Role.from_label(value)


class UserCreate(BaseModel):
    name: Name
    email: Email
    password: Password
    role: Role = DEFAULT_ROLE

    @field_validator("role", mode="before")
    @classmethod
    def _role(cls, value: Role | str | int) -> Role:
        return _parse_role(value)


class UserUpdate(BaseModel):
    name: Name | None = None
    email: Email | None = None
    password: Password | None = None
    role: Role | None = None

    @field_validator("role", mode="before")
    @classmethod
    def _role(cls, value: Role | str | int | None) -> Role | None:
        return _parse_role(value)


class UserRead(BaseModel):
    id: UUID
    name: str
    email: str
    role_name: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class UserIdResponse(BaseModel):
    id: UUID


class UserListQuery(BaseModel):
    limit: int = Field(default=10, ge=1, le=100)
    page: int = Field(default=1, ge=1)
    sort_by: SortField = "created_at"
    order: SortOrder = "desc"
    include_deleted: bool = False
    search: str = Field(default="", max_length=100)

    @property
    def offset(self) -> int:
        return self.limit * (self.page - 1)


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total_data: int
    total_page: int


class UserListResponse(BaseModel):
    users: list[UserRead]
    meta: PaginationMeta


class UserStats(BaseModel):
    total_users: int
    total_non_deleted_users: int
    total_deleted_users: int
