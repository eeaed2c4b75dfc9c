"""SQL access to the users table."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Select, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.schemas.user import UserListQuery

_SORT_COLUMNS = {
    "created_at": User.created_at,
    "updated_at": User.updated_at,
    "name": User.name,
    "email": User.email,
}


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository:
    """Credential store backed by an ``AsyncSession``.

    Lookups only see users that are not soft-deleted unless told otherwise.
    Writes are flushed, never committed; the caller owns the transaction.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_email(self, email: str) -> User | None:
        result = await self._session.execute(
            select(User).where(User.email == _normalize_email(email), User.deleted_at.is_(None))
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, user_id: uuid.UUID, include_deleted: bool = False) -> User | None:
        stmt = select(User).where(User.id == user_id)
        if not include_deleted:
            stmt = stmt.where(User.deleted_at.is_(None))
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def insert(self, user: User) -> uuid.UUID:
        user.email = _normalize_email(user.email)
        self._session.add(user)
        await self._session.flush()
        return user.id

    async def save(self, user: User) -> uuid.UUID:
        user.email = _normalize_email(user.email)
        user.updated_at = datetime.now(timezone.utc)
        await self._session.flush()
        return user.id

    def _filtered(self, stmt: Select, query: UserListQuery) -> Select:
        if not query.include_deleted:
            stmt = stmt.where(User.deleted_at.is_(None))
        if query.search:
            pattern = f"%{query.search}%"
            stmt = stmt.where(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
        return stmt

    async def list_users(self, query: UserListQuery) -> list[User]:
        column = _SORT_COLUMNS[query.sort_by]
        ordering = column.asc() if query.order == "asc" else column.desc()
        stmt = (
            self._filtered(select(User), query)
            .order_by(ordering, User.id)
            .limit(query.limit)
            .offset(query.offset)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def count_users(self, query: UserListQuery) -> int:
        stmt = self._filtered(select(func.count()).select_from(User), query)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def count_by_state(self) -> tuple[int, int]:
        """Return ``(non_deleted, deleted)`` user counts."""
        result = await self._session.execute(
            select(
                func.count().filter(User.deleted_at.is_(None)),
                func.count().filter(User.deleted_at.is_not(None)),
            ).select_from(User)
        )
        active, deleted = result.one()
        return active, deleted

    async def soft_delete(self, user_id: uuid.UUID) -> bool:
        now = datetime.now(timezone.utc)
        result = await self._session.execute(
            update(User)
            .where(User.id == user_id, User.deleted_at.is_(None))
            .values(deleted_at=now, updated_at=now)
        )
        return result.rowcount > 0

    async def restore(self, user_id: uuid.UUID) -> bool:
        result = await self._session.execute(
            update(User)
            .where(User.id == user_id, User.deleted_at.is_not(None))
            .values(deleted_at=None, updated_at=datetime.now(timezone.utc))
        )
        return result.rowcount > 0

    async def delete(self, user_id: uuid.UUID) -> bool:
        result = await self._session.execute(
            delete(User).where(User.id == user_id)
        )
        return result.rowcount > 0
