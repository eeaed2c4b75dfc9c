"""Keep the roles table in step with the Role enumeration."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.roles import Role
from app.models.role import RoleRecord

logger = logging.getLogger(__name__)


async def seed_roles(session: AsyncSession) -> int:
    """Insert missing roles and fix renamed ones. Returns the number of rows written."""
    result = await session.execute(select(RoleRecord))
    existing = {record.id: record for record in result.scalars().all()}

    written = 0
    for role in Role:
        record = existing.get(role.role_id)
        if record is None:
            session.add(RoleRecord(id=role.role_id, name=role.label))
            written += 1
        elif record.name != role.label:
            record.name = role.label
            written += 1

    if written:
        await session.flush()
        logger.info("Seeded %d role(s)", written)
    return written
