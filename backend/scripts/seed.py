#!/usr/bin/env python3
"""Seed roles and users from CSV.

Rows are ``name,email,password,role_id``. The file is picked from
``data/seeders/prod`` in production and ``data/seeders/dev`` otherwise.
Users whose email is already taken are skipped.
"""
from __future__ import annotations

import asyncio
import csv
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.config import Settings, get_settings
from app.core.errors import UserEmailAlreadyExists, ValidationError, validate_input
from app.core.logging import configure_logging
from app.core.security import PasswordHasher
from app.db.base import Base
from app.db.session import create_engine, create_session_factory, get_session
from app.repositories.users import UserRepository
from app.schemas.user import UserCreate
from app.services.roles import seed_roles
from app.services.users import UserService

logger = logging.getLogger("app.seed")

SEEDERS_PATH = Path(__file__).resolve().parent.parent / "data" / "seeders"


def seeders_dir(settings: Settings) -> Path:
    return SEEDERS_PATH / ("prod" if settings.app_env == "production" else "dev")


def read_users(path: Path) -> list[UserCreate]:
    users = []
    with path.open(newline="", encoding="utf-8") as handle:
        for line_no, record in enumerate(csv.reader(handle), start=1):
            if not record:
                continue
            if len(record) != 4:
                raise ValueError(f"{path}:{line_no}: expected 4 columns, got {len(record)}")
            name, email, password, role_id = record
            try:
                users.append(validate_input(UserCreate, name=name, email=email, password=password, role=role_id))
            except ValidationError as exc:
                raise ValueError(f"{path}:{line_no}: invalid user {exc.fields}") from exc
    return users


async def seed(settings: Settings) -> int:
    users = read_users(seeders_dir(settings) / "users.csv")
    engine = create_engine(settings.database_url)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        created = 0
        async with get_session(create_session_factory(engine)) as session:
            await seed_roles(session)
            service = UserService(UserRepository(session), PasswordHasher(schemes=[settings.password_hash_scheme]))
            for user_in in users:
                try:
                    result = await service.create_user(user_in)
                except UserEmailAlreadyExists:
                    logger.info("Skipping %s, email already exists", user_in.email)
                    continue
                logger.info("Inserted user %s (%s)", user_in.email, result.id)
                created += 1
            await session.commit()
        return created
    finally:
        await engine.dispose()


if __name__ == "__main__":
    settings = get_settings()
    configure_logging(settings.log_level)
    count = asyncio.run(seed(settings))
    logger.info("Seeded %d user(s)", count)
