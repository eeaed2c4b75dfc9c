"""
Shared test fixtures and utilities.

Every test gets its own SQLite file under ``tmp_path`` and settings built
explicitly, so nothing reads the developer's ``.env``.
"""
from __future__ import annotations

import asyncio
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

import app.models  # noqa: F401  (registers tables on Base.metadata)
from app.core.config import Settings
from app.core.roles import Role
from app.core.security import PasswordHasher, TokenIssuer
from app.db.base import Base
from app.db.session import create_engine, create_session_factory, get_session
from app.main import create_app
from app.repositories.users import UserRepository
from app.schemas.user import UserCreate
from app.services.roles import seed_roles
from app.services.users import UserService

TEST_JWT_SECRET = "test-secret-key-for-testing-only-0123456789"
TEST_PASSWORD = "password"


def create_test_token(
    user_id: uuid.UUID | None = None,
    role: Role = Role.USER,
    secret: str = TEST_JWT_SECRET,
    expired: bool = False,
    not_yet_valid: bool = False,
) -> str:
    """
    Create a signed access token for tests.

    Args:
        user_id: User ID to embed, random when omitted
        role: Role to embed
        secret: Signing secret
        expired: If True, the token expired an hour ago
        not_yet_valid: If True, the token only becomes valid in an hour
    """
    now = datetime.now(timezone.utc)
    if expired:
        issued_at = now - timedelta(hours=2)
    elif not_yet_valid:
        issued_at = now + timedelta(hours=1)
    else:
        issued_at = now
    issuer = TokenIssuer(secret, timedelta(hours=1), clock=lambda: issued_at)
    return issuer.issue(user_id or uuid.uuid4(), role)


async def _prepare_database(database_url: str):
    engine = create_engine(database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = create_session_factory(engine)
    async with get_session(factory) as session:
        await seed_roles(session)
        await session.commit()
    return engine, factory


def seed_user(
    settings: Settings,
    name: str,
    email: str,
    password: str = TEST_PASSWORD,
    role: Role = Role.USER,
) -> uuid.UUID:
    """Insert a user straight into the test database before the app starts."""

    async def _seed() -> uuid.UUID:
        engine, factory = await _prepare_database(settings.database_url)
        try:
            async with get_session(factory) as session:
                service = UserService(UserRepository(session), PasswordHasher())
                created = await service.create_user(
                    UserCreate(name=name, email=email, password=password, role=role)
                )
                await session.commit()
                return created.id
        finally:
            await engine.dispose()

    return asyncio.run(_seed())


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret_key=TEST_JWT_SECRET,
        access_token_expire_minutes=60,
        log_level="WARNING",
    )


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher()


@pytest.fixture
def token_issuer() -> TokenIssuer:
    return TokenIssuer(TEST_JWT_SECRET, timedelta(hours=1))


@pytest.fixture
async def session(settings):
    """Session on a fresh database with the roles table seeded."""
    engine, factory = await _prepare_database(settings.database_url)
    try:
        async with get_session(factory) as session:
            yield session
    finally:
        await engine.dispose()


@pytest.fixture
def repository(session) -> UserRepository:
    return UserRepository(session)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as client:
        yield client


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
