"""Reusable dependencies for FastAPI routes.

Long-lived collaborators (settings, hasher, token issuer, session factory) are
built once in ``create_app`` and kept on ``app.state``; everything here reads
them from there so tests can swap any of them.
"""
from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Awaitable, Callable

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.errors import (
    BearerTokenNotActive,
    ExpiredBearerToken,
    InvalidBearerToken,
    MalformedBearerToken,
    NoBearerToken,
    RoleCantAccessResource,
)
from app.core.roles import Role
from app.core.security import PasswordHasher, TokenIssuer, utcnow
from app.db.session import get_session
from app.repositories.users import UserRepository
from app.schemas.auth import TokenClaims
from app.services.auth import AuthService
from app.services.users import UserService

logger = logging.getLogger(__name__)

BEARER_SCHEME = "Bearer"


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    async with get_session(request.app.state.session_factory) as session:
        yield session


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


async def get_auth_service(
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> AuthService:
    return AuthService(
        UserRepository(session),
        hasher,
        tokens,
        conflict_on_duplicate=settings.register_conflict_on_duplicate,
    )


async def get_user_service(
    session: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> UserService:
    return UserService(UserRepository(session), hasher)


async def require_auth(
    request: Request,
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> TokenClaims:
    """Authenticate the bearer token and attach its claims to ``request.state``."""
    header = request.headers.get("Authorization")
    if not header:
        raise NoBearerToken()

    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != BEARER_SCHEME:
        raise MalformedBearerToken()

    claims = tokens.verify(parts[1])

    now = utcnow()
    if claims.nbf > now:
        raise BearerTokenNotActive()
    if claims.exp < now:
        raise ExpiredBearerToken()

    request.state.claims = claims
    return claims


def require_one_of_roles(*roles: Role) -> Callable[[Request], Awaitable[TokenClaims]]:
    """Build a dependency that admits super-admins and any of ``roles``.

    Must be declared after ``require_auth`` on the same route.
    """
    allowed = frozenset(roles)

    async def _check_role(request: Request) -> TokenClaims:
        claims = getattr(request.state, "claims", None)
        if not isinstance(claims, TokenClaims):
            raise InvalidBearerToken()

        if not claims.role.satisfies(allowed):
            logger.warning(
                "Role %s denied on %s %s", claims.role_name, request.method, request.url.path
            )
            raise RoleCantAccessResource()
        return claims

    return _check_role
