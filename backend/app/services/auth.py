"""Registration and login."""
from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Callable, Protocol

from uuid6 import uuid7

from app.core.errors import CredentialsNotMatch, EmailNotFound, UserEmailAlreadyExists, validate_input
from app.core.roles import DEFAULT_ROLE
from app.core.security import PasswordHasher, TokenIssuer
from app.models.user import User
from app.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse

logger = logging.getLogger(__name__)


class CredentialStore(Protocol):
    async def get_by_email(self, email: str) -> User | None: ...

    async def get_by_id(self, user_id: uuid.UUID, include_deleted: bool = False) -> User | None: ...

    async def insert(self, user: User) -> uuid.UUID: ...


class AuthService:
    """Credential checks and token issuance on top of a credential store.

    Hashing is CPU bound and slow on purpose, so it runs in a worker thread.
    """

    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        tokens: TokenIssuer,
        conflict_on_duplicate: bool = False,
        id_factory: Callable[[], uuid.UUID] = uuid7,
    ) -> None:
        self._store = store
        self._hasher = hasher
        self._tokens = tokens
        self._conflict_on_duplicate = conflict_on_duplicate
        self._id_factory = id_factory

    async def register(self, name: str, email: str, password: str) -> RegisterResponse:
        request = validate_input(RegisterRequest, name=name, email=email, password=password)

        existing = await self._store.get_by_email(request.email)
        if existing is not None:
            if self._conflict_on_duplicate:
                raise UserEmailAlreadyExists()
            # Kept for client compatibility: duplicates get an empty id and no error
            logger.info("Registration skipped, email already in use")
            return RegisterResponse()

        password_hash = await asyncio.to_thread(self._hasher.hash, request.password)
        user = User(
            id=self._id_factory(),
            name=request.name,
            email=request.email,
            password=password_hash,
            role_id=DEFAULT_ROLE.role_id,
        )
        user_id = await self._store.insert(user)
        logger.info("Registered user %s", user_id)
        return RegisterResponse(id=user_id)

    async def login(self, email: str, password: str) -> LoginResponse:
        request = validate_input(LoginRequest, email=email, password=password)

        user = await self._store.get_by_email(request.email)
        if user is None:
            logger.info("Login rejected: email not found")
            raise EmailNotFound()

        valid = await asyncio.to_thread(self._hasher.verify, request.password, user.password)
        if not valid:
            logger.info("Login rejected for user %s: credentials do not match", user.id)
            raise CredentialsNotMatch()

        token = self._tokens.issue(user.id, user.role)
        logger.info("User %s logged in", user.id)
        return LoginResponse(access_token=token)
