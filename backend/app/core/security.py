"""Security helpers for password hashing and access token signing."""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Sequence

import jwt
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError

from app.core.errors import HashingError, InvalidBearerToken, TokenSigningError
from app.core.roles import Role
from app.schemas.auth import PASSWORD_MAX_LENGTH, TokenClaims

logger = logging.getLogger(__name__)

TOKEN_ISSUER = "hackathon-starter"
TOKEN_AUDIENCE = "hackathon-starter"
TOKEN_ALGORITHM = "HS256"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PasswordHasher:
    """Hash and verify user passwords using Argon2id."""

    def __init__(self, schemes: Sequence[str] = ("argon2",), max_length: int = PASSWORD_MAX_LENGTH) -> None:
        self._context = CryptContext(schemes=list(schemes), deprecated="auto")
        self._max_length = max_length

    def hash(self, password: str) -> str:
        if len(password.encode("utf-8")) > self._max_length:
            raise HashingError(f"password longer than {self._max_length} bytes")
        try:
            return self._context.hash(password)
        except (TypeError, ValueError) as exc:
            raise HashingError() from exc

    def verify(self, password: str, hashed: str) -> bool:
        try:
            return self._context.verify(password, hashed)
        except (TypeError, ValueError):
            # Unknown or corrupt digest
            return False


class TokenIssuer:
    """Issue and verify HS256 access tokens.

    ``verify`` only checks signature, structure, issuer and audience. The
    not-before and expiry window is checked by the caller so each failure can
    be reported with its own error.
    """

    def __init__(
        self,
        secret_key: str,
        expires_in: timedelta,
        issuer: str = TOKEN_ISSUER,
        audience: str = TOKEN_AUDIENCE,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._secret_key = secret_key
        self._expires_in = expires_in
        self._issuer = issuer
        self._audience = audience
        self._clock = clock

    def issue(self, user_id: uuid.UUID, role: Role) -> str:
        now = self._clock()
        payload = {
            "iss": self._issuer,
            "sub": str(user_id),
            "aud": self._audience,
            "exp": now + self._expires_in,
            "iat": now,
            "nbf": now,
            "jti": str(uuid.uuid4()),
            "user_id": str(user_id),
            "role_name": role.label,
        }
        try:
            return jwt.encode(payload, self._secret_key, algorithm=TOKEN_ALGORITHM)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            logger.exception("Failed to sign access token for user %s", user_id)
            raise TokenSigningError() from exc

    def verify(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[TOKEN_ALGORITHM],
                audience=self._audience,
                issuer=self._issuer,
                options={
                    "verify_exp": False,
                    "verify_nbf": False,
                    "verify_iat": False,
                    "require": ["exp", "iat", "nbf", "jti", "sub"],
                },
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidBearerToken() from exc

        try:
            return TokenClaims.model_validate(payload)
        except PydanticValidationError as exc:
            raise InvalidBearerToken() from exc
