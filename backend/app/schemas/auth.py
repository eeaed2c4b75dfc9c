"""Authentication-related schemas."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    field_validator,
)

from app.core.roles import Role

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _within_byte_limit(value: str) -> str:
    # The hasher limit is in bytes, so multibyte passwords hit it before the character limit
    if len(value.encode("utf-8")) > PASSWORD_MAX_LENGTH:
        raise ValueError(f"password longer than {PASSWORD_MAX_LENGTH} bytes")
    return value


Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
Email = Annotated[EmailStr, BeforeValidator(_strip)]
# Passwords are kept byte for byte, surrounding whitespace included
Password = Annotated[
    str,
    Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH),
    AfterValidator(_within_byte_limit),
]


class RegisterRequest(BaseModel):
    name: Name
    email: Email
    password: Password


class LoginRequest(BaseModel):
    email: Email
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LENGTH)


class RegisterResponse(BaseModel):
    # None when the email was already registered
    id: UUID | None = None


class LoginResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., alias="accessToken")


class TokenClaims(BaseModel):
    """Decoded access token payload."""

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    role_name: str
    iss: str
    sub: str
    aud: str | list[str]
    jti: str
    iat: datetime
    nbf: datetime
    exp: datetime

    @field_validator("role_name")
    @classmethod
    def _known_role(cls, value: str) -> str:
        Role.from_label(value)
        return value

    @property
    def role(self) -> Role:
        return Role.from_label(self.role_name)
