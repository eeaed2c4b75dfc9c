"""
Typed application errors.

Every error the API reports on purpose is an ``AppError`` subclass carrying
its HTTP status and a stable code. Route handlers raise them and the handlers
registered in ``app.api.responses`` render them into the response envelope.
Anything else (database failures included) is left to propagate and ends up
as a 500.
"""
from __future__ import annotations

from typing import Any, TypeVar

from fastapi import status
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


class AppError(Exception):
    """Base exception for all errors reported to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"
    message: str = "internal server error"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message or self.message)
        if message is not None:
            self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        data: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            data["details"] = self.details
        return data


class ValidationError(AppError):
    """Input failed shape validation; lists every offending field."""

    status_code = 422
    code = "VALIDATION_ERROR"
    message = "request validation failed"

    def __init__(self, fields: list[dict[str, str]]) -> None:
        super().__init__()
        self.fields = fields

    @classmethod
    def from_errors(cls, errors: list[dict[str, Any]], skip_location: bool = False) -> "ValidationError":
        fields = []
        for error in errors:
            loc = list(error.get("loc", ()))
            if skip_location and loc:
                loc = loc[1:]
            fields.append(
                {
                    "field": ".".join(str(part) for part in loc),
                    "message": error.get("msg", ""),
                    "type": error.get("type", ""),
                }
            )
        return cls(fields)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["fields"] = self.fields
        return data


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
    message = "authentication required"


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    message = "forbidden"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    message = "something not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    message = "conflict"


# Bearer token lifecycle


class NoBearerToken(AuthenticationError):
    code = "NO_BEARER_TOKEN"
    message = "no bearer token provided"


class InvalidBearerToken(AuthenticationError):
    code = "INVALID_BEARER_TOKEN"
    message = "invalid bearer token"


class MalformedBearerToken(InvalidBearerToken):
    """Authorization header is not of the form ``Bearer <token>``."""

    code = "MALFORMED_BEARER_TOKEN"
    message = "malformed authorization header"


class ExpiredBearerToken(AuthenticationError):
    code = "EXPIRED_BEARER_TOKEN"
    message = "expired bearer token"


class BearerTokenNotActive(AuthenticationError):
    code = "BEARER_TOKEN_NOT_ACTIVE"
    message = "bearer token not active"


class RoleCantAccessResource(AuthorizationError):
    code = "ROLE_CANT_ACCESS_RESOURCE"
    message = "role can't access resource"


# API key gate


class NoAPIKey(AuthenticationError):
    code = "NO_API_KEY"
    message = "no api key provided"


class InvalidAPIKey(AuthenticationError):
    code = "INVALID_API_KEY"
    message = "invalid api key"


# Credentials and users


class EmailNotFound(NotFoundError):
    code = "EMAIL_NOT_FOUND"
    message = "email not found"


class CredentialsNotMatch(AuthenticationError):
    code = "CREDENTIALS_NOT_MATCH"
    message = "credentials do not match"


class UserNotFound(NotFoundError):
    code = "USER_NOT_FOUND"
    message = "user not found"


class UserEmailAlreadyExists(ConflictError):
    code = "USER_EMAIL_ALREADY_EXISTS"
    message = "user email already exists"


# Infrastructure


class HashingError(AppError):
    code = "HASHING_ERROR"
    message = "failed to hash password"


class TokenSigningError(AppError):
    code = "TOKEN_SIGNING_ERROR"
    message = "failed to sign access token"


def validate_input(model: type[ModelT], **data: Any) -> ModelT:
    """Build ``model`` from keyword data, raising ``ValidationError`` with every bad field."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError.from_errors(exc.errors()) from exc
