"""Response envelope and exception handlers.

Every body leaves the API as ``{"payload": ...}``; errors as
``{"payload": {"error": {...}}}``.
"""
from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.core.errors import AppError, AuthenticationError, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    payload: T


def envelope(payload: Any) -> dict[str, Any]:
    return {"payload": payload}


def error_response(exc: AppError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(envelope({"error": exc.to_dict()})),
        headers=headers,
    )


async def _handle_app_error(_: Request, exc: AppError) -> JSONResponse:
    return error_response(exc)


async def _handle_request_validation(_: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(ValidationError.from_errors(exc.errors(), skip_location=True))


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(AppError())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _handle_app_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(Exception, _handle_unexpected)
