"""Middleware that gates every request behind a shared API key."""
from __future__ import annotations

import hmac

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from app.api.responses import error_response
from app.core.errors import InvalidAPIKey, NoAPIKey

API_KEY_HEADER = "x-api-key"


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Reject requests whose ``x-api-key`` header is not ``<scheme> <key>``."""

    def __init__(self, app, api_key: str):
        super().__init__(app)
        self.api_key = api_key

    async def dispatch(self, request: Request, call_next):
        # CORS preflight never carries custom headers
        if request.method == "OPTIONS":
            return await call_next(request)

        header = request.headers.get(API_KEY_HEADER)
        if not header:
            return error_response(NoAPIKey())

        parts = header.split(" ")
        if len(parts) != 2 or not hmac.compare_digest(parts[1].encode(), self.api_key.encode()):
            return error_response(InvalidAPIKey())

        return await call_next(request)
