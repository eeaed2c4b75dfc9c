"""Greeting and health endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.responses import envelope
from app.core.dependencies import get_db

logger = logging.getLogger(__name__)

GREETING = "hello, hackers"

router = APIRouter(tags=["health"])


@router.get("/")
async def greet() -> dict:
    return envelope(GREETING)


@router.get("/health")
async def health(session: AsyncSession = Depends(get_db)) -> dict:
    try:
        await session.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        database = "unavailable"
    return envelope({"status": "ok", "database": database})
