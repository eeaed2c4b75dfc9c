"""API router aggregator."""
from fastapi import APIRouter

from app.api.responses import envelope
from app.api.routes import auth, health, users

root_router = APIRouter()


@root_router.get("/", include_in_schema=False)
async def root() -> dict:
    return envelope(health.GREETING)


api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(users.router)

__all__ = ["api_router", "root_router"]
