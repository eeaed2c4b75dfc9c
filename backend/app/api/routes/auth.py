"""Authentication endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.responses import Envelope, envelope
from app.core.dependencies import get_auth_service, get_db, get_user_service, require_auth
from app.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse, TokenClaims
from app.schemas.user import UserRead
from app.services.auth import AuthService
from app.services.users import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=Envelope[RegisterResponse])
async def register_user(
    payload: RegisterRequest,
    session: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict:
    result = await auth_service.register(payload.name, payload.email, payload.password)
    await session.commit()
    return envelope(result)


@router.post("/login", response_model=Envelope[LoginResponse])
async def login(
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> dict:
    return envelope(await auth_service.login(payload.email, payload.password))


@router.get("/me", response_model=Envelope[UserRead])
async def get_current_user_info(
    claims: TokenClaims = Depends(require_auth),
    user_service: UserService = Depends(get_user_service),
) -> dict:
    return envelope(await user_service.get_user(claims.user_id))
