"""FastAPI application entrypoint."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import api_router, root_router
from app.api.responses import register_exception_handlers
from app.core.config import Settings, get_settings
from app.core.logging import configure_logging
from app.core.security import PasswordHasher, TokenIssuer
from app.db.base import Base
from app.db.session import create_engine, create_session_factory, get_session
from app.middleware.api_key import ApiKeyMiddleware
from app.middleware.request_logger import RequestLoggerMiddleware
from app.services.roles import seed_roles

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    engine = create_engine(settings.database_url)
    session_factory = create_session_factory(engine)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        async with get_session(session_factory) as session:
            await seed_roles(session)
            await session.commit()
        logger.info("%s started in %s mode", settings.app_name, settings.app_env)

        try:
            yield
        finally:
            await engine.dispose()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.password_hasher = PasswordHasher(schemes=[settings.password_hash_scheme])
    app.state.token_issuer = TokenIssuer(settings.jwt_secret_key, settings.token_validity)

    register_exception_handlers(app)

    # Outermost middleware is added last
    if settings.api_key_required:
        app.add_middleware(ApiKeyMiddleware, api_key=settings.api_key)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggerMiddleware)

    app.include_router(root_router)
    app.include_router(api_router)
    return app


app = create_app()
