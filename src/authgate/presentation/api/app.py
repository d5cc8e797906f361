"""FastAPI application factory.

Creates and configures the FastAPI application with the registration
router, the sign-in engine under ``/auth``, middleware and exception
handlers.

Routes:
    POST /api/auth/register   create a credentials user
    *    /auth/*              sign-in engine (CSRF, session, callbacks, sign-out)
    GET  /health              liveness probe
"""

import logging
import sys
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine
from starlette.middleware.sessions import SessionMiddleware

from authgate.application import build_auth_engine
from authgate.presentation.api.dependencies import (
    create_engine,
    create_session_maker,
    create_tables,
)
from authgate.presentation.api.exception_handlers import setup_exception_handlers
from authgate.presentation.api.routers import auth_router
from authgate_auth import PasswordHashingService
from authgate_config.settings import Settings, get_settings

API_VERSION = "0.1.0"
REGISTER_PREFIX = "/api/auth"

# OAuth state only has to survive one round trip to the provider
OAUTH_STATE_MAX_AGE = 15 * 60


@lru_cache(maxsize=1)
def _configure_logging(log_level_str: str) -> None:
    """Configure application logging.

    Sets up logging for the authgate packages with:
    - Console output with timestamps and module names
    - Configurable log level for authgate modules (from settings)
    - WARNING level for noisy third-party libraries
    """
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)

    log_format = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt=date_format,
        stream=sys.stdout,
        force=True,
    )

    for name in ("authgate", "authgate_auth", "authgate_identity", "authgate_config"):
        logging.getLogger(name).setLevel(log_level)

    # Quiet down noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("authlib").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("Starting %s v%s...", app.state.settings.app_name, API_VERSION)
    engine: AsyncEngine = app.state.db_engine
    await create_tables(engine)
    yield

    # Shutdown - dispose the shared engine and its connection pool
    logger.info("Shutting down %s...", app.state.settings.app_name)
    await engine.dispose()
    logger.info("Database connections closed")


def create_app(
    settings: Settings | None = None,
    engine: AsyncEngine | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    settings
        Optional settings override for testing. Defaults to the cached
        process settings, which raises ``ConfigurationError`` when required
        values are missing.
    engine
        Optional database engine override for testing.

    Returns
    -------
    Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    _configure_logging(settings.log_level)

    if engine is None:
        engine = create_engine(settings.database_url)
    session_maker = create_session_maker(engine)
    password_service = PasswordHashingService(rounds=settings.password_hash_rounds)
    auth_engine = build_auth_engine(settings, session_maker, password_service)

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Minimal authentication gateway: registration and sessions.",
        version=API_VERSION,
        docs_url="/docs" if settings.api_debug else None,
        redoc_url="/redoc" if settings.api_debug else None,
        openapi_url="/openapi.json" if settings.api_debug else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.db_engine = engine
    app.state.session_maker = session_maker
    app.state.password_service = password_service
    app.state.auth_engine = auth_engine

    # Holds OAuth state between the provider redirect and the callback
    state_cookie = auth_engine.config.cookies.state
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.auth_secret.get_secret_value(),
        session_cookie=state_cookie.name,
        max_age=OAUTH_STATE_MAX_AGE,
        same_site=state_cookie.same_site,
        https_only=state_cookie.secure,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(auth_router, prefix=REGISTER_PREFIX, tags=["Registration"])
    app.include_router(
        auth_engine.create_router(),
        prefix=auth_engine.config.base_path,
        tags=["Authentication"],
    )

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"ok": True}

    return app
