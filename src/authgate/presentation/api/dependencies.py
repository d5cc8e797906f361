"""FastAPI dependency injection for the AuthGate API.

Provides dependencies for:
- Database engine and per-request sessions
- Service instances
"""

import logging
from pathlib import Path
from typing import Annotated, AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from authgate_auth import PasswordHashingService
from authgate_identity.application.services import RegistrationService
from authgate_identity.infrastructure.persistence.sqlalchemy import (
    IdentityBase,
    UserRepositorySQLAlchemy,
)

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Database Engine & Session
# -----------------------------------------------------------------------------


def create_engine(database_url: str) -> AsyncEngine:
    """
    Create the shared async database engine.

    The engine manages the connection pool and is reused across all requests.

    Parameters
    ----------
    database_url
        Async SQLAlchemy URL

    Returns
    -------
    AsyncEngine instance
    """
    # Ensure data directory exists for SQLite
    if database_url.startswith("sqlite") and ":memory:" not in database_url:
        db_path = database_url.split("///")[-1]
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    return create_async_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before use
    )


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session maker bound to the shared engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    Creates an async session for the request using the shared engine/pool.

    Yields
    ------
    AsyncSession for database operations
    """
    async with request.app.state.session_maker() as session:
        yield session


# Type alias for injected session
DBSession = Annotated[AsyncSession, Depends(get_db_session)]


# -----------------------------------------------------------------------------
# Database Schema Management
# -----------------------------------------------------------------------------


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all database tables (idempotent).

    Uses SQLAlchemy's create_all() which only creates missing tables.
    Existing tables and their data are never modified or deleted.
    """
    logger.info("Ensuring all database tables exist...")

    async with engine.begin() as conn:
        await conn.run_sync(IdentityBase.metadata.create_all)

    logger.info("Database schema is up to date (missing tables created if needed)")


# -----------------------------------------------------------------------------
# Services
# -----------------------------------------------------------------------------


def get_password_service(request: Request) -> PasswordHashingService:
    """Get the shared password hashing service."""
    return request.app.state.password_service


PasswordHashingServiceDep = Annotated[
    PasswordHashingService,
    Depends(get_password_service),
]


async def get_registration_service(
    session: DBSession,
    password_service: PasswordHashingServiceDep,
) -> RegistrationService:
    """Get registration service bound to the request's session."""
    return RegistrationService(
        user_repository=UserRepositorySQLAlchemy(session),
        password_service=password_service,
    )


# Type alias for injected registration service
RegistrationServiceDep = Annotated[
    RegistrationService,
    Depends(get_registration_service),
]
