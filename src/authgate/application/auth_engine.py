"""Assembly of the sign-in engine from application settings.

Wires providers, cookie specifications and callbacks into an
``AuthEngine``. Store access happens through a fresh session per call,
opened from the app's session maker.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from authgate.application.callbacks import (
    GatewayCallbacks,
    RedirectPolicy,
    SessionClaimShaper,
)
from authgate_auth import AuthUser, OAuthProfile, PasswordHashingService
from authgate_auth.engine import (
    AccountAdapter,
    AuthEngine,
    AuthEngineConfig,
    CredentialsProvider,
    GoogleProvider,
    Provider,
)
from authgate_auth.engine.providers import Authorize
from authgate_auth.exceptions import OAuthCallbackError
from authgate_auth.services import resolve_cookie_policy
from authgate_config.settings import Settings
from authgate_identity.application.services import (
    CredentialAuthorizer,
    OAuthAccountService,
)
from authgate_identity.infrastructure.persistence.sqlalchemy import (
    AccountRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)
from authgate_identity.domain.user import UserNotFoundError

logger = logging.getLogger(__name__)


class IdentityAccountAdapter(AccountAdapter):
    """Resolves OAuth profiles against the users/accounts tables."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    async def resolve_oauth_user(self, profile: OAuthProfile) -> AuthUser:
        async with self._session_maker() as session:
            service = OAuthAccountService(
                user_repository=UserRepositorySQLAlchemy(session),
                account_repository=AccountRepositorySQLAlchemy(session),
            )
            try:
                user = await service.resolve(profile)
                await session.commit()
            except UserNotFoundError as e:
                await session.rollback()
                logger.error(
                    "Account %s:%s points at a missing user",
                    profile.provider,
                    profile.provider_account_id,
                )
                raise OAuthCallbackError(f"Linked user not found: {e}") from e
            except Exception:
                await session.rollback()
                raise
            return user


def make_credentials_authorize(
    session_maker: async_sessionmaker[AsyncSession],
    password_service: PasswordHashingService,
) -> Authorize:
    """Build the credentials provider's authorize callback."""

    async def authorize(credentials: dict[str, str]) -> AuthUser | None:
        async with session_maker() as session:
            authorizer = CredentialAuthorizer(
                user_repository=UserRepositorySQLAlchemy(session),
                password_service=password_service,
            )
            return await authorizer.authorize(
                credentials.get("email"),
                credentials.get("password"),
            )

    return authorize


def build_providers(
    settings: Settings,
    session_maker: async_sessionmaker[AsyncSession],
    password_service: PasswordHashingService,
) -> list[Provider]:
    providers: list[Provider] = [
        CredentialsProvider(
            authorize=make_credentials_authorize(session_maker, password_service),
        ),
    ]

    client_secret = settings.google_client_secret
    if settings.google_enabled and client_secret is not None:
        providers.append(
            GoogleProvider(
                client_id=settings.google_client_id or "",
                client_secret=client_secret.get_secret_value(),
            ),
        )
        logger.info("Google sign-in enabled")

    return providers


def build_auth_engine(
    settings: Settings,
    session_maker: async_sessionmaker[AsyncSession],
    password_service: PasswordHashingService,
) -> AuthEngine:
    """Create the sign-in engine for the configured deployment."""
    cookies = resolve_cookie_policy(
        auth_url=settings.auth_url,
        cors_origin=settings.cors_origin,
        cookie_domain=settings.auth_cookie_domain,
    )
    logger.debug(
        "Cookie policy: session=%s csrf=%s samesite=%s",
        cookies.session.name,
        cookies.csrf.name,
        cookies.session.same_site,
    )

    config = AuthEngineConfig(
        secret=settings.auth_secret.get_secret_value(),
        base_url=settings.base_url,
        cookies=cookies,
        providers=build_providers(settings, session_maker, password_service),
        callbacks=GatewayCallbacks(
            shaper=SessionClaimShaper(),
            redirect_policy=RedirectPolicy(settings.cors_origin),
        ),
        adapter=IdentityAccountAdapter(session_maker),
        session_max_age_days=settings.session_max_age_days,
    )
    return AuthEngine(config)
