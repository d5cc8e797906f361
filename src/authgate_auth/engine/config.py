"""Configuration surface of the sign-in engine.

The engine owns the session/CSRF/OAuth mechanics. Applications configure
it with providers, cookie specifications, callbacks and an account
adapter instead of reaching into those mechanics.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from authgate_auth.engine.providers import OAuthProvider, Provider
from authgate_auth.schemas import AccountInfo, AuthUser, CookiePolicy, OAuthProfile
from authgate_auth.services.cookie_policy import parse_origin


class AuthCallbacks:
    """Hooks invoked by the engine.

    The defaults pass tokens and sessions through unchanged and only allow
    redirects to the base URL's origin. Subclass to customize.
    """

    def jwt(
        self,
        token: dict[str, Any],
        user: AuthUser | None = None,
        account: AccountInfo | None = None,
    ) -> dict[str, Any]:
        """Shape token claims.

        Called with ``user`` and ``account`` on sign-in, and with the
        decoded claims alone on every later session read.
        """
        return token

    def session(self, session: dict[str, Any], token: dict[str, Any]) -> dict[str, Any]:
        """Shape the client-visible session from token claims."""
        return session

    def redirect(self, url: str, base_url: str) -> str:
        """Decide where to send the browser after sign-in or sign-out."""
        if url.startswith("/"):
            return f"{base_url}{url}"
        if parse_origin(url) == parse_origin(base_url):
            return url
        return base_url


class AccountAdapter(ABC):
    """Maps OAuth profiles onto stored users."""

    @abstractmethod
    async def resolve_oauth_user(self, profile: OAuthProfile) -> AuthUser:
        """Return the user for a profile, creating and linking it if new."""


@dataclass
class AuthEngineConfig:
    """Everything the engine needs to serve ``/auth/*``.

    Attributes
    ----------
    secret
        Signs session tokens and CSRF hashes
    base_url
        Public origin of the engine (scheme://host[:port])
    cookies
        Cookie names and attributes
    providers
        Enabled sign-in providers
    callbacks
        Token/session/redirect hooks
    adapter
        Required when any OAuth provider is configured
    """

    secret: str
    base_url: str
    cookies: CookiePolicy
    providers: list[Provider]
    callbacks: AuthCallbacks = field(default_factory=AuthCallbacks)
    adapter: AccountAdapter | None = None
    base_path: str = "/auth"
    error_page: str = "/auth/error"
    session_max_age_days: int = 30

    def __post_init__(self) -> None:
        if not self.secret:
            msg = "Auth engine secret cannot be empty"
            raise ValueError(msg)

        self.base_url = self.base_url.rstrip("/")

        ids = [provider.id for provider in self.providers]
        if len(ids) != len(set(ids)):
            msg = f"Duplicate provider ids: {ids}"
            raise ValueError(msg)

        has_oauth = any(isinstance(p, OAuthProvider) for p in self.providers)
        if has_oauth and self.adapter is None:
            msg = "An account adapter is required for OAuth providers"
            raise ValueError(msg)
