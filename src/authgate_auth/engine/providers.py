"""Sign-in providers.

Two kinds are supported:
- CredentialsProvider: email/password checked by an application callback
- OAuthProvider: redirect-based sign-in with an external identity provider

Google is implemented on top of Authlib's Starlette client. Authlib keeps
the OAuth ``state`` in ``request.session``, so the app must install
Starlette's SessionMiddleware.
"""

import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable

from authlib.integrations.starlette_client import OAuth, OAuthError
from starlette.requests import Request
from starlette.responses import Response

from authgate_auth.exceptions import OAuthCallbackError
from authgate_auth.schemas import AuthUser, OAuthProfile

logger = logging.getLogger(__name__)

Authorize = Callable[[dict[str, str]], Awaitable[AuthUser | None]]

GOOGLE_DISCOVERY_URL = "https://accounts.google.com/.well-known/openid-configuration"


class Provider(ABC):
    """Base class for sign-in providers."""

    type: str

    def __init__(self, id: str, name: str):
        self.id = id
        self.name = name


class CredentialsProvider(Provider):
    """Sign-in with submitted credentials.

    ``authorize`` receives the submitted form fields and returns the
    signed-in user, or None to reject the attempt.
    """

    type = "credentials"

    def __init__(
        self,
        authorize: Authorize,
        id: str = "credentials",
        name: str = "Credentials",
    ):
        super().__init__(id=id, name=name)
        self._authorize = authorize

    async def authorize(self, credentials: dict[str, str]) -> AuthUser | None:
        return await self._authorize(credentials)


class OAuthProvider(Provider):
    """Base class for redirect-based OAuth/OpenID Connect providers."""

    type = "oauth"

    @abstractmethod
    async def authorize_redirect(self, request: Request, redirect_uri: str) -> Response:
        """Return the redirect to the provider's authorization endpoint."""

    @abstractmethod
    async def fetch_profile(self, request: Request) -> OAuthProfile:
        """Complete the code exchange and return the user's profile.

        Raises
        ------
        OAuthCallbackError
            If the exchange fails or the provider response is unusable
        """


class GoogleProvider(OAuthProvider):
    """Google OpenID Connect sign-in."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        oauth: OAuth | None = None,
    ):
        super().__init__(id="google", name="Google")
        self._oauth = oauth or OAuth()
        self._oauth.register(
            name=self.id,
            client_id=client_id,
            client_secret=client_secret,
            server_metadata_url=GOOGLE_DISCOVERY_URL,
            client_kwargs={
                "scope": "openid email profile",
            },
        )

    @property
    def _client(self):
        return self._oauth.create_client(self.id)

    async def authorize_redirect(self, request: Request, redirect_uri: str) -> Response:
        return await self._client.authorize_redirect(request, redirect_uri)

    async def fetch_profile(self, request: Request) -> OAuthProfile:
        try:
            token = await self._client.authorize_access_token(request)
            userinfo = token.get("userinfo") or await self._client.userinfo(
                token=token,
            )
        except OAuthError as e:
            logger.warning("Google OAuth exchange failed: %s", e.error)
            raise OAuthCallbackError(f"Google OAuth exchange failed: {e.error}") from e

        subject = userinfo.get("sub")
        if not subject:
            msg = "Google profile has no subject"
            raise OAuthCallbackError(msg)

        return OAuthProfile(
            provider=self.id,
            provider_account_id=str(subject),
            email=userinfo.get("email"),
            name=userinfo.get("name"),
            image=userinfo.get("picture"),
        )
