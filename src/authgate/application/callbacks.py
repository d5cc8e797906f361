"""Callbacks the gateway plugs into the sign-in engine.

- SessionClaimShaper: puts ``userId``/``provider`` into session tokens and
  exposes them on the client session
- RedirectPolicy: safelist for post sign-in/sign-out redirects
"""

from typing import Any

from authgate_auth import AccountInfo, AuthUser
from authgate_auth.engine import AuthCallbacks

USER_ID_CLAIM = "userId"
PROVIDER_CLAIM = "provider"


class SessionClaimShaper:
    """Maps identities into token claims and claims into client sessions.

    Additive only: fields already set by the engine are never removed.
    """

    DEFAULT_PROVIDER = "credentials"

    def enrich(
        self,
        token: dict[str, Any],
        user: AuthUser | None = None,
        account: AccountInfo | None = None,
    ) -> dict[str, Any]:
        """Add ``userId`` and ``provider`` claims on sign-in.

        Without ``user`` and ``account`` (a session re-validation) the
        claims are returned unchanged, so the provider survives refreshes.
        """
        claims = dict(token)
        if user is not None and user.id:
            claims[USER_ID_CLAIM] = user.id

        if account is not None and account.provider:
            claims[PROVIDER_CLAIM] = account.provider
        elif user is not None and not claims.get(PROVIDER_CLAIM):
            claims[PROVIDER_CLAIM] = self.DEFAULT_PROVIDER

        return claims

    def project(self, session: dict[str, Any], token: dict[str, Any]) -> dict[str, Any]:
        """Expose ``id`` and ``provider`` on ``session["user"]`` when present."""
        if not isinstance(session.get("user"), dict):
            return session

        user = dict(session["user"])
        if token.get(USER_ID_CLAIM):
            user["id"] = token[USER_ID_CLAIM]
        if token.get(PROVIDER_CLAIM):
            user["provider"] = token[PROVIDER_CLAIM]

        return {**session, "user": user}


class RedirectPolicy:
    """Decides where the browser goes after sign-in or sign-out.

    Relative paths resolve against the base URL. Absolute URLs are allowed
    when they start with the client origin or the base URL; anything else
    falls back to the base URL.

    This is a string prefix match, not an origin comparison:
    ``https://app.example.evil.com`` passes when the client origin is
    ``https://app.example``.
    """

    def __init__(self, client_origin: str | None = None):
        self._client_origin = client_origin or None

    def resolve(self, url: str, base_url: str) -> str:
        if url.startswith("/"):
            return f"{base_url}{url}"

        allowed = [origin for origin in (self._client_origin, base_url) if origin]
        if any(url.startswith(origin) for origin in allowed):
            return url
        return base_url


class GatewayCallbacks(AuthCallbacks):
    """Engine callbacks backed by the claim shaper and redirect policy."""

    def __init__(self, shaper: SessionClaimShaper, redirect_policy: RedirectPolicy):
        self._shaper = shaper
        self._redirect_policy = redirect_policy

    def jwt(
        self,
        token: dict[str, Any],
        user: AuthUser | None = None,
        account: AccountInfo | None = None,
    ) -> dict[str, Any]:
        return self._shaper.enrich(token, user=user, account=account)

    def session(self, session: dict[str, Any], token: dict[str, Any]) -> dict[str, Any]:
        return self._shaper.project(session, token)

    def redirect(self, url: str, base_url: str) -> str:
        return self._redirect_policy.resolve(url, base_url)
