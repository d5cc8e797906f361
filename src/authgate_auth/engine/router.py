"""HTTP routes of the sign-in engine.

Serves the browser-facing sign-in protocol under the configured base path:

    GET  /csrf                  issue (or reuse) a CSRF token
    GET  /providers             list enabled providers
    GET  /session               read and refresh the current session
    POST /signin/{provider}     start an OAuth sign-in
    GET  /callback/{provider}   finish an OAuth sign-in
    POST /callback/{provider}   credentials sign-in (or OAuth form_post)
    POST /signout               end the session
    GET  /error                 describe a sign-in error

State-changing routes require the CSRF token from ``/csrf`` in their
form body. Failures redirect to the error page with an error code and
never reveal why a credentials sign-in was rejected.
"""

import logging
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlencode

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response
from starlette.datastructures import FormData

from authgate_auth.engine.config import AuthEngineConfig
from authgate_auth.engine.providers import CredentialsProvider, OAuthProvider, Provider
from authgate_auth.exceptions import (
    AuthenticationFailedError,
    AuthError,
    CsrfTokenMismatchError,
    InvalidTokenError,
    UnknownProviderError,
)
from authgate_auth.schemas import AccountInfo, AuthUser
from authgate_auth.services import CsrfService, SessionTokenService

logger = logging.getLogger(__name__)

# Form fields consumed by the engine itself, not forwarded to authorize()
_ENGINE_FIELDS = ("csrfToken", "callbackUrl")

ERROR_MESSAGES: dict[str, str] = {
    "CredentialsSignin": "Sign in failed. Check the details you provided.",
    "MissingCSRF": "The request was missing a valid CSRF token.",
    "OAuthAccountNotLinked": (
        "This email is already registered. Sign in with the method you used before."
    ),
    "OAuthCallbackError": "The sign-in provider returned an error.",
    "Default": "Unable to sign in.",
}

_NO_STORE = {"Cache-Control": "no-store, max-age=0"}

# (session view key, token claim)
_SESSION_USER_FIELDS = (("name", "name"), ("email", "email"), ("image", "picture"))


def _form_value(form: FormData, key: str) -> str | None:
    value = form.get(key)
    return value if isinstance(value, str) and value else None


def _isoformat(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00",
        "Z",
    )


class AuthEngine:
    """Session, CSRF and provider handling behind ``/auth/*``.

    Examples
    --------
    >>> engine = AuthEngine(config)
    >>> app.include_router(engine.create_router(), prefix=config.base_path)
    """

    def __init__(self, config: AuthEngineConfig):
        self._config = config
        self._cookies = config.cookies
        self._callbacks = config.callbacks
        self._tokens = SessionTokenService(
            secret_key=config.secret,
            max_age_days=config.session_max_age_days,
        )
        self._csrf = CsrfService(config.secret)
        self._providers: dict[str, Provider] = {p.id: p for p in config.providers}

    @property
    def config(self) -> AuthEngineConfig:
        return self._config

    def create_router(self) -> APIRouter:
        """Create the router; mount it at ``config.base_path``."""
        router = APIRouter()
        router.add_api_route("/csrf", self.csrf, methods=["GET"])
        router.add_api_route("/providers", self.providers, methods=["GET"])
        router.add_api_route("/session", self.session, methods=["GET"])
        router.add_api_route("/signin/{provider_id}", self.signin, methods=["POST"])
        router.add_api_route(
            "/callback/{provider_id}",
            self.callback,
            methods=["GET", "POST"],
        )
        router.add_api_route("/signout", self.signout, methods=["POST"])
        router.add_api_route("/error", self.error, methods=["GET"])
        return router

    # -------------------------------------------------------------------------
    # Routes
    # -------------------------------------------------------------------------

    async def csrf(self, request: Request) -> Response:
        """Return the CSRF token, setting the CSRF cookie when needed."""
        token = self._csrf.token_from_cookie(
            request.cookies.get(self._cookies.csrf.name),
        )
        if token is not None:
            return JSONResponse({"csrfToken": token}, headers=_NO_STORE)

        token, cookie_value = self._csrf.create()
        response = JSONResponse({"csrfToken": token}, headers=_NO_STORE)
        self._cookies.csrf.set_on(response, cookie_value)
        return response

    async def providers(self) -> dict[str, dict[str, str]]:
        """List enabled providers with their sign-in and callback URLs."""
        return {
            provider.id: {
                "id": provider.id,
                "name": provider.name,
                "type": provider.type,
                "signinUrl": self._url(f"/signin/{provider.id}"),
                "callbackUrl": self._url(f"/callback/{provider.id}"),
            }
            for provider in self._providers.values()
        }

    async def session(self, request: Request) -> Response:
        """Return the client session, refreshing the session cookie.

        Answers JSON ``null`` when there is no valid session.
        """
        session_token = request.cookies.get(self._cookies.session.name)
        if not session_token:
            return JSONResponse(None, headers=_NO_STORE)

        try:
            claims = self._tokens.decode(session_token)
        except InvalidTokenError as e:
            logger.debug("Discarding session cookie: %s", e.message)
            response = JSONResponse(None, headers=_NO_STORE)
            self._cookies.session.delete_from(response)
            return response

        claims = self._callbacks.jwt(claims)
        session_token = self._tokens.encode(claims)
        expires = self._tokens.expires_at(self._tokens.decode(session_token))
        user = {
            key: claims[claim]
            for key, claim in _SESSION_USER_FIELDS
            if claims.get(claim) is not None
        }
        session: dict[str, Any] = {"user": user, "expires": _isoformat(expires)}
        session = self._callbacks.session(session, claims)

        response = JSONResponse(session, headers=_NO_STORE)
        self._cookies.session.set_on(
            response,
            session_token,
            max_age=self._tokens.max_age_seconds,
        )
        return response

    async def signin(self, request: Request, provider_id: str) -> Response:
        """Start an OAuth sign-in by redirecting to the provider."""
        provider = self._get_provider(provider_id)
        if not isinstance(provider, OAuthProvider):
            return self._not_found(UnknownProviderError(provider_id))

        form = await request.form()
        try:
            self._verify_csrf(request, form)
        except CsrfTokenMismatchError as e:
            return self._error_redirect(e.code)

        callback_url = self._resolve_redirect(_form_value(form, "callbackUrl"))
        response = await provider.authorize_redirect(
            request,
            self._url(f"/callback/{provider.id}"),
        )
        self._cookies.callback.set_on(response, callback_url)

        logger.debug("Redirecting to %s for sign-in", provider.id)
        return response

    async def callback(self, request: Request, provider_id: str) -> Response:
        """Finish a sign-in and set the session cookie."""
        provider = self._get_provider(provider_id)
        if provider is None:
            return self._not_found(UnknownProviderError(provider_id))

        if isinstance(provider, CredentialsProvider):
            if request.method != "POST":
                return JSONResponse(
                    {"detail": "Method Not Allowed"},
                    status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
                )
            return await self._credentials_callback(request, provider)

        return await self._oauth_callback(request, provider)

    async def signout(self, request: Request) -> Response:
        """Clear the session cookie and redirect."""
        form = await request.form()
        try:
            self._verify_csrf(request, form)
        except CsrfTokenMismatchError as e:
            return self._error_redirect(e.code)

        response = RedirectResponse(
            self._resolve_redirect(_form_value(form, "callbackUrl")),
            status_code=status.HTTP_302_FOUND,
        )
        self._cookies.session.delete_from(response)
        return response

    async def error(self, request: Request) -> JSONResponse:
        """Describe the error code passed in the query string."""
        code = request.query_params.get("error") or "Default"
        return JSONResponse(
            {
                "error": code,
                "detail": ERROR_MESSAGES.get(code, ERROR_MESSAGES["Default"]),
            },
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    # -------------------------------------------------------------------------
    # Sign-in flows
    # -------------------------------------------------------------------------

    async def _credentials_callback(
        self,
        request: Request,
        provider: CredentialsProvider,
    ) -> Response:
        form = await request.form()
        try:
            self._verify_csrf(request, form)
        except CsrfTokenMismatchError as e:
            return self._error_redirect(e.code)

        credentials = {
            key: value
            for key, value in form.items()
            if key not in _ENGINE_FIELDS and isinstance(value, str)
        }

        try:
            user = await provider.authorize(credentials)
        except Exception:
            # Store/provider errors are reported like a rejected attempt
            logger.exception("Credentials authorization failed with an error")
            user = None

        if user is None:
            logger.info("Credentials sign-in rejected")
            return self._error_redirect(AuthenticationFailedError.code)

        callback_url = _form_value(form, "callbackUrl") or request.cookies.get(
            self._cookies.callback.name,
        )
        account = AccountInfo(provider=provider.id, type="credentials")
        return self._complete_sign_in(user, account, callback_url)

    async def _oauth_callback(self, request: Request, provider: OAuthProvider) -> Response:
        adapter = self._config.adapter
        if adapter is None:
            msg = "An account adapter is required for OAuth providers"
            raise RuntimeError(msg)

        try:
            profile = await provider.fetch_profile(request)
            user = await adapter.resolve_oauth_user(profile)
        except AuthError as e:
            logger.warning("OAuth sign-in with %s failed: %s", provider.id, e.message)
            return self._error_redirect(e.code)

        callback_url = request.cookies.get(self._cookies.callback.name)
        return self._complete_sign_in(user, profile.account, callback_url)

    def _complete_sign_in(
        self,
        user: AuthUser,
        account: AccountInfo,
        callback_url: str | None,
    ) -> Response:
        token: dict[str, Any] = {
            "sub": user.id,
            "name": user.name,
            "email": user.email,
            "picture": user.image,
        }
        token = self._callbacks.jwt(token, user=user, account=account)

        response = RedirectResponse(
            self._resolve_redirect(callback_url),
            status_code=status.HTTP_302_FOUND,
        )
        self._set_session_cookie(response, token)

        logger.info("User %s signed in with %s", user.id, account.provider)
        return response

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self._config.base_url}{self._config.base_path}{path}"

    def _get_provider(self, provider_id: str) -> Provider | None:
        return self._providers.get(provider_id)

    def _verify_csrf(self, request: Request, form: FormData) -> None:
        self._csrf.verify(
            request.cookies.get(self._cookies.csrf.name),
            _form_value(form, "csrfToken"),
        )

    def _resolve_redirect(self, url: str | None) -> str:
        base_url = self._config.base_url
        return self._callbacks.redirect(url or base_url, base_url)

    def _set_session_cookie(self, response: Response, claims: dict[str, Any]) -> None:
        self._cookies.session.set_on(
            response,
            self._tokens.encode(claims),
            max_age=self._tokens.max_age_seconds,
        )

    def _error_redirect(self, code: str) -> RedirectResponse:
        query = urlencode({"error": code})
        return RedirectResponse(
            f"{self._config.base_url}{self._config.error_page}?{query}",
            status_code=status.HTTP_302_FOUND,
        )

    def _not_found(self, exc: UnknownProviderError) -> JSONResponse:
        return JSONResponse(
            {"detail": exc.message},
            status_code=status.HTTP_404_NOT_FOUND,
        )
