"""Session token service.

Encodes session claims into a signed JWT carried in the session cookie
and decodes them back on every session read.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from authgate_auth.exceptions import InvalidTokenError

# Claims the service manages itself; callbacks never need to set these.
REGISTERED_CLAIMS = ("iat", "exp", "jti")


class SessionTokenService:
    """Service for session token creation and verification.

    Examples
    --------
    >>> service = SessionTokenService(secret_key="your-secret-key")
    >>> token = service.encode({"sub": "42", "provider": "credentials"})
    >>> service.decode(token)["provider"]
    'credentials'
    """

    DEFAULT_MAX_AGE_DAYS = 30
    ALGORITHM = "HS256"

    def __init__(
        self,
        secret_key: str,
        max_age_days: int = DEFAULT_MAX_AGE_DAYS,
    ):
        """Initialize the session token service.

        Parameters
        ----------
        secret_key
            Secret key for signing tokens. Must be kept secure.
        max_age_days
            Days until a session token expires (default 30)
        """
        if not secret_key:
            msg = "Session secret key cannot be empty"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._max_age = timedelta(days=max_age_days)

    @property
    def max_age_seconds(self) -> int:
        return int(self._max_age.total_seconds())

    def encode(
        self,
        claims: dict[str, Any],
        expires_delta: timedelta | None = None,
    ) -> str:
        """Sign a set of claims into a token.

        ``iat``, ``exp`` and ``jti`` are (re)issued on every call so a
        re-encoded token always carries a fresh expiry.

        Parameters
        ----------
        claims
            The session claims to carry
        expires_delta
            Custom expiration time (optional)

        Returns
        -------
        The encoded JWT token string
        """
        now = datetime.now(tz=timezone.utc)
        payload = {
            key: value
            for key, value in claims.items()
            if key not in REGISTERED_CLAIMS and value is not None
        }
        payload.update(
            iat=now,
            exp=now + (expires_delta or self._max_age),
            jti=secrets.token_urlsafe(16),
        )
        return jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)

    def decode(self, token: str) -> dict[str, Any]:
        """Verify and decode a session token.

        Parameters
        ----------
        token
            The JWT token string to verify

        Returns
        -------
        The decoded claims

        Raises
        ------
        InvalidTokenError
            If token is invalid, expired, or malformed
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e

        if not isinstance(payload, dict):
            raise InvalidTokenError("Malformed token payload")
        return payload

    @staticmethod
    def expires_at(claims: dict[str, Any]) -> datetime:
        """Return the expiry of decoded claims as an aware datetime."""
        try:
            return datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc)
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError(f"Malformed token payload: {e}") from e
