"""Double-submit CSRF tokens.

The CSRF cookie holds ``<token>|<sha256(token + secret)>``. A state-changing
request must echo ``<token>`` in its form body, and the hash proves the
cookie was issued by this server.
"""

import hashlib
import hmac
import secrets

from authgate_auth.exceptions import CsrfTokenMismatchError


class CsrfService:
    """Issue and check CSRF tokens bound to a server secret."""

    TOKEN_BYTES = 32

    def __init__(self, secret_key: str):
        if not secret_key:
            msg = "CSRF secret key cannot be empty"
            raise ValueError(msg)
        self._secret_key = secret_key

    def _digest(self, token: str) -> str:
        return hashlib.sha256(f"{token}{self._secret_key}".encode()).hexdigest()

    def create(self) -> tuple[str, str]:
        """Return a fresh ``(token, cookie_value)`` pair."""
        token = secrets.token_hex(self.TOKEN_BYTES)
        return token, f"{token}|{self._digest(token)}"

    def token_from_cookie(self, cookie_value: str | None) -> str | None:
        """Return the token carried by a cookie if its hash is valid."""
        if not cookie_value or "|" not in cookie_value:
            return None
        token, digest = cookie_value.split("|", 1)
        if not token or not hmac.compare_digest(
            digest.encode(), self._digest(token).encode()
        ):
            return None
        return token

    def verify(self, cookie_value: str | None, submitted: str | None) -> None:
        """Check a submitted token against the CSRF cookie.

        Raises
        ------
        CsrfTokenMismatchError
            If the cookie is missing or forged, or the tokens differ
        """
        token = self.token_from_cookie(cookie_value)
        if token is None or not submitted:
            raise CsrfTokenMismatchError
        if not hmac.compare_digest(token.encode(), submitted.encode()):
            raise CsrfTokenMismatchError
