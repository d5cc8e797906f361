"""Authentication services.

Provides password hashing, session tokens, CSRF tokens and cookie rules.
"""

from authgate_auth.services.cookie_policy import parse_origin, resolve_cookie_policy
from authgate_auth.services.csrf_service import CsrfService
from authgate_auth.services.password_service import PasswordHashingService
from authgate_auth.services.session_token_service import SessionTokenService

__all__ = [
    "CsrfService",
    "PasswordHashingService",
    "SessionTokenService",
    "parse_origin",
    "resolve_cookie_policy",
]
