"""AuthGate Auth - Generic authentication infrastructure.

This package provides authentication infrastructure that is independent
of the user domain. It handles:
- Password hashing (bcrypt)
- Session token creation and verification (JWT)
- Cookie naming/attribute rules and CSRF tokens
- The sign-in engine serving /auth/* (credentials and OAuth providers)

Architecture:
    authgate_auth/
    ├── services/           # Pure logic (passwords, tokens, cookies, CSRF)
    ├── engine/             # Sign-in engine, providers, callback hooks
    ├── schemas.py          # Data classes
    └── exceptions.py       # Auth exceptions

Usage:
    from authgate_auth import PasswordHashingService, resolve_cookie_policy
    from authgate_auth.engine import AuthEngine, AuthEngineConfig
"""

from authgate_auth.exceptions import (
    AuthenticationFailedError,
    AuthError,
    CsrfTokenMismatchError,
    InvalidTokenError,
    OAuthAccountNotLinkedError,
    OAuthCallbackError,
    UnknownProviderError,
    WeakPasswordError,
)
from authgate_auth.schemas import (
    AccountInfo,
    AuthUser,
    CookiePolicy,
    CookieSpec,
    OAuthProfile,
)
from authgate_auth.services import (
    CsrfService,
    PasswordHashingService,
    SessionTokenService,
    resolve_cookie_policy,
)

__all__ = [
    # Services
    "CsrfService",
    "PasswordHashingService",
    "SessionTokenService",
    "resolve_cookie_policy",
    # Schemas
    "AccountInfo",
    "AuthUser",
    "CookiePolicy",
    "CookieSpec",
    "OAuthProfile",
    # Exceptions
    "AuthError",
    "AuthenticationFailedError",
    "CsrfTokenMismatchError",
    "InvalidTokenError",
    "OAuthAccountNotLinkedError",
    "OAuthCallbackError",
    "UnknownProviderError",
    "WeakPasswordError",
]
