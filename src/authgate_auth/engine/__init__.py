"""Sign-in engine.

Serves ``/auth/*`` (CSRF, providers, session, sign-in callbacks, sign-out)
and is configured entirely through ``AuthEngineConfig``.
"""

from authgate_auth.engine.config import AccountAdapter, AuthCallbacks, AuthEngineConfig
from authgate_auth.engine.providers import (
    CredentialsProvider,
    GoogleProvider,
    OAuthProvider,
    Provider,
)
from authgate_auth.engine.router import AuthEngine

__all__ = [
    "AccountAdapter",
    "AuthCallbacks",
    "AuthEngine",
    "AuthEngineConfig",
    "CredentialsProvider",
    "GoogleProvider",
    "OAuthProvider",
    "Provider",
]
