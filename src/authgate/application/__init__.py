"""Application layer: engine callbacks and engine assembly."""

from authgate.application.auth_engine import IdentityAccountAdapter, build_auth_engine
from authgate.application.callbacks import (
    GatewayCallbacks,
    RedirectPolicy,
    SessionClaimShaper,
)

__all__ = [
    "GatewayCallbacks",
    "IdentityAccountAdapter",
    "RedirectPolicy",
    "SessionClaimShaper",
    "build_auth_engine",
]
