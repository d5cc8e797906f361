"""User domain manages user identity only.

This domain handles:
- User aggregate (id, email, display name, optional password hash)
- Registration rules (unique email, default display name)

Session state never lives here; it is carried in signed session tokens.
"""

from authgate_identity.domain.user.aggregates import User, default_name
from authgate_identity.domain.user.exceptions import (
    EmailAlreadyExistsError,
    InvalidPayloadError,
    UserNotFoundError,
)
from authgate_identity.domain.user.repositories import UserRepository

__all__ = [
    "EmailAlreadyExistsError",
    "InvalidPayloadError",
    "User",
    "UserNotFoundError",
    "UserRepository",
    "default_name",
]
