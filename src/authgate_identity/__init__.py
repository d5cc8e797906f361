"""AuthGate Identity - User management behind the sign-in engine.

This module handles all user-related concerns:
- User aggregate and uniqueness rules
- Registration (credentials users)
- Credential verification for email/password sign-in
- Linking OAuth provider accounts to users

Session and cookie mechanics live in authgate_auth; this package only
produces and checks the identities those sessions carry.
"""

from authgate_identity.application.services import (
    CredentialAuthorizer,
    OAuthAccountService,
    RegistrationService,
)
from authgate_identity.domain.user import (
    EmailAlreadyExistsError,
    InvalidPayloadError,
    User,
    UserNotFoundError,
    UserRepository,
    default_name,
)
from authgate_identity.repositories import AccountData, AccountRepository

__all__ = [
    # Domain - User
    "EmailAlreadyExistsError",
    "InvalidPayloadError",
    "User",
    "UserNotFoundError",
    "UserRepository",
    "default_name",
    # Repositories
    "AccountData",
    "AccountRepository",
    # Application Services
    "CredentialAuthorizer",
    "OAuthAccountService",
    "RegistrationService",
]
