"""Application services for identity management."""

from authgate_identity.application.services.credential_authorizer import (
    CredentialAuthorizer,
)
from authgate_identity.application.services.oauth_account_service import (
    OAuthAccountService,
)
from authgate_identity.application.services.registration_service import (
    RegistrationService,
)

__all__ = ["CredentialAuthorizer", "OAuthAccountService", "RegistrationService"]
