"""Authentication exceptions.

These exceptions are raised by the authgate_auth package and should be
caught and handled by the sign-in engine or the application layer.
"""


class AuthError(Exception):
    """Base exception for all authentication errors."""

    code = "AuthError"

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)


class InvalidTokenError(AuthError):
    """Raised when a session token is invalid, expired, or malformed."""

    code = "InvalidToken"

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class WeakPasswordError(AuthError):
    """Raised when a password cannot be hashed."""

    code = "WeakPassword"

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message)


class AuthenticationFailedError(AuthError):
    """Raised when a sign-in attempt fails.

    Deliberately generic: unknown email and wrong password look the same.
    """

    code = "CredentialsSignin"

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message)


class CsrfTokenMismatchError(AuthError):
    """Raised when a state-changing request carries no valid CSRF token."""

    code = "MissingCSRF"

    def __init__(self, message: str = "CSRF token missing or invalid"):
        super().__init__(message)


class OAuthAccountNotLinkedError(AuthError):
    """Raised when an OAuth profile's email belongs to an unlinked user."""

    code = "OAuthAccountNotLinked"

    def __init__(
        self,
        message: str = "Email is already registered with another sign-in method",
    ):
        super().__init__(message)


class UnknownProviderError(AuthError):
    """Raised when a sign-in route names a provider that is not configured."""

    code = "UnknownProvider"

    def __init__(self, provider_id: str):
        self.provider_id = provider_id
        super().__init__(f"Unknown provider: {provider_id}")


class OAuthCallbackError(AuthError):
    """Raised when the OAuth provider exchange fails."""

    code = "OAuthCallbackError"

    def __init__(self, message: str = "OAuth callback failed"):
        super().__init__(message)
