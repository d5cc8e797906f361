"""Credential verification for email/password sign-in."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from authgate_auth import AuthUser, PasswordHashingService

if TYPE_CHECKING:
    from authgate_identity.domain.user import UserRepository

logger = logging.getLogger(__name__)


class CredentialAuthorizer:
    """
    Checks an email/password attempt against stored users.

    Returns the minimal identity ``{id, name, email}`` on success and None
    otherwise. Unknown emails and OAuth-only users still pay for a bcrypt
    verification so timing does not reveal whether the email exists.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        password_service: PasswordHashingService,
    ):
        self._user_repo = user_repository
        self._password_service = password_service

    async def authorize(
        self,
        email: str | None,
        password: str | None,
    ) -> AuthUser | None:
        if not email or not password:
            return None

        user = await self._user_repo.find_by_email(email)
        if user is None or not user.has_password:
            self._password_service.dummy_verify(password)
            logger.debug("Credentials rejected: no password user for email")
            return None

        if not self._password_service.verify(password, user.hashed_password or ""):
            logger.debug("Credentials rejected: password mismatch for %s", user.id)
            return None

        return AuthUser(id=str(user.id), name=user.name, email=user.email)
