"""Registration of credential users."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from authgate_auth import PasswordHashingService, WeakPasswordError
from authgate_identity.domain.user import (
    EmailAlreadyExistsError,
    InvalidPayloadError,
    User,
)

if TYPE_CHECKING:
    from authgate_identity.domain.user import UserRepository

logger = logging.getLogger(__name__)


class RegistrationService:
    """
    Application service for user registration.

    Validates the payload, checks email uniqueness, hashes the password and
    stores the user. Registration never signs the user in.

    The existence check only gives a friendly early answer; the unique
    constraint on the users table is what rejects concurrent duplicates,
    and the repository reports that as EmailAlreadyExistsError too.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        password_service: PasswordHashingService,
    ):
        self._user_repo = user_repository
        self._password_service = password_service

    async def register(
        self,
        email: str | None,
        password: str | None,
        name: str | None = None,
    ) -> User:
        if not isinstance(email, str) or not email:
            raise InvalidPayloadError
        if not isinstance(password, str) or not password:
            raise InvalidPayloadError
        if name is not None and not isinstance(name, str):
            raise InvalidPayloadError

        if await self._user_repo.exists_by_email(email):
            raise EmailAlreadyExistsError(email)

        try:
            hashed_password = self._password_service.hash(password)
        except WeakPasswordError as e:
            raise InvalidPayloadError from e

        user = User.create(email=email, name=name, hashed_password=hashed_password)
        await self._user_repo.save(user)

        logger.info("User registered: %s", user.id)
        return user
