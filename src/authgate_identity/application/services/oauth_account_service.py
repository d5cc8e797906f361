"""Resolution of OAuth profiles to stored users."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from authgate_auth import (
    AuthenticationFailedError,
    AuthUser,
    OAuthAccountNotLinkedError,
    OAuthProfile,
)
from authgate_identity.domain.user import (
    EmailAlreadyExistsError,
    User,
    UserNotFoundError,
)

if TYPE_CHECKING:
    from authgate_identity.domain.user import UserRepository
    from authgate_identity.repositories import AccountRepository

logger = logging.getLogger(__name__)


class OAuthAccountService:
    """
    Maps an OAuth profile onto a user.

    - A linked provider account signs in its user.
    - An email that already belongs to a user is never linked automatically.
    - Otherwise a user without password is created and linked.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        account_repository: AccountRepository,
    ):
        self._user_repo = user_repository
        self._account_repo = account_repository

    async def resolve(self, profile: OAuthProfile) -> AuthUser:
        account = await self._account_repo.find_by_provider_account(
            profile.provider,
            profile.provider_account_id,
        )
        if account is not None:
            user = await self._user_repo.find_by_id(account.user_id)
            if user is None:
                raise UserNotFoundError(str(account.user_id))
            return self._to_auth_user(user, profile)

        if not profile.email:
            msg = f"{profile.provider} profile has no email"
            raise AuthenticationFailedError(msg)

        if await self._user_repo.exists_by_email(profile.email):
            raise OAuthAccountNotLinkedError

        user = User.create(email=profile.email, name=profile.name)
        try:
            await self._user_repo.save(user)
        except EmailAlreadyExistsError as e:
            raise OAuthAccountNotLinkedError from e

        await self._account_repo.link(
            user_id=user.id,
            provider=profile.provider,
            provider_account_id=profile.provider_account_id,
            type="oauth",
        )

        logger.info("Created user %s from %s profile", user.id, profile.provider)
        return self._to_auth_user(user, profile)

    def _to_auth_user(self, user: User, profile: OAuthProfile) -> AuthUser:
        return AuthUser(
            id=str(user.id),
            name=user.name,
            email=user.email,
            image=profile.image,
        )
