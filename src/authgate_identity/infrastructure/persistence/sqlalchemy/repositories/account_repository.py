"""SQLAlchemy implementation of AccountRepository."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from authgate_identity.infrastructure.persistence.sqlalchemy.models import (
    AccountModel,
)
from authgate_identity.repositories import AccountData, AccountRepository

logger = logging.getLogger(__name__)


class AccountRepositorySQLAlchemy(AccountRepository):
    """SQLAlchemy implementation of the AccountRepository interface."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_provider_account(
        self,
        provider: str,
        provider_account_id: str,
    ) -> AccountData | None:
        stmt = select(AccountModel).where(
            AccountModel.provider == provider,
            AccountModel.provider_account_id == provider_account_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_data(model)

    async def link(
        self,
        user_id: UUID,
        provider: str,
        provider_account_id: str,
        type: str = "oauth",
    ) -> AccountData:
        model = AccountModel(
            user_id=user_id,
            type=type,
            provider=provider,
            provider_account_id=provider_account_id,
        )
        self._session.add(model)
        await self._session.flush()

        logger.info("Linked %s account to user: %s", provider, user_id)
        return self._to_data(model)

    def _to_data(self, model: AccountModel) -> AccountData:
        return AccountData(
            id=model.id,
            user_id=model.user_id,
            type=model.type,
            provider=model.provider,
            provider_account_id=model.provider_account_id,
            created_at=model.created_at,
        )
