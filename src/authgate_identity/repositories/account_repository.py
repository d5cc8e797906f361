"""Abstract repository interface for linked provider accounts."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class AccountData:
    """Immutable link between a user and an external provider identity."""

    id: UUID
    user_id: UUID
    type: str
    provider: str
    provider_account_id: str
    created_at: datetime


class AccountRepository(ABC):
    """Abstract repository for provider accounts."""

    @abstractmethod
    async def find_by_provider_account(
        self,
        provider: str,
        provider_account_id: str,
    ) -> AccountData | None:
        """Find the account link for a provider identity.

        Parameters
        ----------
        provider
            Provider id, e.g. "google"
        provider_account_id
            The user's identifier at the provider

        Returns
        -------
        AccountData if linked, None otherwise
        """

    @abstractmethod
    async def link(
        self,
        user_id: UUID,
        provider: str,
        provider_account_id: str,
        type: str = "oauth",
    ) -> AccountData:
        """Link a provider identity to a user.

        Returns
        -------
        The stored account link
        """
