"""Abstract repository interfaces for identity management."""

from authgate_identity.repositories.account_repository import (
    AccountData,
    AccountRepository,
)

__all__ = [
    "AccountData",
    "AccountRepository",
]
