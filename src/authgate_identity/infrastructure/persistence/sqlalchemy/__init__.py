"""SQLAlchemy implementation for authgate_identity persistence.

Provides:
- IdentityBase: Declarative base for identity models
- UserModel: SQLAlchemy model for users
- AccountModel: SQLAlchemy model for linked provider accounts
- UserRepositorySQLAlchemy: Repository implementation for users
- AccountRepositorySQLAlchemy: Repository implementation for accounts
"""

from authgate_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase
from authgate_identity.infrastructure.persistence.sqlalchemy.models import (
    AccountModel,
    UserModel,
)
from authgate_identity.infrastructure.persistence.sqlalchemy.repositories import (
    AccountRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)

__all__ = [
    "AccountModel",
    "AccountRepositorySQLAlchemy",
    "IdentityBase",
    "UserModel",
    "UserRepositorySQLAlchemy",
]
