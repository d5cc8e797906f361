"""
Pytest configuration for authgate_identity domain tests.

This conftest provides fixtures specific to the authgate_identity domain
(users and linked provider accounts).
"""

import pytest

from authgate_identity.domain.user import User


@pytest.fixture
def test_user() -> User:
    """Create a standard credentials user."""
    return User.create("test@example.com", hashed_password="$2b$04$hash")


@pytest.fixture
def oauth_user() -> User:
    """Create a user that only signs in through an OAuth provider."""
    return User.create("oauth@example.com")
