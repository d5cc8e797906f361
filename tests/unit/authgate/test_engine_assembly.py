"""Unit tests for assembling the sign-in engine from settings."""

from unittest.mock import AsyncMock, MagicMock, Mock

import pytest

from authgate.application.auth_engine import (
    IdentityAccountAdapter,
    build_auth_engine,
    build_providers,
    make_credentials_authorize,
)
from authgate.application.callbacks import GatewayCallbacks
from authgate_auth import OAuthProfile, PasswordHashingService
from authgate_auth.engine import CredentialsProvider, GoogleProvider
from authgate_auth.exceptions import OAuthCallbackError
from authgate_config import Settings
from authgate_identity.domain.user import UserNotFoundError


def _settings(**overrides) -> Settings:
    values = {
        "auth_secret": "test-secret",
        "auth_url": "https://auth.example.com",
        "cors_origin": "https://app.example.com",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def _session_maker(session):
    """A session maker whose sessions are async context managers."""
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=session)
    context.__aexit__ = AsyncMock(return_value=False)
    return Mock(return_value=context)


class TestBuildProviders:
    """Tests for provider selection."""

    def test_credentials_only_by_default(self):
        providers = build_providers(_settings(), Mock(), Mock())

        assert [p.id for p in providers] == ["credentials"]
        assert isinstance(providers[0], CredentialsProvider)

    def test_google_enabled_with_client_credentials(self):
        providers = build_providers(
            _settings(google_client_id="id", google_client_secret="secret"),
            Mock(),
            Mock(),
        )

        assert [p.id for p in providers] == ["credentials", "google"]
        assert isinstance(providers[1], GoogleProvider)


class TestBuildAuthEngine:
    """Tests for engine configuration."""

    def test_engine_uses_cross_site_cookie_policy(self):
        engine = build_auth_engine(_settings(), Mock(), Mock())
        config = engine.config

        assert config.base_url == "https://auth.example.com"
        assert config.cookies.session.name == "__Secure-session-token"
        assert config.cookies.session.same_site == "none"
        assert config.cookies.csrf.name == "__Host-csrf-token"
        assert isinstance(config.callbacks, GatewayCallbacks)
        assert isinstance(config.adapter, IdentityAccountAdapter)

    def test_cookie_domain_is_applied(self):
        engine = build_auth_engine(
            _settings(auth_cookie_domain=".example.com"),
            Mock(),
            Mock(),
        )

        assert engine.config.cookies.session.domain == ".example.com"
        assert engine.config.cookies.csrf.name == "__Secure-csrf-token"


class TestCredentialsAuthorize:
    """Tests for the credentials provider callback."""

    @pytest.mark.asyncio
    async def test_missing_fields_are_rejected(self):
        session = AsyncMock()
        authorize = make_credentials_authorize(
            _session_maker(session),
            Mock(spec=PasswordHashingService),
        )

        assert await authorize({"email": "a@b.com"}) is None
        session.execute.assert_not_called()


class TestIdentityAccountAdapter:
    """Tests for the store-backed account adapter."""

    @pytest.mark.asyncio
    async def test_rolls_back_on_failure(self):
        session = AsyncMock()
        session.execute.side_effect = ConnectionError("db down")
        adapter = IdentityAccountAdapter(_session_maker(session))
        profile = OAuthProfile(
            provider="google",
            provider_account_id="g-1",
            email="a@b.com",
        )

        with pytest.raises(ConnectionError):
            await adapter.resolve_oauth_user(profile)

        session.rollback.assert_awaited_once()
        session.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_dangling_account_link_is_an_oauth_callback_error(self, monkeypatch):
        """Test that an account whose user is gone fails like a provider error."""
        session = AsyncMock()
        service = Mock()
        service.resolve = AsyncMock(side_effect=UserNotFoundError("u-gone"))
        monkeypatch.setattr(
            "authgate.application.auth_engine.OAuthAccountService",
            Mock(return_value=service),
        )
        adapter = IdentityAccountAdapter(_session_maker(session))
        profile = OAuthProfile(
            provider="google",
            provider_account_id="g-1",
            email="a@b.com",
        )

        with pytest.raises(OAuthCallbackError) as exc_info:
            await adapter.resolve_oauth_user(profile)

        assert exc_info.value.code == "OAuthCallbackError"
        session.rollback.assert_awaited_once()
        session.commit.assert_not_called()
