"""Unit tests for the session claim shaper and redirect policy."""

from authgate.application.callbacks import (
    GatewayCallbacks,
    RedirectPolicy,
    SessionClaimShaper,
)
from authgate_auth import AccountInfo, AuthUser

BASE_URL = "https://auth.example.com"
CLIENT = "https://app.example.com"

USER = AuthUser(id="u-1", name="alice", email="alice@example.com")


class TestSessionClaimShaperEnrich:
    """Tests for token enrichment on sign-in and refresh."""

    def setup_method(self):
        self.shaper = SessionClaimShaper()

    def test_credentials_sign_in(self):
        claims = self.shaper.enrich(
            {"sub": "u-1"},
            user=USER,
            account=AccountInfo(provider="credentials", type="credentials"),
        )

        assert claims["userId"] == "u-1"
        assert claims["provider"] == "credentials"

    def test_oauth_sign_in_uses_account_provider(self):
        claims = self.shaper.enrich(
            {"sub": "u-1"},
            user=USER,
            account=AccountInfo(
                provider="google",
                type="oauth",
                provider_account_id="g-1",
            ),
        )

        assert claims["provider"] == "google"

    def test_sign_in_without_account_defaults_to_credentials(self):
        claims = self.shaper.enrich({"sub": "u-1"}, user=USER)

        assert claims["provider"] == "credentials"

    def test_existing_provider_is_not_replaced_by_default(self):
        claims = self.shaper.enrich({"provider": "google"}, user=USER)

        assert claims["provider"] == "google"

    def test_refresh_keeps_claims(self):
        """A re-validated token keeps the provider it was issued with."""
        token = {"sub": "u-1", "userId": "u-1", "provider": "google"}

        first = self.shaper.enrich(token)
        second = self.shaper.enrich(first)

        assert second == token

    def test_enrich_is_additive_and_does_not_mutate(self):
        token = {"sub": "u-1", "name": "alice", "custom": 1}

        claims = self.shaper.enrich(token, user=USER)

        assert token == {"sub": "u-1", "name": "alice", "custom": 1}
        assert claims["custom"] == 1
        assert claims["name"] == "alice"


class TestSessionClaimShaperProject:
    """Tests for the client session projection."""

    def setup_method(self):
        self.shaper = SessionClaimShaper()

    def test_adds_id_and_provider(self):
        session = {"user": {"name": "alice", "email": "alice@example.com"}}

        projected = self.shaper.project(
            session,
            {"userId": "u-1", "provider": "credentials"},
        )

        assert projected["user"] == {
            "name": "alice",
            "email": "alice@example.com",
            "id": "u-1",
            "provider": "credentials",
        }

    def test_session_without_user_is_unchanged(self):
        session = {"expires": "2030-01-01T00:00:00.000Z"}

        assert self.shaper.project(session, {"userId": "u-1"}) == session

    def test_user_without_profile_fields_still_gets_identity(self):
        session = {"user": {}, "expires": "2030-01-01T00:00:00.000Z"}

        projected = self.shaper.project(
            session,
            {"userId": "u-1", "provider": "credentials"},
        )

        assert projected["user"] == {"id": "u-1", "provider": "credentials"}

    def test_keeps_other_session_fields(self):
        session = {"user": {"name": "a"}, "expires": "2030-01-01T00:00:00.000Z"}

        projected = self.shaper.project(session, {"userId": "u-1"})

        assert projected["expires"] == session["expires"]
        assert "provider" not in projected["user"]


class TestRedirectPolicy:
    """Tests for post sign-in/sign-out redirect resolution."""

    def setup_method(self):
        self.policy = RedirectPolicy(CLIENT)

    def test_relative_path_resolves_against_base_url(self):
        assert self.policy.resolve("/dashboard", BASE_URL) == f"{BASE_URL}/dashboard"

    def test_client_origin_is_allowed(self):
        url = f"{CLIENT}/welcome"
        assert self.policy.resolve(url, BASE_URL) == url

    def test_base_url_is_allowed(self):
        url = f"{BASE_URL}/auth/error"
        assert self.policy.resolve(url, BASE_URL) == url

    def test_foreign_origin_falls_back_to_base_url(self):
        assert self.policy.resolve("https://evil.example/x", BASE_URL) == BASE_URL

    def test_prefix_match_admits_lookalike_hosts(self):
        """Allowance is a string prefix check, not an origin comparison."""
        url = "https://app.example.com.evil.net/phish"
        assert self.policy.resolve(url, BASE_URL) == url

    def test_without_client_origin_only_base_url_is_allowed(self):
        policy = RedirectPolicy("")

        assert policy.resolve(f"{CLIENT}/x", BASE_URL) == BASE_URL
        assert policy.resolve(f"{BASE_URL}/x", BASE_URL) == f"{BASE_URL}/x"


class TestGatewayCallbacks:
    """Tests for the engine callback adapter."""

    def test_delegates(self):
        callbacks = GatewayCallbacks(SessionClaimShaper(), RedirectPolicy(CLIENT))

        token = callbacks.jwt({}, user=USER)
        session = callbacks.session({"user": {"name": "alice"}}, token)

        assert session["user"]["id"] == "u-1"
        assert session["user"]["provider"] == "credentials"
        assert callbacks.redirect("/x", BASE_URL) == f"{BASE_URL}/x"
