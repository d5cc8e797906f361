"""Integration tests for the sign-in engine under /auth."""

from authgate_auth.services import SessionTokenService
from tests.shared.fixtures.api import (
    TEST_BASE_URL,
    TEST_CLIENT_ORIGIN,
    get_csrf_token,
    register,
    sign_in,
)

ERROR_URL = f"{TEST_BASE_URL}/auth/error"


class TestCsrf:
    """Tests for GET /auth/csrf."""

    def test_issues_token_and_cookie(self, client):
        response = client.get("/auth/csrf")

        assert response.status_code == 200
        token = response.json()["csrfToken"]
        assert client.cookies["csrf-token"].startswith(f"{token}|")
        assert response.headers["cache-control"].startswith("no-store")

    def test_reuses_valid_cookie(self, client):
        assert get_csrf_token(client) == get_csrf_token(client)


class TestProviders:
    """Tests for GET /auth/providers."""

    def test_lists_credentials_provider(self, client):
        providers = client.get("/auth/providers").json()

        assert providers == {
            "credentials": {
                "id": "credentials",
                "name": "Credentials",
                "type": "credentials",
                "signinUrl": f"{TEST_BASE_URL}/auth/signin/credentials",
                "callbackUrl": f"{TEST_BASE_URL}/auth/callback/credentials",
            },
        }


class TestCredentialsSignIn:
    """Tests for POST /auth/callback/credentials."""

    def test_valid_credentials_set_session(self, client):
        user_id = register(client, "alice@example.com", name="Alice").json()["id"]

        response = sign_in(client, "alice@example.com")

        assert response.status_code == 302
        assert response.headers["location"] == f"{TEST_BASE_URL}/dashboard"
        assert "session-token" in client.cookies

        session = client.get("/auth/session").json()
        assert session["user"] == {
            "name": "Alice",
            "email": "alice@example.com",
            "id": user_id,
            "provider": "credentials",
        }
        assert session["expires"].endswith("Z")
        assert "image" not in session["user"]

    def test_redirect_to_client_origin_is_allowed(self, client):
        register(client, "alice@example.com")

        response = sign_in(
            client,
            "alice@example.com",
            callback_url=f"{TEST_CLIENT_ORIGIN}/home",
        )

        assert response.headers["location"] == f"{TEST_CLIENT_ORIGIN}/home"

    def test_foreign_redirect_falls_back_to_base_url(self, client):
        register(client, "alice@example.com")

        response = sign_in(client, "alice@example.com", callback_url="https://evil.example")

        assert response.headers["location"] == TEST_BASE_URL

    def test_wrong_password_is_rejected(self, client):
        register(client, "alice@example.com")

        response = sign_in(client, "alice@example.com", password="wrong")

        assert response.status_code == 302
        assert response.headers["location"] == f"{ERROR_URL}?error=CredentialsSignin"
        assert "session-token" not in client.cookies

    def test_unknown_email_looks_like_wrong_password(self, client):
        response = sign_in(client, "nobody@example.com")

        assert response.headers["location"] == f"{ERROR_URL}?error=CredentialsSignin"

    def test_missing_csrf_token_is_rejected(self, client):
        register(client, "alice@example.com")

        response = client.post(
            "/auth/callback/credentials",
            data={"email": "alice@example.com", "password": "secure_password_123"},
            follow_redirects=False,
        )

        assert response.headers["location"] == f"{ERROR_URL}?error=MissingCSRF"
        assert "session-token" not in client.cookies

    def test_wrong_csrf_token_is_rejected(self, client):
        get_csrf_token(client)

        response = client.post(
            "/auth/callback/credentials",
            data={
                "csrfToken": "forged",
                "email": "alice@example.com",
                "password": "secure_password_123",
            },
            follow_redirects=False,
        )

        assert response.headers["location"] == f"{ERROR_URL}?error=MissingCSRF"

    def test_non_ascii_csrf_token_is_rejected(self, client):
        register(client, "alice@example.com")
        get_csrf_token(client)

        response = client.post(
            "/auth/callback/credentials",
            data={
                "csrfToken": "é",
                "email": "alice@example.com",
                "password": "secure_password_123",
            },
            follow_redirects=False,
        )

        assert response.status_code == 302
        assert response.headers["location"] == f"{ERROR_URL}?error=MissingCSRF"
        assert "session-token" not in client.cookies

    def test_get_is_not_allowed(self, client):
        assert client.get("/auth/callback/credentials").status_code == 405

    def test_unknown_provider(self, client):
        assert client.get("/auth/callback/nope").status_code == 404
        assert client.post("/auth/signin/credentials").status_code == 404


class TestSession:
    """Tests for GET /auth/session."""

    def test_no_cookie_returns_null(self, client):
        response = client.get("/auth/session")

        assert response.status_code == 200
        assert response.json() is None

    def test_invalid_cookie_returns_null_and_is_cleared(self, client):
        client.cookies.set("session-token", "garbage")

        response = client.get("/auth/session")

        assert response.json() is None
        assert response.headers["set-cookie"].startswith('session-token=""')

    def test_provider_survives_session_refresh(self, client):
        register(client, "alice@example.com")
        sign_in(client, "alice@example.com")

        first = client.get("/auth/session").json()
        second = client.get("/auth/session").json()

        assert first["user"]["provider"] == "credentials"
        assert second["user"]["provider"] == "credentials"
        assert second["user"]["id"] == first["user"]["id"]

    def test_session_read_refreshes_cookie(self, client):
        register(client, "alice@example.com")
        sign_in(client, "alice@example.com")
        before = client.cookies["session-token"]

        response = client.get("/auth/session")

        assert "session-token" in response.headers["set-cookie"]
        assert client.cookies["session-token"] != before

    def test_expires_matches_refreshed_token(self, client):
        register(client, "alice@example.com")
        sign_in(client, "alice@example.com")

        session = client.get("/auth/session").json()

        claims = SessionTokenService(secret_key="test-auth-secret").decode(
            client.cookies["session-token"],
        )
        expires = SessionTokenService.expires_at(claims)
        assert session["expires"] == expires.isoformat(timespec="milliseconds").replace(
            "+00:00",
            "Z",
        )


class TestSignOut:
    """Tests for POST /auth/signout."""

    def test_sign_out_clears_session(self, client):
        register(client, "alice@example.com")
        sign_in(client, "alice@example.com")

        response = client.post(
            "/auth/signout",
            data={"csrfToken": get_csrf_token(client), "callbackUrl": "/"},
            follow_redirects=False,
        )

        assert response.status_code == 302
        assert response.headers["location"] == f"{TEST_BASE_URL}/"
        assert client.get("/auth/session").json() is None

    def test_sign_out_requires_csrf(self, client):
        register(client, "alice@example.com")
        sign_in(client, "alice@example.com")

        response = client.post("/auth/signout", follow_redirects=False)

        assert response.headers["location"] == f"{ERROR_URL}?error=MissingCSRF"
        assert client.get("/auth/session").json() is not None

    def test_sign_out_with_non_ascii_csrf_token_is_rejected(self, client):
        register(client, "alice@example.com")
        sign_in(client, "alice@example.com")

        response = client.post(
            "/auth/signout",
            data={"csrfToken": "ü"},
            follow_redirects=False,
        )

        assert response.status_code == 302
        assert response.headers["location"] == f"{ERROR_URL}?error=MissingCSRF"
        assert client.get("/auth/session").json() is not None


class TestErrorPage:
    """Tests for GET /auth/error."""

    def test_known_error(self, client):
        response = client.get("/auth/error", params={"error": "CredentialsSignin"})

        assert response.status_code == 400
        assert response.json()["error"] == "CredentialsSignin"

    def test_unknown_error_uses_default_message(self, client):
        response = client.get("/auth/error", params={"error": "Whatever"})

        assert response.json()["detail"] == "Unable to sign in."
